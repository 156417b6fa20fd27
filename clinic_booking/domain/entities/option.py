from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Option:
    value: int | str
    label: str
    detail: dict[str, Any] = field(default_factory=dict)
