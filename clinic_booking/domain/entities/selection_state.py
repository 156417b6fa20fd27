from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


@dataclass(frozen=True)
class SelectionState:
    values: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str) -> Any:
        return self.values.get(name)

    def is_filled(self, name: str) -> bool:
        return not is_empty(self.values.get(name))

    def with_values(self, **changes: Any) -> "SelectionState":
        merged = dict(self.values)
        merged.update(changes)
        return SelectionState(values=merged)

    def filled(self) -> dict[str, Any]:
        """Non-empty values only, in insertion order."""
        return {name: value for name, value in self.values.items() if not is_empty(value)}
