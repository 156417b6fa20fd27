from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from clinic_booking.domain.entities.navigation import NavigationIntent
from clinic_booking.domain.entities.option import Option


@dataclass(frozen=True)
class FieldView:
    name: str
    label: str
    kind: str
    required: bool
    value: Any
    status: str  # "empty", "loading", "ready", "selected"
    options: tuple[Option, ...] = ()
    loading: bool = False
    locked: bool = False  # an upstream field is still empty
    error: str | None = None
    step: int | None = None  # position in the dependency chain; None outside it


@dataclass(frozen=True)
class FormSnapshot:
    form: str
    fields: tuple[FieldView, ...]
    current_step: int
    submitting: bool = False
    general_error: str | None = None
    last_navigation: NavigationIntent | None = None

    def field(self, name: str) -> FieldView | None:
        for view in self.fields:
            if view.name == name:
                return view
        return None
