from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clinic_booking.application.use_cases.cascading_selection import CascadingSelectionController


@dataclass
class FormSession:
    controller: "CascadingSelectionController"
    flash_success: str | None = None  # shown once, on the first render
    flash_error: str | None = None  # shown until the user edits a field
