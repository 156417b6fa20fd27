from __future__ import annotations

from dataclasses import dataclass, field

from clinic_booking.domain.entities.navigation import NavigationIntent


@dataclass(frozen=True)
class SubmissionOutcome:
    status: str  # "created", "missing_fields", "rejected", "failed", "ignored"
    navigation: NavigationIntent | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    missing_fields: tuple[str, ...] = ()
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "created"
