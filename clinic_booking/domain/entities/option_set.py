from __future__ import annotations

from dataclasses import dataclass

from clinic_booking.domain.entities.option import Option


@dataclass(frozen=True)
class OptionSet:
    field: str
    upstream_key: tuple | None = None  # upstream values the options were fetched for
    options: tuple[Option, ...] = ()
    status: str = "empty"  # "empty", "loading", "ready"

    @property
    def is_loading(self) -> bool:
        return self.status == "loading"
