from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from clinic_booking.domain.entities.navigation import NavigationIntent
from clinic_booking.domain.entities.option import Option


class ClinicApiPort(ABC):
    @abstractmethod
    async def fetch_options(self, source: str, params: Mapping[str, Any]) -> list[Option]:
        """
        Load the candidates of an option source for the given upstream values.
        Raises OptionFetchError with a human-readable reason on any failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def create_appointment(self, form: str, payload: Mapping[str, Any]) -> NavigationIntent | None:
        """
        Commit a completed selection.
        Raises SubmissionValidationError for field-level rejection and
        SubmissionTransportError for anything else.
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
