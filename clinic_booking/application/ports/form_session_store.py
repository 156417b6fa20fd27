from __future__ import annotations

from abc import ABC, abstractmethod

from clinic_booking.domain.entities.form_session import FormSession


class FormSessionStorePort(ABC):
    @abstractmethod
    def create(self, session: FormSession) -> str:
        """Register a form session and return its id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str) -> FormSession | None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError
