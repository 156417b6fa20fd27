from __future__ import annotations

import uuid

from clinic_booking.application.ports.form_session_store import FormSessionStorePort
from clinic_booking.domain.entities.form_session import FormSession


class MemoryFormSessionStore(FormSessionStorePort):
    def __init__(self, session_limit: int = 500) -> None:
        self._sessions: dict[str, FormSession] = {}
        self._session_limit = session_limit

    def create(self, session: FormSession) -> str:
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = session
        while len(self._sessions) > self._session_limit:
            # insertion order: the first key is the oldest session
            del self._sessions[next(iter(self._sessions))]
        return session_id

    def get(self, session_id: str) -> FormSession | None:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def count(self) -> int:
        return len(self._sessions)
