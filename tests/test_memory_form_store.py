"""
Tests for the in-memory form session store.
"""

from __future__ import annotations

from clinic_booking.application.use_cases.appointment_forms import build_appointment_controller
from clinic_booking.domain.entities.form_session import FormSession
from clinic_booking.infrastructure.store.memory_form_store import MemoryFormSessionStore


def test_oldest_session_is_evicted(instant_api):
    store = MemoryFormSessionStore(session_limit=2)
    ids = [store.create(FormSession(build_appointment_controller("patient", instant_api))) for _ in range(3)]

    assert store.count() == 2
    assert store.get(ids[0]) is None
    assert store.get(ids[2]) is not None


def test_sessions_do_not_share_state(instant_api):
    store = MemoryFormSessionStore()
    first = store.create(FormSession(build_appointment_controller("patient", instant_api)))
    second = store.create(FormSession(build_appointment_controller("patient", instant_api)))

    store.get(first).controller.set_field("date", "2025-01-10")

    assert store.get(first).controller.value("date") == "2025-01-10"
    assert store.get(second).controller.value("date") is None
    assert store.delete(first) is True
    assert store.delete(first) is False
