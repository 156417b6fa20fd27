"""
Tests for the FastAPI form endpoints.
"""

from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from clinic_booking.api.v1 import forms
from clinic_booking.application.use_cases.appointment_forms import build_appointment_controller
from clinic_booking.infrastructure.store.memory_form_store import MemoryFormSessionStore
from clinic_booking.main import ContextFormatter, app, configure_logging
from clinic_booking.wiring.dependencies import get_form_store


@pytest.fixture
def client(clinic, monkeypatch):
    store = MemoryFormSessionStore(session_limit=10)
    monkeypatch.setattr(forms, "build_controller", lambda kind: build_appointment_controller(kind, clinic))
    app.dependency_overrides[get_form_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _fields(view: dict) -> dict:
    return {field["name"]: field for field in view["fields"]}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_booking_through_the_api(client, clinic):
    created = client.post("/api/v1/forms", json={"kind": "patient", "flash_success": "Welcome back"})
    assert created.status_code == 201
    view = created.json()
    session_id = view["session_id"]
    assert view["flash"] == "Welcome back"
    assert view["current_step"] == 0

    view = client.put(f"/api/v1/forms/{session_id}/fields/date", json={"value": "2025-01-10"}).json()
    assert view["flash"] is None
    assert [option["value"] for option in _fields(view)["doctor_id"]["options"]] == [5, 6, 7]

    view = client.put(f"/api/v1/forms/{session_id}/fields/doctor_id", json={"value": 7}).json()
    assert [option["value"] for option in _fields(view)["schedule_id"]["options"]] == [1, 2]

    client.put(f"/api/v1/forms/{session_id}/fields/schedule_id", json={"value": 2})
    client.put(f"/api/v1/forms/{session_id}/fields/chief_complaint", json={"value": "toothache"})
    submitted = client.post(f"/api/v1/forms/{session_id}/submit").json()

    assert submitted["status"] == "created"
    assert submitted["view"]["navigation"]["route"] == "patient.appointments.index"
    assert [call for call in clinic.calls if call[0] == "create_appointment"] == [
        ("create_appointment", "patient",
         {"date": "2025-01-10", "doctor_id": 7, "schedule_id": 2, "chief_complaint": "toothache"}),
    ]


def test_missing_fields_are_reported(client, clinic):
    session_id = client.post("/api/v1/forms", json={"kind": "patient"}).json()["session_id"]
    client.put(f"/api/v1/forms/{session_id}/fields/date", json={"value": "2025-01-10"})
    client.put(f"/api/v1/forms/{session_id}/fields/doctor_id", json={"value": 7})

    submitted = client.post(f"/api/v1/forms/{session_id}/submit").json()

    assert submitted["status"] == "missing_fields"
    assert submitted["missing_fields"] == ["schedule_id", "chief_complaint"]
    assert submitted["view"]["banner"] == "Please complete the following fields: Schedule, Chief Complaint"
    assert not [call for call in clinic.calls if call[0] == "create_appointment"]


def test_flash_error_clears_on_edit(client):
    view = client.post("/api/v1/forms", json={"kind": "employee", "flash_error": "Dokter tidak ditemukan."}).json()
    session_id = view["session_id"]
    assert view["banner"] == "Dokter tidak ditemukan."
    assert client.get(f"/api/v1/forms/{session_id}").json()["banner"] == "Dokter tidak ditemukan."

    view = client.put(f"/api/v1/forms/{session_id}/fields/patient_id", json={"value": 3}).json()
    assert view["banner"] is None


def test_locked_and_unknown_fields(client):
    session_id = client.post("/api/v1/forms", json={"kind": "patient"}).json()["session_id"]

    locked = client.put(f"/api/v1/forms/{session_id}/fields/schedule_id", json={"value": 2})
    unknown = client.put(f"/api/v1/forms/{session_id}/fields/room", json={"value": "A"})

    assert locked.status_code == 409
    assert unknown.status_code == 404


def test_unknown_session_and_delete(client):
    session_id = client.post("/api/v1/forms", json={"kind": "patient"}).json()["session_id"]

    assert client.delete(f"/api/v1/forms/{session_id}").status_code == 204
    assert client.get(f"/api/v1/forms/{session_id}").status_code == 404
    assert client.delete(f"/api/v1/forms/{session_id}").status_code == 404


def test_unknown_form_kind_is_rejected(client):
    assert client.post("/api/v1/forms", json={"kind": "doctor"}).status_code == 422


def test_employee_form_lists_patients_and_locks_date(client):
    view = client.post("/api/v1/forms", json={"kind": "employee"}).json()
    fields = _fields(view)
    session_id = view["session_id"]

    assert [option["value"] for option in fields["patient_id"]["options"]] == [1, 2, 3]
    assert fields["date"]["disabled"]
    assert client.put(f"/api/v1/forms/{session_id}/fields/date", json={"value": "2025-01-10"}).status_code == 409

    client.put(f"/api/v1/forms/{session_id}/fields/patient_id", json={"value": 2})
    view = client.put(f"/api/v1/forms/{session_id}/fields/date", json={"value": "2025-01-10"}).json()
    assert [option["value"] for option in _fields(view)["doctor_id"]["options"]] == [5, 6, 7]
    assert view["current_step"] == 2


def test_configure_logging_installs_context_formatter():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        handler = configure_logging("debug")

        assert root.handlers == [handler]
        assert root.level == logging.DEBUG
        assert isinstance(handler.formatter, ContextFormatter)
        record = logging.LogRecord("clinic", logging.INFO, __file__, 1, "Loading options", None, None)
        record.field = "doctor_id"
        record.source = "doctors"
        assert handler.format(record) == "INFO:clinic:Loading options | field=doctor_id source=doctors"
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
