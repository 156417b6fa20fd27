from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from clinic_booking.application.exceptions import (
    OptionFetchError,
    SubmissionTransportError,
    SubmissionValidationError,
)
from clinic_booking.application.ports.clinic_api import ClinicApiPort
from clinic_booking.domain.entities.navigation import NavigationIntent
from clinic_booking.domain.entities.option import Option


@dataclass(frozen=True)
class MockDoctor:
    id: int
    name: str
    specialization: str = "General"


@dataclass(frozen=True)
class MockPatient:
    id: int
    name: str
    no_rm: str


@dataclass(frozen=True)
class MockSchedule:
    id: int
    doctor_id: int
    weekday: int  # Monday == 0
    start_time: str
    end_time: str
    quota: int = 10
    notes: str | None = None


DEFAULT_DOCTORS = (
    MockDoctor(1, "drg. Lina Hartono", "Orthodontics"),
    MockDoctor(2, "drg. Omar Setiawan", "Endodontics"),
    MockDoctor(3, "drg. Ayu Pratiwi"),
)

DEFAULT_PATIENTS = (
    MockPatient(1, "Andi Wijaya", "RM-0001"),
    MockPatient(2, "Citra Lestari", "RM-0002"),
    MockPatient(3, "Dewi Anggraini", "RM-0003"),
)

DEFAULT_SCHEDULES = (
    MockSchedule(1, 1, 0, "08:00", "12:00"),
    MockSchedule(2, 1, 2, "13:00", "17:00", quota=6),
    MockSchedule(3, 2, 0, "13:00", "16:00"),
    MockSchedule(4, 2, 3, "08:00", "11:00", quota=4),
    MockSchedule(5, 3, 4, "09:00", "15:00"),
    MockSchedule(6, 3, 5, "09:00", "12:00", quota=5, notes="Saturday clinic"),
)

SUCCESS_ROUTES = {
    "patient": "patient.appointments.index",
    "employee": "employee.appointments.index",
}

REQUIRED_FIELDS = {
    "patient": ("date", "doctor_id", "schedule_id", "chief_complaint"),
    "employee": ("patient_id", "date", "doctor_id", "schedule_id", "chief_complaint"),
}


class MockClinicApi(ClinicApiPort):
    """In-memory clinic server: weekly doctor schedules with a per-day quota."""

    def __init__(
        self,
        doctors: tuple[MockDoctor, ...] | list[MockDoctor] = DEFAULT_DOCTORS,
        schedules: tuple[MockSchedule, ...] | list[MockSchedule] = DEFAULT_SCHEDULES,
        patients: tuple[MockPatient, ...] | list[MockPatient] = DEFAULT_PATIENTS,
        min_date: date | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self._doctors = {doctor.id: doctor for doctor in doctors}
        self._schedules = {schedule.id: schedule for schedule in schedules}
        self._patients = {patient.id: patient for patient in patients}
        self._min_date = min_date
        self._delay = delay_seconds
        self._booked: dict[tuple[int, date], int] = {}
        self._failures: dict[str, str] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.appointments: list[dict[str, Any]] = []
        self._logger = logging.getLogger(__name__)

    def fail_source(self, source: str, reason: str) -> None:
        self._failures[source] = reason

    def clear_failures(self) -> None:
        self._failures.clear()

    def remaining_quota(self, schedule_id: int, day: date) -> int:
        schedule = self._schedules[schedule_id]
        return max(0, schedule.quota - self._booked.get((schedule_id, day), 0))

    async def fetch_options(self, source: str, params: Mapping[str, Any]) -> list[Option]:
        self.calls.append(("fetch_options", source, dict(params)))
        if self._delay:
            await asyncio.sleep(self._delay)
        if source in self._failures:
            raise OptionFetchError(source, self._failures[source])

        if source == "patients":
            return [
                Option(value=patient.id, label=f"{patient.name} - {patient.no_rm}", detail={"no_rm": patient.no_rm})
                for patient in sorted(self._patients.values(), key=lambda p: p.name)
            ]
        day = self._parse_date(source, params.get("date"))
        if source.endswith("doctors"):
            return self._available_doctors(day)
        if source.endswith("schedules"):
            doctor = self._find_doctor(params.get("doctor_id"))
            if doctor is None:
                raise OptionFetchError(source, "The selected doctor id is invalid.")
            return self._available_schedules(doctor, day)
        raise OptionFetchError(source, f"Unknown option source '{source}'")

    async def create_appointment(self, form: str, payload: Mapping[str, Any]) -> NavigationIntent | None:
        self.calls.append(("create_appointment", form, dict(payload)))
        if self._delay:
            await asyncio.sleep(self._delay)
        if form not in REQUIRED_FIELDS:
            raise SubmissionTransportError(f"No store endpoint for form '{form}'")

        errors: dict[str, str] = {}
        for name in REQUIRED_FIELDS[form]:
            if payload.get(name) in (None, ""):
                errors[name] = f"The {name.replace('_', ' ')} field is required."
        if errors:
            raise SubmissionValidationError(errors)

        if "patient_id" in REQUIRED_FIELDS[form] and not any(
            str(patient.id) == str(payload["patient_id"]) for patient in self._patients.values()
        ):
            raise SubmissionValidationError({"patient_id": "The selected patient id is invalid."})

        complaint = str(payload["chief_complaint"])
        if len(complaint) > 1000:
            raise SubmissionValidationError(
                {"chief_complaint": "The chief complaint may not be greater than 1000 characters."}
            )

        try:
            day = date.fromisoformat(str(payload["date"]))
        except ValueError:
            raise SubmissionValidationError({"date": "The date is not a valid date."}) from None

        doctor = self._find_doctor(payload["doctor_id"])
        if doctor is None:
            raise SubmissionValidationError({"doctor_id": "The selected doctor id is invalid."})
        schedule = self._find_schedule(payload["schedule_id"])
        if schedule is None:
            raise SubmissionValidationError({"schedule_id": "The selected schedule id is invalid."})
        if schedule.doctor_id != doctor.id:
            raise SubmissionValidationError({"schedule_id": "The selected schedule does not belong to the doctor."})
        if schedule.weekday != day.weekday() or self.remaining_quota(schedule.id, day) <= 0:
            raise SubmissionValidationError({"schedule_id": "The selected schedule is not available on this date."})

        self._booked[(schedule.id, day)] = self._booked.get((schedule.id, day), 0) + 1
        appointment_id = len(self.appointments) + 1
        self.appointments.append({"id": appointment_id, "form": form, **dict(payload)})
        self._logger.info("Mock appointment created", extra={"form": form, "status": "created"})
        return NavigationIntent(
            route=SUCCESS_ROUTES[form],
            params={"appointment_id": appointment_id},
            flash="Appointment created successfully.",
        )

    def _parse_date(self, source: str, value: Any) -> date:
        try:
            day = date.fromisoformat(str(value))
        except ValueError:
            raise OptionFetchError(source, "The date field must match the format Y-m-d.") from None
        if self._min_date and day < self._min_date:
            raise OptionFetchError(source, "The date must be a date after or equal to today.")
        return day

    def _find_doctor(self, value: Any) -> MockDoctor | None:
        for doctor in self._doctors.values():
            if str(doctor.id) == str(value):
                return doctor
        return None

    def _find_schedule(self, value: Any) -> MockSchedule | None:
        for schedule in self._schedules.values():
            if str(schedule.id) == str(value):
                return schedule
        return None

    def _open_schedules(self, doctor: MockDoctor, day: date) -> list[MockSchedule]:
        return [
            schedule
            for schedule in self._schedules.values()
            if schedule.doctor_id == doctor.id
            and schedule.weekday == day.weekday()
            and self.remaining_quota(schedule.id, day) > 0
        ]

    def _available_doctors(self, day: date) -> list[Option]:
        options: list[Option] = []
        for doctor in self._doctors.values():
            count = len(self._open_schedules(doctor, day))
            if count == 0:
                continue
            options.append(
                Option(
                    value=doctor.id,
                    label=f"{doctor.name} ({doctor.specialization})",
                    detail={"specialization": doctor.specialization, "available_schedules_count": count},
                )
            )
        return options

    def _available_schedules(self, doctor: MockDoctor, day: date) -> list[Option]:
        options: list[Option] = []
        for schedule in self._open_schedules(doctor, day):
            remaining = self.remaining_quota(schedule.id, day)
            detail: dict[str, Any] = {
                "start_time": schedule.start_time,
                "end_time": schedule.end_time,
                "total_quota": schedule.quota,
                "remaining_quota": remaining,
            }
            if schedule.notes:
                detail["notes"] = schedule.notes
            options.append(
                Option(value=schedule.id, label=f"{schedule.start_time} - {schedule.end_time}", detail=detail)
            )
        return options
