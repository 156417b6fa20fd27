"""
Shared fakes for the appointment form tests.

- InstantClinicApi answers immediately with fixed candidates and records calls
- GatedClinicApi parks every request on a future the test resolves by hand
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

import pytest

from clinic_booking.application.ports.clinic_api import ClinicApiPort
from clinic_booking.domain.entities.navigation import NavigationIntent
from clinic_booking.domain.entities.option import Option
from clinic_booking.infrastructure.clinic_api.mock_clinic_api import MockClinicApi, MockDoctor, MockSchedule


class InstantClinicApi(ClinicApiPort):
    def __init__(self) -> None:
        self.option_calls: list[tuple[str, dict[str, Any]]] = []
        self.submissions: list[tuple[str, dict[str, Any]]] = []

    async def fetch_options(self, source: str, params: Mapping[str, Any]) -> list[Option]:
        self.option_calls.append((source, dict(params)))
        if source == "patients":
            return [Option(41, "Andi Wijaya - RM-0001"), Option(42, "Citra Lestari - RM-0002")]
        if source.endswith("doctors"):
            return [Option(5, "drg. A"), Option(6, "drg. B"), Option(7, "drg. C")]
        return [Option(1, "08:00 - 12:00"), Option(2, "13:00 - 17:00")]

    async def create_appointment(self, form: str, payload: Mapping[str, Any]) -> NavigationIntent | None:
        self.submissions.append((form, dict(payload)))
        return NavigationIntent(route=f"{form}.appointments.index", flash="Appointment created successfully.")


class GatedClinicApi(ClinicApiPort):
    def __init__(self) -> None:
        self.requests: list[tuple[str, dict[str, Any], asyncio.Future]] = []
        self.submissions: list[tuple[str, dict[str, Any], asyncio.Future]] = []

    async def fetch_options(self, source: str, params: Mapping[str, Any]) -> list[Option]:
        future = asyncio.get_running_loop().create_future()
        self.requests.append((source, dict(params), future))
        return await future

    async def create_appointment(self, form: str, payload: Mapping[str, Any]) -> NavigationIntent | None:
        future = asyncio.get_running_loop().create_future()
        self.submissions.append((form, dict(payload), future))
        return await future


def friday_clinic() -> MockClinicApi:
    # 2025-01-10 is a Friday (weekday 4); doctor 8 only works Mondays
    return MockClinicApi(
        doctors=[
            MockDoctor(5, "drg. Sari"),
            MockDoctor(6, "drg. Budi", "Periodontics"),
            MockDoctor(7, "drg. Rina", "Orthodontics"),
            MockDoctor(8, "drg. Tono"),
        ],
        schedules=[
            MockSchedule(10, 5, 4, "08:00", "12:00"),
            MockSchedule(11, 6, 4, "13:00", "16:00"),
            MockSchedule(1, 7, 4, "08:00", "11:00"),
            MockSchedule(2, 7, 4, "13:00", "17:00", quota=1),
            MockSchedule(12, 8, 0, "08:00", "12:00"),
        ],
    )


@pytest.fixture
def instant_api() -> InstantClinicApi:
    return InstantClinicApi()


@pytest.fixture
def gated_api() -> GatedClinicApi:
    return GatedClinicApi()


@pytest.fixture
def clinic() -> MockClinicApi:
    return friday_clinic()
