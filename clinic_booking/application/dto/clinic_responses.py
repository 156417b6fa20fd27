from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from clinic_booking.domain.entities.option import Option


class DoctorDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str
    name: str
    specialization: str | None = None
    available_schedules_count: int | None = None

    def to_option(self) -> Option:
        label = self.name
        if self.specialization:
            label = f"{self.name} ({self.specialization})"
        detail: dict[str, Any] = {"specialization": self.specialization or "General"}
        if self.available_schedules_count is not None:
            detail["available_schedules_count"] = self.available_schedules_count
        return Option(value=self.id, label=label, detail=detail)


class ScheduleDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str
    start_time: str | None = None
    end_time: str | None = None
    formatted_time: str | None = None
    total_quota: int | None = None
    remaining_quota: int | None = None
    is_available: bool = True
    notes: str | None = None

    def to_option(self) -> Option:
        label = self.formatted_time or " - ".join(t for t in (self.start_time, self.end_time) if t) or str(self.id)
        detail: dict[str, Any] = {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "total_quota": self.total_quota,
            "remaining_quota": self.remaining_quota,
            "notes": self.notes,
        }
        return Option(value=self.id, label=label, detail={k: v for k, v in detail.items() if v is not None})


class PatientDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str
    name: str
    no_rm: str | None = None

    def to_option(self) -> Option:
        label = f"{self.name} - {self.no_rm}" if self.no_rm else self.name
        return Option(value=self.id, label=label, detail={"no_rm": self.no_rm} if self.no_rm else {})


class OptionsResponseDTO(BaseModel):
    """Envelope of the clinic's patient list and available-doctors / available-schedules endpoints."""

    model_config = ConfigDict(extra="allow")

    success: bool | None = None
    message: str | None = None
    errors: dict[str, Any] | None = None
    doctors: list[DoctorDTO] | None = None
    schedules: list[ScheduleDTO] | None = None
    patients: list[PatientDTO] | None = None

    def candidates(self, items_key: str) -> list[Option]:
        items = getattr(self, items_key, None)
        if items is None:
            extra = (self.model_extra or {}).get(items_key) or []
            return [
                Option(value=item["id"], label=str(item.get("label") or item.get("name") or item["id"]))
                for item in extra
                if isinstance(item, dict) and "id" in item
            ]
        return [item.to_option() for item in items]


class SubmitResponseDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool | None = None
    message: str | None = None
    errors: dict[str, Any] = Field(default_factory=dict)
    redirect: str | None = None
    appointment_id: int | str | None = None


def flatten_errors(errors: dict[str, Any] | None) -> dict[str, str]:
    """Laravel-style {"field": ["msg", ...]} into {"field": "msg"}."""
    flat: dict[str, str] = {}
    for name, value in (errors or {}).items():
        if isinstance(value, (list, tuple)):
            value = value[0] if value else ""
        if value in (None, ""):
            continue
        flat[str(name)] = str(value)
    return flat
