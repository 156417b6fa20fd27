from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from clinic_booking.application.dto.clinic_responses import (
    OptionsResponseDTO,
    SubmitResponseDTO,
    flatten_errors,
)
from clinic_booking.application.exceptions import (
    OptionFetchError,
    SubmissionTransportError,
    SubmissionValidationError,
)
from clinic_booking.application.ports.clinic_api import ClinicApiPort
from clinic_booking.core.config import settings
from clinic_booking.domain.entities.navigation import NavigationIntent
from clinic_booking.domain.entities.option import Option


@dataclass(frozen=True)
class OptionEndpoint:
    path: str
    items_key: str


@dataclass(frozen=True)
class StoreEndpoint:
    path: str
    success_route: str


# Form field name -> name the clinic server expects on the wire
DEFAULT_FIELD_ALIASES: dict[str, str] = {"date": "appointment_date"}


def default_option_endpoints() -> dict[str, OptionEndpoint]:
    return {
        "doctors": OptionEndpoint(settings.CLINIC_DOCTORS_PATH, "doctors"),
        "schedules": OptionEndpoint(settings.CLINIC_SCHEDULES_PATH, "schedules"),
        "employee_doctors": OptionEndpoint(settings.CLINIC_EMPLOYEE_DOCTORS_PATH, "doctors"),
        "employee_schedules": OptionEndpoint(settings.CLINIC_EMPLOYEE_SCHEDULES_PATH, "schedules"),
        "patients": OptionEndpoint(settings.CLINIC_PATIENTS_PATH, "patients"),
    }


def default_store_endpoints() -> dict[str, StoreEndpoint]:
    return {
        "patient": StoreEndpoint(settings.CLINIC_PATIENT_STORE_PATH, "patient.appointments.index"),
        "employee": StoreEndpoint(settings.CLINIC_EMPLOYEE_STORE_PATH, "employee.appointments.index"),
    }


class HttpClinicApi(ClinicApiPort):
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        option_endpoints: Mapping[str, OptionEndpoint] | None = None,
        store_endpoints: Mapping[str, StoreEndpoint] | None = None,
        field_aliases: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url or settings.CLINIC_API_BASE_URL
        if not self._base_url:
            raise ValueError("CLINIC_API_BASE_URL is required for the HTTP clinic API")
        self._option_endpoints = dict(option_endpoints or default_option_endpoints())
        self._store_endpoints = dict(store_endpoints or default_store_endpoints())
        self._aliases = dict(DEFAULT_FIELD_ALIASES if field_aliases is None else field_aliases)
        self._reverse_aliases = {wire: name for name, wire in self._aliases.items()}

        headers = {"Accept": "application/json", "X-Requested-With": "XMLHttpRequest"}
        token = token or settings.CLINIC_API_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"
        timeout = timeout if timeout is not None else settings.CLINIC_API_TIMEOUT_SECONDS
        client_kwargs: dict[str, Any] = {"base_url": self._base_url, "headers": headers, "transport": transport}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._client = httpx.AsyncClient(**client_kwargs)
        self._logger = logging.getLogger(__name__)

    async def fetch_options(self, source: str, params: Mapping[str, Any]) -> list[Option]:
        endpoint = self._option_endpoints.get(source)
        if endpoint is None:
            raise OptionFetchError(source, f"Unknown option source '{source}'")

        try:
            response = await self._client.get(endpoint.path, params={k: str(v) for k, v in params.items()})
        except httpx.HTTPError as e:
            self._logger.error("Option request failed", extra={"source": source, "reason": str(e)})
            raise OptionFetchError(source, str(e) or e.__class__.__name__) from e

        data = _json_or_none(response)
        if response.status_code >= 400:
            reason = _error_reason(data, response.status_code)
            self._logger.error(
                "Option request rejected",
                extra={"source": source, "status": response.status_code, "reason": reason},
            )
            raise OptionFetchError(source, reason)

        if not isinstance(data, dict):
            self._logger.error(
                "Malformed options response",
                extra={"source": source, "status": response.status_code, "reason": "body is not a JSON object"},
            )
            raise OptionFetchError(source, "Malformed response from server")

        try:
            body = OptionsResponseDTO.model_validate(data)
        except ValidationError as e:
            self._logger.error("Malformed options response", extra={"source": source, "reason": str(e)})
            raise OptionFetchError(source, "Malformed response from server") from e

        if body.success is None and not body.message:
            raise OptionFetchError(source, "Malformed response from server")
        if body.success is not True:
            raise OptionFetchError(source, _error_reason(data, response.status_code))
        return body.candidates(endpoint.items_key)

    async def create_appointment(self, form: str, payload: Mapping[str, Any]) -> NavigationIntent | None:
        endpoint = self._store_endpoints.get(form)
        if endpoint is None:
            raise SubmissionTransportError(f"No store endpoint configured for form '{form}'")

        wire_payload = {self._aliases.get(name, name): value for name, value in payload.items()}
        try:
            response = await self._client.post(endpoint.path, json=wire_payload)
        except httpx.HTTPError as e:
            self._logger.error("Appointment request failed", extra={"form": form, "reason": str(e)})
            raise SubmissionTransportError(str(e) or e.__class__.__name__) from e

        data = _json_or_none(response)
        if response.status_code == 422:
            errors = flatten_errors((data or {}).get("errors") if isinstance(data, dict) else None)
            message = data.get("message") if isinstance(data, dict) else None
            raise SubmissionValidationError(
                {self._reverse_aliases.get(name, name): text for name, text in errors.items()},
                message=message,
            )
        if response.status_code >= 400:
            raise SubmissionTransportError(_error_reason(data, response.status_code))

        if not isinstance(data, dict):
            self._logger.error("Malformed appointment response", extra={"form": form, "status": response.status_code})
            raise SubmissionTransportError("Malformed response from server")
        try:
            body = SubmitResponseDTO.model_validate(data)
        except ValidationError as e:
            raise SubmissionTransportError("Malformed response from server") from e
        if body.success is False:
            errors = flatten_errors(body.errors)
            if errors:
                raise SubmissionValidationError(
                    {self._reverse_aliases.get(name, name): text for name, text in errors.items()},
                    message=body.message,
                )
            raise SubmissionTransportError(body.message or "Request was not accepted")

        self._logger.info("Appointment created", extra={"form": form, "status": response.status_code})
        params = {"appointment_id": body.appointment_id} if body.appointment_id is not None else {}
        return NavigationIntent(route=body.redirect or endpoint.success_route, params=params, flash=body.message)

    async def aclose(self) -> None:
        await self._client.aclose()


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_reason(data: Any, status_code: int) -> str:
    if isinstance(data, dict):
        if data.get("message"):
            return str(data["message"])
        errors = flatten_errors(data.get("errors") if isinstance(data.get("errors"), dict) else None)
        if errors:
            return "; ".join(errors.values())
    return f"HTTP error! status: {status_code}"
