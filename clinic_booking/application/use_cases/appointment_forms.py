from __future__ import annotations

from clinic_booking.application.ports.clinic_api import ClinicApiPort
from clinic_booking.application.use_cases.cascading_selection import CascadingSelectionController
from clinic_booking.domain.entities.field_spec import FieldSpec, FormDefinition


def _appointment_chain(doctor_source: str, schedule_source: str) -> tuple[FieldSpec, ...]:
    return (
        FieldSpec("date", "date", kind="date"),
        FieldSpec("doctor_id", "doctor", option_source=doctor_source),
        FieldSpec("schedule_id", "schedule", option_source=schedule_source),
        FieldSpec("chief_complaint", "chief_complaint", kind="text"),
        FieldSpec("notes", "notes", kind="text", required=False),
    )


PATIENT_FORM = FormDefinition(
    name="patient",
    chain=_appointment_chain("doctors", "schedules"),
    success_route="patient.appointments.index",
)

# Staff book on behalf of a patient: the date stays locked until one is picked
EMPLOYEE_FORM = FormDefinition(
    name="employee",
    chain=(FieldSpec("patient_id", "patient", option_source="patients"),)
    + _appointment_chain("employee_doctors", "employee_schedules"),
    success_route="employee.appointments.index",
)

FORMS: dict[str, FormDefinition] = {form.name: form for form in (PATIENT_FORM, EMPLOYEE_FORM)}


def get_form_definition(kind: str) -> FormDefinition:
    try:
        return FORMS[kind]
    except KeyError:
        raise ValueError(f"Unknown appointment form '{kind}'") from None


def build_appointment_controller(kind: str, api: ClinicApiPort, locale: str = "en") -> CascadingSelectionController:
    return CascadingSelectionController(get_form_definition(kind), api, locale=locale)
