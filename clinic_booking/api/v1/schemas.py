from enum import Enum
from pydantic import BaseModel, Field
from typing import Any


class FormKind(str, Enum):
    patient = "patient"
    employee = "employee"


class CreateFormRequestSchema(BaseModel):
    kind: FormKind = FormKind.patient
    flash_success: str | None = None
    flash_error: str | None = None


class SetFieldRequestSchema(BaseModel):
    value: Any = None


class OptionSchema(BaseModel):
    value: int | str
    label: str
    detail: dict[str, Any] = Field(default_factory=dict)


class FieldViewSchema(BaseModel):
    name: str
    label: str
    kind: str
    required: bool
    value: Any = None
    status: str
    options: list[OptionSchema] = Field(default_factory=list)
    loading: bool = False
    disabled: bool = False
    error: str | None = None


class StepSchema(BaseModel):
    index: int
    label: str
    reached: bool
    current: bool


class NavigationSchema(BaseModel):
    route: str
    params: dict[str, Any] = Field(default_factory=dict)
    flash: str | None = None


class FormViewSchema(BaseModel):
    session_id: str
    form: str
    steps: list[StepSchema]
    current_step: int
    fields: list[FieldViewSchema]
    submitting: bool = False
    can_submit: bool = True
    banner: str | None = None
    flash: str | None = None
    navigation: NavigationSchema | None = None


class SubmitResponseSchema(BaseModel):
    status: str
    view: FormViewSchema
    missing_fields: list[str] = Field(default_factory=list)
