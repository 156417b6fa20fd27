from __future__ import annotations


class AppointmentFlowError(RuntimeError):
    """Base for failures raised while driving an appointment form."""
    pass


class UnknownFieldError(AppointmentFlowError):
    """Raised when a caller names a field the form does not define."""

    def __init__(self, form: str, field: str) -> None:
        super().__init__(f"Form '{form}' has no field '{field}'")
        self.form = form
        self.field = field


class MissingFieldError(AppointmentFlowError):
    """Raised before any network call when required fields are empty."""

    def __init__(self, missing: list[str], labels: list[str]) -> None:
        super().__init__(", ".join(labels))
        self.missing = list(missing)
        self.labels = list(labels)


class OptionFetchError(AppointmentFlowError):
    """Raised by clinic API adapters when a dependent option set cannot be loaded."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(reason)
        self.source = source
        self.reason = reason


class SubmissionValidationError(AppointmentFlowError):
    """Raised when the server rejects a submission with per-field problems."""

    def __init__(self, field_errors: dict[str, str], message: str | None = None) -> None:
        super().__init__(message or "Validation failed")
        self.field_errors = dict(field_errors)
        self.message = message


class SubmissionTransportError(AppointmentFlowError):
    """Raised for any other submission failure (network, unexpected server error)."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
