from functools import lru_cache
import logging

from clinic_booking.application.ports.clinic_api import ClinicApiPort
from clinic_booking.application.ports.form_session_store import FormSessionStorePort
from clinic_booking.application.use_cases.appointment_forms import build_appointment_controller
from clinic_booking.application.use_cases.cascading_selection import CascadingSelectionController
from clinic_booking.core.config import settings
from clinic_booking.infrastructure.clinic_api.http_clinic_api import HttpClinicApi
from clinic_booking.infrastructure.clinic_api.mock_clinic_api import MockClinicApi
from clinic_booking.infrastructure.store.memory_form_store import MemoryFormSessionStore


_form_store: MemoryFormSessionStore | None = None


@lru_cache
def get_clinic_api() -> ClinicApiPort:
    logger = logging.getLogger(__name__)
    if not settings.CLINIC_API_BASE_URL:
        if settings.ENV.lower() in {"dev", "local", "test"}:
            logger.info("Using MockClinicApi (CLINIC_API_BASE_URL missing, ENV=%s)", settings.ENV)
            return MockClinicApi()
        raise ValueError("CLINIC_API_BASE_URL is required outside dev/local.")

    logger.info("Using HttpClinicApi base_url=%s", settings.CLINIC_API_BASE_URL)
    return HttpClinicApi()


def get_form_store() -> FormSessionStorePort:
    global _form_store
    if _form_store is None:
        _form_store = MemoryFormSessionStore(session_limit=settings.FORM_SESSION_LIMIT)
    return _form_store


def build_controller(kind: str) -> CascadingSelectionController:
    return build_appointment_controller(kind, get_clinic_api(), locale=settings.FORM_LOCALE)
