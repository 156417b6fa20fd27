import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from clinic_booking.api.v1.forms import router as forms_router
from clinic_booking.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("form", "field", "source", "status", "reason", "session_id"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


def configure_logging(level: str | None = None) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Dental Clinic Appointment Forms", version="1.0.0", lifespan=lifespan)

app.include_router(forms_router, prefix="/api/v1", tags=["forms"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
