from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    FORM_LOCALE: str = "en"  # "en" | "id"
    FORM_SESSION_LIMIT: int = 500

    CLINIC_API_BASE_URL: str | None = None
    CLINIC_API_TOKEN: str | None = None
    CLINIC_API_TIMEOUT_SECONDS: float | None = None  # None keeps the httpx default

    CLINIC_DOCTORS_PATH: str = "/api/patients/available-doctors"
    CLINIC_SCHEDULES_PATH: str = "/api/patients/available-schedules"
    CLINIC_EMPLOYEE_DOCTORS_PATH: str = "/api/appointments/available-doctors"
    CLINIC_EMPLOYEE_SCHEDULES_PATH: str = "/api/appointments/available-schedules"
    CLINIC_PATIENTS_PATH: str = "/api/employees/patients"
    CLINIC_PATIENT_STORE_PATH: str = "/appointments"
    CLINIC_EMPLOYEE_STORE_PATH: str = "/employees/appointments"


settings = Settings()
