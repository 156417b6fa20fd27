from __future__ import annotations

LABELS: dict[str, dict[str, str]] = {
    "en": {
        "date": "Appointment Date",
        "doctor": "Doctor",
        "schedule": "Schedule",
        "chief_complaint": "Chief Complaint",
        "notes": "Notes",
        "patient": "Patient",
    },
    "id": {
        "date": "Tanggal Janji Temu",
        "doctor": "Dokter",
        "schedule": "Jadwal",
        "chief_complaint": "Keluhan Utama",
        "notes": "Catatan",
        "patient": "Pasien",
    },
}

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "missing_fields": "Please complete the following fields: {fields}",
        "form_has_errors": "The form contains errors. Please review it.",
        "options_failed.doctor": "Failed to load available doctors: {reason}",
        "options_failed.schedule": "Failed to load available schedules: {reason}",
        "options_failed.patient": "Failed to load patients: {reason}",
        "options_failed": "Failed to load options: {reason}",
        "submit_failed": "Failed to create the appointment: {reason}",
        "created": "Appointment created successfully.",
    },
    "id": {
        "missing_fields": "Silakan lengkapi field berikut: {fields}",
        "form_has_errors": "Terdapat kesalahan dalam form. Silakan periksa kembali.",
        "options_failed.doctor": "Gagal memuat dokter yang tersedia: {reason}",
        "options_failed.schedule": "Gagal memuat jadwal yang tersedia: {reason}",
        "options_failed.patient": "Gagal memuat data pasien: {reason}",
        "options_failed": "Gagal memuat pilihan: {reason}",
        "submit_failed": "Gagal membuat janji temu: {reason}",
        "created": "Janji temu berhasil dibuat.",
    },
}

DEFAULT_LOCALE = "en"


def _catalog(table: dict[str, dict[str, str]], locale: str) -> dict[str, str]:
    return table.get(locale) or table[DEFAULT_LOCALE]


def label(key: str, locale: str = DEFAULT_LOCALE) -> str:
    return _catalog(LABELS, locale).get(key) or LABELS[DEFAULT_LOCALE].get(key) or key


def message(key: str, locale: str = DEFAULT_LOCALE, **params: object) -> str:
    catalog = _catalog(MESSAGES, locale)
    template = catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key)
    if template is None:
        # e.g. "options_failed.rooms" falls back to the generic entry
        template = catalog.get(key.split(".")[0], key)
    return template.format(**params)
