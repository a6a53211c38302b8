"""Startup config logging with secrets masked."""

from typing import Any

from payintent.common.config import Settings
from payintent.common.logging import logger

SECRET_MARKERS = ("key", "secret", "password", "token")


def redact(field: str, value: Any) -> str:
    if value is None:
        return "<unset>"
    if any(marker in field.lower() for marker in SECRET_MARKERS):
        return "<redacted>"
    return str(value)


def startup_config(app_settings: Settings) -> dict[str, str]:
    """Effective settings as printable strings, one entry per field."""

    return {field: redact(field, value) for field, value in app_settings.model_dump().items()}


def log_startup_config(app_settings: Settings) -> dict[str, str]:
    """Log the effective configuration once when the app is built."""

    config = startup_config(app_settings)
    logger.info("startup_config=%s", config)
    return config
