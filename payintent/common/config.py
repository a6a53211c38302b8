"""Environment-driven settings for the payment intent API.

The process loads this once at startup and hands the instance to
`create_app`. Handlers never read the environment themselves.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed, read-only view of runtime configuration."""

    service_name: str = "payment-intent-api"
    app_version: str = "1.0.0"
    log_level: str = "INFO"
    stripe_secret_key: str | None = None
    stripe_api_version: str = "2024-06-20"
    cors_allow_origins: list[str] = ["*"]
    otel_exporter_otlp_endpoint: str | None = None
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)


settings = Settings()
