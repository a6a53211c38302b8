"""Shared fixtures: settings without .env lookups and substitutable processors."""

import pytest
from fastapi.testclient import TestClient

from payintent.common.config import Settings
from payintent.services.api.main import create_app


class RecordingProcessor:
    """Processor double that remembers every call and returns a fixed secret."""

    def __init__(self, client_secret: str = "pi_123_secret_456") -> None:
        self.client_secret = client_secret
        self.calls: list[tuple[int, str]] = []

    async def create_payment_intent(self, amount_minor_units: int, currency: str) -> str:
        self.calls.append((amount_minor_units, currency))
        return self.client_secret


class FailingProcessor:
    """Processor double that always raises the given exception."""

    def __init__(self, exc: Exception) -> None:
        self.exc = exc
        self.calls = 0

    async def create_payment_intent(self, amount_minor_units: int, currency: str) -> str:
        self.calls += 1
        raise self.exc


def make_settings(**overrides) -> Settings:
    values = {"stripe_secret_key": "sk_test_dummy", "service_name": "payintent-test"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def processor() -> RecordingProcessor:
    return RecordingProcessor()


@pytest.fixture
def client(processor) -> TestClient:
    return TestClient(create_app(make_settings(), processor))
