"""Tests for the Stripe processor and the lazily built default processor."""

import asyncio
from types import SimpleNamespace

import pytest
import stripe

from conftest import make_settings
from payintent.services.api.processor import StripePaymentProcessor
from payintent.services.api.service import PaymentIntentService


def test_stripe_processor_sends_credentials_per_request(monkeypatch):
    captured = {}

    async def fake_create_async(**params):
        captured.update(params)
        return SimpleNamespace(id="pi_1", client_secret="pi_1_secret_abc")

    monkeypatch.setattr(stripe.PaymentIntent, "create_async", fake_create_async)
    processor = StripePaymentProcessor("sk_test_x", "2024-06-20")

    secret = asyncio.run(processor.create_payment_intent(1250, "eur"))

    assert secret == "pi_1_secret_abc"
    assert captured == {
        "api_key": "sk_test_x",
        "stripe_version": "2024-06-20",
        "amount": 1250,
        "currency": "eur",
        "automatic_payment_methods": {"enabled": True},
    }


def test_stripe_processor_requires_client_secret(monkeypatch):
    async def fake_create_async(**params):
        return SimpleNamespace(id="pi_2", client_secret=None)

    monkeypatch.setattr(stripe.PaymentIntent, "create_async", fake_create_async)
    processor = StripePaymentProcessor("sk_test_x", "2024-06-20")

    with pytest.raises(RuntimeError):
        asyncio.run(processor.create_payment_intent(100, "eur"))


def test_default_processor_is_built_once_from_settings():
    service = PaymentIntentService(make_settings(stripe_secret_key="sk_test_lazy"))

    first = service.processor
    assert isinstance(first, StripePaymentProcessor)
    assert first.secret_key == "sk_test_lazy"
    assert service.processor is first
