"""Payment processor interface and its Stripe implementation."""

from typing import Protocol

import stripe


class PaymentProcessor(Protocol):
    """Anything that can turn an amount into a payment intent client secret."""

    async def create_payment_intent(self, amount_minor_units: int, currency: str) -> str:
        ...


class StripePaymentProcessor:
    """Creates payment intents through the Stripe API.

    Credentials are passed per request so the `stripe` module globals are
    never touched.
    """

    def __init__(self, secret_key: str, api_version: str) -> None:
        self.secret_key = secret_key
        self.api_version = api_version

    async def create_payment_intent(self, amount_minor_units: int, currency: str) -> str:
        intent = await stripe.PaymentIntent.create_async(
            api_key=self.secret_key,
            stripe_version=self.api_version,
            amount=amount_minor_units,
            currency=currency,
            automatic_payment_methods={"enabled": True},
        )
        if not isinstance(intent.client_secret, str):
            raise RuntimeError(f"payment intent {intent.id} has no client secret")
        return intent.client_secret
