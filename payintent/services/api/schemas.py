"""API request/response schemas for the payment intent endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict

DEFAULT_CURRENCY = "eur"


class PaymentIntentRequest(BaseModel):
    """Body accepted by `POST /create-payment-intent`.

    `amount` stays untyped; the service coerces numbers and numeric strings.
    """

    model_config = ConfigDict(extra="ignore")

    amount: Any = None
    currency: str | None = None

    @property
    def resolved_currency(self) -> str:
        return DEFAULT_CURRENCY if self.currency is None else self.currency


class PaymentIntentResponse(BaseModel):
    """Client-usable secret for a created payment intent."""

    clientSecret: str
