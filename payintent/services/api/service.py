"""Payment intent creation: validate the request, call the processor, map errors."""

import json
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import ValidationError

from payintent.common.config import Settings
from payintent.common.logging import logger
from payintent.common.metrics import (
    payment_intent_failure_total,
    payment_intent_latency_seconds,
    payment_intent_requests_total,
    payment_intent_success_total,
)
from payintent.services.api.processor import PaymentProcessor, StripePaymentProcessor
from payintent.services.api.schemas import PaymentIntentRequest, PaymentIntentResponse

MISCONFIGURATION_MESSAGE = "Server misconfiguration: STRIPE_SECRET_KEY is missing"
INVALID_AMOUNT_MESSAGE = "Invalid amount"
INVALID_BODY_MESSAGE = "Invalid JSON body"
GENERIC_ERROR_MESSAGE = "Internal Server Error"

DECIMAL_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
INFINITY_LITERAL = re.compile(r"[+-]?Infinity")
RADIX_LITERAL = re.compile(r"0([xXoObB])([0-9a-fA-F]+)", re.ASCII)
RADIXES = {"x": 16, "o": 8, "b": 2}


class PaymentIntentError(Exception):
    """Request failure carrying the HTTP status and client-facing message."""

    def __init__(self, status_code: int, message: str, reason: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.reason = reason


def parse_number_string(text: str) -> float:
    """Parse a numeric string from a request body.

    Accepts ASCII decimal literals, signed `Infinity` and unsigned
    `0x`/`0o`/`0b` integers. A blank string is 0; anything else is NaN,
    including `1_000`, `inf` and non-ASCII digits.
    """

    text = text.strip()
    if not text:
        return 0.0
    if DECIMAL_LITERAL.fullmatch(text):
        return float(text)
    if INFINITY_LITERAL.fullmatch(text):
        return -math.inf if text.startswith("-") else math.inf
    match = RADIX_LITERAL.fullmatch(text)
    if match:
        try:
            return float(int(match.group(2), RADIXES[match.group(1).lower()]))
        except ValueError:
            return math.nan
    return math.nan


def coerce_amount(value: Any) -> float:
    """Convert a raw body value to a float, NaN when it is not numeric.

    Booleans, null, arrays and objects are never amounts.
    """

    if value is None or isinstance(value, bool):
        return math.nan
    try:
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            return parse_number_string(value)
    except OverflowError:
        return math.inf
    return math.nan


def is_valid_amount(amount: float) -> bool:
    return math.isfinite(amount) and amount > 0


def to_minor_units(amount: float) -> int:
    """Major units to integer minor units, rounding half up.

    Works on the shortest decimal repr of the float, so 19.995 gives 2000.
    """

    minor = Decimal(repr(amount)) * 100
    return int(minor.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def processor_error_message(exc: BaseException) -> str:
    if exc.args and isinstance(exc.args[0], str):
        return exc.args[0]
    return GENERIC_ERROR_MESSAGE


def parse_request(body: bytes) -> PaymentIntentRequest:
    """Decode a raw JSON body; an empty body counts as `{}`."""

    if not body.strip():
        return PaymentIntentRequest()
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise PaymentIntentError(400, INVALID_BODY_MESSAGE, "invalid_body") from exc
    if not isinstance(payload, dict):
        raise PaymentIntentError(400, INVALID_BODY_MESSAGE, "invalid_body")
    try:
        return PaymentIntentRequest.model_validate(payload)
    except ValidationError as exc:
        raise PaymentIntentError(400, INVALID_BODY_MESSAGE, "invalid_body") from exc


class PaymentIntentService:
    """Creates payment intents for incoming requests.

    The processor is built from settings on first use unless one is injected.
    """

    def __init__(self, settings: Settings, processor: PaymentProcessor | None = None) -> None:
        self.settings = settings
        self._processor = processor

    @property
    def processor(self) -> PaymentProcessor:
        if self._processor is None:
            self._processor = StripePaymentProcessor(
                self.settings.stripe_secret_key,
                self.settings.stripe_api_version,
            )
        return self._processor

    async def create_payment_intent(self, body: bytes) -> PaymentIntentResponse:
        """Validate, call the processor once and return the client secret.

        Raises `PaymentIntentError` for every failure; nothing else escapes.
        """

        service_name = self.settings.service_name
        payment_intent_requests_total.labels(service=service_name).inc()
        try:
            return await self._create(body)
        except PaymentIntentError as exc:
            payment_intent_failure_total.labels(service=service_name, reason=exc.reason).inc()
            raise

    async def _create(self, body: bytes) -> PaymentIntentResponse:
        if not self.settings.stripe_secret_key:
            logger.error("payment intent rejected: STRIPE_SECRET_KEY is not configured")
            raise PaymentIntentError(500, MISCONFIGURATION_MESSAGE, "misconfigured")

        request = parse_request(body)
        amount = coerce_amount(request.amount)
        if not is_valid_amount(amount):
            raise PaymentIntentError(400, INVALID_AMOUNT_MESSAGE, "invalid_amount")

        amount_minor_units = to_minor_units(amount)
        currency = request.resolved_currency
        try:
            with payment_intent_latency_seconds.labels(service=self.settings.service_name).time():
                client_secret = await self.processor.create_payment_intent(amount_minor_units, currency)
        except Exception as exc:
            logger.exception("error creating payment intent amount=%s currency=%s", amount_minor_units, currency)
            raise PaymentIntentError(500, processor_error_message(exc), "processor_error") from exc

        payment_intent_success_total.labels(service=self.settings.service_name).inc()
        logger.info("payment intent created amount=%s currency=%s", amount_minor_units, currency)
        return PaymentIntentResponse(clientSecret=client_secret)
