"""Prometheus metric definitions."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


payment_intent_requests_total = Counter(
    "payment_intent_requests_total",
    "Total payment intent creation requests",
    ["service"],
)
payment_intent_success_total = Counter(
    "payment_intent_success_total",
    "Payment intents created by the processor",
    ["service"],
)
payment_intent_failure_total = Counter(
    "payment_intent_failure_total",
    "Payment intent requests that did not produce a client secret",
    ["service", "reason"],
)
payment_intent_latency_seconds = Histogram(
    "payment_intent_latency_seconds",
    "Processor call latency seconds",
    ["service"],
)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
