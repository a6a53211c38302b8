"""Public HTTP entrypoint.

Serves the informational endpoints and `POST /create-payment-intent`, which
forwards a validated amount to the payment processor and returns the client
secret of the created payment intent.
"""

from datetime import datetime, timezone
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from payintent.common.config import Settings, settings
from payintent.common.logging import configure_logging, logger, trace_id_ctx
from payintent.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
)
from payintent.common.startup import log_startup_config
from payintent.common.tracing import instrument_app, setup_tracing
from payintent.services.api.processor import PaymentProcessor
from payintent.services.api.service import PaymentIntentError, PaymentIntentService


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision."""

    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def requested_url(request: Request) -> str:
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return url


def create_app(app_settings: Settings = settings, processor: PaymentProcessor | None = None) -> FastAPI:
    """Build the API around one settings object and one payment service."""

    configure_logging(app_settings.service_name, app_settings.log_level)
    tracing_enabled = setup_tracing(app_settings.service_name, app_settings.otel_exporter_otlp_endpoint)
    log_startup_config(app_settings)

    app = FastAPI(title="Payment Intent API", version=app_settings.app_version)
    app.state.settings = app_settings
    app.state.payment_service = PaymentIntentService(app_settings, processor)
    if tracing_enabled:
        instrument_app(app)

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Tag the request with a trace id, record count and latency.

        Uncaught errors become a JSON 500 here, while the trace id is still set.
        """

        trace_id = request.headers.get("x-correlation-id") or str(uuid4())
        token = trace_id_ctx.set(trace_id)
        start = perf_counter()
        route = "unmatched"
        method = request.method
        status_code = 500
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.exception("unhandled error on %s %s", method, request.url.path)
                response = JSONResponse(
                    status_code=500,
                    content={"error": "Internal Server Error", "message": str(exc)},
                )
            status_code = response.status_code
            route_obj = request.scope.get("route")
            if route_obj is not None and getattr(route_obj, "path", None):
                route = route_obj.path
            response.headers["x-correlation-id"] = trace_id
            return response
        finally:
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(
                service=app_settings.service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=app_settings.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()
            trace_id_ctx.reset(token)

    # Added last so CORS headers also wrap the 500s built above.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and known paths with the wrong method both count as missing routes.
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={"error": "Not Found", "message": f"API route {requested_url(request)} not found"},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.get("/")
    def root():
        """Service banner."""

        return {
            "message": "API Server is running!",
            "timestamp": utc_timestamp(),
            "version": app_settings.app_version,
        }

    @app.get("/health")
    def health():
        """Container health probe endpoint."""

        return {"status": "OK", "timestamp": utc_timestamp()}

    @app.get("/test")
    def test_endpoint(request: Request):
        return {
            "message": "✅ Backend API works!",
            "timestamp": utc_timestamp(),
            "method": request.method,
        }

    @app.post("/create-payment-intent")
    async def create_payment_intent(request: Request):
        """Create a payment intent and return its client secret.

        The body is read raw so the configuration check runs before any parsing.
        """

        service: PaymentIntentService = request.app.state.payment_service
        try:
            result = await service.create_payment_intent(await request.body())
        except PaymentIntentError as exc:
            return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
        return result.model_dump()

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    return app


app = create_app()
