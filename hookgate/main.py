"""Main FastAPI application."""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import structlog
from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, generate_latest

from hookgate.auth.security import SignatureVerifier
from hookgate.config import Settings, settings as default_settings
from hookgate.queue import QueueConfig, QueueService
from hookgate.webhooks import HealthResponse, get_queue_service, webhook_router

# Metrics
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_DURATION = Histogram(
    "http_request_duration_seconds", "HTTP request duration", ["method", "endpoint"]
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info("Starting HookGate application", version=settings.app_version)

    # Services attached before startup are used as-is.
    if getattr(app.state, "queue_service", None) is None:
        app.state.queue_service = QueueService(QueueConfig.from_settings(settings))
    if getattr(app.state, "signature_verifier", None) is None:
        app.state.signature_verifier = SignatureVerifier.from_settings(settings)

    service: QueueService = app.state.queue_service
    try:
        await service.start()
        logger.info("Application startup completed")
        yield
    finally:
        logger.info("Shutting down HookGate application")
        await service.stop()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or default_settings

    app = FastAPI(
        title=settings.app_name,
        description="Webhook intake gateway with queued, retried delivery",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.queue_service = None
    app.state.signature_verifier = None

    # Configure CORS
    if settings.cors_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=settings.cors_credentials,
            allow_methods=settings.cors_methods,
            allow_headers=settings.cors_headers,
        )

    # Request logging and metrics middleware
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code,
        ).inc()

        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=request.url.path,
        ).observe(duration)

        log = logger.debug if request.url.path in ("/health", "/metrics") else logger.info
        log(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=round(duration, 4),
            client_host=request.client.host if request.client else None,
        )

        return response

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse)
    async def health_check(service: QueueService = Depends(get_queue_service)):
        """Health check endpoint."""
        return {
            "status": "ok",
            "uptime": service.uptime,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "queue": {
                "length": len(service.queue),
                "processed": service.history.count(),
            },
        }

    # Metrics endpoint
    if settings.metrics_enabled:
        @app.get("/metrics")
        async def metrics():
            """Prometheus metrics endpoint."""
            return Response(
                generate_latest(),
                media_type="text/plain",
            )

    # Body schema violations are reported as 400
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "Rejected invalid request body",
            url=str(request.url),
            errors=len(exc.errors()),
        )
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request body",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            url=str(request.url),
            method=request.method,
            exc_info=True,
        )

        if settings.is_development:
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal Server Error",
                    "detail": str(exc),
                    "type": type(exc).__name__,
                },
            )
        else:
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error"},
            )

    app.include_router(webhook_router)

    return app


# Create the app instance
app = create_app()
