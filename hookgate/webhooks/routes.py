"""Webhook HTTP routes."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from hookgate.auth.security import SignatureVerifier
from hookgate.config import Settings, settings as default_settings
from hookgate.exceptions import AuthenticationError
from hookgate.queue import QueueFullError, QueueService
from hookgate.webhooks.models import (
    ErrorResponse,
    QueueStatusResponse,
    TokenResponse,
    WebhookAccepted,
    WebhookPayload,
)

logger = structlog.get_logger()

webhook_router = APIRouter()


def get_settings_dependency(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return getattr(request.app.state, "settings", default_settings)


def get_queue_service(request: Request) -> QueueService:
    """Get the queue service owned by the running application."""
    return request.app.state.queue_service


def get_signature_verifier(request: Request) -> SignatureVerifier:
    """Get the signature verifier owned by the running application."""
    return request.app.state.signature_verifier


@webhook_router.post(
    "/webhook",
    tags=["Webhooks"],
    summary="Receive a signed webhook",
    response_model=WebhookAccepted,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def receive_webhook(
    payload: WebhookPayload,
    request: Request,
    service: QueueService = Depends(get_queue_service),
    verifier: SignatureVerifier = Depends(get_signature_verifier),
    settings: Settings = Depends(get_settings_dependency),
):
    """
    Accept a webhook and queue it for delivery.

    The body is validated before the signature is checked; unsigned or
    badly signed requests never reach the queue.
    """
    signature = request.headers.get(settings.signature_header, "")

    try:
        verifier.authenticate(signature)
    except AuthenticationError as e:
        service.metrics.record_admission("unauthorized")
        logger.warning(
            "Rejected webhook with invalid signature",
            event_type=payload.event,
            reason=e.reason,
            client_host=request.client.host if request.client else None,
        )
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Invalid signature"},
        )

    try:
        await service.admit(payload.to_event())
    except QueueFullError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": str(e)},
        )

    logger.info("Webhook accepted", event_type=payload.event)
    message = (
        "Webhook received and processed"
        if service.config.inline
        else "Webhook received and queued"
    )
    return WebhookAccepted(ok=True, message=message)


@webhook_router.get(
    "/generate-test-token",
    tags=["Webhooks"],
    summary="Generate a test signature token",
    response_model=TokenResponse,
)
async def generate_test_token(
    verifier: SignatureVerifier = Depends(get_signature_verifier),
    settings: Settings = Depends(get_settings_dependency),
):
    """Issue a signature token valid for the configured test lifetime."""
    if not settings.test_token_enabled:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not Found",
        )
    return TokenResponse(token=verifier.create_test_token())


@webhook_router.get(
    "/queue-status",
    tags=["Queue"],
    summary="Queue statistics and recent outcomes",
    response_model=QueueStatusResponse,
)
async def queue_status(service: QueueService = Depends(get_queue_service)):
    """Report queued items and the most recent delivery outcomes."""
    return service.status()
