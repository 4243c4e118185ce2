"""Webhook intake for HookGate.

This module provides the HTTP surface of the gateway:
- Signed webhook admission
- Test token issuance
- Queue status reporting
"""

from .models import (
    ErrorResponse,
    HealthResponse,
    QueueStatusResponse,
    TokenResponse,
    WebhookAccepted,
    WebhookPayload,
)
from .routes import (
    get_queue_service,
    get_settings_dependency,
    get_signature_verifier,
    webhook_router,
)

__all__ = [
    # Models
    "WebhookPayload",
    "WebhookAccepted",
    "ErrorResponse",
    "TokenResponse",
    "QueueStatusResponse",
    "HealthResponse",
    # Routing
    "webhook_router",
    "get_queue_service",
    "get_signature_verifier",
    "get_settings_dependency",
]
