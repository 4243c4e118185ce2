"""Webhook request and response schemas."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from hookgate.queue.models import Event


class WebhookPayload(BaseModel):
    """Incoming webhook body."""

    model_config = ConfigDict(extra="allow")

    event: str = Field(min_length=1, description="Event type, e.g. user.created")
    data: Any = Field(default=None, description="Arbitrary event payload")

    def to_event(self) -> Event:
        return Event(event_type=self.event, data=self.data)


class WebhookAccepted(BaseModel):
    """Response for an accepted webhook."""

    ok: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error body returned by the gateway."""

    error: str
    details: Optional[Any] = None


class TokenResponse(BaseModel):
    """Test token response."""

    token: str


class QueueItemStatus(BaseModel):
    event: str
    retries: int


class RecentEvent(BaseModel):
    event: str
    status: str
    timestamp: int = Field(description="Unix epoch milliseconds")


class QueueStatusResponse(BaseModel):
    """Queue status report."""

    queueLength: int
    processedCount: int
    maxRetries: int
    items: List[QueueItemStatus]
    recentEvents: List[RecentEvent]


class QueueHealth(BaseModel):
    length: int
    processed: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    uptime: float
    timestamp: str
    queue: QueueHealth
