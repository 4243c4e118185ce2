"""Queue system data models."""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict
from uuid import uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeliveryResult(str, Enum):
    """Result of a single delivery attempt."""

    SUCCESS = "success"
    FAILURE = "failure"


class OutcomeStatus(str, Enum):
    """Terminal outcome of a queued event."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class Event:
    """A validated webhook event admitted to the queue."""

    event_type: str
    data: Any = None

    def __post_init__(self):
        if not isinstance(self.event_type, str) or not self.event_type:
            raise ValueError("event_type must be a non-empty string")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation."""
        return {"event": self.event_type, "data": self.data}


@dataclass
class QueueItem:
    """An event waiting in the delivery queue.

    ``attempts`` counts failed deliveries so far and is only touched by the
    processor while a pass is running.
    """

    event: Event
    attempts: int = 0
    enqueued_at: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def event_type(self) -> str:
        return self.event.event_type


@dataclass(frozen=True)
class ItemView:
    """Read-only view of a queue item."""

    event_type: str
    attempts: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the status endpoint representation."""
        return {"event": self.event_type, "retries": self.attempts}


@dataclass(frozen=True)
class Outcome:
    """Terminal outcome recorded in the history log."""

    event_type: str
    result: OutcomeStatus
    recorded_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the status endpoint representation (epoch milliseconds)."""
        return {
            "event": self.event_type,
            "status": self.result.value,
            "timestamp": int(self.recorded_at.timestamp() * 1000),
        }


@dataclass
class PassReport:
    """Summary of a single processing pass."""

    processed: int = 0
    delivered: int = 0
    retried: int = 0
    dropped: int = 0
    duration_seconds: float = 0.0
    started_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        return data
