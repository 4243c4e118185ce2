"""Queue system exceptions."""

from typing import Optional, Dict, Any


class QueueException(Exception):
    """Base exception for queue-related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class QueueFullError(QueueException):
    """Raised when an admission would exceed the configured queue length."""

    def __init__(self, max_length: int):
        message = f"Delivery queue is full ({max_length} items)"
        super().__init__(message, {"max_length": max_length})
        self.max_length = max_length


class DeliveryError(QueueException):
    """Raised by a deliverer when forwarding an event fails."""

    def __init__(
        self,
        message: str,
        event_type: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, {"event_type": event_type, "status_code": status_code})
        self.event_type = event_type
        self.status_code = status_code


class WorkerShutdownError(QueueException):
    """Raised when the queue worker is used after shutdown."""
    pass
