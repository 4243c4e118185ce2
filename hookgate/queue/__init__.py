"""
HookGate Queue System

In-memory delivery queue with bounded retries for verified webhook events.

Key Features:
- FIFO delivery queue with snapshot-based processing passes
- Bounded retry policy (drop after a fixed number of failed attempts)
- Size-capped, newest-first history of terminal outcomes
- Pluggable delivery backends (logging stand-in, HTTP forwarding)
- Background worker or inline processing triggers
- Prometheus metrics

Usage:
    from hookgate.queue import QueueService, QueueConfig, Event

    service = QueueService(QueueConfig(max_attempts=3))
    await service.start()

    await service.admit(Event(event_type="user.created", data={"id": 1}))

    await service.stop()
"""

from .config import QueueConfig
from .delivery import (
    CallableDeliverer,
    Deliverer,
    HttpDeliverer,
    LoggingDeliverer,
    create_deliverer,
)
from .exceptions import (
    DeliveryError,
    QueueException,
    QueueFullError,
    WorkerShutdownError,
)
from .history import HistoryLog
from .metrics import MetricsCollector
from .models import (
    DeliveryResult,
    Event,
    ItemView,
    Outcome,
    OutcomeStatus,
    PassReport,
    QueueItem,
)
from .policy import RetryPolicy
from .processor import QueueProcessor
from .service import QueueService
from .store import DeliveryQueue
from .worker import QueueWorker


__all__ = [
    # Configuration
    "QueueConfig",

    # Core components
    "DeliveryQueue",
    "HistoryLog",
    "RetryPolicy",
    "QueueProcessor",
    "QueueWorker",
    "QueueService",

    # Delivery
    "Deliverer",
    "LoggingDeliverer",
    "HttpDeliverer",
    "CallableDeliverer",
    "create_deliverer",

    # Models
    "Event",
    "QueueItem",
    "ItemView",
    "Outcome",
    "OutcomeStatus",
    "DeliveryResult",
    "PassReport",

    # Metrics
    "MetricsCollector",

    # Exceptions
    "QueueException",
    "QueueFullError",
    "DeliveryError",
    "WorkerShutdownError",
]
