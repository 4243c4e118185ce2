"""Queue service wiring the delivery queue, history and worker together."""

import time
from typing import Any, Dict, Optional

import structlog

from hookgate.exceptions import ConfigurationError

from .config import QueueConfig
from .delivery import Deliverer, create_deliverer
from .exceptions import QueueFullError
from .history import HistoryLog
from .metrics import MetricsCollector
from .models import Event, PassReport, QueueItem
from .policy import RetryPolicy
from .processor import QueueProcessor
from .store import DeliveryQueue
from .worker import QueueWorker

logger = structlog.get_logger()


class QueueService:
    """Owns the queue engine for the lifetime of the application.

    Constructed at startup, started with :meth:`start` once an event loop is
    running and torn down with :meth:`stop` at shutdown.
    """

    def __init__(
        self,
        config: Optional[QueueConfig] = None,
        deliverer: Optional[Deliverer] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.config = config or QueueConfig()
        if self.config.processing_mode not in ("background", "inline"):
            raise ConfigurationError(
                f"Unknown processing mode: {self.config.processing_mode!r}"
            )
        self.queue = DeliveryQueue(max_length=self.config.max_length)
        self.history = HistoryLog(capacity=self.config.history_size)
        self.policy = RetryPolicy(max_attempts=self.config.max_attempts)
        self.deliverer = deliverer or create_deliverer(
            self.config.delivery_target_url, timeout=self.config.delivery_timeout
        )
        self.metrics = metrics or MetricsCollector()
        self.processor = QueueProcessor(
            queue=self.queue,
            history=self.history,
            policy=self.policy,
            deliverer=self.deliverer,
            delivery_timeout=self.config.delivery_timeout,
            metrics=self.metrics,
        )
        self.worker = QueueWorker(self.processor, retry_interval=self.config.retry_interval)
        self.started_at = time.monotonic()

    @property
    def uptime(self) -> float:
        """Seconds since the service was created."""
        return time.monotonic() - self.started_at

    async def start(self) -> None:
        if not self.config.inline:
            self.worker.start()
        logger.info(
            "Queue service started",
            processing_mode=self.config.processing_mode,
            max_attempts=self.policy.max_attempts,
            history_size=self.history.capacity,
            deliverer=type(self.deliverer).__name__,
        )

    async def stop(self) -> None:
        await self.worker.stop(timeout=self.config.shutdown_timeout)
        aclose = getattr(self.deliverer, "aclose", None)
        if aclose is not None:
            await aclose()

        pending = len(self.queue)
        if pending:
            logger.warning("Discarding undelivered events on shutdown", pending=pending)
        logger.info("Queue service stopped")

    async def admit(self, event: Event) -> QueueItem:
        """Queue a verified event and trigger processing."""
        try:
            item = self.queue.enqueue(event)
        except QueueFullError:
            self.metrics.record_admission("rejected")
            logger.warning(
                "Queue full, rejecting event",
                event_type=event.event_type,
                max_length=self.queue.max_length,
            )
            raise

        self.metrics.record_admission("accepted")
        self.metrics.record_queue_length(len(self.queue))

        if self.config.inline:
            await self.processor.run_pass()
        else:
            self.worker.notify()
        return item

    async def process(self) -> PassReport:
        """Run a single pass immediately."""
        return await self.processor.run_pass()

    def status(self, recent_limit: Optional[int] = None) -> Dict[str, Any]:
        """Queue status report."""
        limit = recent_limit if recent_limit is not None else self.config.recent_events_limit
        return {
            "queueLength": len(self.queue),
            "processedCount": self.history.count(),
            "maxRetries": self.policy.max_attempts,
            "items": [view.to_dict() for view in self.queue.snapshot()],
            "recentEvents": [outcome.to_dict() for outcome in self.history.recent(limit)],
        }
