"""Queue processing passes.

A pass visits every item that was in the delivery queue when it started,
in admission order, and attempts one delivery for each:

* success: the item leaves the queue and a ``success`` outcome is recorded
* failure: the attempt count goes up; once the retry policy says so the item
  is dropped with a ``failed`` outcome, otherwise it waits for the next pass

Only one pass runs at a time. Events admitted while a pass is waiting on a
delivery join the queue behind the visited items and are picked up by the
next pass.
"""

import asyncio
import time
from typing import List, Optional

import structlog

from .delivery import Deliverer
from .history import HistoryLog
from .metrics import MetricsCollector
from .models import DeliveryResult, OutcomeStatus, PassReport, QueueItem
from .policy import RetryPolicy
from .store import DeliveryQueue

logger = structlog.get_logger()


class QueueProcessor:
    """Runs processing passes over a delivery queue."""

    def __init__(
        self,
        queue: DeliveryQueue,
        history: HistoryLog,
        policy: RetryPolicy,
        deliverer: Deliverer,
        delivery_timeout: Optional[float] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.queue = queue
        self.history = history
        self.policy = policy
        self.deliverer = deliverer
        self.delivery_timeout = delivery_timeout
        self.metrics = metrics or MetricsCollector()
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        """Whether a pass is currently in progress."""
        return self._lock.locked()

    async def run_pass(self) -> PassReport:
        """Process every item present in the queue at pass start exactly once."""
        async with self._lock:
            report = PassReport()
            start = time.perf_counter()
            items = self.queue.begin_pass()
            retained: List[QueueItem] = []
            visited = 0

            try:
                for item in items:
                    delivered = await self._attempt(item)
                    visited += 1
                    report.processed += 1

                    if delivered:
                        report.delivered += 1
                        self.history.record(item.event_type, OutcomeStatus.SUCCESS)
                        continue

                    item.attempts += 1
                    if self.policy.should_drop(item.attempts):
                        report.dropped += 1
                        logger.error(
                            "Dropping failed webhook",
                            event_type=item.event_type,
                            attempts=item.attempts,
                            payload=item.event.to_dict(),
                        )
                        self.history.record(item.event_type, OutcomeStatus.FAILED)
                    else:
                        report.retried += 1
                        retained.append(item)
            finally:
                # Unvisited items (pass interrupted) go back untouched.
                self.queue.finish_pass(retained + items[visited:])

            report.duration_seconds = time.perf_counter() - start
            self.metrics.record_pass(report, len(self.queue))

            if report.processed:
                logger.info(
                    "Queue pass completed",
                    processed=report.processed,
                    delivered=report.delivered,
                    retried=report.retried,
                    dropped=report.dropped,
                    queue_length=len(self.queue),
                )
            return report

    async def _attempt(self, item: QueueItem) -> bool:
        """Run one delivery attempt; every kind of failure returns False."""
        attempt = item.attempts + 1
        logger.debug("Delivering event", event_type=item.event_type, attempt=attempt)

        try:
            if self.delivery_timeout:
                result = await asyncio.wait_for(
                    self.deliverer.deliver(item.event), timeout=self.delivery_timeout
                )
            else:
                result = await self.deliverer.deliver(item.event)
        except asyncio.TimeoutError:
            logger.warning(
                "Delivery timed out",
                event_type=item.event_type,
                attempt=attempt,
                max_attempts=self.policy.max_attempts,
                timeout=self.delivery_timeout,
            )
            self.metrics.record_attempt(False)
            return False
        except Exception as e:
            logger.warning(
                "Delivery failed",
                event_type=item.event_type,
                attempt=attempt,
                max_attempts=self.policy.max_attempts,
                error=str(e),
                error_type=type(e).__name__,
            )
            self.metrics.record_attempt(False)
            return False

        success = result == DeliveryResult.SUCCESS
        if not success:
            logger.warning(
                "Delivery failed",
                event_type=item.event_type,
                attempt=attempt,
                max_attempts=self.policy.max_attempts,
            )
        self.metrics.record_attempt(success)
        return success
