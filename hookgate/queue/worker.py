"""Background queue worker."""

import asyncio
from typing import Optional

import structlog

from .exceptions import WorkerShutdownError
from .processor import QueueProcessor

logger = structlog.get_logger()


class QueueWorker:
    """Single background task that runs processing passes.

    Admissions call :meth:`notify`; the worker then runs passes until the
    queue is empty, pausing ``retry_interval`` seconds between passes while
    failed items are waiting for another attempt.
    """

    def __init__(self, processor: QueueProcessor, retry_interval: float = 0.0):
        self.processor = processor
        self.retry_interval = retry_interval
        self._wakeup = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()
        self._task: Optional[asyncio.Task] = None
        self._stopped = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the worker task on the running event loop."""
        if self._stopped:
            raise WorkerShutdownError("Queue worker has been stopped")
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="hookgate-queue-worker")
        logger.info("Queue worker started", retry_interval=self.retry_interval)

    def notify(self) -> None:
        """Request a processing pass."""
        if self._stopped:
            raise WorkerShutdownError("Queue worker has been stopped")
        self._idle.clear()
        self._wakeup.set()

    async def wait_idle(self) -> None:
        """Wait until the worker has emptied the queue."""
        await self._idle.wait()

    async def stop(self, timeout: float = 0.0) -> None:
        """Stop the worker, letting it drain the queue for up to ``timeout`` seconds."""
        self._stopped = True
        if self._task is None:
            return

        if timeout > 0 and not self._idle.is_set():
            try:
                await asyncio.wait_for(self._idle.wait(), timeout)
            except asyncio.TimeoutError:
                logger.warning("Queue worker did not drain before shutdown", timeout=timeout)

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._idle.set()
        logger.info("Queue worker stopped")

    async def _run(self) -> None:
        while True:
            await self._wakeup.wait()
            self._wakeup.clear()

            try:
                await self.processor.run_pass()
            except Exception as e:
                logger.error("Queue pass failed", error=str(e), exc_info=True)

            if len(self.processor.queue):
                # Failed items stay queued; schedule the next pass.
                await asyncio.sleep(self.retry_interval)
                self._wakeup.set()
            elif not self._wakeup.is_set():
                self._idle.set()
