"""Test background worker and queue service."""

import asyncio

import pytest
import pytest_asyncio

from hookgate.exceptions import ConfigurationError
from hookgate.queue import (
    DeliveryResult,
    Event,
    HttpDeliverer,
    LoggingDeliverer,
    OutcomeStatus,
    QueueConfig,
    QueueFullError,
    QueueService,
    WorkerShutdownError,
)


@pytest_asyncio.fixture
async def background_service(scripted):
    """Started service running passes on the background worker."""
    deliverer = scripted({"flaky": [DeliveryResult.FAILURE, DeliveryResult.SUCCESS]})
    service = QueueService(
        QueueConfig(processing_mode="background", retry_interval=0.0, delivery_timeout=1.0),
        deliverer=deliverer,
    )
    await service.start()
    yield service
    await service.stop()


@pytest.mark.unit
class TestQueueWorker:
    """Test QueueWorker."""

    @pytest.mark.asyncio
    async def test_admission_wakes_worker(self, background_service):
        await background_service.admit(Event("user.created", {}))
        await asyncio.wait_for(background_service.worker.wait_idle(), timeout=1)

        assert len(background_service.queue) == 0
        assert background_service.history.recent(1)[0].result == OutcomeStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_worker_retries_without_new_admissions(self, background_service):
        await background_service.admit(Event("flaky"))
        await asyncio.wait_for(background_service.worker.wait_idle(), timeout=1)

        assert background_service.deliverer.attempts_for("flaky") == 2
        assert background_service.history.count() == 1
        assert background_service.history.recent(1)[0].result == OutcomeStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_worker_drops_after_max_attempts(self, scripted):
        deliverer = scripted(default=DeliveryResult.FAILURE)
        service = QueueService(QueueConfig(max_attempts=3), deliverer=deliverer)
        await service.start()
        try:
            await service.admit(Event("broken"))
            await asyncio.wait_for(service.worker.wait_idle(), timeout=1)
        finally:
            await service.stop()

        assert deliverer.attempts_for("broken") == 3
        assert [o.result for o in service.history.recent(10)] == [OutcomeStatus.FAILED]

    @pytest.mark.asyncio
    async def test_many_admissions_each_get_one_outcome(self, background_service):
        for i in range(10):
            await background_service.admit(Event(f"event.{i}"))
        await asyncio.wait_for(background_service.worker.wait_idle(), timeout=1)

        assert background_service.history.count() == 10
        assert sorted(o.event_type for o in background_service.history.recent(10)) == sorted(
            f"event.{i}" for i in range(10)
        )

    @pytest.mark.asyncio
    async def test_notify_after_stop(self, deliverer):
        service = QueueService(QueueConfig(), deliverer=deliverer)
        await service.start()
        await service.stop()

        assert service.worker.is_running is False
        with pytest.raises(WorkerShutdownError):
            service.worker.notify()

    @pytest.mark.asyncio
    async def test_stop_cancels_worker_that_cannot_drain(self, scripted):
        deliverer = scripted(default=DeliveryResult.FAILURE)
        service = QueueService(
            QueueConfig(max_attempts=1000, retry_interval=0.01, shutdown_timeout=0.05),
            deliverer=deliverer,
        )
        await service.start()
        await service.admit(Event("stuck"))

        await asyncio.wait_for(service.stop(), timeout=1)

        assert service.worker.is_running is False
        assert len(service.queue) == 1


@pytest.mark.unit
class TestQueueService:
    """Test QueueService."""

    @pytest.mark.asyncio
    async def test_inline_admission_processes_immediately(self, queue_service):
        await queue_service.start()

        await queue_service.admit(Event("user.created", {}))

        assert len(queue_service.queue) == 0
        assert queue_service.history.count() == 1
        assert queue_service.worker.is_running is False
        await queue_service.stop()

    @pytest.mark.asyncio
    async def test_queue_full(self, deliverer):
        service = QueueService(
            QueueConfig(max_length=1, processing_mode="background"), deliverer=deliverer
        )
        service.queue.enqueue(Event("occupying"))

        with pytest.raises(QueueFullError):
            await service.admit(Event("rejected"))
        assert len(service.queue) == 1

    @pytest.mark.asyncio
    async def test_status_report(self, scripted):
        deliverer = scripted({"pending": [DeliveryResult.FAILURE]})
        service = QueueService(
            QueueConfig(processing_mode="inline", recent_events_limit=2), deliverer=deliverer
        )
        for event_type in ["a", "b", "c"]:
            await service.admit(Event(event_type))
        await service.admit(Event("pending"))

        status = service.status()

        assert status["queueLength"] == 1
        assert status["processedCount"] == 3
        assert status["maxRetries"] == 3
        assert status["items"] == [{"event": "pending", "retries": 1}]
        assert [e["event"] for e in status["recentEvents"]] == ["c", "b"]
        assert all(e["status"] == "success" for e in status["recentEvents"])

    def test_default_deliverer_selection(self):
        assert isinstance(QueueService(QueueConfig()).deliverer, LoggingDeliverer)

        service = QueueService(QueueConfig(delivery_target_url="http://downstream.test/hooks"))
        assert isinstance(service.deliverer, HttpDeliverer)
        assert service.deliverer.target_url == "http://downstream.test/hooks"

    def test_unknown_processing_mode(self):
        with pytest.raises(ConfigurationError):
            QueueService(QueueConfig(processing_mode="cron"))

    @pytest.mark.asyncio
    async def test_manual_pass_and_metrics(self, scripted):
        deliverer = scripted({"retry.me": [DeliveryResult.FAILURE]})
        service = QueueService(QueueConfig(processing_mode="background"), deliverer=deliverer)
        service.queue.enqueue(Event("ok"))
        service.queue.enqueue(Event("retry.me"))

        report = await service.process()

        assert report.to_dict()["processed"] == 2
        assert report.to_dict()["retried"] == 1
        assert service.metrics.passes == 1
        assert service.metrics.total_delivered == 1
        assert service.metrics.total_attempts == 2
        assert service.metrics.total_dropped == 0
