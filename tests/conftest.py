"""Pytest configuration and fixtures."""

from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from hookgate.auth.security import SignatureVerifier
from hookgate.config import Settings
from hookgate.main import create_app
from hookgate.queue import (
    CallableDeliverer,
    DeliveryQueue,
    DeliveryResult,
    Event,
    HistoryLog,
    QueueConfig,
    QueueProcessor,
    QueueService,
    RetryPolicy,
)


TEST_SECRET = "test-secret-signature"


class ScriptedDeliverer(CallableDeliverer):
    """Deliverer that replays a per-event-type script of results.

    Event types without a script succeed. Every call is recorded in
    ``calls`` in order.
    """

    def __init__(self, script: Dict[str, List[DeliveryResult]] = None, default=DeliveryResult.SUCCESS):
        self.script = {k: list(v) for k, v in (script or {}).items()}
        self.default = default
        self.calls: List[Event] = []
        super().__init__(self._next)

    def _next(self, event: Event) -> DeliveryResult:
        self.calls.append(event)
        results = self.script.get(event.event_type)
        if results:
            return results.pop(0)
        return self.default

    def attempts_for(self, event_type: str) -> int:
        return sum(1 for e in self.calls if e.event_type == event_type)


@pytest.fixture
def test_settings():
    """Settings for an inline-processing test application."""
    return Settings(
        environment="testing",
        debug=True,
        secret_key=TEST_SECRET,
        processing_mode="inline",
        delivery_timeout=1.0,
        metrics_enabled=True,
    )


@pytest.fixture
def queue_config():
    """Create test queue configuration."""
    return QueueConfig(
        max_attempts=3,
        history_size=20,
        recent_events_limit=10,
        processing_mode="inline",
        delivery_timeout=1.0,
    )


@pytest.fixture
def scripted():
    """Factory for scripted deliverers."""
    return ScriptedDeliverer


@pytest.fixture
def deliverer():
    """Deliverer that succeeds unless scripted otherwise."""
    return ScriptedDeliverer()


@pytest.fixture
def delivery_queue():
    return DeliveryQueue()


@pytest.fixture
def history():
    return HistoryLog(capacity=20)


@pytest.fixture
def processor(delivery_queue, history, deliverer):
    """Processor wired to the scripted deliverer."""
    return QueueProcessor(
        queue=delivery_queue,
        history=history,
        policy=RetryPolicy(max_attempts=3),
        deliverer=deliverer,
        delivery_timeout=1.0,
    )


@pytest.fixture
def verifier():
    return SignatureVerifier(secret_key=TEST_SECRET, algorithm="HS256", test_token_expire_hours=1)


@pytest.fixture
def signed_headers(verifier):
    """Headers carrying a valid signature token."""
    return {"x-signature": verifier.create_test_token()}


@pytest.fixture
def queue_service(queue_config, deliverer):
    return QueueService(queue_config, deliverer=deliverer)


@pytest.fixture
def test_app(test_settings, queue_service, verifier):
    """Create test FastAPI app with an injected queue service."""
    app = create_app(test_settings)
    app.state.queue_service = queue_service
    app.state.signature_verifier = verifier
    return app


@pytest.fixture
def client(test_app):
    """Create test client; the context manager runs the app lifespan."""
    with TestClient(test_app) as test_client:
        yield test_client
