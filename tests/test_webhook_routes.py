"""Test webhook HTTP routes."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from hookgate.config import Settings
from hookgate.main import create_app
from hookgate.queue import DeliveryResult, Event, QueueConfig, QueueService


@pytest.mark.unit
class TestWebhookRoutes:
    """Test the webhook intake endpoint."""

    def test_signed_webhook_is_processed(self, client, signed_headers, queue_service):
        response = client.post(
            "/webhook",
            json={"event": "user.created", "data": {}},
            headers=signed_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True, "message": "Webhook received and processed"}
        assert len(queue_service.queue) == 0
        recent = queue_service.history.recent(1)
        assert recent[0].event_type == "user.created"
        assert recent[0].result.value == "success"

    def test_missing_signature(self, client, queue_service):
        response = client.post("/webhook", json={"event": "user.created", "data": {}})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid signature"}
        assert len(queue_service.queue) == 0
        assert queue_service.history.count() == 0

    def test_invalid_signature(self, client, queue_service):
        response = client.post(
            "/webhook",
            json={"event": "user.created", "data": {}},
            headers={"x-signature": "invalid-token"},
        )

        assert response.status_code == 401
        assert queue_service.deliverer.calls == []

    def test_expired_signature(self, client, verifier, queue_service):
        token = verifier.create_test_token(expires_delta=timedelta(seconds=-1))
        response = client.post(
            "/webhook",
            json={"event": "user.created", "data": {}},
            headers={"x-signature": token},
        )

        assert response.status_code == 401
        assert queue_service.history.count() == 0

    @pytest.mark.parametrize(
        "body",
        [
            {"data": {}},
            {"event": 42, "data": {}},
            {"event": "", "data": {}},
            [],
        ],
    )
    def test_invalid_body(self, client, signed_headers, queue_service, body):
        response = client.post("/webhook", json=body, headers=signed_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"
        assert queue_service.history.count() == 0

    def test_invalid_body_checked_before_signature(self, client):
        response = client.post("/webhook", json={"data": {}})

        assert response.status_code == 400

    def test_malformed_json(self, client, signed_headers):
        response = client.post(
            "/webhook",
            content=b"{not json",
            headers={**signed_headers, "content-type": "application/json"},
        )

        assert response.status_code == 400

    def test_failed_delivery_stays_queued(self, client, signed_headers, queue_service):
        queue_service.deliverer.script["order.completed"] = [DeliveryResult.FAILURE]

        response = client.post(
            "/webhook",
            json={"event": "order.completed", "data": {"orderId": 7}},
            headers=signed_headers,
        )

        assert response.status_code == 200
        status = client.get("/queue-status").json()
        assert status["queueLength"] == 1
        assert status["items"] == [{"event": "order.completed", "retries": 1}]
        assert status["recentEvents"] == []

    def test_queue_full_returns_503(self, test_settings, verifier, deliverer, signed_headers):
        app = create_app(test_settings)
        app.state.queue_service = QueueService(
            QueueConfig(max_length=1, processing_mode="background"), deliverer=deliverer
        )
        app.state.signature_verifier = verifier

        with TestClient(app) as client:
            # Fill the queue without giving the worker a chance to drain it
            app.state.queue_service.queue.enqueue(Event("occupying"))
            response = client.post(
                "/webhook",
                json={"event": "user.created", "data": {}},
                headers=signed_headers,
            )

        assert response.status_code == 503
        assert "full" in response.json()["error"]


@pytest.mark.unit
class TestTokenRoute:
    """Test the test token endpoint."""

    def test_generate_test_token(self, client, verifier):
        response = client.get("/generate-test-token")

        assert response.status_code == 200
        token = response.json()["token"]
        assert verifier.verify(token)

    def test_generated_token_is_accepted(self, client):
        token = client.get("/generate-test-token").json()["token"]

        response = client.post(
            "/webhook",
            json={"event": "payment.received", "data": {"amount": 10}},
            headers={"x-signature": token},
        )

        assert response.status_code == 200

    def test_token_endpoint_can_be_disabled(self, queue_service, verifier):
        app = create_app(Settings(environment="testing", test_token_enabled=False))
        app.state.queue_service = queue_service
        app.state.signature_verifier = verifier

        with TestClient(app) as client:
            response = client.get("/generate-test-token")

        assert response.status_code == 404


@pytest.mark.unit
class TestQueueStatusRoute:
    """Test the queue status endpoint."""

    def test_empty_status(self, client):
        response = client.get("/queue-status")

        assert response.status_code == 200
        assert response.json() == {
            "queueLength": 0,
            "processedCount": 0,
            "maxRetries": 3,
            "items": [],
            "recentEvents": [],
        }

    def test_recent_events_limited_to_ten(self, client, signed_headers):
        for i in range(15):
            client.post(
                "/webhook",
                json={"event": f"event.{i}", "data": {}},
                headers=signed_headers,
            )

        data = client.get("/queue-status").json()

        assert data["processedCount"] == 15
        assert len(data["recentEvents"]) == 10
        assert data["recentEvents"][0]["event"] == "event.14"
        assert data["recentEvents"][0]["status"] == "success"
        assert isinstance(data["recentEvents"][0]["timestamp"], int)

    def test_status_does_not_mutate(self, client, signed_headers, queue_service):
        client.post("/webhook", json={"event": "a", "data": {}}, headers=signed_headers)

        first = client.get("/queue-status").json()
        second = client.get("/queue-status").json()

        assert first == second
        assert queue_service.history.count() == 1
