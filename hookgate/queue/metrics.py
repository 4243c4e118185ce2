"""Queue metrics collection."""

from prometheus_client import Counter, Gauge, Histogram

from .models import PassReport


WEBHOOKS_RECEIVED = Counter(
    "webhooks_received_total",
    "Webhook admissions by result",
    ["result"],
    namespace="hookgate",
)

DELIVERIES = Counter(
    "deliveries_total",
    "Terminal delivery outcomes",
    ["outcome"],
    namespace="hookgate",
)

DELIVERY_ATTEMPTS = Counter(
    "delivery_attempts_total",
    "Delivery attempts by result",
    ["result"],
    namespace="hookgate",
)

QUEUE_LENGTH = Gauge(
    "queue_length",
    "Number of events waiting in the delivery queue",
    namespace="hookgate",
)

PASS_DURATION = Histogram(
    "pass_duration_seconds",
    "Duration of a queue processing pass",
    namespace="hookgate",
    buckets=(0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)


class MetricsCollector:
    """Records queue activity into the Prometheus registry.

    Also keeps plain lifetime totals so they can be read back without
    scraping the registry.
    """

    def __init__(self):
        self.total_delivered = 0
        self.total_dropped = 0
        self.total_attempts = 0
        self.passes = 0

    def record_admission(self, result: str) -> None:
        WEBHOOKS_RECEIVED.labels(result=result).inc()

    def record_attempt(self, success: bool) -> None:
        self.total_attempts += 1
        DELIVERY_ATTEMPTS.labels(result="success" if success else "failure").inc()

    def record_pass(self, report: PassReport, queue_length: int) -> None:
        """Record the outcome of a processing pass."""
        self.passes += 1
        self.total_delivered += report.delivered
        self.total_dropped += report.dropped

        if report.delivered:
            DELIVERIES.labels(outcome="success").inc(report.delivered)
        if report.dropped:
            DELIVERIES.labels(outcome="failed").inc(report.dropped)
        PASS_DURATION.observe(report.duration_seconds)
        QUEUE_LENGTH.set(queue_length)

    def record_queue_length(self, queue_length: int) -> None:
        QUEUE_LENGTH.set(queue_length)
