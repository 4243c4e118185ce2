"""Queue configuration."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from hookgate.config import Settings


@dataclass
class QueueConfig:
    """Queue engine configuration."""

    # Retry configuration
    max_attempts: int = 3

    # History configuration
    history_size: int = 20
    recent_events_limit: int = 10

    # Admission
    max_length: Optional[int] = None  # None keeps the queue unbounded

    # Processing
    processing_mode: str = "background"
    retry_interval: float = 0.0  # seconds

    # Delivery
    delivery_target_url: Optional[str] = None
    delivery_timeout: Optional[float] = 10.0  # seconds

    # Shutdown
    shutdown_timeout: float = 5.0  # seconds

    @property
    def inline(self) -> bool:
        """Whether passes run inside the admitting request."""
        return self.processing_mode == "inline"

    @classmethod
    def from_settings(cls, settings: "Settings") -> "QueueConfig":
        """Create config from application settings."""
        return cls(
            max_attempts=settings.max_retries,
            history_size=settings.history_size,
            recent_events_limit=settings.recent_events_limit,
            max_length=settings.queue_max_length,
            processing_mode=settings.processing_mode,
            retry_interval=settings.retry_interval,
            delivery_target_url=settings.delivery_target_url,
            delivery_timeout=settings.delivery_timeout,
            shutdown_timeout=settings.shutdown_timeout,
        )

    @classmethod
    def from_env(cls) -> "QueueConfig":
        """Create config from environment variables."""
        import os

        return cls(
            max_attempts=int(os.getenv("MAX_RETRIES", "3")),
            history_size=int(os.getenv("HISTORY_SIZE", "20")),
            recent_events_limit=int(os.getenv("RECENT_EVENTS_LIMIT", "10")),
            max_length=int(os.getenv("QUEUE_MAX_LENGTH")) if os.getenv("QUEUE_MAX_LENGTH") else None,
            processing_mode=os.getenv("PROCESSING_MODE", "background").lower(),
            retry_interval=float(os.getenv("RETRY_INTERVAL", "0")),
            delivery_target_url=os.getenv("DELIVERY_TARGET_URL") or None,
            delivery_timeout=float(os.getenv("DELIVERY_TIMEOUT", "10")),
            shutdown_timeout=float(os.getenv("SHUTDOWN_TIMEOUT", "5")),
        )
