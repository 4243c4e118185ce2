"""Application configuration."""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="HookGate", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: str = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, description="Number of workers")
    reload: bool = Field(default=False, description="Auto-reload on changes")

    # Signature verification
    secret_key: str = Field(
        default="super-secret-signature",
        description="Shared secret for webhook signature tokens",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    signature_header: str = Field(
        default="x-signature", description="Header carrying the signature token"
    )
    test_token_enabled: bool = Field(
        default=True, description="Expose the test token endpoint"
    )
    test_token_expire_hours: int = Field(
        default=1, description="Test token expiration in hours"
    )

    # Queue
    max_retries: int = Field(
        default=3, description="Delivery attempts before an event is dropped"
    )
    history_size: int = Field(
        default=20, description="Number of terminal outcomes kept in history"
    )
    recent_events_limit: int = Field(
        default=10, description="Outcomes reported by the queue status endpoint"
    )
    queue_max_length: Optional[int] = Field(
        default=None, description="Reject admissions once the queue holds this many items"
    )
    processing_mode: Literal["background", "inline"] = Field(
        default="background", description="How queue passes are triggered"
    )
    retry_interval: float = Field(
        default=0.0, description="Seconds between passes while retries are pending"
    )

    # Delivery
    delivery_target_url: Optional[str] = Field(
        default=None, description="Forward accepted events to this URL"
    )
    delivery_timeout: float = Field(
        default=10.0, description="Delivery attempt timeout in seconds"
    )
    shutdown_timeout: float = Field(
        default=5.0, description="Seconds the worker may spend draining the queue at shutdown"
    )

    # Monitoring
    metrics_enabled: bool = Field(default=True, description="Enable metrics")

    # CORS
    cors_enabled: bool = Field(default=True, description="Enable CORS")
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="CORS origins",
    )
    cors_credentials: bool = Field(default=True, description="CORS credentials")
    cors_methods: List[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        description="CORS methods",
    )
    cors_headers: List[str] = Field(default=["*"], description="CORS headers")

    @field_validator("max_retries", "history_size", "recent_events_limit")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("queue_max_length")
    @classmethod
    def validate_queue_max_length(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("queue_max_length must be at least 1 when set")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev")

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment.lower() in ("testing", "test")


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()


# Global settings instance
settings = get_settings()
