"""Server entry point."""

import logging
import sys
from typing import Any, Dict

import structlog
import uvicorn
from rich.console import Console
from rich.panel import Panel

from hookgate.config import settings

logger = structlog.get_logger()
console = Console()


def setup_logging() -> None:
    """Setup structured logging."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.is_production else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_uvicorn_config() -> Dict[str, Any]:
    """Create Uvicorn configuration."""
    return {
        "app": "hookgate.main:app",
        "host": settings.host,
        "port": settings.port,
        "reload": settings.reload and settings.is_development,
        # Queue state lives in-process, so a single worker process is required.
        "workers": 1,
        "log_level": settings.log_level.lower(),
        "access_log": settings.is_development,
        "use_colors": settings.is_development,
        "server_header": False,
        "date_header": False,
    }


def display_startup_info() -> None:
    """Display startup information."""
    startup_info = f"""
🚀 HookGate Server Starting

Environment: {settings.environment}
Host: {settings.host}
Port: {settings.port}
Processing: {settings.processing_mode}
Max retries: {settings.max_retries}
Delivery target: {settings.delivery_target_url or "log only"}

🌐 Endpoints:
• Webhook: POST http://{settings.host}:{settings.port}/webhook
• Queue status: http://{settings.host}:{settings.port}/queue-status
• Health: http://{settings.host}:{settings.port}/health
"""

    if settings.metrics_enabled:
        startup_info += f"• Metrics: http://{settings.host}:{settings.port}/metrics\n"
    if settings.is_development:
        startup_info += f"• Docs: http://{settings.host}:{settings.port}/docs\n"

    console.print(
        Panel(
            startup_info.strip(),
            title="HookGate - Webhook Gateway",
            border_style="blue",
        )
    )


def main() -> None:
    """Main server entry point."""
    setup_logging()
    display_startup_info()

    if settings.workers > 1:
        logger.warning("Ignoring workers setting, queue state is per-process", workers=settings.workers)

    try:
        uvicorn.run(**create_uvicorn_config())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error("Server error", error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
