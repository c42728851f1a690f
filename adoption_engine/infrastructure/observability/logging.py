"""Structured logging configuration with structlog.

Production emits one JSON object per line; development renders colored
console output. The level comes from the LOG_LEVEL environment variable.

Log Entry Format:
    {
        "timestamp": "2026-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "favorite_toggle_rolled_back",
        "correlation_id": "uuid",
        "service": "FavoriteToggleService",
        ...additional context
    }

Usage:
    from adoption_engine.infrastructure.observability import configure_structlog

    configure_structlog(environment="development")
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from adoption_engine.infrastructure.observability.correlation import (
    correlation_id_processor,
)

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

# httpx logs every request at INFO through the stdlib logger
_NOISY_LOGGERS = ("httpx", "httpcore")


def _get_log_level(level_name: str | None = None) -> int:
    """Resolve a level name (or LOG_LEVEL) to a logging level integer."""
    name = (level_name or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    return getattr(logging, name, logging.INFO)


def configure_structlog(
    environment: str = "production", level: str | None = None
) -> None:
    """Configure structlog once at startup.

    Args:
        environment: 'production' for JSON output, anything else for console.
        level: Explicit level name; LOG_LEVEL is used when omitted.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer(
            ensure_ascii=False
        )
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger_for_component(name: str, component: str) -> structlog.BoundLogger:
    """Get a logger pre-bound with service and component names."""
    return structlog.get_logger().bind(service=name, component=component)
