"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from adoption_engine.config.engine_config import EngineConfig
from adoption_engine.infrastructure.observability import (
    configure_structlog as _configure_structlog,
)


def configure_structlog(config: EngineConfig) -> None:
    """Configure structlog for the configured environment."""
    _configure_structlog(environment=config.environment)


__all__ = ["configure_structlog"]
