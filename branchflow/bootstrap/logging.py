"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from branchflow.config.workflow_config import AppConfig
from branchflow.infrastructure.observability import configure_structlog as _configure_structlog


def configure_logging(app_config: AppConfig) -> None:
    """Configure structlog for the process from the application config."""
    _configure_structlog(
        environment=app_config.environment,
        log_level=app_config.log_level,
    )


__all__ = ["configure_logging"]
