"""Structured logging configuration with structlog.

Production emits one JSON object per line; every other environment uses the
coloured console renderer.

Log Entry Format (production):
    {
        "timestamp": "2026-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "Event proposed",
        "correlation_id": "uuid",
        "logger": "branchflow.application.services.event_lifecycle_service",
        ...bound context (event_id, approver_id, ...)
    }

Usage:
    # At application startup
    from branchflow.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")

    # In modules
    from structlog import get_logger
    logger = get_logger(__name__)
    logger.bind(event_id=str(event_id)).info("Event proposed")
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from branchflow.infrastructure.observability.correlation import correlation_id_processor

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _resolve_log_level(log_level: str | None) -> int:
    """Map a level name (argument, then LOG_LEVEL, then INFO) to its number."""
    level_name = (log_level or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_structlog(
    environment: str = "production",
    log_level: str | None = None,
) -> None:
    """Configure structlog for the process.

    Call once at startup.

    Args:
        environment: 'production' for JSON output, anything else for console.
        log_level: Level name, defaults to the LOG_LEVEL variable.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_log_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
