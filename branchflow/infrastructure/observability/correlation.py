"""Request correlation IDs.

A correlation ID is carried in a ContextVar so it survives awaits inside one
request. The HTTP middleware sets it from ``X-Correlation-ID`` (or generates
one) and the structlog processor below stamps it on every log entry.

Usage:
    # In middleware (request start)
    token = set_correlation_id(request.headers.get(CORRELATION_HEADER) or generate_correlation_id())
    ...
    reset_correlation_id(token)
"""

from contextvars import ContextVar, Token
from typing import Any
from uuid import uuid4

CORRELATION_HEADER = "X-Correlation-ID"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def get_correlation_id() -> str:
    """Return the current correlation ID, empty string outside a request."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> Token[str]:
    """Set the correlation ID for the current context.

    Returns:
        Token to restore the previous value with reset_correlation_id.
    """
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding ``correlation_id`` to every entry."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
