"""FastAPI dependency providers."""

from branchflow.api.dependencies.workflow import (
    get_calendar_query_service,
    get_event_lifecycle_service,
    get_proctor_assignment_service,
)

__all__ = [
    "get_calendar_query_service",
    "get_event_lifecycle_service",
    "get_proctor_assignment_service",
]
