"""Workflow service dependencies.

Routes depend on these providers; tests replace them through
``app.dependency_overrides`` or install a whole container with
branchflow.bootstrap.set_workflow_container().
"""

from branchflow.application.services import (
    CalendarQueryService,
    EventLifecycleService,
    ProctorAssignmentService,
)
from branchflow.bootstrap.workflow import get_workflow_container


def get_event_lifecycle_service() -> EventLifecycleService:
    """Get the event lifecycle engine."""
    return get_workflow_container().lifecycle


def get_calendar_query_service() -> CalendarQueryService:
    """Get the calendar read service."""
    return get_workflow_container().calendar_queries


def get_proctor_assignment_service() -> ProctorAssignmentService:
    """Get the proctor assignment ledger service."""
    return get_workflow_container().proctors
