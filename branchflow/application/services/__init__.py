"""Application services."""

from branchflow.application.services.admission_controller_service import (
    AdmissionControllerService,
)
from branchflow.application.services.calendar_query_service import (
    CalendarQueryService,
    DateAvailability,
    EventSummary,
)
from branchflow.application.services.event_lifecycle_service import (
    ApprovalStatusView,
    EventLifecycleService,
    PendingApproval,
    ProposalResult,
    TransitionResult,
)
from branchflow.application.services.proctor_assignment_service import (
    ProctorAssignmentService,
)

__all__ = [
    "AdmissionControllerService",
    "ApprovalStatusView",
    "CalendarQueryService",
    "DateAvailability",
    "EventLifecycleService",
    "EventSummary",
    "PendingApproval",
    "ProctorAssignmentService",
    "ProposalResult",
    "TransitionResult",
]
