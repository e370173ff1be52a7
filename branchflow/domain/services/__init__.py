"""Pure domain services."""

from branchflow.domain.services.event_status import (
    DEFAULT_SENIOR_CORE_QUORUM,
    ApprovalSummary,
    StageSummary,
    compute_event_status,
    is_forward_transition,
    stages_to_materialize,
    summarize_approvals,
)

__all__ = [
    "DEFAULT_SENIOR_CORE_QUORUM",
    "ApprovalSummary",
    "StageSummary",
    "compute_event_status",
    "is_forward_transition",
    "stages_to_materialize",
    "summarize_approvals",
]
