"""Concrete domain errors.

Every class here subclasses one of the taxonomy classes in
branchflow.domain.exceptions.
"""

from branchflow.domain.errors.admission import (
    CalendarDateExhaustedError,
    InvalidDateRangeError,
)
from branchflow.domain.errors.event_workflow import (
    ApprovalAlreadyDecidedError,
    ApprovalNotAssignedError,
    ApprovalStageError,
    DocumentationReviewerError,
    DocumentationStageError,
    EventNotFoundError,
    LeadTimeViolationError,
    ProposerNotEligibleError,
    QuorumUnsatisfiableError,
    StageApproverMissingError,
)
from branchflow.domain.errors.proctor import (
    AssignerNotAuthorizedError,
    AssignerScopeError,
    DuplicateProctorUpdateError,
    EmptyUpdateBodyError,
    InvalidUpdatePeriodError,
    MemberNotFoundError,
    MenteeAlreadyAssignedError,
    MentorAtCapacityError,
    ProctorMappingNotFoundError,
    ProctorNotAssignedError,
    SelfMentorshipError,
)

__all__ = [
    "ApprovalAlreadyDecidedError",
    "ApprovalNotAssignedError",
    "ApprovalStageError",
    "AssignerNotAuthorizedError",
    "AssignerScopeError",
    "CalendarDateExhaustedError",
    "DocumentationReviewerError",
    "DocumentationStageError",
    "DuplicateProctorUpdateError",
    "EmptyUpdateBodyError",
    "EventNotFoundError",
    "InvalidDateRangeError",
    "InvalidUpdatePeriodError",
    "LeadTimeViolationError",
    "MemberNotFoundError",
    "MenteeAlreadyAssignedError",
    "MentorAtCapacityError",
    "ProctorMappingNotFoundError",
    "ProctorNotAssignedError",
    "ProposerNotEligibleError",
    "QuorumUnsatisfiableError",
    "SelfMentorshipError",
    "StageApproverMissingError",
]
