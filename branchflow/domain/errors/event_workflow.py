"""Event workflow errors.

Errors raised by the event lifecycle engine while proposing events, recording
approval decisions and driving the documentation stage. Each class narrows
one of the taxonomy classes in branchflow.domain.exceptions.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

from branchflow.domain.exceptions import (
    AlreadyDecidedError,
    ConfigurationError,
    InvariantError,
    NotAssignedError,
    NotFoundError,
    PermissionDeniedError,
    StageError,
    ValidationError,
)

if TYPE_CHECKING:
    from branchflow.domain.models.approval_slot import ApprovalStatus, ApprovalType
    from branchflow.domain.models.event_proposal import EventStatus


class EventNotFoundError(NotFoundError):
    """Raised when an event proposal does not exist.

    Attributes:
        event_id: The missing event.
    """

    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class ProposerNotEligibleError(PermissionDeniedError):
    """Raised when the proposer's role may not propose events.

    Attributes:
        proposer_id: Identity attempting the proposal.
        role_name: Resolved role name, None if the identity has no role.
    """

    def __init__(self, proposer_id: UUID, role_name: str | None) -> None:
        self.proposer_id = proposer_id
        self.role_name = role_name
        super().__init__(
            f"Member {proposer_id} with role {role_name!r} cannot propose events"
        )


class LeadTimeViolationError(ValidationError):
    """Raised when an event is proposed too close to its date.

    Attributes:
        proposed_date: Requested event date.
        earliest_date: First date that satisfies the lead time.
        lead_time_days: Required lead time in days.
    """

    def __init__(
        self,
        proposed_date: date,
        earliest_date: date,
        lead_time_days: int,
    ) -> None:
        self.proposed_date = proposed_date
        self.earliest_date = earliest_date
        self.lead_time_days = lead_time_days
        super().__init__(
            f"Events must be proposed at least {lead_time_days} days in advance: "
            f"{proposed_date.isoformat()} is before {earliest_date.isoformat()}"
        )


class QuorumUnsatisfiableError(InvariantError):
    """Raised when too few senior-core approvers exist to ever reach quorum.

    Attributes:
        eligible_count: Eligible approvers other than the proposer.
        required: Quorum size.
    """

    def __init__(self, eligible_count: int, required: int) -> None:
        self.eligible_count = eligible_count
        self.required = required
        super().__init__(
            f"Senior core quorum of {required} cannot be met: "
            f"only {eligible_count} eligible approver(s)"
        )


class ApprovalStageError(StageError):
    """Raised when an approval type is not accepted in the event's status.

    Attributes:
        event_id: Target event.
        status: Current event status.
        approval_type: Approval type that was submitted.
    """

    def __init__(
        self,
        event_id: UUID,
        status: EventStatus,
        approval_type: ApprovalType,
    ) -> None:
        self.event_id = event_id
        self.status = status
        self.approval_type = approval_type
        super().__init__(
            f"Event {event_id} is {status.value}; "
            f"{approval_type.value} decisions are not accepted"
        )


class ApprovalNotAssignedError(NotAssignedError):
    """Raised when the approver holds no slot of the given type on the event."""

    def __init__(
        self,
        event_id: UUID,
        approver_id: UUID,
        approval_type: ApprovalType,
    ) -> None:
        self.event_id = event_id
        self.approver_id = approver_id
        self.approval_type = approval_type
        super().__init__(
            f"Member {approver_id} has no {approval_type.value} approval slot "
            f"on event {event_id}"
        )


class ApprovalAlreadyDecidedError(AlreadyDecidedError):
    """Raised when a decided approval slot receives another decision.

    Attributes:
        slot_id: The decided slot.
        event_id: Event the slot belongs to.
        status: The recorded decision.
    """

    def __init__(self, slot_id: UUID, event_id: UUID, status: ApprovalStatus) -> None:
        self.slot_id = slot_id
        self.event_id = event_id
        self.status = status
        super().__init__(
            f"Approval slot {slot_id} on event {event_id} is already {status.value}"
        )


class StageApproverMissingError(ConfigurationError):
    """Raised when no member holds the role a workflow stage requires.

    Attributes:
        approval_type: Stage being materialized.
        role_name: Role the stage requires.
    """

    def __init__(self, approval_type: ApprovalType, role_name: str) -> None:
        self.approval_type = approval_type
        self.role_name = role_name
        super().__init__(
            f"No member holds {role_name!r}; cannot open the "
            f"{approval_type.value} approval stage"
        )


class DocumentationStageError(StageError):
    """Raised when a documentation action does not fit the event's status.

    Attributes:
        event_id: Target event.
        status: Current event status.
        action: The attempted action (submit, review).
    """

    def __init__(self, event_id: UUID, status: EventStatus, action: str) -> None:
        self.event_id = event_id
        self.status = status
        self.action = action
        super().__init__(
            f"Cannot {action} documentation for event {event_id} in status {status.value}"
        )


class DocumentationReviewerError(PermissionDeniedError):
    """Raised when someone other than the documentation reviewer reviews."""

    def __init__(self, reviewer_id: UUID, role_name: str | None) -> None:
        self.reviewer_id = reviewer_id
        self.role_name = role_name
        super().__init__(
            f"Member {reviewer_id} with role {role_name!r} cannot review documentation"
        )

