"""Event proposal domain model and status state machine.

State Machine (progress order):
    SENIOR_CORE_PENDING -> TREASURER_PENDING -> COUNSELLOR_PENDING
        -> APPROVED -> DOCUMENTATION_SUBMITTED -> CLOSED

    REJECTED is reachable from any of the three pending states.

Terminal States:
    REJECTED, CLOSED. No approval or documentation action succeeds once an
    event is terminal.

Status is derived from the approval ledger (see
branchflow.domain.services.event_status) for the pending/approved/rejected
part of the machine. The documentation part (APPROVED ->
DOCUMENTATION_SUBMITTED -> CLOSED) is driven by documentation signals.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from uuid import UUID

from branchflow.domain.models.approval_slot import ApprovalType


class EventType(Enum):
    """Kind of event. Informational only."""

    TECHNICAL = "technical"
    NON_TECHNICAL = "non_technical"
    WORKSHOP = "workshop"
    OUTREACH = "outreach"


class EventStatus(Enum):
    """Lifecycle state of an event proposal."""

    SENIOR_CORE_PENDING = "senior_core_pending"
    TREASURER_PENDING = "treasurer_pending"
    COUNSELLOR_PENDING = "counsellor_pending"
    APPROVED = "approved"
    DOCUMENTATION_SUBMITTED = "documentation_submitted"
    CLOSED = "closed"
    REJECTED = "rejected"

    def is_terminal(self) -> bool:
        """Check if no further workflow action is possible."""
        return self in TERMINAL_STATUSES

    def is_pending_approval(self) -> bool:
        """Check if the event is still collecting approvals."""
        return self in STAGE_APPROVAL_TYPE

    def is_approved_or_beyond(self) -> bool:
        """Check if the event has passed final approval (calendar visible)."""
        return self in APPROVED_OR_BEYOND

    def counts_toward_calendar(self) -> bool:
        """Check if the event occupies a calendar slot in this state.

        Occupancy is permanent once approved: documentation and closure keep
        the slot. Only a rejection releases it.
        """
        return self in APPROVED_OR_BEYOND

    def required_approval_type(self) -> ApprovalType | None:
        """Approval type accepted in this state, None if none is accepted."""
        return STAGE_APPROVAL_TYPE.get(self)


TERMINAL_STATUSES: frozenset[EventStatus] = frozenset(
    {EventStatus.REJECTED, EventStatus.CLOSED}
)

APPROVED_OR_BEYOND: frozenset[EventStatus] = frozenset(
    {
        EventStatus.APPROVED,
        EventStatus.DOCUMENTATION_SUBMITTED,
        EventStatus.CLOSED,
    }
)

# Stage gating: the only approval type accepted in each pending status
STAGE_APPROVAL_TYPE: dict[EventStatus, ApprovalType] = {
    EventStatus.SENIOR_CORE_PENDING: ApprovalType.SENIOR_CORE,
    EventStatus.TREASURER_PENDING: ApprovalType.TREASURER,
    EventStatus.COUNSELLOR_PENDING: ApprovalType.COUNSELLOR,
}


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class EventProposal:
    """A proposed chapter event moving through the approval workflow.

    Attributes:
        id: Event identifier.
        title: Event title (opaque to the core).
        description: Event description (opaque to the core).
        event_type: Informational event kind.
        proposed_date: Calendar date the event would occupy.
        proposed_by: Identity of the proposer.
        chapter_id: Owning chapter (opaque foreign entity).
        status: Current lifecycle state.
        approved_date: Set once, to proposed_date, when first approved.
        created_at: Proposal timestamp (UTC).
        updated_at: Last status change (UTC).
    """

    id: UUID
    title: str
    proposed_date: date
    proposed_by: UUID
    chapter_id: UUID
    event_type: EventType = field(default=EventType.TECHNICAL)
    description: str | None = field(default=None)
    status: EventStatus = field(default=EventStatus.SENIOR_CORE_PENDING)
    approved_date: date | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate proposal fields."""
        if not self.title.strip():
            raise ValueError("Event title must not be empty")
        if self.status.is_approved_or_beyond() and self.approved_date is None:
            raise ValueError(
                f"Event in status {self.status.value} must carry an approved_date"
            )

    def with_status(self, new_status: EventStatus, updated_at: datetime) -> EventProposal:
        """Return a copy in ``new_status``.

        approved_date is stamped with proposed_date on the first transition
        into APPROVED and never cleared afterwards.

        Args:
            new_status: Target status.
            updated_at: Timestamp of the transition.

        Returns:
            New EventProposal instance.
        """
        approved_date = self.approved_date
        if new_status is EventStatus.APPROVED and approved_date is None:
            approved_date = self.proposed_date
        return replace(
            self,
            status=new_status,
            approved_date=approved_date,
            updated_at=updated_at,
        )
