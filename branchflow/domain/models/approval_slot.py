"""Approval slot domain model.

An approval slot is one row of an event's approval ledger: a single
(event, approver, approval_type) assignment that is decided exactly once.

Invariants:
- At most one slot per (event_id, approver_id, approval_type)
- A slot is mutable only while PENDING; APPROVED and REJECTED are final
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


class ApprovalType(Enum):
    """Workflow stage an approval slot belongs to."""

    SENIOR_CORE = "senior_core"
    TREASURER = "treasurer"
    COUNSELLOR = "counsellor"


class ApprovalStatus(Enum):
    """Decision state of an approval slot."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    def is_decided(self) -> bool:
        return self is not ApprovalStatus.PENDING


class ApprovalDecision(Enum):
    """A decision an approver can submit."""

    APPROVE = "approved"
    REJECT = "rejected"

    def to_status(self) -> ApprovalStatus:
        return ApprovalStatus(self.value)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class ApprovalSlot:
    """One approval assignment in an event's ledger.

    Attributes:
        id: Slot identifier.
        event_id: Event the slot belongs to.
        approver_id: Identity expected to decide the slot.
        approval_type: Stage of the workflow.
        status: Current decision state.
        comment: Optional free-text comment recorded with the decision.
        created_at: When the slot was materialized.
        decided_at: Commit time of the decision (orders decisions).
    """

    id: UUID
    event_id: UUID
    approver_id: UUID
    approval_type: ApprovalType
    status: ApprovalStatus = field(default=ApprovalStatus.PENDING)
    comment: str | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)
    decided_at: datetime | None = field(default=None)

    @property
    def ledger_key(self) -> tuple[UUID, UUID, ApprovalType]:
        """Uniqueness key of the slot within the ledger."""
        return (self.event_id, self.approver_id, self.approval_type)

    @property
    def is_pending(self) -> bool:
        return self.status is ApprovalStatus.PENDING

    def decide(
        self,
        decision: ApprovalDecision,
        decided_at: datetime,
        comment: str | None = None,
    ) -> ApprovalSlot:
        """Return a decided copy of this slot.

        Args:
            decision: Approve or reject.
            decided_at: Commit time of the decision.
            comment: Optional comment.

        Returns:
            New ApprovalSlot with the decision applied.

        Raises:
            ValueError: If the slot is already decided. Services check this
                first and raise AlreadyDecidedError with context.
        """
        if not self.is_pending:
            raise ValueError(f"Approval slot {self.id} is already {self.status.value}")
        return replace(
            self,
            status=decision.to_status(),
            comment=comment,
            decided_at=decided_at,
        )
