"""Pure event status computation over an approval ledger.

The event status is never commanded directly during the approval part of the
workflow. Given the full, post-commit ledger of an event, compute_event_status
returns the status the event should be in:

1. any relevant slot rejected -> REJECTED
2. a counsellor slot approved -> APPROVED
3. a treasurer slot approved -> COUNSELLOR_PENDING
4. at least ``quorum`` distinct approvers with an approved senior-core slot
   -> TREASURER_PENDING
5. otherwise SENIOR_CORE_PENDING
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

from branchflow.domain.models.approval_slot import (
    ApprovalSlot,
    ApprovalStatus,
    ApprovalType,
)
from branchflow.domain.models.event_proposal import EventStatus

DEFAULT_SENIOR_CORE_QUORUM = 2


@dataclass(frozen=True)
class StageSummary:
    """Per-stage slot counts.

    Attributes:
        approval_type: The stage.
        total: Slots materialized for the stage.
        approved: Approved slots.
        rejected: Rejected slots.
        pending: Slots still awaiting a decision.
    """

    approval_type: ApprovalType
    total: int
    approved: int
    rejected: int
    pending: int


@dataclass(frozen=True)
class ApprovalSummary:
    """Aggregate view of an event's approval ledger.

    Attributes:
        senior_core: Senior core stage counts.
        treasurer: Treasurer stage counts.
        counsellor: Counsellor stage counts.
        senior_core_approvers: Distinct identities with an approved senior-core slot.
        quorum: Distinct senior-core approvals needed to advance.
    """

    senior_core: StageSummary
    treasurer: StageSummary
    counsellor: StageSummary
    senior_core_approvers: frozenset[UUID]
    quorum: int

    @property
    def has_rejection(self) -> bool:
        return any(
            stage.rejected > 0
            for stage in (self.senior_core, self.treasurer, self.counsellor)
        )

    @property
    def quorum_reached(self) -> bool:
        return len(self.senior_core_approvers) >= self.quorum

    def stage(self, approval_type: ApprovalType) -> StageSummary:
        if approval_type is ApprovalType.SENIOR_CORE:
            return self.senior_core
        if approval_type is ApprovalType.TREASURER:
            return self.treasurer
        return self.counsellor


def _summarize_stage(
    slots: list[ApprovalSlot],
    approval_type: ApprovalType,
) -> StageSummary:
    stage_slots = [s for s in slots if s.approval_type is approval_type]
    return StageSummary(
        approval_type=approval_type,
        total=len(stage_slots),
        approved=sum(1 for s in stage_slots if s.status is ApprovalStatus.APPROVED),
        rejected=sum(1 for s in stage_slots if s.status is ApprovalStatus.REJECTED),
        pending=sum(1 for s in stage_slots if s.status is ApprovalStatus.PENDING),
    )


def summarize_approvals(
    slots: Iterable[ApprovalSlot],
    quorum: int = DEFAULT_SENIOR_CORE_QUORUM,
) -> ApprovalSummary:
    """Summarize an event's ledger.

    Args:
        slots: Every approval slot of one event.
        quorum: Distinct senior-core approvals needed to advance.

    Returns:
        ApprovalSummary for the ledger.
    """
    slot_list = list(slots)
    approvers = frozenset(
        s.approver_id
        for s in slot_list
        if s.approval_type is ApprovalType.SENIOR_CORE
        and s.status is ApprovalStatus.APPROVED
    )
    return ApprovalSummary(
        senior_core=_summarize_stage(slot_list, ApprovalType.SENIOR_CORE),
        treasurer=_summarize_stage(slot_list, ApprovalType.TREASURER),
        counsellor=_summarize_stage(slot_list, ApprovalType.COUNSELLOR),
        senior_core_approvers=approvers,
        quorum=quorum,
    )


def compute_event_status(
    slots: Iterable[ApprovalSlot],
    quorum: int = DEFAULT_SENIOR_CORE_QUORUM,
) -> EventStatus:
    """Derive the target event status from the full approval ledger.

    Args:
        slots: Every approval slot of one event.
        quorum: Distinct senior-core approvals needed to advance.

    Returns:
        The status the ledger implies. Only approval-part statuses are ever
        returned (never DOCUMENTATION_SUBMITTED or CLOSED).
    """
    summary = summarize_approvals(slots, quorum)

    if summary.has_rejection:
        return EventStatus.REJECTED
    if summary.counsellor.approved > 0:
        return EventStatus.APPROVED
    if summary.treasurer.approved > 0:
        return EventStatus.COUNSELLOR_PENDING
    if summary.quorum_reached:
        return EventStatus.TREASURER_PENDING
    return EventStatus.SENIOR_CORE_PENDING


# Progress rank of the approval-part statuses, used to ignore ledger
# outcomes that would move an event backwards.
_PROGRESS_RANK: dict[EventStatus, int] = {
    EventStatus.SENIOR_CORE_PENDING: 0,
    EventStatus.TREASURER_PENDING: 1,
    EventStatus.COUNSELLOR_PENDING: 2,
    EventStatus.APPROVED: 3,
    EventStatus.DOCUMENTATION_SUBMITTED: 4,
    EventStatus.CLOSED: 5,
}


def is_forward_transition(current: EventStatus, target: EventStatus) -> bool:
    """Check whether moving from ``current`` to ``target`` is progress.

    REJECTED is a forward transition from any pending status. Nothing moves
    out of a terminal status.
    """
    if current.is_terminal():
        return False
    if target is EventStatus.REJECTED:
        return current.is_pending_approval() or current is EventStatus.APPROVED
    return _PROGRESS_RANK[target] > _PROGRESS_RANK[current]


def stages_to_materialize(
    current: EventStatus,
    target: EventStatus,
) -> list[ApprovalType]:
    """Lazily materialized stages crossed when moving from current to target.

    Normally one stage, but a retried transition can cross several at once
    (for example a treasurer slot created and approved before the event
    status was persisted).
    """
    stages: list[ApprovalType] = []
    if current is EventStatus.SENIOR_CORE_PENDING and target in (
        EventStatus.TREASURER_PENDING,
        EventStatus.COUNSELLOR_PENDING,
        EventStatus.APPROVED,
    ):
        stages.append(ApprovalType.TREASURER)
    if current in (
        EventStatus.SENIOR_CORE_PENDING,
        EventStatus.TREASURER_PENDING,
    ) and target in (EventStatus.COUNSELLOR_PENDING, EventStatus.APPROVED):
        stages.append(ApprovalType.COUNSELLOR)
    return stages
