"""Event workflow API request/response models."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from branchflow.api.models.common import DateTimeWithZ
from branchflow.application.services import (
    ApprovalStatusView,
    PendingApproval,
    ProposalResult,
    TransitionResult,
)
from branchflow.domain.models.approval_slot import (
    ApprovalDecision,
    ApprovalSlot,
    ApprovalStatus,
    ApprovalType,
)
from branchflow.domain.models.event_proposal import (
    EventProposal,
    EventStatus,
    EventType,
)
from branchflow.domain.services.event_status import StageSummary


class ProposeEventRequest(BaseModel):
    """Request to propose a chapter event."""

    title: str = Field(..., min_length=1, max_length=200)
    proposed_date: date = Field(..., description="Date the event would occupy")
    chapter_id: UUID = Field(..., description="Owning chapter")
    event_type: EventType = Field(default=EventType.TECHNICAL)
    description: str | None = Field(default=None, max_length=5000)


class SubmitApprovalRequest(BaseModel):
    """An approver's decision on their slot."""

    approval_type: ApprovalType
    decision: ApprovalDecision
    comment: str | None = Field(default=None, max_length=2000)


class SubmitDocumentRequest(BaseModel):
    """Notice that the final event document was uploaded."""

    document_title: str = Field(..., min_length=1, max_length=300)


class ReviewDocumentRequest(BaseModel):
    """The documentation reviewer's verdict."""

    approved: bool


class EventResponse(BaseModel):
    """An event proposal."""

    id: UUID
    title: str
    description: str | None
    event_type: EventType
    proposed_date: date
    proposed_by: UUID
    chapter_id: UUID
    status: EventStatus
    approved_date: date | None
    created_at: DateTimeWithZ
    updated_at: DateTimeWithZ

    @classmethod
    def from_event(cls, event: EventProposal) -> EventResponse:
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            event_type=event.event_type,
            proposed_date=event.proposed_date,
            proposed_by=event.proposed_by,
            chapter_id=event.chapter_id,
            status=event.status,
            approved_date=event.approved_date,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


class ApprovalSlotResponse(BaseModel):
    """One row of an event's approval ledger."""

    id: UUID
    event_id: UUID
    approver_id: UUID
    approval_type: ApprovalType
    status: ApprovalStatus
    comment: str | None
    created_at: DateTimeWithZ
    decided_at: DateTimeWithZ | None

    @classmethod
    def from_slot(cls, slot: ApprovalSlot) -> ApprovalSlotResponse:
        return cls(
            id=slot.id,
            event_id=slot.event_id,
            approver_id=slot.approver_id,
            approval_type=slot.approval_type,
            status=slot.status,
            comment=slot.comment,
            created_at=slot.created_at,
            decided_at=slot.decided_at,
        )


class ProposalResponse(BaseModel):
    """Result of a proposal.

    Attributes:
        event: The created proposal.
        approvers: Senior-core approvers seeded for the first stage.
        date_available: Whether the date had room at proposal time. Not a
            reservation.
    """

    event: EventResponse
    approvers: list[UUID]
    date_available: bool

    @classmethod
    def from_result(cls, result: ProposalResult) -> ProposalResponse:
        return cls(
            event=EventResponse.from_event(result.event),
            approvers=[slot.approver_id for slot in result.slots],
            date_available=result.date_available,
        )


class TransitionResponse(BaseModel):
    """Result of a decision or a retried transition."""

    event: EventResponse
    previous_status: EventStatus
    transitioned: bool
    slot: ApprovalSlotResponse | None
    created_slots: list[ApprovalSlotResponse]

    @classmethod
    def from_result(cls, result: TransitionResult) -> TransitionResponse:
        return cls(
            event=EventResponse.from_event(result.event),
            previous_status=result.previous_status,
            transitioned=result.transitioned,
            slot=ApprovalSlotResponse.from_slot(result.slot) if result.slot else None,
            created_slots=[ApprovalSlotResponse.from_slot(s) for s in result.created_slots],
        )


class StageSummaryResponse(BaseModel):
    total: int
    approved: int
    rejected: int
    pending: int

    @classmethod
    def from_summary(cls, summary: StageSummary) -> StageSummaryResponse:
        return cls(
            total=summary.total,
            approved=summary.approved,
            rejected=summary.rejected,
            pending=summary.pending,
        )


class ApprovalStatusResponse(BaseModel):
    """Per-stage view of an event's ledger."""

    event_id: UUID
    status: EventStatus
    computed_status: EventStatus
    quorum: int
    quorum_reached: bool
    senior_core: StageSummaryResponse
    treasurer: StageSummaryResponse
    counsellor: StageSummaryResponse
    slots: list[ApprovalSlotResponse]

    @classmethod
    def from_view(cls, view: ApprovalStatusView) -> ApprovalStatusResponse:
        summary = view.summary
        return cls(
            event_id=view.event.id,
            status=view.event.status,
            computed_status=view.computed_status,
            quorum=summary.quorum,
            quorum_reached=summary.quorum_reached,
            senior_core=StageSummaryResponse.from_summary(summary.senior_core),
            treasurer=StageSummaryResponse.from_summary(summary.treasurer),
            counsellor=StageSummaryResponse.from_summary(summary.counsellor),
            slots=[ApprovalSlotResponse.from_slot(s) for s in view.slots],
        )


class PendingApprovalResponse(BaseModel):
    """A slot waiting on the caller."""

    slot: ApprovalSlotResponse
    event: EventResponse

    @classmethod
    def from_pending(cls, pending: PendingApproval) -> PendingApprovalResponse:
        return cls(
            slot=ApprovalSlotResponse.from_slot(pending.slot),
            event=EventResponse.from_event(pending.event),
        )


class PendingApprovalsResponse(BaseModel):
    approvals: list[PendingApprovalResponse]
