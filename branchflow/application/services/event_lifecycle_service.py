"""Event lifecycle engine.

Drives an event proposal through its approval workflow:

    senior_core_pending -> treasurer_pending -> counsellor_pending
        -> approved -> documentation_submitted -> closed

with REJECTED reachable from the three pending states.

Status in the approval part of the workflow is derived from the full,
post-commit approval ledger (compute_event_status). Entering a stage has
side effects, applied here in one place:

- TREASURER_PENDING: one pending slot for the unique SB Treasurer. A missing
  treasurer is fatal (ConfigurationError) and the status does not advance.
- COUNSELLOR_PENDING: one pending slot for the unique Branch Counsellor. A
  missing counsellor is logged and the status still advances.
- APPROVED: reserve the calendar date atomically. If the date is full the
  status stays where it was and the recorded decision is kept.
- REJECTED from APPROVED: release the calendar date.

Every mutation of one event runs under that event's lock. Notifications are
sent after the lock is released and their failures are logged, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from branchflow.config.workflow_config import DEFAULT_WORKFLOW_CONFIG, WorkflowConfig
from branchflow.domain.errors import (
    ApprovalAlreadyDecidedError,
    ApprovalNotAssignedError,
    ApprovalStageError,
    DocumentationReviewerError,
    DocumentationStageError,
    EventNotFoundError,
    ProposerNotEligibleError,
    QuorumUnsatisfiableError,
    StageApproverMissingError,
)
from branchflow.domain.exceptions import ValidationError
from branchflow.domain.models.approval_slot import (
    ApprovalDecision,
    ApprovalSlot,
    ApprovalType,
)
from branchflow.domain.models.event_proposal import (
    EventProposal,
    EventStatus,
    EventType,
)
from branchflow.domain.services.event_status import (
    ApprovalSummary,
    compute_event_status,
    is_forward_transition,
    stages_to_materialize,
    summarize_approvals,
)
from branchflow.domain.services.role_policy import (
    STAGE_ROLE_NAMES,
    can_propose_event,
    is_documentation_reviewer,
)

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from branchflow.application.ports.approval_ledger import ApprovalLedgerProtocol
    from branchflow.application.ports.event_repository import EventRepositoryProtocol
    from branchflow.application.ports.notification_dispatcher import (
        NotificationDispatcherProtocol,
    )
    from branchflow.application.ports.role_directory import RoleDirectoryProtocol
    from branchflow.application.ports.time_authority import TimeAuthorityProtocol
    from branchflow.application.services.admission_controller_service import (
        AdmissionControllerService,
    )

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProposalResult:
    """Outcome of a successful proposal.

    Attributes:
        event: The persisted proposal.
        slots: Pending senior-core slots seeded for it.
        date_available: Non-binding availability of the date at proposal time.
    """

    event: EventProposal
    slots: list[ApprovalSlot]
    date_available: bool


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of recording a decision or retrying a transition.

    Attributes:
        event: The event after the operation.
        previous_status: Status before the operation.
        slot: The decided slot (None for a retried transition).
        created_slots: Stage slots materialized by the operation.
    """

    event: EventProposal
    previous_status: EventStatus
    slot: ApprovalSlot | None = None
    created_slots: list[ApprovalSlot] = field(default_factory=list)

    @property
    def transitioned(self) -> bool:
        return self.event.status is not self.previous_status


@dataclass(frozen=True)
class ApprovalStatusView:
    """Read model of an event's ledger.

    Attributes:
        event: The event.
        summary: Per-stage counts and distinct senior-core approvers.
        computed_status: Status the ledger implies right now.
        slots: Every slot of the event.
    """

    event: EventProposal
    summary: ApprovalSummary
    computed_status: EventStatus
    slots: list[ApprovalSlot]


@dataclass(frozen=True)
class PendingApproval:
    """A pending slot whose event is waiting on exactly that stage."""

    slot: ApprovalSlot
    event: EventProposal


class EventLifecycleService:
    """Event lifecycle engine.

    Attributes:
        _events: Event persistence and per-event locks.
        _ledger: Approval slot persistence.
        _admission: Calendar admission control.
        _directory: Role directory.
        _notifier: Best-effort notification dispatcher.
        _time: Time authority.
        _config: Workflow limits.
    """

    def __init__(
        self,
        events: EventRepositoryProtocol,
        ledger: ApprovalLedgerProtocol,
        admission: AdmissionControllerService,
        directory: RoleDirectoryProtocol,
        notifier: NotificationDispatcherProtocol,
        time_authority: TimeAuthorityProtocol,
        config: WorkflowConfig | None = None,
    ) -> None:
        self._events = events
        self._ledger = ledger
        self._admission = admission
        self._directory = directory
        self._notifier = notifier
        self._time = time_authority
        self._config = config or DEFAULT_WORKFLOW_CONFIG

    # ------------------------------------------------------------------
    # Proposal
    # ------------------------------------------------------------------

    async def propose_event(
        self,
        *,
        title: str,
        proposed_date: date,
        proposer_id: UUID,
        chapter_id: UUID,
        event_type: EventType = EventType.TECHNICAL,
        description: str | None = None,
    ) -> ProposalResult:
        """Create a proposal and seed its senior-core approval stage.

        Checks run in this order and nothing is written until all pass:
        proposer role, title, lead time, senior-core quorum pool.

        Raises:
            ProposerNotEligibleError: Proposer is not a chapter chair,
                vice chair or secretary.
            ValidationError: Empty title.
            LeadTimeViolationError: Date is inside the lead time.
            QuorumUnsatisfiableError: Fewer eligible senior-core approvers
                (other than the proposer) than the quorum.
        """
        log = logger.bind(
            proposer_id=str(proposer_id),
            chapter_id=str(chapter_id),
            proposed_date=proposed_date.isoformat(),
        )
        log.info("Proposing event")

        role = await self._directory.resolve_role(proposer_id)
        if role is None or not can_propose_event(role):
            log.warning(
                "Proposal rejected, proposer not eligible",
                role=role.name if role else None,
            )
            raise ProposerNotEligibleError(proposer_id, role.name if role else None)

        if not title.strip():
            raise ValidationError("Event title must not be empty")

        now = self._time.utcnow()
        self._admission.validate_lead_time(proposed_date, now)

        eligible = await self._directory.find_eligible_approvers(ApprovalType.SENIOR_CORE)
        approvers = [a for a in dict.fromkeys(eligible) if a != proposer_id]
        if len(approvers) < self._config.senior_core_quorum:
            log.error(
                "Senior core quorum unsatisfiable",
                eligible_count=len(approvers),
                quorum=self._config.senior_core_quorum,
            )
            raise QuorumUnsatisfiableError(
                eligible_count=len(approvers),
                required=self._config.senior_core_quorum,
            )

        event = EventProposal(
            id=uuid4(),
            title=title,
            description=description,
            event_type=event_type,
            proposed_date=proposed_date,
            proposed_by=proposer_id,
            chapter_id=chapter_id,
            created_at=now,
            updated_at=now,
        )
        slots = [
            ApprovalSlot(
                id=uuid4(),
                event_id=event.id,
                approver_id=approver_id,
                approval_type=ApprovalType.SENIOR_CORE,
                created_at=now,
            )
            for approver_id in approvers
        ]
        event = await self._events.create(event, slots)

        date_available = await self._admission.check_availability(proposed_date)
        log.info(
            "Event proposed",
            event_id=str(event.id),
            senior_core_slots=len(slots),
            date_available=date_available,
        )
        return ProposalResult(event=event, slots=slots, date_available=date_available)

    # ------------------------------------------------------------------
    # Approvals
    # ------------------------------------------------------------------

    async def submit_approval(
        self,
        event_id: UUID,
        approver_id: UUID,
        approval_type: ApprovalType,
        decision: ApprovalDecision,
        comment: str | None = None,
    ) -> TransitionResult:
        """Record one approval decision and apply the resulting transition.

        Raises:
            EventNotFoundError: Unknown event.
            ApprovalStageError: approval_type not accepted in the current status.
            ApprovalNotAssignedError: No slot for (event, approver, approval_type).
            ApprovalAlreadyDecidedError: The slot is already decided.
            StageApproverMissingError: Entering TREASURER_PENDING with no
                SB Treasurer. The decision stays recorded.
            CalendarDateExhaustedError: Entering APPROVED on a full date. The
                decision stays recorded.
        """
        log = logger.bind(
            event_id=str(event_id),
            approver_id=str(approver_id),
            approval_type=approval_type.value,
            decision=decision.value,
        )

        async with self._events.lock(event_id):
            event = await self._require_event(event_id)
            previous_status = event.status

            if event.status.required_approval_type() is not approval_type:
                log.warning("Approval rejected by stage gate", status=event.status.value)
                raise ApprovalStageError(event_id, event.status, approval_type)

            slot = await self._ledger.find_slot(event_id, approver_id, approval_type)
            if slot is None:
                log.warning("Approval rejected, approver holds no slot")
                raise ApprovalNotAssignedError(event_id, approver_id, approval_type)
            if not slot.is_pending:
                log.warning("Approval rejected, slot already decided", slot_status=slot.status.value)
                raise ApprovalAlreadyDecidedError(slot.id, event_id, slot.status)

            decided = slot.decide(decision, decided_at=self._time.utcnow(), comment=comment)
            decided = await self._ledger.record_decision(decided)
            log.info("Approval decision recorded", slot_id=str(decided.id))

            event, created = await self._advance(event, log)

        result = TransitionResult(
            event=event,
            previous_status=previous_status,
            slot=decided,
            created_slots=created,
        )
        if result.transitioned and event.status is EventStatus.APPROVED:
            await self._notify_team_heads(event, log)
        return result

    async def retry_transition(self, event_id: UUID) -> TransitionResult:
        """Re-run the transition step for an event without a new decision.

        Used after a refused calendar reservation or after a missing stage
        approver was added to the directory. Existing stage slots are reused.
        Events outside the approval part of the workflow are returned as is.
        """
        log = logger.bind(event_id=str(event_id))

        async with self._events.lock(event_id):
            event = await self._require_event(event_id)
            previous_status = event.status
            if not event.status.is_pending_approval():
                log.info("Retry skipped, event not awaiting approval", status=event.status.value)
                return TransitionResult(event=event, previous_status=previous_status)

            event, created = await self._advance(event, log)
            if event.status is previous_status:
                # Stage entered earlier with its approver missing
                stage = event.status.required_approval_type()
                if stage in STAGE_ROLE_NAMES:
                    slots = await self._ledger.list_for_event(event.id)
                    created.extend(await self._materialize_stage(event, stage, slots, log))

        result = TransitionResult(
            event=event,
            previous_status=previous_status,
            created_slots=created,
        )
        log.info(
            "Transition retried",
            from_status=previous_status.value,
            to_status=event.status.value,
            created_slots=len(created),
        )
        if result.transitioned and event.status is EventStatus.APPROVED:
            await self._notify_team_heads(event, log)
        return result

    async def _advance(
        self,
        event: EventProposal,
        log: BoundLogger,
    ) -> tuple[EventProposal, list[ApprovalSlot]]:
        """Recompute status from the ledger and apply the transition.

        Must be called with the event lock held.
        """
        slots = await self._ledger.list_for_event(event.id)
        current = event.status
        target = compute_event_status(slots, self._config.senior_core_quorum)

        if target is current or not is_forward_transition(current, target):
            return event, []

        created: list[ApprovalSlot] = []
        if target is not EventStatus.REJECTED:
            for stage in stages_to_materialize(current, target):
                created.extend(await self._materialize_stage(event, stage, slots, log))

        now = self._time.utcnow()
        if target is EventStatus.APPROVED:
            await self._admission.reserve_slot(event.proposed_date)
            try:
                updated = await self._events.save(event.with_status(target, now))
            except Exception:
                await self._admission.release_slot(event.proposed_date)
                raise
        else:
            updated = await self._events.save(event.with_status(target, now))
            if target is EventStatus.REJECTED and current.counts_toward_calendar():
                await self._admission.release_slot(event.proposed_date)

        log.info(
            "Event status transitioned",
            from_status=current.value,
            to_status=target.value,
        )
        return updated, created

    async def _materialize_stage(
        self,
        event: EventProposal,
        stage: ApprovalType,
        slots: list[ApprovalSlot],
        log: BoundLogger,
    ) -> list[ApprovalSlot]:
        """Create the single pending slot a lazily opened stage needs.

        A stage that already has a slot is left alone.

        Raises:
            StageApproverMissingError: No SB Treasurer (treasurer stage only).
        """
        if any(s.approval_type is stage for s in slots):
            return []

        role_name = STAGE_ROLE_NAMES[stage]
        holders = await self._directory.find_members_with_role(role_name)
        if not holders:
            if stage is ApprovalType.TREASURER:
                log.error("Stage approver missing", stage=stage.value, role=role_name)
                raise StageApproverMissingError(stage, role_name)
            log.warning(
                "Stage approver missing, advancing without slot",
                stage=stage.value,
                role=role_name,
            )
            return []
        if len(holders) > 1:
            log.warning(
                "Multiple holders of singleton role, using first",
                role=role_name,
                holder_count=len(holders),
            )

        slot = ApprovalSlot(
            id=uuid4(),
            event_id=event.id,
            approver_id=holders[0],
            approval_type=stage,
            created_at=self._time.utcnow(),
        )
        inserted = await self._ledger.add_slots([slot])
        log.info("Stage slot materialized", stage=stage.value, approver_id=str(holders[0]))
        return inserted

    # ------------------------------------------------------------------
    # Documentation
    # ------------------------------------------------------------------

    async def submit_final_document(
        self,
        event_id: UUID,
        submitter_id: UUID,
        document_title: str,
    ) -> EventProposal:
        """React to a final document upload.

        Accepted while APPROVED, and again while DOCUMENTATION_SUBMITTED to
        replace a document the reviewer sent back.

        Raises:
            EventNotFoundError: Unknown event.
            DocumentationStageError: Event is in any other status.
            ValidationError: Empty document title.
        """
        log = logger.bind(event_id=str(event_id), submitter_id=str(submitter_id))

        if not document_title.strip():
            raise ValidationError("Document title must not be empty")

        async with self._events.lock(event_id):
            event = await self._require_event(event_id)
            if event.status not in (
                EventStatus.APPROVED,
                EventStatus.DOCUMENTATION_SUBMITTED,
            ):
                log.warning("Documentation rejected by stage gate", status=event.status.value)
                raise DocumentationStageError(event_id, event.status, "submit")

            if event.status is EventStatus.APPROVED:
                event = await self._events.save(
                    event.with_status(EventStatus.DOCUMENTATION_SUBMITTED, self._time.utcnow())
                )
            log.info("Final document submitted", document_title=document_title)

        await self._notify_reviewers(event, document_title, log)
        return event

    async def review_final_document(
        self,
        event_id: UUID,
        reviewer_id: UUID,
        approved: bool,
    ) -> EventProposal:
        """Apply the documentation reviewer's verdict.

        Approval closes the event. A rejection leaves it in
        DOCUMENTATION_SUBMITTED awaiting a new document.

        Raises:
            DocumentationReviewerError: Reviewer is not the SB Secretary.
            EventNotFoundError: Unknown event.
            DocumentationStageError: Event is not DOCUMENTATION_SUBMITTED.
        """
        log = logger.bind(event_id=str(event_id), reviewer_id=str(reviewer_id))

        role = await self._directory.resolve_role(reviewer_id)
        if role is None or not is_documentation_reviewer(role):
            log.warning("Documentation review rejected, not a reviewer")
            raise DocumentationReviewerError(reviewer_id, role.name if role else None)

        async with self._events.lock(event_id):
            event = await self._require_event(event_id)
            if event.status is not EventStatus.DOCUMENTATION_SUBMITTED:
                raise DocumentationStageError(event_id, event.status, "review")

            if approved:
                event = await self._events.save(
                    event.with_status(EventStatus.CLOSED, self._time.utcnow())
                )
                log.info("Documentation approved, event closed")
            else:
                log.info("Documentation sent back for resubmission")
        return event

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_event(self, event_id: UUID) -> EventProposal:
        return await self._require_event(event_id)

    async def get_approval_status(self, event_id: UUID) -> ApprovalStatusView:
        """Summarize an event's ledger per stage."""
        event = await self._require_event(event_id)
        slots = await self._ledger.list_for_event(event_id)
        quorum = self._config.senior_core_quorum
        return ApprovalStatusView(
            event=event,
            summary=summarize_approvals(slots, quorum),
            computed_status=compute_event_status(slots, quorum),
            slots=slots,
        )

    async def list_pending_approvals(self, approver_id: UUID) -> list[PendingApproval]:
        """Pending slots of an identity whose event waits on that stage."""
        slots = await self._ledger.list_pending_for_approver(approver_id)
        if not slots:
            return []
        events = {
            e.id: e for e in await self._events.list_by_ids({s.event_id for s in slots})
        }
        pending: list[PendingApproval] = []
        for slot in slots:
            event = events.get(slot.event_id)
            if event is None:
                continue
            if event.status.required_approval_type() is slot.approval_type:
                pending.append(PendingApproval(slot=slot, event=event))
        return pending

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_event(self, event_id: UUID) -> EventProposal:
        event = await self._events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def _notify_team_heads(self, event: EventProposal, log: BoundLogger) -> None:
        try:
            await self._notifier.notify_team_heads(event)
        except Exception as exc:
            log.warning("Team head notification failed", error=str(exc))

    async def _notify_reviewers(
        self,
        event: EventProposal,
        document_title: str,
        log: BoundLogger,
    ) -> None:
        try:
            await self._notifier.notify_reviewers(event, document_title)
        except Exception as exc:
            log.warning("Reviewer notification failed", error=str(exc))
