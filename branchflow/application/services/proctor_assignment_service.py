"""Proctor assignment ledger service.

Maintains mentor -> mentee mappings under two hard constraints (one mentor
per mentee, at most ``mentor_capacity`` mentees per mentor) and records the
periodic updates mentors write about their mentees.

Assigners are the SB Chair, the SB Secretary and chapter Chairs. A chapter
Chair may only map members of their own chapter.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from branchflow.config.workflow_config import DEFAULT_WORKFLOW_CONFIG, WorkflowConfig
from branchflow.domain.errors import (
    AssignerNotAuthorizedError,
    AssignerScopeError,
    EmptyUpdateBodyError,
    InvalidUpdatePeriodError,
    MemberNotFoundError,
    ProctorMappingNotFoundError,
    ProctorNotAssignedError,
    SelfMentorshipError,
)
from branchflow.domain.models.proctor import ProctorMapping, ProctorUpdate
from branchflow.domain.services.role_policy import (
    can_assign_proctors,
    can_view_all_proctor_updates,
    is_chapter_scoped_assigner,
)

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from branchflow.application.ports.proctor_ledger import ProctorLedgerProtocol
    from branchflow.application.ports.role_directory import RoleDirectoryProtocol
    from branchflow.application.ports.time_authority import TimeAuthorityProtocol
    from branchflow.domain.models.role import Member

logger = get_logger(__name__)


class ProctorAssignmentService:
    """Proctor assignment ledger.

    Attributes:
        _ledger: Mapping and update persistence.
        _directory: Role directory.
        _time: Time authority.
        _config: Workflow limits (mentor capacity, update window).
    """

    def __init__(
        self,
        ledger: ProctorLedgerProtocol,
        directory: RoleDirectoryProtocol,
        time_authority: TimeAuthorityProtocol,
        config: WorkflowConfig | None = None,
    ) -> None:
        self._ledger = ledger
        self._directory = directory
        self._time = time_authority
        self._config = config or DEFAULT_WORKFLOW_CONFIG

    async def assign(
        self,
        caller_id: UUID,
        mentor_id: UUID,
        mentee_id: UUID,
    ) -> ProctorMapping:
        """Map a mentee to a mentor.

        Raises:
            AssignerNotAuthorizedError: Caller is not an assigner.
            SelfMentorshipError: mentor_id == mentee_id.
            MemberNotFoundError: Mentor or mentee unknown.
            AssignerScopeError: Chapter Chair targeting another chapter.
            MenteeAlreadyAssignedError: Mentee already has a mentor.
            MentorAtCapacityError: Mentor is full.
        """
        log = logger.bind(
            caller_id=str(caller_id),
            mentor_id=str(mentor_id),
            mentee_id=str(mentee_id),
        )

        caller = await self._require_assigner(caller_id, log)
        if mentor_id == mentee_id:
            raise SelfMentorshipError(mentor_id)
        members = await self._lookup_members(mentor_id, mentee_id)
        for member_id, member in members.items():
            if member is None:
                raise MemberNotFoundError(member_id)
        if is_chapter_scoped_assigner(caller.role):
            self._check_scope(caller, members, log)

        mapping = ProctorMapping(
            id=uuid4(),
            mentor_id=mentor_id,
            mentee_id=mentee_id,
            assigned_by=caller_id,
            created_at=self._time.utcnow(),
        )
        stored = await self._ledger.assign_within_capacity(
            mapping, self._config.mentor_capacity
        )
        log.info("Proctor assigned", mapping_id=str(stored.id))
        return stored

    async def unassign(self, caller_id: UUID, mentor_id: UUID, mentee_id: UUID) -> None:
        """Remove a mapping.

        Only chapter-scoped assigners need the members in the directory, to
        check their chapter. Branch-wide assigners can remove mappings of
        members who have since left the directory.

        Raises:
            AssignerNotAuthorizedError: Caller is not an assigner.
            AssignerScopeError: Chapter Chair targeting another chapter.
            ProctorMappingNotFoundError: No such mapping.
        """
        log = logger.bind(
            caller_id=str(caller_id),
            mentor_id=str(mentor_id),
            mentee_id=str(mentee_id),
        )

        caller = await self._require_assigner(caller_id, log)
        if is_chapter_scoped_assigner(caller.role):
            self._check_scope(caller, await self._lookup_members(mentor_id, mentee_id), log)

        if not await self._ledger.remove(mentor_id, mentee_id):
            raise ProctorMappingNotFoundError(mentor_id, mentee_id)
        log.info("Proctor unassigned")

    async def record_update(
        self,
        mentor_id: UUID,
        mentee_id: UUID,
        body: str,
        period_start: date,
        period_end: date,
    ) -> ProctorUpdate:
        """Record a mentor's periodic update about a mentee.

        Raises:
            ProctorNotAssignedError: No live mapping between the two.
            InvalidUpdatePeriodError: Window length outside the allowed range.
            EmptyUpdateBodyError: Blank body.
            DuplicateProctorUpdateError: Same (mentor, mentee, period) exists.
        """
        log = logger.bind(mentor_id=str(mentor_id), mentee_id=str(mentee_id))

        if await self._ledger.get_mapping(mentor_id, mentee_id) is None:
            log.warning("Update rejected, mentee not assigned to mentor")
            raise ProctorNotAssignedError(mentor_id, mentee_id)

        period_days = (period_end - period_start).days
        if not (
            self._config.update_period_min_days
            <= period_days
            <= self._config.update_period_max_days
        ):
            raise InvalidUpdatePeriodError(
                period_start=period_start,
                period_end=period_end,
                min_days=self._config.update_period_min_days,
                max_days=self._config.update_period_max_days,
            )
        if not body.strip():
            raise EmptyUpdateBodyError()

        update = ProctorUpdate(
            id=uuid4(),
            mentor_id=mentor_id,
            mentee_id=mentee_id,
            body=body.strip(),
            period_start=period_start,
            period_end=period_end,
            created_at=self._time.utcnow(),
        )
        stored = await self._ledger.add_update(update)
        log.info(
            "Proctor update recorded",
            update_id=str(stored.id),
            period_start=period_start.isoformat(),
        )
        return stored

    async def list_updates(
        self,
        viewer_id: UUID,
        mentee_id: UUID | None = None,
    ) -> list[ProctorUpdate]:
        """Updates visible to a viewer, newest first.

        Senior core sees every update. Everyone else sees the updates they
        wrote as a mentor.
        """
        role = await self._directory.resolve_role(viewer_id)
        if role is not None and can_view_all_proctor_updates(role):
            return await self._ledger.list_updates(mentee_id=mentee_id)
        return await self._ledger.list_updates(mentor_id=viewer_id, mentee_id=mentee_id)

    async def list_mentees(self, mentor_id: UUID) -> list[ProctorMapping]:
        return await self._ledger.list_mentees(mentor_id)

    async def list_mentor_candidates(self) -> list[Member]:
        return await self._directory.find_mentor_candidates()

    async def _require_assigner(self, caller_id: UUID, log: BoundLogger) -> Member:
        caller = await self._directory.get_member(caller_id)
        if caller is None or not can_assign_proctors(caller.role):
            role_name = caller.role.name if caller else None
            log.warning("Proctor change rejected, caller not an assigner", role=role_name)
            raise AssignerNotAuthorizedError(caller_id, role_name)
        return caller

    async def _lookup_members(self, *member_ids: UUID) -> dict[UUID, Member | None]:
        return {member_id: await self._directory.get_member(member_id) for member_id in member_ids}

    def _check_scope(
        self,
        caller: Member,
        members: dict[UUID, Member | None],
        log: BoundLogger,
    ) -> None:
        """Chapter-scoped assigners may only touch members of their own chapter.

        A member missing from the directory cannot be placed in the chapter
        and counts as out of scope.
        """
        for member_id, member in members.items():
            if (
                caller.chapter_id is None
                or member is None
                or member.chapter_id != caller.chapter_id
            ):
                log.warning(
                    "Proctor change rejected, outside assigner chapter",
                    member_id=str(member_id),
                )
                raise AssignerScopeError(caller.id, caller.chapter_id, member_id)
