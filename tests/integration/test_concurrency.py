"""Concurrency tests over the in-memory backend.

Overlapping requests are simulated with asyncio.gather. The stubs suspend
inside their critical sections, so racing tasks genuinely interleave and a
missing lock would show up as a broken invariant here.
"""

import asyncio

import pytest

from branchflow.domain.errors import (
    ApprovalAlreadyDecidedError,
    CalendarDateExhaustedError,
    MentorAtCapacityError,
)
from branchflow.domain.models.approval_slot import ApprovalType
from branchflow.domain.models.event_proposal import EventStatus
from tests.helpers import BranchRoster


class TestConcurrentCalendarAdmission:
    """Daily cap holds when several events reach final approval at once."""

    async def test_cap_never_exceeded(self, branch: BranchRoster) -> None:
        events = [(await branch.propose(days_ahead=25)).event for _ in range(5)]
        for event in events:
            await branch.approve_to_counsellor(event.id)

        results = await asyncio.gather(
            *(
                branch.approve(event.id, branch.counsellor, ApprovalType.COUNSELLOR)
                for event in events
            ),
            return_exceptions=True,
        )

        approved = [r for r in results if not isinstance(r, BaseException)]
        refused = [r for r in results if isinstance(r, CalendarDateExhaustedError)]
        assert len(approved) == 2
        assert len(refused) == 3

        lifecycle = branch.container.lifecycle
        statuses = [(await lifecycle.get_event(e.id)).status for e in events]
        assert statuses.count(EventStatus.APPROVED) == 2
        assert statuses.count(EventStatus.COUNSELLOR_PENDING) == 3
        counter = await branch.container.admission.get_counter(branch.date_ahead(25))
        assert counter.count == 2

    async def test_reservations_on_different_dates_do_not_interfere(
        self, branch: BranchRoster
    ) -> None:
        events = [(await branch.propose(days_ahead=20 + i)).event for i in range(4)]
        for event in events:
            await branch.approve_to_counsellor(event.id)

        results = await asyncio.gather(
            *(branch.approve(e.id, branch.counsellor, ApprovalType.COUNSELLOR) for e in events)
        )

        assert all(r.event.status is EventStatus.APPROVED for r in results)


class TestConcurrentApprovals:
    """Per-event serialization of decisions and stage transitions."""

    async def test_simultaneous_quorum_materializes_one_treasurer_slot(
        self, branch: BranchRoster
    ) -> None:
        event = (await branch.propose()).event

        results = await asyncio.gather(
            *(
                branch.approve(event.id, approver, ApprovalType.SENIOR_CORE)
                for approver in (branch.sb_chair, branch.sb_secretary, branch.sb_convener)
            ),
            return_exceptions=True,
        )

        transitioned = [r for r in results if not isinstance(r, BaseException) and r.transitioned]
        assert len(transitioned) == 1
        assert len(transitioned[0].created_slots) == 1

        slots = await branch.ledger.list_for_event(event.id)
        assert sum(1 for s in slots if s.approval_type is ApprovalType.TREASURER) == 1
        stored = await branch.container.lifecycle.get_event(event.id)
        assert stored.status is EventStatus.TREASURER_PENDING

    async def test_duplicate_decision_race(self, branch: BranchRoster) -> None:
        event = (await branch.propose()).event

        results = await asyncio.gather(
            branch.approve(event.id, branch.sb_chair, ApprovalType.SENIOR_CORE),
            branch.approve(event.id, branch.sb_chair, ApprovalType.SENIOR_CORE),
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, ApprovalAlreadyDecidedError)) == 1
        view = await branch.container.lifecycle.get_approval_status(event.id)
        assert view.summary.senior_core.approved == 1
        assert view.event.status is EventStatus.SENIOR_CORE_PENDING


class TestConcurrentProctorAssignment:
    """Capacity and mentee uniqueness hold under racing assignments."""

    @pytest.mark.parametrize("capacity_attempts", [6, 7])
    async def test_capacity_never_exceeded(
        self, branch: BranchRoster, capacity_attempts: int
    ) -> None:
        mentor = branch.team_heads[0]
        proctors = branch.container.proctors

        results = await asyncio.gather(
            *(
                proctors.assign(branch.sb_chair, mentor, mentee)
                for mentee in branch.execom[:capacity_attempts]
            ),
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, MentorAtCapacityError)) == (
            capacity_attempts - 5
        )
        assert len(await proctors.list_mentees(mentor)) == 5

    async def test_one_mentor_per_mentee(self, branch: BranchRoster) -> None:
        proctors = branch.container.proctors
        mentee = branch.execom[0]

        results = await asyncio.gather(
            *(proctors.assign(branch.sb_chair, mentor, mentee) for mentor in branch.team_heads),
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, BaseException)]
        assert len(winners) == 1
        mentees = [await proctors.list_mentees(m) for m in branch.team_heads]
        assert sum(len(m) for m in mentees) == 1
