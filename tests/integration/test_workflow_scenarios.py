"""End-to-end workflow scenarios over the in-memory backend.

Each test walks one documented scenario from proposal to outcome using the
services exactly as the API does.
"""

import pytest

from branchflow.domain.errors import (
    ApprovalAlreadyDecidedError,
    CalendarDateExhaustedError,
    MentorAtCapacityError,
)
from branchflow.domain.exceptions import CapacityExceededError, ResourceExhaustedError
from branchflow.domain.models.approval_slot import ApprovalType
from branchflow.domain.models.event_proposal import EventStatus
from tests.helpers import BranchRoster


class TestEventScenarios:
    async def test_proposal_seeds_one_slot_per_eligible_approver(
        self, branch: BranchRoster
    ) -> None:
        result = await branch.propose(days_ahead=12)

        assert result.event.status is EventStatus.SENIOR_CORE_PENDING
        assert len(result.slots) == len(branch.senior_core)

    async def test_two_distinct_approvals_open_treasurer_stage(
        self, branch: BranchRoster
    ) -> None:
        event = (await branch.propose()).event
        await branch.approve(event.id, branch.sb_chair, ApprovalType.SENIOR_CORE)

        result = await branch.approve(event.id, branch.sb_technical_head, ApprovalType.SENIOR_CORE)

        assert result.event.status is EventStatus.TREASURER_PENDING
        assert [s.approval_type for s in result.created_slots] == [ApprovalType.TREASURER]

    async def test_repeat_approval_does_not_count_twice(self, branch: BranchRoster) -> None:
        event = (await branch.propose()).event
        await branch.approve(event.id, branch.sb_chair, ApprovalType.SENIOR_CORE)

        with pytest.raises(ApprovalAlreadyDecidedError):
            await branch.approve(event.id, branch.sb_chair, ApprovalType.SENIOR_CORE)
        assert (await branch.container.lifecycle.get_event(event.id)).status is (
            EventStatus.SENIOR_CORE_PENDING
        )

        result = await branch.approve(event.id, branch.sb_convener, ApprovalType.SENIOR_CORE)
        assert result.event.status is EventStatus.TREASURER_PENDING

    async def test_treasurer_then_counsellor_approves(self, branch: BranchRoster) -> None:
        event = (await branch.propose()).event
        await branch.approve(event.id, branch.sb_chair, ApprovalType.SENIOR_CORE)
        await branch.approve(event.id, branch.sb_secretary, ApprovalType.SENIOR_CORE)

        treasurer = await branch.approve(event.id, branch.sb_treasurer, ApprovalType.TREASURER)
        assert treasurer.event.status is EventStatus.COUNSELLOR_PENDING

        counsellor = await branch.approve(event.id, branch.counsellor, ApprovalType.COUNSELLOR)
        assert counsellor.event.status is EventStatus.APPROVED

        availability = await branch.container.calendar_queries.get_availability(
            event.proposed_date
        )
        assert availability.count == 1

    async def test_third_event_on_full_date_stays_pending(self, branch: BranchRoster) -> None:
        first, second, third = [(await branch.propose(days_ahead=18)).event for _ in range(3)]
        await branch.approve_fully(first.id)
        await branch.approve_fully(second.id)
        await branch.approve_to_counsellor(third.id)

        with pytest.raises(ResourceExhaustedError) as exc_info:
            await branch.approve(third.id, branch.counsellor, ApprovalType.COUNSELLOR)

        assert isinstance(exc_info.value, CalendarDateExhaustedError)
        stored = await branch.container.lifecycle.get_event(third.id)
        assert stored.status is EventStatus.COUNSELLOR_PENDING


class TestProctorScenarios:
    async def test_sixth_mentee_exceeds_capacity(self, branch: BranchRoster) -> None:
        proctors = branch.container.proctors
        mentor = branch.team_heads[0]
        for mentee in branch.execom[:5]:
            await proctors.assign(branch.sb_chair, mentor, mentee)

        with pytest.raises(CapacityExceededError) as exc_info:
            await proctors.assign(branch.sb_chair, mentor, branch.execom[5])

        assert isinstance(exc_info.value, MentorAtCapacityError)
