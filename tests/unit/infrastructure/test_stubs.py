"""Unit tests for the in-memory port stubs.

The stubs back the ``memory`` storage mode, so their constraint behaviour
(uniqueness, conditional writes, atomic capacity checks) is tested directly.
"""

import asyncio
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from branchflow.domain.errors import (
    ApprovalAlreadyDecidedError,
    DuplicateProctorUpdateError,
    MenteeAlreadyAssignedError,
    MentorAtCapacityError,
    ProctorNotAssignedError,
)
from branchflow.domain.models.approval_slot import (
    ApprovalDecision,
    ApprovalSlot,
    ApprovalStatus,
    ApprovalType,
)
from branchflow.domain.models.event_proposal import EventProposal, EventStatus
from branchflow.domain.models.notification import NotificationKind
from branchflow.domain.models.proctor import ProctorMapping, ProctorUpdate
from branchflow.domain.models.role import RoleLevel, RoleName
from branchflow.infrastructure.stubs import (
    ApprovalLedgerStub,
    CalendarSlotCounterStub,
    EventRepositoryStub,
    NotificationDeliveryError,
    NotificationDispatcherStub,
    ProctorLedgerStub,
    RoleDirectoryStub,
)
from tests.helpers import FakeTimeAuthority

EVENT_DATE = date(2026, 2, 10)
T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _event(**overrides) -> EventProposal:
    fields = {
        "id": uuid4(),
        "title": "Robotics Meetup",
        "proposed_date": EVENT_DATE,
        "proposed_by": uuid4(),
        "chapter_id": uuid4(),
    }
    fields.update(overrides)
    return EventProposal(**fields)


def _slot(event_id, approver_id=None, approval_type=ApprovalType.SENIOR_CORE, offset=0):
    return ApprovalSlot(
        id=uuid4(),
        event_id=event_id,
        approver_id=approver_id or uuid4(),
        approval_type=approval_type,
        created_at=T0 + timedelta(seconds=offset),
    )


class TestApprovalLedgerStub:
    async def test_duplicate_keys_skipped(self) -> None:
        ledger = ApprovalLedgerStub()
        event_id, approver = uuid4(), uuid4()
        first = _slot(event_id, approver)

        inserted = await ledger.add_slots([first, _slot(event_id, approver)])

        assert inserted == [first]
        assert await ledger.list_for_event(event_id) == [first]

    async def test_same_approver_different_stage_allowed(self) -> None:
        ledger = ApprovalLedgerStub()
        event_id, approver = uuid4(), uuid4()

        await ledger.add_slots(
            [_slot(event_id, approver), _slot(event_id, approver, ApprovalType.TREASURER, 1)]
        )

        assert len(await ledger.list_for_event(event_id)) == 2

    async def test_decision_written_once(self) -> None:
        ledger = ApprovalLedgerStub()
        slot = _slot(uuid4())
        await ledger.add_slots([slot])
        approved = slot.decide(ApprovalDecision.APPROVE, T0)

        await ledger.record_decision(approved)

        with pytest.raises(ApprovalAlreadyDecidedError):
            await ledger.record_decision(slot.decide(ApprovalDecision.REJECT, T0))
        stored = await ledger.find_slot(*slot.ledger_key)
        assert stored is not None
        assert stored.status is ApprovalStatus.APPROVED

    async def test_pending_for_approver(self) -> None:
        ledger = ApprovalLedgerStub()
        approver = uuid4()
        decided = _slot(uuid4(), approver)
        pending = _slot(uuid4(), approver, offset=1)
        await ledger.add_slots([decided, pending, _slot(uuid4())])
        await ledger.record_decision(decided.decide(ApprovalDecision.APPROVE, T0))

        assert await ledger.list_pending_for_approver(approver) == [pending]


class TestEventRepositoryStub:
    async def test_create_writes_event_and_slots(self) -> None:
        ledger = ApprovalLedgerStub()
        events = EventRepositoryStub(ledger)
        event = _event()
        slots = [_slot(event.id), _slot(event.id, offset=1)]

        await events.create(event, slots)

        assert await events.get(event.id) == event
        assert await ledger.list_for_event(event.id) == slots
        with pytest.raises(KeyError):
            await events.create(event, [])

    async def test_save_requires_existing_event(self) -> None:
        events = EventRepositoryStub(ApprovalLedgerStub())
        with pytest.raises(KeyError):
            await events.save(_event())

    async def test_list_in_range_filters_status_and_date(self) -> None:
        events = EventRepositoryStub(ApprovalLedgerStub())
        inside = _event(status=EventStatus.APPROVED, approved_date=EVENT_DATE)
        pending = _event()
        outside = _event(
            proposed_date=EVENT_DATE + timedelta(days=30),
            status=EventStatus.APPROVED,
            approved_date=EVENT_DATE + timedelta(days=30),
        )
        for event in (inside, pending, outside):
            events.put(event)

        found = await events.list_in_range(
            EVENT_DATE, EVENT_DATE + timedelta(days=7), [EventStatus.APPROVED]
        )

        assert found == [inside]

    async def test_lock_serializes_one_event(self) -> None:
        events = EventRepositoryStub(ApprovalLedgerStub())
        event_id = uuid4()
        order: list[str] = []

        async def critical(name: str) -> None:
            async with events.lock(event_id):
                order.append(f"{name}-in")
                await asyncio.sleep(0)
                order.append(f"{name}-out")

        await asyncio.gather(critical("a"), critical("b"))

        assert order == ["a-in", "a-out", "b-in", "b-out"]

    async def test_locks_of_different_events_do_not_block(self) -> None:
        events = EventRepositoryStub(ApprovalLedgerStub())
        first, second = uuid4(), uuid4()

        async with events.lock(first):
            async with asyncio.timeout(1):
                async with events.lock(second):
                    assert events.active_locks == 2

    async def test_lock_dropped_after_use(self) -> None:
        events = EventRepositoryStub(ApprovalLedgerStub())
        event_id = uuid4()

        async def hold() -> None:
            async with events.lock(event_id):
                await asyncio.sleep(0)

        await asyncio.gather(hold(), hold(), hold())
        with pytest.raises(KeyError):
            async with events.lock(uuid4()):
                raise KeyError("unknown event")

        assert events.active_locks == 0


class TestCalendarSlotCounterStub:
    async def test_concurrent_increments_respect_cap(self) -> None:
        counter = CalendarSlotCounterStub()

        results = await asyncio.gather(
            *(counter.try_increment(EVENT_DATE, 2) for _ in range(6))
        )

        assert sum(1 for r in results if r is not None) == 2
        assert (await counter.get(EVENT_DATE, 2)).count == 2

    async def test_decrement_clamps_at_zero(self) -> None:
        counter = CalendarSlotCounterStub()
        counter.set_count(EVENT_DATE, 1)

        await counter.decrement(EVENT_DATE, 2)
        after = await counter.decrement(EVENT_DATE, 2)

        assert after.count == 0


class TestProctorLedgerStub:
    def _mapping(self, mentor, mentee) -> ProctorMapping:
        return ProctorMapping(id=uuid4(), mentor_id=mentor, mentee_id=mentee, assigned_by=uuid4())

    async def test_concurrent_assignments_respect_capacity(self) -> None:
        ledger = ProctorLedgerStub()
        mentor = uuid4()

        results = await asyncio.gather(
            *(ledger.assign_within_capacity(self._mapping(mentor, uuid4()), 3) for _ in range(5)),
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, ProctorMapping)) == 3
        assert all(
            isinstance(r, (ProctorMapping, MentorAtCapacityError)) for r in results
        )
        assert len(await ledger.list_mentees(mentor)) == 3

    async def test_mentee_unique(self) -> None:
        ledger = ProctorLedgerStub()
        mentee = uuid4()
        await ledger.assign_within_capacity(self._mapping(uuid4(), mentee), 5)

        with pytest.raises(MenteeAlreadyAssignedError):
            await ledger.assign_within_capacity(self._mapping(uuid4(), mentee), 5)

    async def test_remove_checks_mentor(self) -> None:
        ledger = ProctorLedgerStub()
        mentor, mentee = uuid4(), uuid4()
        await ledger.assign_within_capacity(self._mapping(mentor, mentee), 5)

        assert not await ledger.remove(uuid4(), mentee)
        assert await ledger.remove(mentor, mentee)
        assert await ledger.get_mapping(mentor, mentee) is None

    def _update(self, mentor, mentee, body: str) -> ProctorUpdate:
        return ProctorUpdate(
            id=uuid4(),
            mentor_id=mentor,
            mentee_id=mentee,
            body=body,
            period_start=date(2026, 1, 1),
            period_end=date(2026, 1, 15),
        )

    async def test_duplicate_update_period(self) -> None:
        ledger = ProctorLedgerStub()
        mentor, mentee = uuid4(), uuid4()
        await ledger.assign_within_capacity(self._mapping(mentor, mentee), 5)

        def update(body: str) -> ProctorUpdate:
            return self._update(mentor, mentee, body)

        await ledger.add_update(update("first"))
        with pytest.raises(DuplicateProctorUpdateError):
            await ledger.add_update(update("second"))

    async def test_update_requires_live_mapping(self) -> None:
        ledger = ProctorLedgerStub()
        mentor, mentee = uuid4(), uuid4()
        await ledger.assign_within_capacity(self._mapping(mentor, mentee), 5)
        await ledger.remove(mentor, mentee)

        with pytest.raises(ProctorNotAssignedError):
            await ledger.add_update(self._update(mentor, mentee, "late"))
        with pytest.raises(ProctorNotAssignedError):
            await ledger.add_update(self._update(uuid4(), uuid4(), "stranger"))
        assert await ledger.list_updates() == []


class TestRoleDirectoryStub:
    async def test_registration_normalizes_payload(self) -> None:
        directory = RoleDirectoryStub()
        member_id = directory.add_member([{"name": "SB Treasurer", "level": 1}], name="Asha")

        member = await directory.get_member(member_id)

        assert member is not None
        assert member.name == "Asha"
        assert member.role.name == RoleName.SB_TREASURER
        assert member.role.level is RoleLevel.SENIOR_CORE

    def test_member_needs_a_role(self) -> None:
        with pytest.raises(ValueError):
            RoleDirectoryStub().add_member(None)

    async def test_queries_follow_registration_order(self) -> None:
        directory = RoleDirectoryStub()
        chair = directory.add_member(RoleName.SB_CHAIR)
        directory.add_member(RoleName.BRANCH_COUNSELLOR)
        head = directory.add_member(RoleName.DESIGN_HEAD)
        convener = directory.add_member(RoleName.SB_CONVENER)

        assert await directory.find_eligible_approvers(ApprovalType.SENIOR_CORE) == [
            chair,
            convener,
        ]
        assert await directory.find_team_heads() == [head]
        assert len(await directory.find_mentor_candidates()) == 4

    async def test_removed_member_unresolvable(self) -> None:
        directory = RoleDirectoryStub()
        member_id = directory.add_member(RoleName.SB_CHAIR)
        directory.remove_member(member_id)

        assert await directory.resolve_role(member_id) is None


class TestNotificationDispatcherStub:
    async def test_team_heads_recorded(self) -> None:
        directory = RoleDirectoryStub()
        heads = [directory.add_member(RoleName.PR_HEAD), directory.add_member(RoleName.COVERAGE_HEAD)]
        directory.add_member(RoleName.SB_CHAIR)
        time = FakeTimeAuthority()
        notifier = NotificationDispatcherStub(directory, time)
        event = _event()

        await notifier.notify_team_heads(event)

        assert [n.recipient_id for n in notifier.sent] == heads
        assert all(n.kind is NotificationKind.EVENT_APPROVED for n in notifier.sent)
        assert all(n.event_id == event.id for n in notifier.sent)
        assert notifier.sent[0].created_at == time.utcnow()

    async def test_failing_mode(self) -> None:
        directory = RoleDirectoryStub()
        directory.add_member(RoleName.SB_SECRETARY)
        notifier = NotificationDispatcherStub(directory)
        notifier.set_failing()

        with pytest.raises(NotificationDeliveryError):
            await notifier.notify_reviewers(_event(), "Report")

        notifier.set_failing(False)
        await notifier.notify_reviewers(_event(), "Report")
        assert len(notifier.sent) == 1
