"""In-memory stub for EventRepositoryProtocol.

Per-event serialization uses one asyncio.Lock per event id. A lock lives only
while some task holds or waits on it, so ids that fail lookup leave nothing
behind. The proposal and
its seeded slots are written without an await in between, so no other task
can observe one without the other.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from branchflow.domain.models.approval_slot import ApprovalSlot
from branchflow.domain.models.event_proposal import EventProposal, EventStatus
from branchflow.infrastructure.stubs.approval_ledger_stub import ApprovalLedgerStub


class EventRepositoryStub:
    """In-memory implementation of EventRepositoryProtocol."""

    def __init__(self, ledger: ApprovalLedgerStub) -> None:
        self._ledger = ledger
        self._events: dict[UUID, EventProposal] = {}
        self._locks: dict[UUID, asyncio.Lock] = {}
        # Tasks holding or waiting on each lock
        self._lock_users: dict[UUID, int] = {}

    @asynccontextmanager
    async def lock(self, event_id: UUID) -> AsyncIterator[None]:
        lock = self._locks.setdefault(event_id, asyncio.Lock())
        self._lock_users[event_id] = self._lock_users.get(event_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            users = self._lock_users.get(event_id, 1) - 1
            if users:
                self._lock_users[event_id] = users
            else:
                self._lock_users.pop(event_id, None)
                self._locks.pop(event_id, None)

    @property
    def active_locks(self) -> int:
        """Number of event ids with a live lock."""
        return len(self._locks)

    async def create(
        self,
        event: EventProposal,
        initial_slots: Iterable[ApprovalSlot],
    ) -> EventProposal:
        if event.id in self._events:
            raise KeyError(f"Event {event.id} already exists")
        slots = list(initial_slots)
        self._events[event.id] = event
        self._ledger.insert_many(slots)
        return event

    async def get(self, event_id: UUID) -> EventProposal | None:
        return self._events.get(event_id)

    async def save(self, event: EventProposal) -> EventProposal:
        if event.id not in self._events:
            raise KeyError(f"Event {event.id} does not exist")
        self._events[event.id] = event
        return event

    async def list_by_ids(self, event_ids: Iterable[UUID]) -> list[EventProposal]:
        return [self._events[i] for i in event_ids if i in self._events]

    async def list_in_range(
        self,
        start: date,
        end: date,
        statuses: Iterable[EventStatus],
    ) -> list[EventProposal]:
        wanted = set(statuses)
        return sorted(
            (
                e
                for e in self._events.values()
                if start <= e.proposed_date <= end and e.status in wanted
            ),
            key=lambda e: (e.proposed_date, e.created_at),
        )

    def put(self, event: EventProposal) -> None:
        """Store an event directly, bypassing the workflow (test setup)."""
        self._events[event.id] = event

    def clear(self) -> None:
        """Clear all stored data (for test cleanup)."""
        self._events.clear()
        self._locks.clear()
        self._lock_users.clear()
