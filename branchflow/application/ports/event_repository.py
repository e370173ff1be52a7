"""Event repository protocol.

Persistence of EventProposal rows plus the per-event serialization primitive
used by the lifecycle engine.

Invariants:
- Every mutation of an event's status or ledger runs inside ``lock(event_id)``
- Events are never deleted
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

    from branchflow.domain.models.approval_slot import ApprovalSlot
    from branchflow.domain.models.event_proposal import EventProposal, EventStatus


class EventRepositoryProtocol(Protocol):
    """Protocol for event proposal persistence."""

    @abstractmethod
    def lock(self, event_id: UUID) -> AbstractAsyncContextManager[None]:
        """Serialize all mutations of one event.

        Usage:
            async with repo.lock(event_id):
                ...

        Args:
            event_id: The event to serialize on.

        Returns:
            Async context manager holding the per-event lock.
        """
        ...

    @abstractmethod
    async def create(
        self,
        event: EventProposal,
        initial_slots: Iterable[ApprovalSlot],
    ) -> EventProposal:
        """Persist a new proposal together with its seeded approval slots.

        The proposal and the slots are written atomically: either all rows
        exist afterwards or none do.

        Args:
            event: The new proposal.
            initial_slots: Pending senior-core slots seeded at proposal time.

        Returns:
            The persisted proposal.
        """
        ...

    @abstractmethod
    async def get(self, event_id: UUID) -> EventProposal | None:
        """Load a proposal by id, None if it does not exist."""
        ...

    @abstractmethod
    async def save(self, event: EventProposal) -> EventProposal:
        """Overwrite an existing proposal (status, approved_date, updated_at).

        Args:
            event: The updated proposal.

        Returns:
            The persisted proposal.
        """
        ...

    @abstractmethod
    async def list_by_ids(self, event_ids: Iterable[UUID]) -> list[EventProposal]:
        """Load several proposals. Unknown ids are skipped."""
        ...

    @abstractmethod
    async def list_in_range(
        self,
        start: date,
        end: date,
        statuses: Iterable[EventStatus],
    ) -> list[EventProposal]:
        """List proposals dated in [start, end] whose status is in ``statuses``.

        Results are ordered by proposed_date, then created_at.
        """
        ...
