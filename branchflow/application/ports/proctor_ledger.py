"""Proctor ledger protocol.

Persistence for mentor -> mentee mappings and periodic proctor updates.

Invariants enforced by every implementation:
- A mentee is held by at most one mentor
- A mentor holds at most ``capacity`` mentees
- At most one update per (mentor, mentee, period_start, period_end)
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from branchflow.domain.models.proctor import ProctorMapping, ProctorUpdate


class ProctorLedgerProtocol(Protocol):
    """Protocol for proctor mapping and update persistence."""

    @abstractmethod
    async def assign_within_capacity(
        self,
        mapping: ProctorMapping,
        capacity: int,
    ) -> ProctorMapping:
        """Insert a mapping if the mentee is free and the mentor has room.

        The uniqueness check, the capacity check and the insert are one
        atomic step.

        Args:
            mapping: The mapping to insert.
            capacity: Maximum mentees per mentor.

        Returns:
            The stored mapping.

        Raises:
            MenteeAlreadyAssignedError: The mentee already has a mentor.
            MentorAtCapacityError: The mentor already holds ``capacity`` mentees.
        """
        ...

    @abstractmethod
    async def remove(self, mentor_id: UUID, mentee_id: UUID) -> bool:
        """Delete a mapping. Returns False if it did not exist."""
        ...

    @abstractmethod
    async def get_mapping(self, mentor_id: UUID, mentee_id: UUID) -> ProctorMapping | None:
        ...

    @abstractmethod
    async def list_mentees(self, mentor_id: UUID) -> list[ProctorMapping]:
        """Return a mentor's mappings, oldest first."""
        ...

    @abstractmethod
    async def add_update(self, update: ProctorUpdate) -> ProctorUpdate:
        """Insert an update while its mapping is live.

        The mapping check and the insert are one atomic step.

        Raises:
            ProctorNotAssignedError: The mentor no longer holds the mentee.
            DuplicateProctorUpdateError: An update for the same period exists.
        """
        ...

    @abstractmethod
    async def list_updates(
        self,
        mentor_id: UUID | None = None,
        mentee_id: UUID | None = None,
    ) -> list[ProctorUpdate]:
        """Return updates, newest first, optionally filtered."""
        ...
