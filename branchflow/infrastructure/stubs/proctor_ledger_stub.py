"""In-memory stub for ProctorLedgerProtocol.

Simulates the proctor_mappings and proctor_updates tables:
- Unique mentee across all mappings
- Mentor capacity checked and the row inserted under one asyncio.Lock
- Unique (mentor, mentee, period_start, period_end) for updates, recorded
  only while the mapping is live
"""

from __future__ import annotations

import asyncio
from uuid import UUID

from branchflow.domain.errors import (
    DuplicateProctorUpdateError,
    MenteeAlreadyAssignedError,
    MentorAtCapacityError,
    ProctorNotAssignedError,
)
from branchflow.domain.models.proctor import ProctorMapping, ProctorUpdate


class ProctorLedgerStub:
    """In-memory implementation of ProctorLedgerProtocol."""

    def __init__(self) -> None:
        # Key: mentee_id, a mentee has at most one mapping
        self._mappings: dict[UUID, ProctorMapping] = {}
        self._updates: dict[tuple, ProctorUpdate] = {}
        self._lock = asyncio.Lock()

    async def assign_within_capacity(
        self,
        mapping: ProctorMapping,
        capacity: int,
    ) -> ProctorMapping:
        async with self._lock:
            existing = self._mappings.get(mapping.mentee_id)
            if existing is not None:
                raise MenteeAlreadyAssignedError(mapping.mentee_id, existing.mentor_id)

            current = sum(
                1 for m in self._mappings.values() if m.mentor_id == mapping.mentor_id
            )
            await asyncio.sleep(0)
            if current >= capacity:
                raise MentorAtCapacityError(mapping.mentor_id, current, capacity)

            self._mappings[mapping.mentee_id] = mapping
            return mapping

    async def remove(self, mentor_id: UUID, mentee_id: UUID) -> bool:
        async with self._lock:
            existing = self._mappings.get(mentee_id)
            if existing is None or existing.mentor_id != mentor_id:
                return False
            del self._mappings[mentee_id]
            return True

    async def get_mapping(self, mentor_id: UUID, mentee_id: UUID) -> ProctorMapping | None:
        existing = self._mappings.get(mentee_id)
        if existing is None or existing.mentor_id != mentor_id:
            return None
        return existing

    async def list_mentees(self, mentor_id: UUID) -> list[ProctorMapping]:
        return sorted(
            (m for m in self._mappings.values() if m.mentor_id == mentor_id),
            key=lambda m: m.created_at,
        )

    async def add_update(self, update: ProctorUpdate) -> ProctorUpdate:
        async with self._lock:
            mapping = self._mappings.get(update.mentee_id)
            if mapping is None or mapping.mentor_id != update.mentor_id:
                raise ProctorNotAssignedError(update.mentor_id, update.mentee_id)
            if update.period_key in self._updates:
                raise DuplicateProctorUpdateError(
                    mentor_id=update.mentor_id,
                    mentee_id=update.mentee_id,
                    period_start=update.period_start,
                    period_end=update.period_end,
                )
            self._updates[update.period_key] = update
            return update

    async def list_updates(
        self,
        mentor_id: UUID | None = None,
        mentee_id: UUID | None = None,
    ) -> list[ProctorUpdate]:
        updates = [
            u
            for u in self._updates.values()
            if (mentor_id is None or u.mentor_id == mentor_id)
            and (mentee_id is None or u.mentee_id == mentee_id)
        ]
        return sorted(updates, key=lambda u: u.created_at, reverse=True)

    def clear(self) -> None:
        """Clear all stored data (for test cleanup)."""
        self._mappings.clear()
        self._updates.clear()
