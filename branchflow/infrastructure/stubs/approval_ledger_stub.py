"""In-memory stub for ApprovalLedgerProtocol.

Simulates the approval_slots table:
- Unique constraint on (event_id, approver_id, approval_type)
- Conditional decision write (only while pending)
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from branchflow.domain.errors import ApprovalAlreadyDecidedError
from branchflow.domain.models.approval_slot import ApprovalSlot, ApprovalType


class ApprovalLedgerStub:
    """In-memory implementation of ApprovalLedgerProtocol.

    Slots are keyed by their ledger key. Callers serialize per event through
    the event repository lock, so no lock is held here.
    """

    def __init__(self) -> None:
        self._slots: dict[tuple[UUID, UUID, ApprovalType], ApprovalSlot] = {}

    def insert_many(self, slots: Iterable[ApprovalSlot]) -> list[ApprovalSlot]:
        """Insert slots synchronously, skipping existing keys."""
        inserted: list[ApprovalSlot] = []
        for slot in slots:
            if slot.ledger_key in self._slots:
                continue
            self._slots[slot.ledger_key] = slot
            inserted.append(slot)
        return inserted

    async def add_slots(self, slots: Iterable[ApprovalSlot]) -> list[ApprovalSlot]:
        return self.insert_many(slots)

    async def list_for_event(self, event_id: UUID) -> list[ApprovalSlot]:
        return sorted(
            (s for s in self._slots.values() if s.event_id == event_id),
            key=lambda s: s.created_at,
        )

    async def find_slot(
        self,
        event_id: UUID,
        approver_id: UUID,
        approval_type: ApprovalType,
    ) -> ApprovalSlot | None:
        return self._slots.get((event_id, approver_id, approval_type))

    async def record_decision(self, slot: ApprovalSlot) -> ApprovalSlot:
        stored = self._slots.get(slot.ledger_key)
        if stored is None:
            raise KeyError(f"Approval slot {slot.id} does not exist")
        if not stored.is_pending:
            raise ApprovalAlreadyDecidedError(stored.id, stored.event_id, stored.status)
        self._slots[slot.ledger_key] = slot
        return slot

    async def list_pending_for_approver(self, approver_id: UUID) -> list[ApprovalSlot]:
        return sorted(
            (
                s
                for s in self._slots.values()
                if s.approver_id == approver_id and s.is_pending
            ),
            key=lambda s: s.created_at,
        )

    def clear(self) -> None:
        """Clear all stored data (for test cleanup)."""
        self._slots.clear()
