"""Approval ledger protocol.

The ledger holds one ApprovalSlot per (event, approver, approval_type).
Slots are inserted pending and decided exactly once.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from branchflow.domain.models.approval_slot import ApprovalSlot, ApprovalType


class ApprovalLedgerProtocol(Protocol):
    """Protocol for approval slot persistence."""

    @abstractmethod
    async def add_slots(self, slots: Iterable[ApprovalSlot]) -> list[ApprovalSlot]:
        """Insert new pending slots.

        Slots whose (event_id, approver_id, approval_type) already exists are
        skipped, so re-materializing a stage is harmless.

        Returns:
            The slots that were actually inserted.
        """
        ...

    @abstractmethod
    async def list_for_event(self, event_id: UUID) -> list[ApprovalSlot]:
        """Return every slot of an event, ordered by created_at."""
        ...

    @abstractmethod
    async def find_slot(
        self,
        event_id: UUID,
        approver_id: UUID,
        approval_type: ApprovalType,
    ) -> ApprovalSlot | None:
        """Return the slot for exactly this key, None if absent."""
        ...

    @abstractmethod
    async def record_decision(self, slot: ApprovalSlot) -> ApprovalSlot:
        """Persist a decided slot.

        The write only succeeds if the stored slot is still pending.

        Raises:
            ApprovalAlreadyDecidedError: If the stored slot is already decided.
        """
        ...

    @abstractmethod
    async def list_pending_for_approver(self, approver_id: UUID) -> list[ApprovalSlot]:
        """Return pending slots assigned to an identity, oldest first."""
        ...
