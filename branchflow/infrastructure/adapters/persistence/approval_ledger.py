"""PostgreSQL implementation of ApprovalLedgerProtocol.

The unique constraint ``uq_approval_slot`` backs the one-slot-per-key rule.
A decision is written with ``WHERE status = 'pending'`` so a decided slot is
never overwritten even without the event lock.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import text

from branchflow.domain.errors import ApprovalAlreadyDecidedError
from branchflow.domain.models.approval_slot import (
    ApprovalSlot,
    ApprovalStatus,
    ApprovalType,
)

from branchflow.infrastructure.adapters.persistence.unit_of_work import session_scope

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

INSERT_SLOT_SQL = """
    INSERT INTO approval_slots (
        id, event_id, approver_id, approval_type, status, comment,
        created_at, decided_at
    )
    VALUES (
        :id, :event_id, :approver_id, :approval_type, :status, :comment,
        :created_at, :decided_at
    )
    ON CONFLICT (event_id, approver_id, approval_type) DO NOTHING
    RETURNING id
"""

_SLOT_COLUMNS = """
    id, event_id, approver_id, approval_type, status, comment,
    created_at, decided_at
"""


def slot_params(slot: ApprovalSlot) -> dict[str, Any]:
    return {
        "id": slot.id,
        "event_id": slot.event_id,
        "approver_id": slot.approver_id,
        "approval_type": slot.approval_type.value,
        "status": slot.status.value,
        "comment": slot.comment,
        "created_at": slot.created_at,
        "decided_at": slot.decided_at,
    }


def _row_to_slot(row: Any) -> ApprovalSlot:
    return ApprovalSlot(
        id=row.id,
        event_id=row.event_id,
        approver_id=row.approver_id,
        approval_type=ApprovalType(row.approval_type),
        status=ApprovalStatus(row.status),
        comment=row.comment,
        created_at=row.created_at,
        decided_at=row.decided_at,
    )


class PostgresApprovalLedger:
    """Approval slots stored in the ``approval_slots`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_slots(self, slots: Iterable[ApprovalSlot]) -> list[ApprovalSlot]:
        inserted: list[ApprovalSlot] = []
        async with session_scope(self._session_factory) as session:
            for slot in slots:
                result = await session.execute(text(INSERT_SLOT_SQL), slot_params(slot))
                if result.fetchone() is not None:
                    inserted.append(slot)
        return inserted

    async def list_for_event(self, event_id: UUID) -> list[ApprovalSlot]:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"""
                    SELECT {_SLOT_COLUMNS}
                    FROM approval_slots
                    WHERE event_id = :event_id
                    ORDER BY created_at, id
                """),
                {"event_id": event_id},
            )
            return [_row_to_slot(row) for row in result.fetchall()]

    async def find_slot(
        self,
        event_id: UUID,
        approver_id: UUID,
        approval_type: ApprovalType,
    ) -> ApprovalSlot | None:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"""
                    SELECT {_SLOT_COLUMNS}
                    FROM approval_slots
                    WHERE event_id = :event_id
                      AND approver_id = :approver_id
                      AND approval_type = :approval_type
                """),
                {
                    "event_id": event_id,
                    "approver_id": approver_id,
                    "approval_type": approval_type.value,
                },
            )
            row = result.fetchone()
        return _row_to_slot(row) if row else None

    async def record_decision(self, slot: ApprovalSlot) -> ApprovalSlot:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text("""
                    UPDATE approval_slots
                    SET status = :status, comment = :comment, decided_at = :decided_at
                    WHERE id = :id AND status = 'pending'
                    RETURNING id
                """),
                {
                    "id": slot.id,
                    "status": slot.status.value,
                    "comment": slot.comment,
                    "decided_at": slot.decided_at,
                },
            )
            written = result.fetchone() is not None

        if not written:
            current = await self.find_slot(slot.event_id, slot.approver_id, slot.approval_type)
            if current is None:
                raise KeyError(f"Approval slot {slot.id} does not exist")
            raise ApprovalAlreadyDecidedError(current.id, current.event_id, current.status)
        return slot

    async def list_pending_for_approver(self, approver_id: UUID) -> list[ApprovalSlot]:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"""
                    SELECT {_SLOT_COLUMNS}
                    FROM approval_slots
                    WHERE approver_id = :approver_id AND status = 'pending'
                    ORDER BY created_at, id
                """),
                {"approver_id": approver_id},
            )
            return [_row_to_slot(row) for row in result.fetchall()]
