"""PostgreSQL implementation of EventRepositoryProtocol.

Per-event serialization opens a unit of work and takes a transaction-level
advisory lock keyed by the event id. Every repository, ledger and counter
call made inside the critical section runs on that unit's session, so one
event mutation holds exactly one pooled connection and commits once.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import date
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import text
from structlog import get_logger

from branchflow.domain.models.approval_slot import ApprovalSlot
from branchflow.domain.models.event_proposal import (
    EventProposal,
    EventStatus,
    EventType,
)
from branchflow.infrastructure.adapters.persistence.approval_ledger import (
    INSERT_SLOT_SQL,
    slot_params,
)
from branchflow.infrastructure.adapters.persistence.unit_of_work import (
    session_scope,
    unit_of_work,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)

_EVENT_COLUMNS = """
    id, title, description, event_type, proposed_date, proposed_by,
    chapter_id, status, approved_date, created_at, updated_at
"""


def _row_to_event(row: Any) -> EventProposal:
    return EventProposal(
        id=row.id,
        title=row.title,
        description=row.description,
        event_type=EventType(row.event_type),
        proposed_date=row.proposed_date,
        proposed_by=row.proposed_by,
        chapter_id=row.chapter_id,
        status=EventStatus(row.status),
        approved_date=row.approved_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class PostgresEventRepository:
    """Event proposals stored in the ``event_proposals`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def lock(self, event_id: UUID) -> AsyncIterator[None]:
        async with unit_of_work(self._session_factory) as session:
            await session.execute(
                text("SELECT pg_advisory_xact_lock(hashtextextended(:key, 0))"),
                {"key": f"event:{event_id}"},
            )
            yield

    async def create(
        self,
        event: EventProposal,
        initial_slots: Iterable[ApprovalSlot],
    ) -> EventProposal:
        async with session_scope(self._session_factory) as session:
            await session.execute(
                text(f"""
                    INSERT INTO event_proposals ({_EVENT_COLUMNS})
                    VALUES (
                        :id, :title, :description, :event_type, :proposed_date,
                        :proposed_by, :chapter_id, :status, :approved_date,
                        :created_at, :updated_at
                    )
                """),
                self._params(event),
            )
            for slot in initial_slots:
                await session.execute(text(INSERT_SLOT_SQL), slot_params(slot))

        logger.debug("event_row_created", event_id=str(event.id))
        return event

    async def get(self, event_id: UUID) -> EventProposal | None:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"SELECT {_EVENT_COLUMNS} FROM event_proposals WHERE id = :id"),
                {"id": event_id},
            )
            row = result.fetchone()
        return _row_to_event(row) if row else None

    async def save(self, event: EventProposal) -> EventProposal:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text("""
                    UPDATE event_proposals
                    SET status = :status,
                        approved_date = :approved_date,
                        updated_at = :updated_at
                    WHERE id = :id
                    RETURNING id
                """),
                {
                    "id": event.id,
                    "status": event.status.value,
                    "approved_date": event.approved_date,
                    "updated_at": event.updated_at,
                },
            )
            if result.fetchone() is None:
                raise KeyError(f"Event {event.id} does not exist")
        return event

    async def list_by_ids(self, event_ids: Iterable[UUID]) -> list[EventProposal]:
        ids = list(event_ids)
        if not ids:
            return []
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"SELECT {_EVENT_COLUMNS} FROM event_proposals WHERE id = ANY(:ids)"),
                {"ids": ids},
            )
            return [_row_to_event(row) for row in result.fetchall()]

    async def list_in_range(
        self,
        start: date,
        end: date,
        statuses: Iterable[EventStatus],
    ) -> list[EventProposal]:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"""
                    SELECT {_EVENT_COLUMNS}
                    FROM event_proposals
                    WHERE proposed_date BETWEEN :start AND :end
                      AND status = ANY(:statuses)
                    ORDER BY proposed_date, created_at
                """),
                {
                    "start": start,
                    "end": end,
                    "statuses": [s.value for s in statuses],
                },
            )
            return [_row_to_event(row) for row in result.fetchall()]

    @staticmethod
    def _params(event: EventProposal) -> dict[str, Any]:
        return {
            "id": event.id,
            "title": event.title,
            "description": event.description,
            "event_type": event.event_type.value,
            "proposed_date": event.proposed_date,
            "proposed_by": event.proposed_by,
            "chapter_id": event.chapter_id,
            "status": event.status.value,
            "approved_date": event.approved_date,
            "created_at": event.created_at,
            "updated_at": event.updated_at,
        }
