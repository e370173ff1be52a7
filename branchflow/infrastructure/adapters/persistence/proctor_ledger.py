"""PostgreSQL implementation of ProctorLedgerProtocol.

Assignment runs in one transaction holding an advisory transaction lock on
the mentor, so the capacity count and the insert cannot interleave with a
concurrent assignment to the same mentor. The unique constraint on
``mentee_id`` catches two mentors racing for one mentee. Recording an update
locks the mapping row it refers to, so an update never outlives a concurrent
unassignment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from structlog import get_logger

from branchflow.domain.errors import (
    DuplicateProctorUpdateError,
    MenteeAlreadyAssignedError,
    MentorAtCapacityError,
    ProctorNotAssignedError,
)
from branchflow.domain.models.proctor import ProctorMapping, ProctorUpdate

from branchflow.infrastructure.adapters.persistence.unit_of_work import session_scope

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)

_MAPPING_COLUMNS = "id, mentor_id, mentee_id, assigned_by, created_at"
_UPDATE_COLUMNS = "id, mentor_id, mentee_id, body, period_start, period_end, created_at"


def _row_to_mapping(row: Any) -> ProctorMapping:
    return ProctorMapping(
        id=row.id,
        mentor_id=row.mentor_id,
        mentee_id=row.mentee_id,
        assigned_by=row.assigned_by,
        created_at=row.created_at,
    )


def _row_to_update(row: Any) -> ProctorUpdate:
    return ProctorUpdate(
        id=row.id,
        mentor_id=row.mentor_id,
        mentee_id=row.mentee_id,
        body=row.body,
        period_start=row.period_start,
        period_end=row.period_end,
        created_at=row.created_at,
    )


class PostgresProctorLedger:
    """Mappings in ``proctor_mappings``, updates in ``proctor_updates``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def assign_within_capacity(
        self,
        mapping: ProctorMapping,
        capacity: int,
    ) -> ProctorMapping:
        try:
            async with session_scope(self._session_factory) as session:
                await session.execute(
                    text("SELECT pg_advisory_xact_lock(hashtextextended(:key, 0))"),
                    {"key": f"mentor:{mapping.mentor_id}"},
                )

                result = await session.execute(
                    text("SELECT mentor_id FROM proctor_mappings WHERE mentee_id = :mentee_id"),
                    {"mentee_id": mapping.mentee_id},
                )
                existing = result.scalar()
                if existing is not None:
                    raise MenteeAlreadyAssignedError(mapping.mentee_id, existing)

                result = await session.execute(
                    text("SELECT COUNT(*) FROM proctor_mappings WHERE mentor_id = :mentor_id"),
                    {"mentor_id": mapping.mentor_id},
                )
                current = result.scalar() or 0
                if current >= capacity:
                    raise MentorAtCapacityError(mapping.mentor_id, current, capacity)

                await session.execute(
                    text(f"""
                        INSERT INTO proctor_mappings ({_MAPPING_COLUMNS})
                        VALUES (:id, :mentor_id, :mentee_id, :assigned_by, :created_at)
                    """),
                    {
                        "id": mapping.id,
                        "mentor_id": mapping.mentor_id,
                        "mentee_id": mapping.mentee_id,
                        "assigned_by": mapping.assigned_by,
                        "created_at": mapping.created_at,
                    },
                )
        except IntegrityError:
            holder = await self._mentor_of(mapping.mentee_id)
            logger.info(
                "mentee_assignment_race_lost",
                mentee_id=str(mapping.mentee_id),
            )
            raise MenteeAlreadyAssignedError(
                mapping.mentee_id, holder or mapping.mentor_id
            ) from None
        return mapping

    async def remove(self, mentor_id: UUID, mentee_id: UUID) -> bool:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text("""
                    DELETE FROM proctor_mappings
                    WHERE mentor_id = :mentor_id AND mentee_id = :mentee_id
                    RETURNING id
                """),
                {"mentor_id": mentor_id, "mentee_id": mentee_id},
            )
            removed = result.fetchone() is not None
        return removed

    async def get_mapping(self, mentor_id: UUID, mentee_id: UUID) -> ProctorMapping | None:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"""
                    SELECT {_MAPPING_COLUMNS} FROM proctor_mappings
                    WHERE mentor_id = :mentor_id AND mentee_id = :mentee_id
                """),
                {"mentor_id": mentor_id, "mentee_id": mentee_id},
            )
            row = result.fetchone()
        return _row_to_mapping(row) if row else None

    async def list_mentees(self, mentor_id: UUID) -> list[ProctorMapping]:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"""
                    SELECT {_MAPPING_COLUMNS} FROM proctor_mappings
                    WHERE mentor_id = :mentor_id
                    ORDER BY created_at
                """),
                {"mentor_id": mentor_id},
            )
            return [_row_to_mapping(row) for row in result.fetchall()]

    async def add_update(self, update: ProctorUpdate) -> ProctorUpdate:
        async with session_scope(self._session_factory) as session:
            # Row lock makes a concurrent unassign wait for this insert, or
            # leaves no row when it committed first
            result = await session.execute(
                text("""
                    SELECT id FROM proctor_mappings
                    WHERE mentor_id = :mentor_id AND mentee_id = :mentee_id
                    FOR UPDATE
                """),
                {"mentor_id": update.mentor_id, "mentee_id": update.mentee_id},
            )
            if result.fetchone() is None:
                raise ProctorNotAssignedError(update.mentor_id, update.mentee_id)

            result = await session.execute(
                text(f"""
                    INSERT INTO proctor_updates ({_UPDATE_COLUMNS})
                    VALUES (
                        :id, :mentor_id, :mentee_id, :body,
                        :period_start, :period_end, :created_at
                    )
                    ON CONFLICT ON CONSTRAINT uq_proctor_update DO NOTHING
                    RETURNING id
                """),
                {
                    "id": update.id,
                    "mentor_id": update.mentor_id,
                    "mentee_id": update.mentee_id,
                    "body": update.body,
                    "period_start": update.period_start,
                    "period_end": update.period_end,
                    "created_at": update.created_at,
                },
            )
            if result.fetchone() is None:
                raise DuplicateProctorUpdateError(
                    mentor_id=update.mentor_id,
                    mentee_id=update.mentee_id,
                    period_start=update.period_start,
                    period_end=update.period_end,
                )
        return update

    async def list_updates(
        self,
        mentor_id: UUID | None = None,
        mentee_id: UUID | None = None,
    ) -> list[ProctorUpdate]:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"""
                    SELECT {_UPDATE_COLUMNS} FROM proctor_updates
                    WHERE (CAST(:mentor_id AS UUID) IS NULL OR mentor_id = :mentor_id)
                      AND (CAST(:mentee_id AS UUID) IS NULL OR mentee_id = :mentee_id)
                    ORDER BY created_at DESC
                """),
                {"mentor_id": mentor_id, "mentee_id": mentee_id},
            )
            return [_row_to_update(row) for row in result.fetchall()]

    async def _mentor_of(self, mentee_id: UUID) -> UUID | None:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text("SELECT mentor_id FROM proctor_mappings WHERE mentee_id = :mentee_id"),
                {"mentee_id": mentee_id},
            )
            return result.scalar()
