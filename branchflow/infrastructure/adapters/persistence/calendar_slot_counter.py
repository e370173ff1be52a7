"""PostgreSQL implementation of CalendarSlotCounterProtocol.

Reservation is a single conditional upsert: the row is created with count 1,
or incremented only while below the cap. No row returned means the date is
full. Concurrent reservations for one date serialize on the row lock taken by
ON CONFLICT DO UPDATE.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import text

from branchflow.domain.models.calendar_slot import CalendarSlotCounter

from branchflow.infrastructure.adapters.persistence.unit_of_work import session_scope

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class PostgresCalendarSlotCounter:
    """Per-date counters stored in ``calendar_slot_counters``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def try_increment(self, event_date: date, daily_cap: int) -> CalendarSlotCounter | None:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text("""
                    INSERT INTO calendar_slot_counters (event_date, count)
                    VALUES (:event_date, 1)
                    ON CONFLICT (event_date) DO UPDATE
                    SET count = calendar_slot_counters.count + 1
                    WHERE calendar_slot_counters.count < :daily_cap
                    RETURNING count
                """),
                {"event_date": event_date, "daily_cap": daily_cap},
            )
            count = result.scalar()
        if count is None:
            return None
        return CalendarSlotCounter(event_date, count, daily_cap)

    async def decrement(self, event_date: date, daily_cap: int) -> CalendarSlotCounter:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text("""
                    UPDATE calendar_slot_counters
                    SET count = GREATEST(count - 1, 0)
                    WHERE event_date = :event_date
                    RETURNING count
                """),
                {"event_date": event_date},
            )
            count = result.scalar()
        return CalendarSlotCounter(event_date, count or 0, daily_cap)

    async def get(self, event_date: date, daily_cap: int) -> CalendarSlotCounter:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text("SELECT count FROM calendar_slot_counters WHERE event_date = :event_date"),
                {"event_date": event_date},
            )
            count = result.scalar()
        return CalendarSlotCounter(event_date, count or 0, daily_cap)

    async def list_range(
        self,
        start: date,
        end: date,
        daily_cap: int,
    ) -> list[CalendarSlotCounter]:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text("""
                    SELECT event_date, count
                    FROM calendar_slot_counters
                    WHERE event_date BETWEEN :start AND :end
                    ORDER BY event_date
                """),
                {"start": start, "end": end},
            )
            return [
                CalendarSlotCounter(row.event_date, row.count, daily_cap)
                for row in result.fetchall()
            ]
