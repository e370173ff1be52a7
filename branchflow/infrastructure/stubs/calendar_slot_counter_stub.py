"""In-memory stub for CalendarSlotCounterProtocol.

Check and increment run under one asyncio.Lock, which makes try_increment
linearizable across tasks. The critical section suspends once between the
read and the write so that racing tasks genuinely interleave in tests.
"""

from __future__ import annotations

import asyncio
from datetime import date

from branchflow.domain.models.calendar_slot import CalendarSlotCounter


class CalendarSlotCounterStub:
    """In-memory implementation of CalendarSlotCounterProtocol."""

    def __init__(self) -> None:
        self._counts: dict[date, int] = {}
        self._lock = asyncio.Lock()

    async def try_increment(self, event_date: date, daily_cap: int) -> CalendarSlotCounter | None:
        async with self._lock:
            current = self._counts.get(event_date, 0)
            await asyncio.sleep(0)
            if current >= daily_cap:
                return None
            self._counts[event_date] = current + 1
            return CalendarSlotCounter(event_date, current + 1, daily_cap)

    async def decrement(self, event_date: date, daily_cap: int) -> CalendarSlotCounter:
        async with self._lock:
            count = max(self._counts.get(event_date, 0) - 1, 0)
            if event_date in self._counts:
                self._counts[event_date] = count
            return CalendarSlotCounter(event_date, count, daily_cap)

    async def get(self, event_date: date, daily_cap: int) -> CalendarSlotCounter:
        return CalendarSlotCounter(event_date, self._counts.get(event_date, 0), daily_cap)

    async def list_range(
        self,
        start: date,
        end: date,
        daily_cap: int,
    ) -> list[CalendarSlotCounter]:
        return [
            CalendarSlotCounter(d, count, daily_cap)
            for d, count in sorted(self._counts.items())
            if start <= d <= end
        ]

    def set_count(self, event_date: date, count: int) -> None:
        """Force a counter value (test setup)."""
        self._counts[event_date] = count

    def clear(self) -> None:
        """Clear all stored data (for test cleanup)."""
        self._counts.clear()
