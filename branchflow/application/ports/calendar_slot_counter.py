"""Calendar slot counter protocol.

A keyed counter per calendar date. The only write paths are an atomic
conditional increment and a floored decrement; there is no read-then-write
pair exposed to callers.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import date

    from branchflow.domain.models.calendar_slot import CalendarSlotCounter


class CalendarSlotCounterProtocol(Protocol):
    """Protocol for per-date approved-event counters."""

    @abstractmethod
    async def try_increment(self, event_date: date, daily_cap: int) -> CalendarSlotCounter | None:
        """Increment the counter for a date if it is below ``daily_cap``.

        Check and increment are one linearizable step. The counter row is
        created on first use.

        Args:
            event_date: Date to reserve.
            daily_cap: Maximum count allowed after the increment.

        Returns:
            The counter after the increment, or None if the date was full.
        """
        ...

    @abstractmethod
    async def decrement(self, event_date: date, daily_cap: int) -> CalendarSlotCounter:
        """Decrement the counter for a date, never below zero.

        Returns:
            The counter after the decrement.
        """
        ...

    @abstractmethod
    async def get(self, event_date: date, daily_cap: int) -> CalendarSlotCounter:
        """Return the counter for a date (count 0 if never incremented)."""
        ...

    @abstractmethod
    async def list_range(
        self,
        start: date,
        end: date,
        daily_cap: int,
    ) -> list[CalendarSlotCounter]:
        """Return existing counters dated in [start, end], ordered by date."""
        ...
