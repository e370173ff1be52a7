"""Calendar slot counter domain model.

One counter per calendar date holds the number of events counted as approved
on that date. The counter is created lazily on first reservation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

DEFAULT_DAILY_EVENT_CAP = 2


@dataclass(frozen=True, eq=True)
class CalendarSlotCounter:
    """Approved-event count for a single calendar date.

    Attributes:
        event_date: The calendar date.
        count: Number of events counted as approved on that date.
        daily_cap: Cap the counter is evaluated against.
    """

    event_date: date
    count: int = 0
    daily_cap: int = DEFAULT_DAILY_EVENT_CAP

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"Calendar slot count must be >= 0, got {self.count}")
        if self.daily_cap < 1:
            raise ValueError(f"daily_cap must be >= 1, got {self.daily_cap}")

    @property
    def blocked(self) -> bool:
        """True when no further event may be admitted on this date."""
        return self.count >= self.daily_cap

    @property
    def remaining(self) -> int:
        return max(self.daily_cap - self.count, 0)
