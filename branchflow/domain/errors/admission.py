"""Calendar admission errors."""

from __future__ import annotations

from datetime import date

from branchflow.domain.exceptions import ResourceExhaustedError, ValidationError


class CalendarDateExhaustedError(ResourceExhaustedError):
    """Raised when a calendar date already holds the maximum approved events.

    Attributes:
        event_date: The saturated date.
        daily_cap: Maximum approved events per date.
    """

    def __init__(self, event_date: date, daily_cap: int) -> None:
        self.event_date = event_date
        self.daily_cap = daily_cap
        super().__init__(
            f"{event_date.isoformat()} already has {daily_cap} approved event(s)"
        )


class InvalidDateRangeError(ValidationError):
    """Raised when a calendar query range ends before it starts."""

    def __init__(self, start: date, end: date) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"Invalid date range: {start.isoformat()} is after {end.isoformat()}"
        )
