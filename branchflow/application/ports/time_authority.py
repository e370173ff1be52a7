"""Time authority protocol.

Every service that needs the current time injects a TimeAuthorityProtocol
implementation instead of calling datetime.now() directly. Lead-time checks,
decision timestamps and proctor update timestamps all come from here.

For production use SystemTimeAuthority from
branchflow.infrastructure.adapters.system_time_authority. Tests use
FakeTimeAuthority from tests/helpers/fake_time_authority.py.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    Example usage:
        class MyService:
            def __init__(self, time_authority: TimeAuthorityProtocol) -> None:
                self._time = time_authority

            def process(self) -> None:
                now = self._time.utcnow()  # NOT datetime.now()
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return current time with timezone awareness (UTC recommended)."""
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return current UTC time as a timezone-aware datetime."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return monotonic clock value for measuring elapsed time."""
        ...

    def today(self) -> date:
        """Return the current calendar date (UTC)."""
        return self.utcnow().date()
