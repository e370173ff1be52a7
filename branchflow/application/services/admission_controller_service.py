"""Admission controller service.

Per-date capacity accounting for approved events and the proposal lead-time
rule.

Lead time and availability are checked cheaply at proposal time for fast
feedback. The binding check is reserve_slot, which re-validates and
increments in one atomic step when an event enters APPROVED.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from structlog import get_logger

from branchflow.config.workflow_config import DEFAULT_WORKFLOW_CONFIG, WorkflowConfig
from branchflow.domain.errors import (
    CalendarDateExhaustedError,
    InvalidDateRangeError,
    LeadTimeViolationError,
)

if TYPE_CHECKING:
    from branchflow.application.ports.calendar_slot_counter import (
        CalendarSlotCounterProtocol,
    )
    from branchflow.domain.models.calendar_slot import CalendarSlotCounter

logger = get_logger(__name__)


class AdmissionControllerService:
    """Calendar admission control.

    Attributes:
        _counter: Keyed per-date counter store.
        _config: Workflow limits (daily cap, lead time).
    """

    def __init__(
        self,
        counter: CalendarSlotCounterProtocol,
        config: WorkflowConfig | None = None,
    ) -> None:
        self._counter = counter
        self._config = config or DEFAULT_WORKFLOW_CONFIG

    @property
    def daily_cap(self) -> int:
        return self._config.daily_event_cap

    def validate_lead_time(self, proposed_date: date, now: datetime) -> None:
        """Reject dates closer than the configured lead time.

        Args:
            proposed_date: Requested event date.
            now: Current time from the time authority.

        Raises:
            LeadTimeViolationError: proposed_date < now.date() + lead time.
        """
        earliest = now.date() + timedelta(days=self._config.lead_time_days)
        if proposed_date < earliest:
            logger.info(
                "Lead time violated",
                proposed_date=proposed_date.isoformat(),
                earliest_date=earliest.isoformat(),
            )
            raise LeadTimeViolationError(
                proposed_date=proposed_date,
                earliest_date=earliest,
                lead_time_days=self._config.lead_time_days,
            )

    async def check_availability(self, event_date: date) -> bool:
        """Non-binding availability check: True iff count < daily cap."""
        counter = await self._counter.get(event_date, self.daily_cap)
        return not counter.blocked

    async def get_counter(self, event_date: date) -> CalendarSlotCounter:
        return await self._counter.get(event_date, self.daily_cap)

    async def reserve_slot(self, event_date: date) -> CalendarSlotCounter:
        """Atomically re-check availability and take a slot.

        Args:
            event_date: Date to reserve.

        Returns:
            Counter after the increment.

        Raises:
            CalendarDateExhaustedError: The date is already at the daily cap.
        """
        log = logger.bind(event_date=event_date.isoformat(), daily_cap=self.daily_cap)

        counter = await self._counter.try_increment(event_date, self.daily_cap)
        if counter is None:
            log.warning("Calendar slot reservation refused, date is full")
            raise CalendarDateExhaustedError(event_date, self.daily_cap)

        log.info("Calendar slot reserved", count=counter.count)
        return counter

    async def release_slot(self, event_date: date) -> CalendarSlotCounter:
        """Give a slot back. The counter never drops below zero."""
        counter = await self._counter.decrement(event_date, self.daily_cap)
        logger.info(
            "Calendar slot released",
            event_date=event_date.isoformat(),
            count=counter.count,
        )
        return counter

    async def get_calendar_blocks(
        self,
        start: date,
        end: date,
    ) -> list[CalendarSlotCounter]:
        """Return counters dated in [start, end] for calendar views.

        Raises:
            InvalidDateRangeError: start is after end.
        """
        if start > end:
            raise InvalidDateRangeError(start, end)
        return await self._counter.list_range(start, end, self.daily_cap)
