"""Calendar read API.

Read-only views used by calendar pages: approved events in a date range and
per-date admission counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

from branchflow.domain.errors import InvalidDateRangeError
from branchflow.domain.models.event_proposal import (
    APPROVED_OR_BEYOND,
    EventProposal,
    EventStatus,
    EventType,
)

if TYPE_CHECKING:
    from branchflow.application.ports.event_repository import EventRepositoryProtocol
    from branchflow.application.services.admission_controller_service import (
        AdmissionControllerService,
    )
    from branchflow.domain.models.calendar_slot import CalendarSlotCounter


@dataclass(frozen=True)
class EventSummary:
    """Calendar entry for an approved (or later) event."""

    event_id: UUID
    title: str
    event_type: EventType
    event_date: date
    chapter_id: UUID
    status: EventStatus

    @classmethod
    def from_event(cls, event: EventProposal) -> EventSummary:
        return cls(
            event_id=event.id,
            title=event.title,
            event_type=event.event_type,
            event_date=event.approved_date or event.proposed_date,
            chapter_id=event.chapter_id,
            status=event.status,
        )


@dataclass(frozen=True)
class DateAvailability:
    event_date: date
    count: int
    daily_cap: int
    available: bool


class CalendarQueryService:
    """Calendar views over events and admission counters."""

    def __init__(
        self,
        events: EventRepositoryProtocol,
        admission: AdmissionControllerService,
    ) -> None:
        self._events = events
        self._admission = admission

    async def list_approved_events(self, start: date, end: date) -> list[EventSummary]:
        """Events dated in [start, end] that are approved or beyond.

        Raises:
            InvalidDateRangeError: start is after end.
        """
        if start > end:
            raise InvalidDateRangeError(start, end)
        events = await self._events.list_in_range(start, end, APPROVED_OR_BEYOND)
        return [EventSummary.from_event(e) for e in events]

    async def get_availability(self, event_date: date) -> DateAvailability:
        counter = await self._admission.get_counter(event_date)
        return DateAvailability(
            event_date=event_date,
            count=counter.count,
            daily_cap=counter.daily_cap,
            available=not counter.blocked,
        )

    async def get_calendar_blocks(self, start: date, end: date) -> list[CalendarSlotCounter]:
        return await self._admission.get_calendar_blocks(start, end)
