"""Calendar API response models."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import BaseModel

from branchflow.application.services import DateAvailability, EventSummary
from branchflow.domain.models.calendar_slot import CalendarSlotCounter
from branchflow.domain.models.event_proposal import EventStatus, EventType


class CalendarEventResponse(BaseModel):
    """An approved (or later) event on the calendar."""

    event_id: UUID
    title: str
    event_type: EventType
    event_date: date
    chapter_id: UUID
    status: EventStatus

    @classmethod
    def from_summary(cls, summary: EventSummary) -> CalendarEventResponse:
        return cls(
            event_id=summary.event_id,
            title=summary.title,
            event_type=summary.event_type,
            event_date=summary.event_date,
            chapter_id=summary.chapter_id,
            status=summary.status,
        )


class CalendarEventsResponse(BaseModel):
    start: date
    end: date
    events: list[CalendarEventResponse]


class AvailabilityResponse(BaseModel):
    """Occupancy of one date."""

    event_date: date
    count: int
    daily_cap: int
    available: bool

    @classmethod
    def from_availability(cls, availability: DateAvailability) -> AvailabilityResponse:
        return cls(
            event_date=availability.event_date,
            count=availability.count,
            daily_cap=availability.daily_cap,
            available=availability.available,
        )


class CalendarBlockResponse(BaseModel):
    """A date whose approved events reached the daily cap."""

    event_date: date
    count: int
    daily_cap: int

    @classmethod
    def from_counter(cls, counter: CalendarSlotCounter) -> CalendarBlockResponse:
        return cls(
            event_date=counter.event_date,
            count=counter.count,
            daily_cap=counter.daily_cap,
        )


class CalendarBlocksResponse(BaseModel):
    start: date
    end: date
    blocks: list[CalendarBlockResponse]
