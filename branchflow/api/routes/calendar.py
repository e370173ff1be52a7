"""Calendar read endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from branchflow.api.dependencies.workflow import get_calendar_query_service
from branchflow.api.errors import problem_from_error
from branchflow.api.models.calendar import (
    AvailabilityResponse,
    CalendarBlockResponse,
    CalendarBlocksResponse,
    CalendarEventResponse,
    CalendarEventsResponse,
)
from branchflow.api.models.common import ProblemResponse
from branchflow.application.services import CalendarQueryService
from branchflow.domain.exceptions import BranchflowError

router = APIRouter(prefix="/v1/calendar", tags=["calendar"])

Calendar = Annotated[CalendarQueryService, Depends(get_calendar_query_service)]


@router.get(
    "/events",
    response_model=CalendarEventsResponse,
    responses={422: {"model": ProblemResponse, "description": "start is after end"}},
    summary="List approved events in a date range",
)
async def list_calendar_events(
    request: Request,
    service: Calendar,
    start: Annotated[date, Query(description="First date, inclusive")],
    end: Annotated[date, Query(description="Last date, inclusive")],
) -> CalendarEventsResponse:
    """Events in approved, documentation_submitted or closed status."""
    try:
        events = await service.list_approved_events(start, end)
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return CalendarEventsResponse(
        start=start,
        end=end,
        events=[CalendarEventResponse.from_summary(s) for s in events],
    )


@router.get(
    "/availability/{event_date}",
    response_model=AvailabilityResponse,
    summary="Get the occupancy of one date",
)
async def get_availability(event_date: date, service: Calendar) -> AvailabilityResponse:
    availability = await service.get_availability(event_date)
    return AvailabilityResponse.from_availability(availability)


@router.get(
    "/blocks",
    response_model=CalendarBlocksResponse,
    responses={422: {"model": ProblemResponse, "description": "start is after end"}},
    summary="List fully booked dates in a range",
)
async def get_calendar_blocks(
    request: Request,
    service: Calendar,
    start: Annotated[date, Query(description="First date, inclusive")],
    end: Annotated[date, Query(description="Last date, inclusive")],
) -> CalendarBlocksResponse:
    try:
        blocks = await service.get_calendar_blocks(start, end)
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return CalendarBlocksResponse(
        start=start,
        end=end,
        blocks=[CalendarBlockResponse.from_counter(c) for c in blocks],
    )
