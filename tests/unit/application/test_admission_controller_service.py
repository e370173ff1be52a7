"""Unit tests for AdmissionControllerService."""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

import pytest

from branchflow.application.services import AdmissionControllerService
from branchflow.config.workflow_config import WorkflowConfig
from branchflow.domain.errors import (
    CalendarDateExhaustedError,
    InvalidDateRangeError,
    LeadTimeViolationError,
)
from branchflow.domain.exceptions import ResourceExhaustedError
from branchflow.domain.models.calendar_slot import CalendarSlotCounter
from branchflow.infrastructure.stubs import CalendarSlotCounterStub

NOW = datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc)
EVENT_DATE = date(2026, 3, 20)


@pytest.fixture
def counter() -> CalendarSlotCounterStub:
    return CalendarSlotCounterStub()


@pytest.fixture
def admission(counter: CalendarSlotCounterStub) -> AdmissionControllerService:
    return AdmissionControllerService(counter, WorkflowConfig())


class TestLeadTime:
    """Tests for validate_lead_time()."""

    def test_date_at_lead_time_accepted(self, admission: AdmissionControllerService) -> None:
        admission.validate_lead_time(date(2026, 3, 11), NOW)

    def test_date_inside_lead_time_rejected(self, admission: AdmissionControllerService) -> None:
        with pytest.raises(LeadTimeViolationError) as exc_info:
            admission.validate_lead_time(date(2026, 3, 10), NOW)

        assert exc_info.value.earliest_date == date(2026, 3, 11)
        assert exc_info.value.lead_time_days == 10

    def test_past_date_rejected(self, admission: AdmissionControllerService) -> None:
        with pytest.raises(LeadTimeViolationError):
            admission.validate_lead_time(date(2026, 2, 1), NOW)

    def test_zero_lead_time_allows_today(self, counter: CalendarSlotCounterStub) -> None:
        service = AdmissionControllerService(counter, WorkflowConfig(lead_time_days=0))
        service.validate_lead_time(NOW.date(), NOW)


class TestReservation:
    """Tests for reserve_slot() and release_slot()."""

    async def test_reserve_until_cap(self, admission: AdmissionControllerService) -> None:
        first = await admission.reserve_slot(EVENT_DATE)
        second = await admission.reserve_slot(EVENT_DATE)

        assert (first.count, second.count) == (1, 2)
        assert second.blocked

        with pytest.raises(CalendarDateExhaustedError) as exc_info:
            await admission.reserve_slot(EVENT_DATE)

        assert isinstance(exc_info.value, ResourceExhaustedError)
        assert exc_info.value.daily_cap == 2
        assert (await admission.get_counter(EVENT_DATE)).count == 2

    async def test_reservations_are_per_date(self, admission: AdmissionControllerService) -> None:
        await admission.reserve_slot(EVENT_DATE)
        await admission.reserve_slot(EVENT_DATE)

        other = await admission.reserve_slot(date(2026, 3, 21))

        assert other.count == 1

    async def test_release_frees_a_slot(self, admission: AdmissionControllerService) -> None:
        await admission.reserve_slot(EVENT_DATE)
        await admission.reserve_slot(EVENT_DATE)

        released = await admission.release_slot(EVENT_DATE)

        assert released.count == 1
        assert await admission.check_availability(EVENT_DATE)

    async def test_release_never_goes_negative(
        self, admission: AdmissionControllerService
    ) -> None:
        released = await admission.release_slot(EVENT_DATE)
        assert released.count == 0

    async def test_configured_cap(self, counter: CalendarSlotCounterStub) -> None:
        service = AdmissionControllerService(counter, WorkflowConfig(daily_event_cap=1))
        await service.reserve_slot(EVENT_DATE)

        assert not await service.check_availability(EVENT_DATE)
        with pytest.raises(CalendarDateExhaustedError):
            await service.reserve_slot(EVENT_DATE)

    async def test_refused_increment_raises(self) -> None:
        counter = AsyncMock()
        counter.try_increment = AsyncMock(return_value=None)
        service = AdmissionControllerService(counter)

        with pytest.raises(CalendarDateExhaustedError):
            await service.reserve_slot(EVENT_DATE)

        counter.try_increment.assert_awaited_once_with(EVENT_DATE, 2)


class TestAvailability:
    """Tests for check_availability() and get_calendar_blocks()."""

    async def test_unseen_date_is_available(self, admission: AdmissionControllerService) -> None:
        assert await admission.check_availability(EVENT_DATE)
        assert (await admission.get_counter(EVENT_DATE)).count == 0

    async def test_blocks_in_range(
        self, admission: AdmissionControllerService, counter: CalendarSlotCounterStub
    ) -> None:
        counter.set_count(date(2026, 3, 5), 2)
        counter.set_count(date(2026, 3, 6), 1)
        counter.set_count(date(2026, 4, 1), 2)

        blocks = await admission.get_calendar_blocks(date(2026, 3, 1), date(2026, 3, 31))

        assert blocks == [
            CalendarSlotCounter(date(2026, 3, 5), 2, 2),
            CalendarSlotCounter(date(2026, 3, 6), 1, 2),
        ]
        assert [b.blocked for b in blocks] == [True, False]

    async def test_inverted_range_rejected(self, admission: AdmissionControllerService) -> None:
        with pytest.raises(InvalidDateRangeError):
            await admission.get_calendar_blocks(date(2026, 3, 31), date(2026, 3, 1))
