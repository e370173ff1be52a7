"""Unit tests for LogNotificationDispatcher."""

from datetime import date
from uuid import uuid4

import pytest
import structlog
from structlog.testing import capture_logs

from branchflow.domain.models.event_proposal import EventProposal
from branchflow.domain.models.role import RoleName
from branchflow.infrastructure.adapters.log_notification_dispatcher import (
    LogNotificationDispatcher,
)
from branchflow.infrastructure.stubs import RoleDirectoryStub


@pytest.fixture(autouse=True)
def uncached_loggers() -> None:
    """capture_logs only sees loggers that were not cached by an earlier configure."""
    structlog.reset_defaults()


def _event() -> EventProposal:
    return EventProposal(
        id=uuid4(),
        title="Career Talk",
        proposed_date=date(2026, 4, 2),
        proposed_by=uuid4(),
        chapter_id=uuid4(),
    )


class TestLogNotificationDispatcher:
    async def test_one_entry_per_team_head(self) -> None:
        directory = RoleDirectoryStub()
        heads = [directory.add_member(RoleName.PR_HEAD), directory.add_member(RoleName.DESIGN_HEAD)]
        directory.add_member(RoleName.SB_SECRETARY)
        event = _event()

        with capture_logs() as logs:
            await LogNotificationDispatcher(directory).notify_team_heads(event)

        dispatched = [entry for entry in logs if entry["event"] == "Notification dispatched"]
        assert [entry["recipient_id"] for entry in dispatched] == [str(h) for h in heads]
        assert all(entry["kind"] == "event_approved" for entry in dispatched)
        assert all(entry["event_date"] == "2026-04-02" for entry in dispatched)

    async def test_reviewers_are_sb_secretaries(self) -> None:
        directory = RoleDirectoryStub()
        secretary = directory.add_member(RoleName.SB_SECRETARY)
        directory.add_member(RoleName.CHAPTER_SECRETARY)

        with capture_logs() as logs:
            await LogNotificationDispatcher(directory).notify_reviewers(_event(), "Report v2")

        assert len(logs) == 1
        assert logs[0]["recipient_id"] == str(secretary)
        assert logs[0]["kind"] == "document_review"
        assert logs[0]["document_title"] == "Report v2"

    async def test_no_recipients_no_entries(self) -> None:
        with capture_logs() as logs:
            await LogNotificationDispatcher(RoleDirectoryStub()).notify_team_heads(_event())

        assert logs == []
