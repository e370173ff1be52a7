"""In-memory notification dispatcher.

Records what would be delivered instead of sending it. Can be switched into
a failing mode to exercise the best-effort contract of callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from structlog import get_logger

from branchflow.domain.models.notification import Notification, NotificationKind
from branchflow.domain.models.role import RoleName

if TYPE_CHECKING:
    from uuid import UUID

    from branchflow.application.ports.role_directory import RoleDirectoryProtocol
    from branchflow.application.ports.time_authority import TimeAuthorityProtocol
    from branchflow.domain.models.event_proposal import EventProposal

logger = get_logger(__name__)


class NotificationDeliveryError(Exception):
    """Raised by the stub when configured to fail."""


class NotificationDispatcherStub:
    """Records notifications in memory.

    Attributes:
        sent: Every notification recorded, in order.
    """

    def __init__(
        self,
        directory: RoleDirectoryProtocol,
        time_authority: TimeAuthorityProtocol | None = None,
    ) -> None:
        self._directory = directory
        self._time = time_authority
        self._fail = False
        self.sent: list[Notification] = []

    def set_failing(self, fail: bool = True) -> None:
        """Make every subsequent notify call raise NotificationDeliveryError."""
        self._fail = fail

    async def notify_team_heads(self, event: EventProposal) -> None:
        if self._fail:
            raise NotificationDeliveryError("Notification transport unavailable")
        recipients = await self._directory.find_team_heads()
        for recipient_id in recipients:
            self._record(
                Notification(
                    recipient_id=recipient_id,
                    kind=NotificationKind.EVENT_APPROVED,
                    message=f"Event approved: {event.title} on {event.proposed_date.isoformat()}",
                    event_id=event.id,
                    **self._timestamp(),
                )
            )
        logger.info(
            "Team heads notified",
            event_id=str(event.id),
            recipients=len(recipients),
        )

    async def notify_reviewers(self, event: EventProposal, document_title: str) -> None:
        if self._fail:
            raise NotificationDeliveryError("Notification transport unavailable")
        recipients = await self._directory.find_members_with_role(RoleName.SB_SECRETARY)
        for recipient_id in recipients:
            self._record(
                Notification(
                    recipient_id=recipient_id,
                    kind=NotificationKind.DOCUMENT_REVIEW,
                    message=f"Final document '{document_title}' submitted for {event.title}",
                    event_id=event.id,
                    **self._timestamp(),
                )
            )
        logger.info(
            "Reviewers notified",
            event_id=str(event.id),
            recipients=len(recipients),
        )

    def for_recipient(self, recipient_id: UUID) -> list[Notification]:
        return [n for n in self.sent if n.recipient_id == recipient_id]

    def _record(self, notification: Notification) -> None:
        self.sent.append(notification)

    def _timestamp(self) -> dict:
        return {"created_at": self._time.utcnow()} if self._time else {}

    def clear(self) -> None:
        """Clear all stored data (for test cleanup)."""
        self.sent.clear()
        self._fail = False
