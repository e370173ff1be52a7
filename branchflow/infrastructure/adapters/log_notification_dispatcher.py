"""Notification dispatcher that hands notifications to the log stream.

Delivery transport (email, push) is external to Branchflow. This adapter
resolves recipients through the role directory and emits one structured log
entry per notification, which a log shipper can forward.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from structlog import get_logger

from branchflow.domain.models.notification import NotificationKind
from branchflow.domain.models.role import RoleName

if TYPE_CHECKING:
    from branchflow.application.ports.role_directory import RoleDirectoryProtocol
    from branchflow.domain.models.event_proposal import EventProposal

logger = get_logger(__name__)


class LogNotificationDispatcher:
    """NotificationDispatcherProtocol implementation backed by structlog."""

    def __init__(self, directory: RoleDirectoryProtocol) -> None:
        self._directory = directory

    async def notify_team_heads(self, event: EventProposal) -> None:
        recipients = await self._directory.find_team_heads()
        for recipient_id in recipients:
            logger.info(
                "Notification dispatched",
                kind=NotificationKind.EVENT_APPROVED.value,
                recipient_id=str(recipient_id),
                event_id=str(event.id),
                event_date=event.proposed_date.isoformat(),
            )

    async def notify_reviewers(self, event: EventProposal, document_title: str) -> None:
        recipients = await self._directory.find_members_with_role(RoleName.SB_SECRETARY)
        for recipient_id in recipients:
            logger.info(
                "Notification dispatched",
                kind=NotificationKind.DOCUMENT_REVIEW.value,
                recipient_id=str(recipient_id),
                event_id=str(event.id),
                document_title=document_title,
            )
