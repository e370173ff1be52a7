"""Notification dispatcher protocol.

Fire-and-forget delivery of workflow notifications. Callers treat any
exception from these methods as non-fatal: it is logged and swallowed.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from branchflow.domain.models.event_proposal import EventProposal


class NotificationDispatcherProtocol(Protocol):
    """Protocol for outbound workflow notifications."""

    @abstractmethod
    async def notify_team_heads(self, event: EventProposal) -> None:
        """Tell every team head that an event was approved."""
        ...

    @abstractmethod
    async def notify_reviewers(self, event: EventProposal, document_title: str) -> None:
        """Tell the documentation reviewer that a final document is waiting."""
        ...
