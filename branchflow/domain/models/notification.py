"""Notification record domain model.

Delivery transport is external; this record is what the in-memory dispatcher
keeps so callers and tests can observe what would have been sent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


class NotificationKind(Enum):
    EVENT_APPROVED = "event_approved"
    DOCUMENT_REVIEW = "document_review"


@dataclass(frozen=True)
class Notification:
    """A single notification addressed to one member."""

    recipient_id: UUID
    kind: NotificationKind
    message: str
    event_id: UUID | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
