"""Proctor (mentor) assignment domain models.

Invariants:
- A mentee appears in at most one ProctorMapping
- A mentor appears in at most ``mentor_capacity`` ProctorMappings
- At most one ProctorUpdate per (mentor, mentee, period_start, period_end)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from uuid import UUID


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class ProctorMapping:
    """A live mentor -> mentee assignment.

    Attributes:
        id: Mapping identifier.
        mentor_id: The proctor.
        mentee_id: The execom member being mentored.
        assigned_by: Identity that created the mapping.
        created_at: Assignment timestamp (UTC).
    """

    id: UUID
    mentor_id: UUID
    mentee_id: UUID
    assigned_by: UUID
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if self.mentor_id == self.mentee_id:
            raise ValueError("A member cannot be their own proctor")


@dataclass(frozen=True, eq=True)
class ProctorUpdate:
    """A periodic status update written by a mentor about a mentee.

    Attributes:
        id: Update identifier.
        mentor_id: Author of the update.
        mentee_id: Subject of the update.
        body: Free-text update.
        period_start: First day of the reporting window.
        period_end: Last day of the reporting window.
        created_at: Recording timestamp (UTC).
    """

    id: UUID
    mentor_id: UUID
    mentee_id: UUID
    body: str
    period_start: date
    period_end: date
    created_at: datetime = field(default_factory=_utc_now)

    @property
    def period_key(self) -> tuple[UUID, UUID, date, date]:
        """Uniqueness key of the update."""
        return (self.mentor_id, self.mentee_id, self.period_start, self.period_end)

    @property
    def period_days(self) -> int:
        return (self.period_end - self.period_start).days
