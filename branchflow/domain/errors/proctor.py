"""Proctor assignment errors.

Raised by the proctor assignment ledger for mapping and update operations.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from branchflow.domain.exceptions import (
    CapacityExceededError,
    ConflictError,
    NotAssignedError,
    NotFoundError,
    PermissionDeniedError,
    ScopeError,
    ValidationError,
)


class AssignerNotAuthorizedError(PermissionDeniedError):
    """Raised when the caller's role may not manage proctor mappings."""

    def __init__(self, caller_id: UUID, role_name: str | None) -> None:
        self.caller_id = caller_id
        self.role_name = role_name
        super().__init__(
            f"Member {caller_id} with role {role_name!r} cannot manage proctor mappings"
        )


class AssignerScopeError(ScopeError):
    """Raised when a chapter-scoped assigner targets a member of another chapter.

    Attributes:
        caller_id: The assigner.
        caller_chapter_id: The assigner's chapter.
        member_id: Member outside the assigner's chapter.
    """

    def __init__(
        self,
        caller_id: UUID,
        caller_chapter_id: UUID | None,
        member_id: UUID,
    ) -> None:
        self.caller_id = caller_id
        self.caller_chapter_id = caller_chapter_id
        self.member_id = member_id
        super().__init__(
            f"Member {member_id} is outside chapter {caller_chapter_id} "
            f"of assigner {caller_id}"
        )


class MemberNotFoundError(NotFoundError):
    """Raised when an identity is unknown to the role directory."""

    def __init__(self, member_id: UUID) -> None:
        self.member_id = member_id
        super().__init__(f"Member {member_id} not found")


class SelfMentorshipError(ValidationError):
    """Raised when a member is assigned as their own proctor."""

    def __init__(self, member_id: UUID) -> None:
        self.member_id = member_id
        super().__init__(f"Member {member_id} cannot be their own proctor")


class MenteeAlreadyAssignedError(ConflictError):
    """Raised when a mentee already has a proctor.

    Attributes:
        mentee_id: The mentee.
        mentor_id: The mentor currently holding the mentee.
    """

    def __init__(self, mentee_id: UUID, mentor_id: UUID) -> None:
        self.mentee_id = mentee_id
        self.mentor_id = mentor_id
        super().__init__(f"Mentee {mentee_id} is already assigned to {mentor_id}")


class MentorAtCapacityError(CapacityExceededError):
    """Raised when a mentor already carries the maximum number of mentees.

    Attributes:
        mentor_id: The saturated mentor.
        current_count: Mentees currently mapped.
        max_allowed: Mentor capacity.
    """

    def __init__(self, mentor_id: UUID, current_count: int, max_allowed: int) -> None:
        self.mentor_id = mentor_id
        self.current_count = current_count
        self.max_allowed = max_allowed
        super().__init__(
            f"Mentor {mentor_id} at capacity: {current_count}/{max_allowed} mentees"
        )


class ProctorMappingNotFoundError(NotFoundError):
    """Raised when unassigning a mapping that does not exist."""

    def __init__(self, mentor_id: UUID, mentee_id: UUID) -> None:
        self.mentor_id = mentor_id
        self.mentee_id = mentee_id
        super().__init__(f"No proctor mapping from {mentor_id} to {mentee_id}")


class ProctorNotAssignedError(NotAssignedError):
    """Raised when a mentor records an update for a mentee they do not hold."""

    def __init__(self, mentor_id: UUID, mentee_id: UUID) -> None:
        self.mentor_id = mentor_id
        self.mentee_id = mentee_id
        super().__init__(f"Mentor {mentor_id} is not assigned to mentee {mentee_id}")


class InvalidUpdatePeriodError(ValidationError):
    """Raised when an update window is outside the allowed length.

    Attributes:
        period_start: First day of the window.
        period_end: Last day of the window.
        min_days: Shortest allowed window.
        max_days: Longest allowed window.
    """

    def __init__(
        self,
        period_start: date,
        period_end: date,
        min_days: int,
        max_days: int,
    ) -> None:
        self.period_start = period_start
        self.period_end = period_end
        self.min_days = min_days
        self.max_days = max_days
        super().__init__(
            f"Update period {period_start.isoformat()}..{period_end.isoformat()} "
            f"must span {min_days}-{max_days} days"
        )


class EmptyUpdateBodyError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Update body must not be empty")


class DuplicateProctorUpdateError(ConflictError):
    """Raised when an update already exists for the same mentee and period."""

    def __init__(
        self,
        mentor_id: UUID,
        mentee_id: UUID,
        period_start: date,
        period_end: date,
    ) -> None:
        self.mentor_id = mentor_id
        self.mentee_id = mentee_id
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(
            f"Update for mentee {mentee_id} covering "
            f"{period_start.isoformat()}..{period_end.isoformat()} already exists"
        )
