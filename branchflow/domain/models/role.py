"""Role and member domain models.

Roles arrive from the role directory as a flat ``{name, level}`` record. The
core never sees storage-specific shapes; see the role directory adapters for
normalization.

Role Levels:
    1 SENIOR_CORE: Student branch officers and the branch counsellor
    2 VICE_CORE: Vice officers of the student branch
    3 CHAPTER_LEADERSHIP: Chapter chair, secretary, treasurer (and vices)
    4 TEAMS: PR, design, documentation and coverage heads
    5 EXECOM: Everyone else
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from uuid import UUID


class RoleLevel(IntEnum):
    """Organizational tier of a role. Lower is more senior."""

    SENIOR_CORE = 1
    VICE_CORE = 2
    CHAPTER_LEADERSHIP = 3
    TEAMS = 4
    EXECOM = 5


class RoleName:
    """Canonical role names as stored in the role directory."""

    # Level 1 - Senior core
    SB_CHAIR = "SB Chair"
    SB_SECRETARY = "SB Secretary"
    SB_TREASURER = "SB Treasurer"
    SB_TECHNICAL_HEAD = "SB Technical Head"
    SB_CONVENER = "SB Convener"
    BRANCH_COUNSELLOR = "Branch Counsellor"

    # Level 2 - Vice core
    SB_VICE_CHAIR = "Vice Chair"
    SB_VICE_SECRETARY = "Vice Secretary"
    SB_VICE_TREASURER = "Vice Treasurer"
    SB_VICE_TECHNICAL_HEAD = "Vice Technical Head"
    SB_VICE_CONVENER = "Vice Convener"

    # Level 3 - Chapter leadership
    CHAPTER_CHAIR = "Chair"
    CHAPTER_VICE_CHAIR = "Vice Chair"
    CHAPTER_SECRETARY = "Secretary"
    CHAPTER_VICE_SECRETARY = "Vice Secretary"
    CHAPTER_TREASURER = "Treasurer"
    CHAPTER_VICE_TREASURER = "Vice Treasurer"

    # Level 4 - Teams
    PR_HEAD = "PR Head"
    DESIGN_HEAD = "Design Head"
    DOCUMENTATION_HEAD = "Documentation Head"
    COVERAGE_HEAD = "Coverage Head"


@dataclass(frozen=True)
class ResolvedRole:
    """A role as resolved by the role directory.

    Attributes:
        name: Canonical role name (see RoleName).
        level: Organizational tier.
    """

    name: str
    level: RoleLevel

    @property
    def is_top_level(self) -> bool:
        """True for the top organizational tier (senior core)."""
        return self.level == RoleLevel.SENIOR_CORE


@dataclass(frozen=True)
class Member:
    """A directory member with their resolved role.

    Attributes:
        id: Member identity.
        name: Display name (opaque to the core).
        role: Resolved role.
        chapter_id: Chapter the member belongs to, None for branch-wide roles.
        email: Contact address (opaque to the core).
    """

    id: UUID
    name: str
    role: ResolvedRole
    chapter_id: UUID | None = field(default=None)
    email: str | None = field(default=None)
