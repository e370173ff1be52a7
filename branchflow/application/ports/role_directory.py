"""Role directory protocol.

The role directory is external and read-only to the core. It resolves an
identity to a single flat role record; whatever shape roles take in storage
is normalized before it crosses this boundary.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from branchflow.domain.models.approval_slot import ApprovalType
    from branchflow.domain.models.role import Member, ResolvedRole


class RoleDirectoryProtocol(Protocol):
    """Narrow query interface over members and their roles."""

    @abstractmethod
    async def get_member(self, member_id: UUID) -> Member | None:
        """Return the member with their resolved role, None if unknown."""
        ...

    @abstractmethod
    async def resolve_role(self, member_id: UUID) -> ResolvedRole | None:
        """Return the member's role, None if unknown or role-less."""
        ...

    @abstractmethod
    async def find_eligible_approvers(self, approval_type: ApprovalType) -> list[UUID]:
        """Return every identity whose role may decide the given stage."""
        ...

    @abstractmethod
    async def find_members_with_role(self, role_name: str) -> list[UUID]:
        """Return every identity holding exactly ``role_name``."""
        ...

    @abstractmethod
    async def find_team_heads(self) -> list[UUID]:
        """Return the PR, design, documentation and coverage heads."""
        ...

    @abstractmethod
    async def find_mentor_candidates(self) -> list[Member]:
        """Return members who may act as proctors (every member holding a role)."""
        ...
