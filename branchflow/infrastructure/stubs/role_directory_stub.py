"""In-memory stub for RoleDirectoryProtocol.

Members are registered with a raw role payload in any of the shapes the
directory may hand back; payloads are normalized once, on registration.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from branchflow.domain.models.approval_slot import ApprovalType
from branchflow.domain.models.role import Member, ResolvedRole
from branchflow.domain.services.role_policy import can_approve, is_team_head
from branchflow.infrastructure.adapters.role_payload import normalize_role_payload


class RoleDirectoryStub:
    """In-memory implementation of RoleDirectoryProtocol.

    Members keep their registration order, which is the order every
    ``find_*`` query returns them in.
    """

    def __init__(self) -> None:
        self._members: dict[UUID, Member] = {}

    def add_member(
        self,
        role: Any,
        *,
        member_id: UUID | None = None,
        name: str | None = None,
        chapter_id: UUID | None = None,
        email: str | None = None,
    ) -> UUID:
        """Register a member.

        Args:
            role: Role payload (role name, mapping, one-element list or
                ResolvedRole).
            member_id: Identity, generated if omitted.
            name: Display name.
            chapter_id: Chapter the member belongs to.
            email: Contact address.

        Returns:
            The member's identity.

        Raises:
            ValueError: The payload carries no role.
        """
        member_id = member_id or uuid4()
        resolved = normalize_role_payload(role)
        if resolved is None:
            raise ValueError(f"Member {member_id} needs a role")

        self._members[member_id] = Member(
            id=member_id,
            name=name or resolved.name,
            role=resolved,
            chapter_id=chapter_id,
            email=email,
        )
        return member_id

    def remove_member(self, member_id: UUID) -> None:
        self._members.pop(member_id, None)

    async def get_member(self, member_id: UUID) -> Member | None:
        return self._members.get(member_id)

    async def resolve_role(self, member_id: UUID) -> ResolvedRole | None:
        member = self._members.get(member_id)
        return member.role if member else None

    async def find_eligible_approvers(self, approval_type: ApprovalType) -> list[UUID]:
        return [m.id for m in self._members.values() if can_approve(m.role, approval_type)]

    async def find_members_with_role(self, role_name: str) -> list[UUID]:
        return [m.id for m in self._members.values() if m.role.name == role_name]

    async def find_team_heads(self) -> list[UUID]:
        return [m.id for m in self._members.values() if is_team_head(m.role)]

    async def find_mentor_candidates(self) -> list[Member]:
        return list(self._members.values())

    def clear(self) -> None:
        """Clear all stored data (for test cleanup)."""
        self._members.clear()
