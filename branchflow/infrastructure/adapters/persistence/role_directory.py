"""PostgreSQL implementation of RoleDirectoryProtocol.

Reads ``members`` joined to ``roles``. The joined role columns are folded
into a ResolvedRole by normalize_role_payload, the same path every other
directory source uses.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import text

from branchflow.domain.models.role import Member, ResolvedRole
from branchflow.domain.services.role_policy import TEAM_HEAD_ROLES, approver_role_names
from branchflow.infrastructure.adapters.persistence.unit_of_work import session_scope
from branchflow.infrastructure.adapters.role_payload import normalize_role_payload

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from branchflow.domain.models.approval_slot import ApprovalType

_MEMBER_SELECT = """
    SELECT m.id, m.name, m.email, m.chapter_id,
           r.name AS role_name, r.level AS role_level
    FROM members m
    JOIN roles r ON r.id = m.role_id
"""


def _row_to_member(row: Any) -> Member | None:
    role = normalize_role_payload({"name": row.role_name, "level": row.role_level})
    if role is None:
        return None
    return Member(
        id=row.id,
        name=row.name,
        role=role,
        chapter_id=row.chapter_id,
        email=row.email,
    )


class PostgresRoleDirectory:
    """Members and roles read from PostgreSQL."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_member(self, member_id: UUID) -> Member | None:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"{_MEMBER_SELECT} WHERE m.id = :id"),
                {"id": member_id},
            )
            row = result.fetchone()
        return _row_to_member(row) if row else None

    async def resolve_role(self, member_id: UUID) -> ResolvedRole | None:
        member = await self.get_member(member_id)
        return member.role if member else None

    async def find_eligible_approvers(self, approval_type: ApprovalType) -> list[UUID]:
        return await self._ids_with_roles(approver_role_names(approval_type))

    async def find_members_with_role(self, role_name: str) -> list[UUID]:
        return await self._ids_with_roles([role_name])

    async def find_team_heads(self) -> list[UUID]:
        return await self._ids_with_roles(TEAM_HEAD_ROLES)

    async def find_mentor_candidates(self) -> list[Member]:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(text(f"{_MEMBER_SELECT} ORDER BY r.level, m.name"))
            members = [_row_to_member(row) for row in result.fetchall()]
        return [m for m in members if m is not None]

    async def _ids_with_roles(self, role_names: Iterable[str]) -> list[UUID]:
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                text(f"{_MEMBER_SELECT} WHERE r.name = ANY(:names) ORDER BY m.id"),
                {"names": sorted(role_names)},
            )
            return [row.id for row in result.fetchall()]
