"""PostgreSQL fixtures (testcontainers).

Every test module here sets ``pytestmark = pytest.mark.postgres``, which the
default addopts deselect.
Run them with ``pytest -m postgres`` on a machine with Docker.

One container is started per session; every test gets its own engine, a
freshly applied schema and truncated tables.
"""

from collections.abc import AsyncGenerator, Generator
from uuid import UUID, uuid4

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from testcontainers.postgres import PostgresContainer

from branchflow.bootstrap.database import apply_schema, create_session_factory, to_async_url
from branchflow.bootstrap.workflow import build_postgres_container
from branchflow.domain.models.role import RoleLevel, RoleName
from tests.helpers import BranchRoster, FakeTimeAuthority

TABLES = (
    "proctor_updates",
    "proctor_mappings",
    "calendar_slot_counters",
    "approval_slots",
    "event_proposals",
    "members",
    "roles",
)

ROLE_LEVELS: dict[str, RoleLevel] = {
    RoleName.SB_CHAIR: RoleLevel.SENIOR_CORE,
    RoleName.SB_SECRETARY: RoleLevel.SENIOR_CORE,
    RoleName.SB_TREASURER: RoleLevel.SENIOR_CORE,
    RoleName.SB_TECHNICAL_HEAD: RoleLevel.SENIOR_CORE,
    RoleName.SB_CONVENER: RoleLevel.SENIOR_CORE,
    RoleName.BRANCH_COUNSELLOR: RoleLevel.SENIOR_CORE,
    RoleName.CHAPTER_CHAIR: RoleLevel.CHAPTER_LEADERSHIP,
    RoleName.CHAPTER_SECRETARY: RoleLevel.CHAPTER_LEADERSHIP,
    RoleName.PR_HEAD: RoleLevel.TEAMS,
    RoleName.DESIGN_HEAD: RoleLevel.TEAMS,
    RoleName.DOCUMENTATION_HEAD: RoleLevel.TEAMS,
    RoleName.COVERAGE_HEAD: RoleLevel.TEAMS,
    "Execom Member": RoleLevel.EXECOM,
}


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """Session-scoped PostgreSQL 16 container."""
    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def postgres_async_url(postgres_container: PostgresContainer) -> str:
    return to_async_url(postgres_container.get_connection_url())


@pytest.fixture
async def session_factory(
    postgres_async_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Per-test engine over a clean schema."""
    factory = create_session_factory(postgres_async_url)
    await apply_schema(factory)
    yield factory
    async with factory() as session:
        await session.execute(text(f"TRUNCATE {', '.join(TABLES)} CASCADE"))
        await session.commit()
    await factory.kw["bind"].dispose()


class MemberSeeder:
    """Inserts roles on demand and members holding them."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._role_ids: dict[str, UUID] = {}

    async def add(self, role_name: str, chapter_id: UUID | None = None, name: str | None = None) -> UUID:
        member_id = uuid4()
        async with self._session_factory() as session:
            role_id = self._role_ids.get(role_name)
            if role_id is None:
                role_id = uuid4()
                await session.execute(
                    text("INSERT INTO roles (id, name, level) VALUES (:id, :name, :level)"),
                    {"id": role_id, "name": role_name, "level": int(ROLE_LEVELS[role_name])},
                )
                self._role_ids[role_name] = role_id
            await session.execute(
                text("""
                    INSERT INTO members (id, name, email, chapter_id, role_id)
                    VALUES (:id, :name, :email, :chapter_id, :role_id)
                """),
                {
                    "id": member_id,
                    "name": name or role_name,
                    "email": f"{member_id.hex[:8]}@branch.example",
                    "chapter_id": chapter_id,
                    "role_id": role_id,
                },
            )
            await session.commit()
        return member_id

    async def remove(self, member_id: UUID) -> None:
        async with self._session_factory() as session:
            await session.execute(text("DELETE FROM members WHERE id = :id"), {"id": member_id})
            await session.commit()


@pytest.fixture
def seeder(session_factory: async_sessionmaker[AsyncSession]) -> MemberSeeder:
    return MemberSeeder(session_factory)


@pytest.fixture
async def pg_branch(
    session_factory: async_sessionmaker[AsyncSession],
    seeder: MemberSeeder,
    fake_time_authority: FakeTimeAuthority,
) -> BranchRoster:
    """A staffed branch over the PostgreSQL adapters."""
    container = build_postgres_container(session_factory, time_authority=fake_time_authority)
    chapter_id, other_chapter_id = uuid4(), uuid4()

    roster = BranchRoster(
        container=container,
        time=fake_time_authority,
        chapter_id=chapter_id,
        other_chapter_id=other_chapter_id,
        sb_chair=await seeder.add(RoleName.SB_CHAIR),
        sb_secretary=await seeder.add(RoleName.SB_SECRETARY),
        sb_treasurer=await seeder.add(RoleName.SB_TREASURER),
        sb_technical_head=await seeder.add(RoleName.SB_TECHNICAL_HEAD),
        sb_convener=await seeder.add(RoleName.SB_CONVENER),
        counsellor=await seeder.add(RoleName.BRANCH_COUNSELLOR),
        chapter_chair=await seeder.add(RoleName.CHAPTER_CHAIR, chapter_id),
        chapter_secretary=await seeder.add(RoleName.CHAPTER_SECRETARY, chapter_id),
        other_chapter_chair=await seeder.add(RoleName.CHAPTER_CHAIR, other_chapter_id),
        team_heads=[
            await seeder.add(RoleName.PR_HEAD),
            await seeder.add(RoleName.DESIGN_HEAD),
            await seeder.add(RoleName.DOCUMENTATION_HEAD),
            await seeder.add(RoleName.COVERAGE_HEAD),
        ],
    )
    roster.execom = [
        await seeder.add("Execom Member", chapter_id, f"Member {i}") for i in range(7)
    ]
    roster.other_execom = [
        await seeder.add("Execom Member", other_chapter_id, f"Other {i}") for i in range(2)
    ]
    return roster
