"""Shared-session unit of work for the PostgreSQL adapters.

Outside a unit of work every adapter call opens its own session and commits
when the call returns. Inside one, every adapter call reuses the unit's
session and runs in a savepoint, so the whole critical section uses a single
pooled connection and a single transaction. A failing call rolls back only
its own savepoint.

The unit's session is carried in a ContextVar, the same way the request
correlation id is carried, so adapters need no extra parameter.

Usage:
    async with unit_of_work(session_factory) as session:
        await session.execute(text("SELECT pg_advisory_xact_lock(...)"))
        await repository.save(event)  # runs on ``session``
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

_current_session: ContextVar[AsyncSession | None] = ContextVar(
    "branchflow_unit_of_work_session", default=None
)


def current_session() -> AsyncSession | None:
    """Return the session of the open unit of work, if any."""
    return _current_session.get()


@asynccontextmanager
async def unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Open a session that every adapter call in this context shares.

    The transaction is committed when the block exits, also when it exits
    with an error: writes made before a domain error (a recorded decision
    followed by a refused reservation) stay, as they do without a unit of
    work.

    Raises:
        RuntimeError: A unit of work is already open in this context.
    """
    if _current_session.get() is not None:
        raise RuntimeError("A unit of work is already open in this context")

    async with session_factory() as session:
        token = _current_session.set(session)
        try:
            yield session
        finally:
            _current_session.reset(token)
            await session.commit()


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session for one adapter call.

    Reuses the open unit of work inside a savepoint, otherwise opens a
    session of its own and commits it when the block exits cleanly.
    """
    shared = _current_session.get()
    if shared is not None:
        async with shared.begin_nested():
            yield shared
        return

    async with session_factory() as session:
        yield session
        await session.commit()
