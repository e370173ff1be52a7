"""
Pytest configuration and shared fixtures for Branchflow tests.

Testing Standards:
- Async tests run in pytest-asyncio auto mode (configured in pyproject.toml)
- Use AsyncMock for async collaborators that are not stubbed
- Unit tests go in tests/unit/, concurrency tests in tests/integration/
- PostgreSQL adapter tests live in tests/postgres/ and are marked ``postgres``
"""

from datetime import datetime, timezone

import pytest

from tests.helpers import BranchRoster, FakeTimeAuthority, seed_branch


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from branchflow import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Time frozen at 2026-01-01T09:00:00Z."""
    return FakeTimeAuthority(frozen_at=datetime(2026, 1, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def branch(fake_time_authority: FakeTimeAuthority) -> BranchRoster:
    """A fully staffed branch over fresh in-memory stubs."""
    return seed_branch(fake_time_authority)
