"""Fixtures for API route tests.

The app is exercised through TestClient without entering its lifespan, so
no logging configuration or schema application happens. A seeded memory
container is installed as the process-wide container for each test.
"""

from collections.abc import Callable, Iterator
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from branchflow.api.main import app
from branchflow.bootstrap import reset_workflow_container, set_workflow_container
from tests.helpers import BranchRoster, FakeTimeAuthority, seed_branch


@pytest.fixture
def api_branch(fake_time_authority: FakeTimeAuthority) -> Iterator[BranchRoster]:
    roster = seed_branch(fake_time_authority)
    set_workflow_container(roster.container)
    yield roster
    reset_workflow_container()


@pytest.fixture
def client(api_branch: BranchRoster) -> TestClient:
    return TestClient(app)


@pytest.fixture
def as_member() -> Callable[[UUID], dict[str, str]]:
    """Build the identity header for a member."""

    def _headers(member_id: UUID) -> dict[str, str]:
        return {"X-Member-ID": str(member_id)}

    return _headers
