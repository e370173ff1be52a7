"""Test helpers for Branchflow tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    BranchRoster / seed_branch: In-memory container with a staffed branch

Usage:
    from tests.helpers import FakeTimeAuthority, seed_branch
"""

from tests.helpers.branch import BranchRoster, seed_branch
from tests.helpers.fake_time_authority import FakeTimeAuthority

__all__ = ["BranchRoster", "FakeTimeAuthority", "seed_branch"]
