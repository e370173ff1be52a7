"""Workflow and application configuration.

Workflow limits can be overridden per deployment through environment
variables. Values are validated when the config is built.

Environment Variables (Workflow):
- BRANCHFLOW_DAILY_EVENT_CAP: Approved events allowed per calendar date (default: 2)
- BRANCHFLOW_LEAD_TIME_DAYS: Minimum days between proposal and event (default: 10)
- BRANCHFLOW_MENTOR_CAPACITY: Maximum mentees per proctor (default: 5)
- BRANCHFLOW_SENIOR_CORE_QUORUM: Distinct senior-core approvals needed (default: 2)
- BRANCHFLOW_UPDATE_PERIOD_MIN_DAYS: Shortest proctor update window (default: 13)
- BRANCHFLOW_UPDATE_PERIOD_MAX_DAYS: Longest proctor update window (default: 15)

Environment Variables (Application):
- ENVIRONMENT: development | test | production (default: development)
- BRANCHFLOW_STORAGE: memory | postgres (default: memory)
- DATABASE_URL: PostgreSQL connection string, required for postgres storage
- LOG_LEVEL: Root log level (default: INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

VALID_STORAGE_BACKENDS = frozenset({"memory", "postgres"})
VALID_ENVIRONMENTS = frozenset({"development", "test", "production"})


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class WorkflowConfig:
    """Limits of the event workflow and the proctor ledger.

    Attributes:
        daily_event_cap: Approved events allowed per calendar date.
        lead_time_days: Minimum days between today and the proposed date.
        mentor_capacity: Maximum mentees per proctor.
        senior_core_quorum: Distinct senior-core approvals to leave the first stage.
        update_period_min_days: Shortest allowed proctor update window.
        update_period_max_days: Longest allowed proctor update window.
    """

    daily_event_cap: int = 2
    lead_time_days: int = 10
    mentor_capacity: int = 5
    senior_core_quorum: int = 2
    update_period_min_days: int = 13
    update_period_max_days: int = 15

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.daily_event_cap < 1:
            raise ValueError(
                f"daily_event_cap must be positive, got {self.daily_event_cap}"
            )
        if self.lead_time_days < 0:
            raise ValueError(
                f"lead_time_days must be non-negative, got {self.lead_time_days}"
            )
        if self.mentor_capacity < 1:
            raise ValueError(
                f"mentor_capacity must be positive, got {self.mentor_capacity}"
            )
        if self.senior_core_quorum < 1:
            raise ValueError(
                f"senior_core_quorum must be positive, got {self.senior_core_quorum}"
            )
        if self.update_period_min_days < 1:
            raise ValueError(
                "update_period_min_days must be positive, "
                f"got {self.update_period_min_days}"
            )
        if self.update_period_max_days < self.update_period_min_days:
            raise ValueError(
                f"update_period_max_days ({self.update_period_max_days}) must be >= "
                f"update_period_min_days ({self.update_period_min_days})"
            )

    @classmethod
    def from_environment(cls) -> WorkflowConfig:
        """Create config from environment variables with defaults."""
        return cls(
            daily_event_cap=_get_int_env("BRANCHFLOW_DAILY_EVENT_CAP", 2),
            lead_time_days=_get_int_env("BRANCHFLOW_LEAD_TIME_DAYS", 10),
            mentor_capacity=_get_int_env("BRANCHFLOW_MENTOR_CAPACITY", 5),
            senior_core_quorum=_get_int_env("BRANCHFLOW_SENIOR_CORE_QUORUM", 2),
            update_period_min_days=_get_int_env("BRANCHFLOW_UPDATE_PERIOD_MIN_DAYS", 13),
            update_period_max_days=_get_int_env("BRANCHFLOW_UPDATE_PERIOD_MAX_DAYS", 15),
        )


@dataclass(frozen=True)
class AppConfig:
    """Process-level configuration.

    Attributes:
        environment: Deployment environment, selects the log renderer.
        storage: Persistence backend, ``memory`` or ``postgres``.
        database_url: PostgreSQL connection string (postgres storage only).
        log_level: Root log level name.
    """

    environment: str = "development"
    storage: str = "memory"
    database_url: str | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.environment not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {sorted(VALID_ENVIRONMENTS)}, "
                f"got {self.environment!r}"
            )
        if self.storage not in VALID_STORAGE_BACKENDS:
            raise ValueError(
                f"storage must be one of {sorted(VALID_STORAGE_BACKENDS)}, "
                f"got {self.storage!r}"
            )
        if self.storage == "postgres" and not self.database_url:
            raise ValueError("DATABASE_URL is required when BRANCHFLOW_STORAGE=postgres")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_environment(cls) -> AppConfig:
        """Create config from environment variables with defaults."""
        return cls(
            environment=os.environ.get("ENVIRONMENT", "development").lower(),
            storage=os.environ.get("BRANCHFLOW_STORAGE", "memory").lower(),
            database_url=os.environ.get("DATABASE_URL") or None,
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


# Default production config (override through from_environment)
DEFAULT_WORKFLOW_CONFIG = WorkflowConfig()
