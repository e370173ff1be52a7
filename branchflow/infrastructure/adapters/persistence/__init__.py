"""PostgreSQL persistence adapters (SQLAlchemy async + asyncpg)."""

from branchflow.infrastructure.adapters.persistence.approval_ledger import (
    PostgresApprovalLedger,
)
from branchflow.infrastructure.adapters.persistence.calendar_slot_counter import (
    PostgresCalendarSlotCounter,
)
from branchflow.infrastructure.adapters.persistence.event_repository import (
    PostgresEventRepository,
)
from branchflow.infrastructure.adapters.persistence.proctor_ledger import (
    PostgresProctorLedger,
)
from branchflow.infrastructure.adapters.persistence.role_directory import (
    PostgresRoleDirectory,
)

__all__ = [
    "PostgresApprovalLedger",
    "PostgresCalendarSlotCounter",
    "PostgresEventRepository",
    "PostgresProctorLedger",
    "PostgresRoleDirectory",
]
