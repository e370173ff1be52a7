"""In-memory stub implementations of the application ports.

Used by the default ``memory`` storage backend and by the test suite.
"""

from branchflow.infrastructure.stubs.approval_ledger_stub import ApprovalLedgerStub
from branchflow.infrastructure.stubs.calendar_slot_counter_stub import (
    CalendarSlotCounterStub,
)
from branchflow.infrastructure.stubs.event_repository_stub import EventRepositoryStub
from branchflow.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDeliveryError,
    NotificationDispatcherStub,
)
from branchflow.infrastructure.stubs.proctor_ledger_stub import ProctorLedgerStub
from branchflow.infrastructure.stubs.role_directory_stub import RoleDirectoryStub

__all__ = [
    "ApprovalLedgerStub",
    "CalendarSlotCounterStub",
    "EventRepositoryStub",
    "NotificationDeliveryError",
    "NotificationDispatcherStub",
    "ProctorLedgerStub",
    "RoleDirectoryStub",
]
