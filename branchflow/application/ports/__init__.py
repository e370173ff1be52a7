"""Application ports.

Interfaces the application services depend on. Infrastructure provides the
implementations (in-memory stubs and PostgreSQL adapters).
"""

from branchflow.application.ports.approval_ledger import ApprovalLedgerProtocol
from branchflow.application.ports.calendar_slot_counter import (
    CalendarSlotCounterProtocol,
)
from branchflow.application.ports.event_repository import EventRepositoryProtocol
from branchflow.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from branchflow.application.ports.proctor_ledger import ProctorLedgerProtocol
from branchflow.application.ports.role_directory import RoleDirectoryProtocol
from branchflow.application.ports.time_authority import TimeAuthorityProtocol

__all__ = [
    "ApprovalLedgerProtocol",
    "CalendarSlotCounterProtocol",
    "EventRepositoryProtocol",
    "NotificationDispatcherProtocol",
    "ProctorLedgerProtocol",
    "RoleDirectoryProtocol",
    "TimeAuthorityProtocol",
]
