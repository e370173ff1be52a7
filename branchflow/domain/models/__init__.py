"""Domain models for Branchflow."""

from branchflow.domain.models.approval_slot import (
    ApprovalDecision,
    ApprovalSlot,
    ApprovalStatus,
    ApprovalType,
)
from branchflow.domain.models.calendar_slot import (
    DEFAULT_DAILY_EVENT_CAP,
    CalendarSlotCounter,
)
from branchflow.domain.models.event_proposal import (
    APPROVED_OR_BEYOND,
    STAGE_APPROVAL_TYPE,
    TERMINAL_STATUSES,
    EventProposal,
    EventStatus,
    EventType,
)
from branchflow.domain.models.notification import Notification, NotificationKind
from branchflow.domain.models.proctor import ProctorMapping, ProctorUpdate
from branchflow.domain.models.role import Member, ResolvedRole, RoleLevel, RoleName

__all__ = [
    "APPROVED_OR_BEYOND",
    "DEFAULT_DAILY_EVENT_CAP",
    "STAGE_APPROVAL_TYPE",
    "TERMINAL_STATUSES",
    "ApprovalDecision",
    "ApprovalSlot",
    "ApprovalStatus",
    "ApprovalType",
    "CalendarSlotCounter",
    "EventProposal",
    "EventStatus",
    "EventType",
    "Member",
    "Notification",
    "NotificationKind",
    "ProctorMapping",
    "ProctorUpdate",
    "ResolvedRole",
    "RoleLevel",
    "RoleName",
]
