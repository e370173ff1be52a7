"""Role policy predicates.

Pure functions of a resolved role. Every authorization decision in the core
goes through one of these; nothing else inspects role names.
"""

from __future__ import annotations

from branchflow.domain.models.approval_slot import ApprovalType
from branchflow.domain.models.role import ResolvedRole, RoleLevel, RoleName

SENIOR_CORE_APPROVER_ROLES: frozenset[str] = frozenset(
    {
        RoleName.SB_CHAIR,
        RoleName.SB_SECRETARY,
        RoleName.SB_TREASURER,
        RoleName.SB_TECHNICAL_HEAD,
        RoleName.SB_CONVENER,
    }
)

EVENT_PROPOSER_ROLES: frozenset[str] = frozenset(
    {
        RoleName.CHAPTER_CHAIR,
        RoleName.CHAPTER_VICE_CHAIR,
        RoleName.CHAPTER_SECRETARY,
    }
)

PROCTOR_ASSIGNER_ROLES: frozenset[str] = frozenset(
    {
        RoleName.SB_CHAIR,
        RoleName.SB_SECRETARY,
        RoleName.CHAPTER_CHAIR,
    }
)

# Assigners whose authority is limited to their own chapter
CHAPTER_SCOPED_ASSIGNER_ROLES: frozenset[str] = frozenset({RoleName.CHAPTER_CHAIR})

TEAM_HEAD_ROLES: frozenset[str] = frozenset(
    {
        RoleName.PR_HEAD,
        RoleName.DESIGN_HEAD,
        RoleName.DOCUMENTATION_HEAD,
        RoleName.COVERAGE_HEAD,
    }
)

# Single role holder required for each lazily materialized stage
STAGE_ROLE_NAMES: dict[ApprovalType, str] = {
    ApprovalType.TREASURER: RoleName.SB_TREASURER,
    ApprovalType.COUNSELLOR: RoleName.BRANCH_COUNSELLOR,
}


def is_senior_core_approver(role: ResolvedRole) -> bool:
    return role.name in SENIOR_CORE_APPROVER_ROLES


def is_documentation_reviewer(role: ResolvedRole) -> bool:
    """Only the SB Secretary reviews final event documentation."""
    return role.name == RoleName.SB_SECRETARY


def can_propose_event(role: ResolvedRole) -> bool:
    return role.name in EVENT_PROPOSER_ROLES


def can_assign_proctors(role: ResolvedRole) -> bool:
    return role.name in PROCTOR_ASSIGNER_ROLES


def is_chapter_scoped_assigner(role: ResolvedRole) -> bool:
    return role.name in CHAPTER_SCOPED_ASSIGNER_ROLES


def is_team_head(role: ResolvedRole) -> bool:
    return role.name in TEAM_HEAD_ROLES


def can_view_all_proctor_updates(role: ResolvedRole) -> bool:
    return role.level == RoleLevel.SENIOR_CORE


def approver_role_names(approval_type: ApprovalType) -> frozenset[str]:
    """Role names allowed to hold a slot of the given approval type."""
    if approval_type == ApprovalType.SENIOR_CORE:
        return SENIOR_CORE_APPROVER_ROLES
    return frozenset({STAGE_ROLE_NAMES[approval_type]})


def can_approve(role: ResolvedRole, approval_type: ApprovalType) -> bool:
    """Check whether a role may ever hold a slot of the given approval type."""
    return role.name in approver_role_names(approval_type)


def level_for_role_name(role_name: str) -> RoleLevel:
    """Derive the organizational level from a role name.

    Used when a directory record carries a name but no level. Mirrors the
    naming conventions of the branch: ``SB`` prefixed officers and the
    counsellor are senior core, ``Vice`` officers are vice core, team heads
    are level 4, remaining chair/secretary/treasurer roles are chapter
    leadership and everything else is execom.
    """
    upper = role_name.upper()
    is_vice = "VICE" in upper

    if "COUNSELLOR" in upper:
        return RoleLevel.SENIOR_CORE
    if upper.startswith("SB ") and not is_vice:
        if any(
            key in upper
            for key in ("CHAIR", "SECRETARY", "TREASURER", "TECHNICAL", "CONVENER")
        ):
            return RoleLevel.SENIOR_CORE

    if is_vice and any(
        key in upper
        for key in ("CHAIR", "SECRETARY", "TREASURER", "TECHNICAL", "CONVENER")
    ):
        return RoleLevel.VICE_CORE

    if "HEAD" in upper and any(
        key in upper for key in ("PR", "DESIGN", "DOCUMENTATION", "COVERAGE")
    ):
        return RoleLevel.TEAMS

    if any(key in upper for key in ("CHAIR", "SECRETARY", "TREASURER")):
        return RoleLevel.CHAPTER_LEADERSHIP

    return RoleLevel.EXECOM
