"""Role payload normalization.

Role records reach the directory in more than one shape: a single object
``{"name": ..., "level": ...}``, a one-element list of such objects (what a
joined query returns), an already resolved ResolvedRole, or nothing at all.
normalize_role_payload folds all of them into one ResolvedRole so nothing
downstream has to care.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from branchflow.domain.models.role import ResolvedRole, RoleLevel
from branchflow.domain.services.role_policy import level_for_role_name


def normalize_role_payload(payload: Any) -> ResolvedRole | None:
    """Fold a raw role payload into a ResolvedRole.

    Args:
        payload: Mapping, single-element sequence of mappings, ResolvedRole,
            bare role name, or None.

    Returns:
        The resolved role, or None when the payload carries no role name.

    Raises:
        ValueError: A sequence payload holds more than one role, or the
            level is not a known RoleLevel.
    """
    if payload is None:
        return None
    if isinstance(payload, ResolvedRole):
        return payload
    if isinstance(payload, str):
        name = payload.strip()
        return ResolvedRole(name=name, level=level_for_role_name(name)) if name else None
    if isinstance(payload, Sequence):
        if len(payload) == 0:
            return None
        if len(payload) > 1:
            raise ValueError(f"Expected a single role, got {len(payload)}")
        return normalize_role_payload(payload[0])
    if isinstance(payload, Mapping):
        name = str(payload.get("name") or "").strip()
        if not name:
            return None
        raw_level = payload.get("level")
        level = (
            RoleLevel(int(raw_level))
            if raw_level is not None
            else level_for_role_name(name)
        )
        return ResolvedRole(name=name, level=level)
    raise ValueError(f"Unsupported role payload type: {type(payload).__name__}")
