"""RFC 7807 problem responses for domain errors.

Every BranchflowError carries its HTTP status and problem type. Routes catch
BranchflowError and raise the HTTPException built here; the structured
attributes of the error become extension members of the problem document.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from fastapi import HTTPException, Request

from branchflow.domain.exceptions import BranchflowError

PROBLEM_TYPE_PREFIX = "urn:branchflow:"


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_value(v) for v in value]
    return value


def _title(exc: BranchflowError) -> str:
    return exc.problem_type.replace("-", " ").capitalize()


def problem_detail(exc: BranchflowError, request: Request) -> dict[str, Any]:
    """Build the RFC 7807 body for ``exc``."""
    detail: dict[str, Any] = {
        "type": f"{PROBLEM_TYPE_PREFIX}{exc.problem_type}",
        "title": _title(exc),
        "status": exc.http_status,
        "detail": str(exc),
        "instance": str(request.url),
        "error": type(exc).__name__,
    }
    for key, value in vars(exc).items():
        if key.startswith("_"):
            continue
        # Attributes named like a problem member (status) are reported as current_<name>
        detail[f"current_{key}" if key in detail else key] = _json_value(value)
    return detail


def problem_from_error(exc: BranchflowError, request: Request) -> HTTPException:
    """Convert a domain error into the HTTPException a route raises."""
    return HTTPException(
        status_code=exc.http_status,
        detail=problem_detail(exc, request),
    )
