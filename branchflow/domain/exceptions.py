"""Base exception classes for the Branchflow domain layer.

Every business-rule outcome raised by the core inherits from one of the
taxonomy classes below. The taxonomy is closed: callers (the API layer in
particular) map on these classes, never on concrete subclasses.

Persistence faults are NOT part of this taxonomy. A failing database driver
raises its own exception, which propagates unchanged.
"""

from __future__ import annotations


class BranchflowError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.

    Attributes:
        http_status: Status code used when the error crosses the HTTP boundary.
        problem_type: Suffix of the RFC 7807 ``type`` URN.
    """

    http_status: int = 400
    problem_type: str = "error"

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)


class ValidationError(BranchflowError):
    """Malformed or out-of-policy input (lead time, period length, ...)."""

    http_status = 422
    problem_type = "validation"


class PermissionDeniedError(BranchflowError):
    """The caller's role cannot perform the action."""

    http_status = 403
    problem_type = "permission-denied"


class ScopeError(BranchflowError):
    """The caller's role is right but its chapter scope does not cover the target."""

    http_status = 403
    problem_type = "scope"


class NotFoundError(BranchflowError):
    """A referenced row does not exist."""

    http_status = 404
    problem_type = "not-found"


class NotAssignedError(NotFoundError):
    """The caller has no ledger row (approval slot, proctor mapping) for the action."""

    problem_type = "not-assigned"


class ConflictError(BranchflowError):
    """A uniqueness constraint would be violated."""

    http_status = 409
    problem_type = "conflict"


class AlreadyDecidedError(ConflictError):
    """An approval slot has already been decided and is immutable."""

    problem_type = "already-decided"


class StageError(BranchflowError):
    """The action is not valid for the event's current workflow stage."""

    http_status = 409
    problem_type = "stage"


class ResourceExhaustedError(BranchflowError):
    """A capacity cap (calendar day, mentor load) has been reached."""

    http_status = 409
    problem_type = "resource-exhausted"


class CapacityExceededError(ResourceExhaustedError):
    """A mentor already carries the maximum number of mentees."""

    problem_type = "capacity-exceeded"


class ConfigurationError(BranchflowError):
    """A required singleton role holder is missing from the directory."""

    http_status = 500
    problem_type = "configuration"


class InvariantError(BranchflowError):
    """A structural precondition of the workflow cannot be met."""

    http_status = 422
    problem_type = "invariant"
