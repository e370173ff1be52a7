"""
Domain layer - Pure business logic for Branchflow.

This layer contains:
- Domain models (event proposals, approval slots, calendar counters, proctor rows)
- Pure domain services (status computation, role policy)
- Domain exceptions (the business-rule taxonomy)

CRITICAL: This layer must NOT import from application, infrastructure, or api.
Only stdlib and typing imports are allowed.
"""

from branchflow.domain.exceptions import BranchflowError

__all__: list[str] = ["BranchflowError"]
