"""Calling member identity.

Authentication happens in front of Branchflow. The authenticated member id is
forwarded in the ``X-Member-ID`` header and every authorization decision is
taken by the services from the member's directory role.
"""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Header, HTTPException, status

logger = structlog.get_logger(__name__)

MEMBER_HEADER = "X-Member-ID"


def get_member_id(
    x_member_id: Annotated[
        str | None,
        Header(description="Identity of the authenticated member making the call."),
    ] = None,
) -> UUID:
    """Extract the calling member id from the request headers.

    Raises:
        HTTPException 401: Header missing.
        HTTPException 400: Header is not a UUID.
    """
    if not x_member_id:
        logger.warning("auth_failed", reason="missing_member_id")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"{MEMBER_HEADER} header is required",
        )

    try:
        return UUID(x_member_id)
    except ValueError:
        logger.warning("auth_failed", reason="invalid_member_id", member_id=x_member_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {MEMBER_HEADER} format (must be UUID)",
        ) from None
