"""Shared API model types."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

# ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class ProblemDetail(BaseModel):
    """RFC 7807 problem document returned for domain errors.

    Concrete errors add their structured attributes as extension members.
    """

    type: str = Field(..., description="Problem type URN (urn:branchflow:<kind>)")
    title: str = Field(..., description="Short summary of the problem kind")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: str = Field(..., description="Request URL")
    error: str = Field(..., description="Concrete error class")


class ProblemResponse(BaseModel):
    """FastAPI HTTPException envelope around a problem document."""

    detail: ProblemDetail
