"""Approver inbox endpoint."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from branchflow.api.auth.member_auth import get_member_id
from branchflow.api.dependencies.workflow import get_event_lifecycle_service
from branchflow.api.models.event import PendingApprovalResponse, PendingApprovalsResponse
from branchflow.application.services import EventLifecycleService

router = APIRouter(prefix="/v1/approvals", tags=["approvals"])


@router.get(
    "/pending",
    response_model=PendingApprovalsResponse,
    summary="List approvals waiting on the caller",
)
async def list_pending_approvals(
    member_id: Annotated[UUID, Depends(get_member_id)],
    service: Annotated[EventLifecycleService, Depends(get_event_lifecycle_service)],
) -> PendingApprovalsResponse:
    """Pending slots of the caller whose event currently waits on that stage."""
    pending = await service.list_pending_approvals(member_id)
    return PendingApprovalsResponse(
        approvals=[PendingApprovalResponse.from_pending(p) for p in pending]
    )
