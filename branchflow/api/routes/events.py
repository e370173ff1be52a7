"""Event workflow endpoints.

Proposal, approval decisions, transition retries and the documentation
stage. The caller is identified by the ``X-Member-ID`` header; role checks
are taken by the event lifecycle engine.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from structlog import get_logger

from branchflow.api.auth.member_auth import get_member_id
from branchflow.api.dependencies.workflow import get_event_lifecycle_service
from branchflow.api.errors import problem_from_error
from branchflow.api.models.common import ProblemResponse
from branchflow.api.models.event import (
    ApprovalStatusResponse,
    EventResponse,
    ProposalResponse,
    ProposeEventRequest,
    ReviewDocumentRequest,
    SubmitApprovalRequest,
    SubmitDocumentRequest,
    TransitionResponse,
)
from branchflow.application.services import EventLifecycleService
from branchflow.domain.exceptions import BranchflowError

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/events", tags=["events"])

MemberId = Annotated[UUID, Depends(get_member_id)]
Lifecycle = Annotated[EventLifecycleService, Depends(get_event_lifecycle_service)]

_ERROR_RESPONSES: dict[int | str, dict] = {
    403: {"model": ProblemResponse, "description": "Role or chapter scope does not allow the action"},
    404: {"model": ProblemResponse, "description": "Event or approval slot not found"},
    409: {"model": ProblemResponse, "description": "Wrong stage, already decided or date full"},
    422: {"model": ProblemResponse, "description": "Invalid input or unsatisfiable quorum"},
    500: {"model": ProblemResponse, "description": "Required role holder missing from the directory"},
}


@router.post(
    "",
    response_model=ProposalResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
    summary="Propose an event",
)
async def propose_event(
    request_data: ProposeEventRequest,
    request: Request,
    member_id: MemberId,
    service: Lifecycle,
) -> ProposalResponse:
    """Create a proposal and seed its senior-core approval stage.

    The response reports whether the date had room at proposal time. The
    date is only reserved on final approval.
    """
    try:
        result = await service.propose_event(
            title=request_data.title,
            proposed_date=request_data.proposed_date,
            proposer_id=member_id,
            chapter_id=request_data.chapter_id,
            event_type=request_data.event_type,
            description=request_data.description,
        )
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return ProposalResponse.from_result(result)


@router.get(
    "/{event_id}",
    response_model=EventResponse,
    responses={404: _ERROR_RESPONSES[404]},
    summary="Get an event",
)
async def get_event(event_id: UUID, request: Request, service: Lifecycle) -> EventResponse:
    try:
        event = await service.get_event(event_id)
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return EventResponse.from_event(event)


@router.get(
    "/{event_id}/approvals",
    response_model=ApprovalStatusResponse,
    responses={404: _ERROR_RESPONSES[404]},
    summary="Get the approval status of an event",
)
async def get_approval_status(
    event_id: UUID,
    request: Request,
    service: Lifecycle,
) -> ApprovalStatusResponse:
    try:
        view = await service.get_approval_status(event_id)
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return ApprovalStatusResponse.from_view(view)


@router.post(
    "/{event_id}/approvals",
    response_model=TransitionResponse,
    responses=_ERROR_RESPONSES,
    summary="Submit an approval decision",
)
async def submit_approval(
    event_id: UUID,
    request_data: SubmitApprovalRequest,
    request: Request,
    member_id: MemberId,
    service: Lifecycle,
) -> TransitionResponse:
    """Record the caller's decision on their slot for the current stage.

    A decision is kept even when the follow-up transition is refused (date
    full, SB Treasurer missing). Use retry-transition once the cause is
    resolved.
    """
    try:
        result = await service.submit_approval(
            event_id=event_id,
            approver_id=member_id,
            approval_type=request_data.approval_type,
            decision=request_data.decision,
            comment=request_data.comment,
        )
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return TransitionResponse.from_result(result)


@router.post(
    "/{event_id}/retry-transition",
    response_model=TransitionResponse,
    responses=_ERROR_RESPONSES,
    summary="Re-run the status transition of an event",
)
async def retry_transition(
    event_id: UUID,
    request: Request,
    member_id: MemberId,
    service: Lifecycle,
) -> TransitionResponse:
    logger.info("transition_retry_requested", event_id=str(event_id), member_id=str(member_id))
    try:
        result = await service.retry_transition(event_id)
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return TransitionResponse.from_result(result)


@router.post(
    "/{event_id}/documentation",
    response_model=EventResponse,
    responses={404: _ERROR_RESPONSES[404], 409: _ERROR_RESPONSES[409], 422: _ERROR_RESPONSES[422]},
    summary="Submit the final event document",
)
async def submit_final_document(
    event_id: UUID,
    request_data: SubmitDocumentRequest,
    request: Request,
    member_id: MemberId,
    service: Lifecycle,
) -> EventResponse:
    try:
        event = await service.submit_final_document(
            event_id=event_id,
            submitter_id=member_id,
            document_title=request_data.document_title,
        )
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return EventResponse.from_event(event)


@router.post(
    "/{event_id}/documentation/review",
    response_model=EventResponse,
    responses={403: _ERROR_RESPONSES[403], 404: _ERROR_RESPONSES[404], 409: _ERROR_RESPONSES[409]},
    summary="Review the final event document",
)
async def review_final_document(
    event_id: UUID,
    request_data: ReviewDocumentRequest,
    request: Request,
    member_id: MemberId,
    service: Lifecycle,
) -> EventResponse:
    """Approve (closes the event) or send back the submitted document."""
    try:
        event = await service.review_final_document(
            event_id=event_id,
            reviewer_id=member_id,
            approved=request_data.approved,
        )
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return EventResponse.from_event(event)
