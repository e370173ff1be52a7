"""Proctor assignment endpoints.

Assigners (SB Chair, SB Secretary, chapter Chairs) map mentees to mentors;
mentors record periodic updates about their mentees.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response

from branchflow.api.auth.member_auth import get_member_id
from branchflow.api.dependencies.workflow import get_proctor_assignment_service
from branchflow.api.errors import problem_from_error
from branchflow.api.models.common import ProblemResponse
from branchflow.api.models.proctor import (
    AssignProctorRequest,
    MenteesResponse,
    MentorCandidateResponse,
    MentorCandidatesResponse,
    ProctorMappingResponse,
    ProctorUpdateResponse,
    ProctorUpdatesResponse,
    RecordUpdateRequest,
)
from branchflow.application.services import ProctorAssignmentService
from branchflow.domain.exceptions import BranchflowError

router = APIRouter(prefix="/v1/proctor", tags=["proctor"])

MemberId = Annotated[UUID, Depends(get_member_id)]
Proctors = Annotated[ProctorAssignmentService, Depends(get_proctor_assignment_service)]

_ERROR_RESPONSES: dict[int | str, dict] = {
    403: {"model": ProblemResponse, "description": "Caller may not change this mapping"},
    404: {"model": ProblemResponse, "description": "Member or mapping not found"},
    409: {"model": ProblemResponse, "description": "Mentee taken, mentor full or duplicate update"},
    422: {"model": ProblemResponse, "description": "Self-mentorship or invalid update"},
}


@router.post(
    "/mappings",
    response_model=ProctorMappingResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
    summary="Assign a mentee to a mentor",
)
async def assign_proctor(
    request_data: AssignProctorRequest,
    request: Request,
    member_id: MemberId,
    service: Proctors,
) -> ProctorMappingResponse:
    try:
        mapping = await service.assign(
            caller_id=member_id,
            mentor_id=request_data.mentor_id,
            mentee_id=request_data.mentee_id,
        )
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return ProctorMappingResponse.from_mapping(mapping)


@router.delete(
    "/mappings/{mentor_id}/{mentee_id}",
    status_code=204,
    responses=_ERROR_RESPONSES,
    summary="Remove a mentee from a mentor",
)
async def unassign_proctor(
    mentor_id: UUID,
    mentee_id: UUID,
    request: Request,
    member_id: MemberId,
    service: Proctors,
) -> Response:
    try:
        await service.unassign(caller_id=member_id, mentor_id=mentor_id, mentee_id=mentee_id)
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return Response(status_code=204)


@router.get(
    "/mentees",
    response_model=MenteesResponse,
    summary="List the mentees of a mentor",
)
async def list_mentees(
    member_id: MemberId,
    service: Proctors,
    mentor_id: Annotated[
        UUID | None, Query(description="Mentor to list, defaults to the caller")
    ] = None,
) -> MenteesResponse:
    mentor_id = mentor_id or member_id
    mappings = await service.list_mentees(mentor_id)
    return MenteesResponse(
        mentor_id=mentor_id,
        mentees=[ProctorMappingResponse.from_mapping(m) for m in mappings],
    )


@router.get(
    "/mentor-candidates",
    response_model=MentorCandidatesResponse,
    summary="List members eligible to be picked as mentors",
)
async def list_mentor_candidates(service: Proctors) -> MentorCandidatesResponse:
    members = await service.list_mentor_candidates()
    return MentorCandidatesResponse(
        candidates=[MentorCandidateResponse.from_member(m) for m in members]
    )


@router.post(
    "/updates",
    response_model=ProctorUpdateResponse,
    status_code=201,
    responses={
        404: {"model": ProblemResponse, "description": "Mentee not assigned to the caller"},
        409: _ERROR_RESPONSES[409],
        422: _ERROR_RESPONSES[422],
    },
    summary="Record a periodic update about a mentee",
)
async def record_update(
    request_data: RecordUpdateRequest,
    request: Request,
    member_id: MemberId,
    service: Proctors,
) -> ProctorUpdateResponse:
    try:
        update = await service.record_update(
            mentor_id=member_id,
            mentee_id=request_data.mentee_id,
            body=request_data.body,
            period_start=request_data.period_start,
            period_end=request_data.period_end,
        )
    except BranchflowError as e:
        raise problem_from_error(e, request) from None
    return ProctorUpdateResponse.from_update(update)


@router.get(
    "/updates",
    response_model=ProctorUpdatesResponse,
    summary="List proctor updates visible to the caller",
)
async def list_updates(
    member_id: MemberId,
    service: Proctors,
    mentee_id: Annotated[UUID | None, Query(description="Only updates about this mentee")] = None,
) -> ProctorUpdatesResponse:
    """Senior core sees every update, everyone else the updates they wrote."""
    updates = await service.list_updates(viewer_id=member_id, mentee_id=mentee_id)
    return ProctorUpdatesResponse(
        updates=[ProctorUpdateResponse.from_update(u) for u in updates]
    )
