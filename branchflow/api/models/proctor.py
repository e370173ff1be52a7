"""Proctor API request/response models."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from branchflow.api.models.common import DateTimeWithZ
from branchflow.domain.models.proctor import ProctorMapping, ProctorUpdate
from branchflow.domain.models.role import Member, RoleLevel


class AssignProctorRequest(BaseModel):
    """Map a mentee to a mentor."""

    mentor_id: UUID
    mentee_id: UUID


class RecordUpdateRequest(BaseModel):
    """A mentor's periodic update about one mentee. The mentor is the caller."""

    mentee_id: UUID
    body: str = Field(..., max_length=10000)
    period_start: date
    period_end: date


class ProctorMappingResponse(BaseModel):
    id: UUID
    mentor_id: UUID
    mentee_id: UUID
    assigned_by: UUID
    created_at: DateTimeWithZ

    @classmethod
    def from_mapping(cls, mapping: ProctorMapping) -> ProctorMappingResponse:
        return cls(
            id=mapping.id,
            mentor_id=mapping.mentor_id,
            mentee_id=mapping.mentee_id,
            assigned_by=mapping.assigned_by,
            created_at=mapping.created_at,
        )


class MenteesResponse(BaseModel):
    mentor_id: UUID
    mentees: list[ProctorMappingResponse]


class ProctorUpdateResponse(BaseModel):
    id: UUID
    mentor_id: UUID
    mentee_id: UUID
    body: str
    period_start: date
    period_end: date
    created_at: DateTimeWithZ

    @classmethod
    def from_update(cls, update: ProctorUpdate) -> ProctorUpdateResponse:
        return cls(
            id=update.id,
            mentor_id=update.mentor_id,
            mentee_id=update.mentee_id,
            body=update.body,
            period_start=update.period_start,
            period_end=update.period_end,
            created_at=update.created_at,
        )


class ProctorUpdatesResponse(BaseModel):
    updates: list[ProctorUpdateResponse]


class MentorCandidateResponse(BaseModel):
    """A member who can be picked as a mentor."""

    id: UUID
    name: str
    role_name: str
    role_level: RoleLevel
    chapter_id: UUID | None

    @classmethod
    def from_member(cls, member: Member) -> MentorCandidateResponse:
        return cls(
            id=member.id,
            name=member.name,
            role_name=member.role.name,
            role_level=member.role.level,
            chapter_id=member.chapter_id,
        )


class MentorCandidatesResponse(BaseModel):
    candidates: list[MentorCandidateResponse]
