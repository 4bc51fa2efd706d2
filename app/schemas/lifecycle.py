"""Request bodies for lifecycle mutations.

Every body carries ``version``: the project version the caller last read.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from models.enums import LeadRole, ProjectStage

from .base import BaseModelSchema, BaseSchema, VersionedRequest


class AdvanceStageRequest(VersionedRequest):
    next_stage: ProjectStage


class QAFeedbackRequest(VersionedRequest):
    passed: bool


class ReassignLeadRequest(VersionedRequest):
    role: LeadRole
    user_id: UUID


class ChangeDeadlineRequest(VersionedRequest):
    new_deadline: datetime
    justification: str = Field(..., max_length=1000)


class ChecklistToggleRequest(VersionedRequest):
    completed: bool


class ChecklistItemCreate(VersionedRequest):
    label: str = Field(..., min_length=1, max_length=500)

    @field_validator("label")
    @classmethod
    def validate_label(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Checklist item label cannot be empty")
        return v


class TeamMemberCreate(VersionedRequest):
    lead_role: LeadRole
    name: str = Field(..., min_length=1, max_length=255)
    role_title: str = Field(..., min_length=1, max_length=255)
    notes: str | None = None


class TeamMemberUpdate(VersionedRequest):
    name: str | None = Field(None, min_length=1, max_length=255)
    role_title: str | None = Field(None, min_length=1, max_length=255)
    notes: str | None = None


class TeamMemberResponse(BaseModelSchema):
    project_id: UUID
    lead_role: LeadRole
    name: str
    role_title: str
    notes: str | None = None


class AuditLogResponse(BaseSchema):
    id: UUID
    actor_id: UUID
    action: str
    target: str
    details: dict
    timestamp: datetime
