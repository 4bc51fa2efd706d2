"""Project schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from models.enums import ChecklistKey, Priority, ProjectStage

from .base import BaseModelSchema, BaseSchema


class ChecklistItemSchema(BaseSchema):
    id: str
    label: str
    completed: bool = False


class ProjectCreate(BaseSchema):
    """Schema for creating a new project."""

    name: str = Field(..., min_length=1, max_length=255)
    client_name: str = Field(..., min_length=1, max_length=255)
    scope: str | None = None
    priority: Priority = Priority.MEDIUM
    overall_deadline: datetime
    current_deadline: datetime | None = None
    assigned_designer_id: UUID | None = None
    assigned_dev_manager_id: UUID | None = None
    assigned_qa_id: UUID | None = None

    @field_validator("name", "client_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Strip whitespace and reject blank names."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Value cannot be empty or only whitespace")
        return v


class ProjectResponse(BaseModelSchema):
    """Schema for project response."""

    tenant_id: UUID
    name: str
    client_name: str
    scope: str | None = None
    priority: Priority
    stage: ProjectStage
    overall_deadline: datetime
    current_deadline: datetime
    completed_at: datetime | None = None
    assigned_designer_id: UUID | None = None
    assigned_dev_manager_id: UUID | None = None
    assigned_qa_id: UUID | None = None
    qa_fail_count: int
    version: int
    is_delayed: bool

    # Computed fields
    active_checklist: ChecklistKey | None = None
    checklist_completion: int | None = None


class ProjectDetail(ProjectResponse):
    """Project with all four checklists."""

    design_checklist: list[ChecklistItemSchema] = []
    dev_checklist: list[ChecklistItemSchema] = []
    qa_checklist: list[ChecklistItemSchema] = []
    final_checklist: list[ChecklistItemSchema] = []


class ProjectFilter(BaseSchema):
    """Schema for filtering projects."""

    stage: ProjectStage | None = None
    priority: Priority | None = None
    search: str | None = None


class ProjectListResponse(BaseSchema):
    """Schema for project list response."""

    projects: list[ProjectResponse]
    total: int
    page: int
    size: int
    has_next: bool
    has_prev: bool


class ProjectStats(BaseSchema):
    """Schema for project statistics."""

    total_projects: int
    active_projects: int
    completed_projects: int
    delayed_projects: int
    by_stage: dict[str, int]


class HistoryItemResponse(BaseSchema):
    id: UUID
    project_id: UUID
    user_id: UUID
    stage: ProjectStage
    action: str
    timestamp: datetime
    rejection_snapshot: list[dict[str, Any]] | None = None


class ActivityItem(BaseSchema):
    id: UUID
    project_id: UUID
    project_name: str
    stage: ProjectStage
    action: str
    user_id: UUID
    timestamp: datetime


class ScoreEntryResponse(BaseSchema):
    id: UUID
    project_id: UUID
    user_id: UUID
    date: datetime
    points: int
    reason: str
