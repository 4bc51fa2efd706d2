"""Batch operation schemas."""

from __future__ import annotations

from enum import Enum
from uuid import UUID

from pydantic import Field

from models.enums import LeadRole, ProjectStage

from .base import BaseSchema


class BatchOperation(str, Enum):
    UPDATE_STAGE = "UPDATE_STAGE"
    ASSIGN_USER = "ASSIGN_USER"
    ARCHIVE = "ARCHIVE"
    DELETE = "DELETE"


class BatchPayload(BaseSchema):
    """Operation arguments; which fields are required depends on the operation."""

    stage: ProjectStage | None = None
    role: LeadRole | None = None
    user_id: UUID | None = None


class BatchRequest(BaseSchema):
    operation: BatchOperation
    project_ids: list[UUID] = Field(..., min_length=1)
    payload: BatchPayload = Field(default_factory=BatchPayload)
    # Versions the caller last read, keyed by project id
    versions: dict[UUID, int] = Field(default_factory=dict)


class BatchItemResult(BaseSchema):
    project_id: UUID
    success: bool
    error: str | None = None
    error_code: str | None = None


class BatchResult(BaseSchema):
    success: bool
    operation: BatchOperation
    total_requested: int
    total_succeeded: int
    total_failed: int
    results: list[BatchItemResult]
