"""Project API controller with FastAPI endpoints."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_actor, get_db, get_emitter, validate_token
from app.domains.lifecycle.permissions import Actor
from app.domains.project.service import ProjectService, project_summary
from app.schemas.base import ResponseSchema
from app.schemas.project import (
    ProjectCreate,
    ProjectDetail,
    ProjectFilter,
    ProjectListResponse,
    ProjectResponse,
    ProjectStats,
)
from app.services.invalidation import InvalidationEmitter
from app.shared.pagination import PaginationParams
from models.enums import Priority, ProjectStage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_project(
    request: Request,
    project_data: ProjectCreate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    """Create a new project (admin only)."""

    service = ProjectService(db, actor, emitter)
    project = await service.create_project(project_data)

    return ResponseSchema(
        status="success",
        message="Project created successfully",
        data=ProjectDetail.model_validate(project_summary(project)).model_dump(mode="json"),
    )


@router.get("/", response_model=ProjectListResponse)
async def get_projects(
    request: Request,
    stage: Optional[ProjectStage] = Query(None),
    priority: Optional[Priority] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated list of projects with optional filters."""

    filters = ProjectFilter(stage=stage, priority=priority, search=search)
    pagination = PaginationParams(page=page, size=size)

    service = ProjectService(db, actor)
    result = await service.get_projects_list(filters=filters, pagination=pagination)

    return ProjectListResponse(
        projects=[ProjectResponse.model_validate(project_summary(p)) for p in result["items"]],
        total=result["total"],
        page=result["page"],
        size=result["size"],
        has_next=result["has_next"],
        has_prev=result["has_prev"],
    )


@router.get("/stats/summary", response_model=ResponseSchema)
async def get_project_stats(
    request: Request,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Get project statistics for the caller's tenant."""

    service = ProjectService(db, actor)
    stats = await service.get_project_stats()

    return ResponseSchema(
        status="success",
        message="Project statistics retrieved successfully",
        data=ProjectStats.model_validate(stats).model_dump(),
    )


@router.get("/{project_id}", response_model=ResponseSchema)
async def get_project(
    request: Request,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific project with all of its checklists."""

    service = ProjectService(db, actor)
    project = await service.get_project(project_id)

    return ResponseSchema(
        status="success",
        message="Project retrieved successfully",
        data=ProjectDetail.model_validate(project_summary(project)).model_dump(mode="json"),
    )


@router.delete("/{project_id}", response_model=ResponseSchema)
async def delete_project(
    request: Request,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    """Delete a project and everything attached to it (admin only, irreversible)."""

    service = ProjectService(db, actor, emitter)
    success = await service.delete_project(project_id)

    return ResponseSchema(
        status="success" if success else "error",
        message="Project deleted successfully" if success else "Failed to delete project",
        data=None,
    )
