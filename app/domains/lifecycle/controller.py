"""Lifecycle API controller: stage transitions, checklists, team and timelines."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.dependencies import get_current_actor, get_db, get_emitter, validate_token
from app.domains.lifecycle.checklist import ChecklistService
from app.domains.lifecycle.history import HistoryLog
from app.domains.lifecycle.permissions import Actor, require_admin
from app.domains.lifecycle.scoring import ScoringLedger
from app.domains.lifecycle.team import TeamService
from app.domains.lifecycle.transitions import StageTransitionEngine
from app.domains.project.service import ProjectService, project_summary
from app.schemas.base import ResponseSchema, VersionedRequest
from app.schemas.lifecycle import (
    AdvanceStageRequest,
    AuditLogResponse,
    ChangeDeadlineRequest,
    ChecklistItemCreate,
    ChecklistToggleRequest,
    QAFeedbackRequest,
    ReassignLeadRequest,
    TeamMemberCreate,
    TeamMemberResponse,
    TeamMemberUpdate,
)
from app.schemas.project import (
    ActivityItem,
    HistoryItemResponse,
    ProjectDetail,
    ScoreEntryResponse,
)
from app.services.invalidation import InvalidationEmitter
from models.audit_log import AuditLog
from models.project import Project

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/projects",
    tags=["lifecycle"],
    dependencies=[Depends(validate_token)],
)

feed_router = APIRouter(
    prefix="/api",
    tags=["activity"],
    dependencies=[Depends(validate_token)],
)


def _project_response(project: Project, message: str) -> ResponseSchema:
    return ResponseSchema(
        status="success",
        message=message,
        data=ProjectDetail.model_validate(project_summary(project)).model_dump(mode="json"),
    )


# ---------------------------------------------------------------------- #
# Stage transitions
# ---------------------------------------------------------------------- #


@router.post("/{project_id}/start", response_model=ResponseSchema)
async def start_project(
    body: VersionedRequest,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    """Start an upcoming project once all three leads are assigned."""
    engine = StageTransitionEngine(db, actor, emitter)
    project = await engine.start(project_id, body.version)
    return _project_response(project, "Project started")


@router.post("/{project_id}/advance-stage", response_model=ResponseSchema)
async def advance_stage(
    body: AdvanceStageRequest,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    """Move the project to the next stage of the pipeline."""
    engine = StageTransitionEngine(db, actor, emitter)
    project = await engine.advance(project_id, body.next_stage, body.version)
    return _project_response(project, f"Project moved to {project.stage.value}")


@router.post("/{project_id}/qa-feedback", response_model=ResponseSchema)
async def qa_feedback(
    body: QAFeedbackRequest,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    """Pass or reject a project in QA."""
    engine = StageTransitionEngine(db, actor, emitter)
    project = await engine.qa_feedback(project_id, body.passed, body.version)
    message = "QA passed" if body.passed else "QA rejected, project returned to development"
    return _project_response(project, message)


@router.post("/{project_id}/archive", response_model=ResponseSchema)
async def archive_project(
    body: VersionedRequest,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    engine = StageTransitionEngine(db, actor, emitter)
    project = await engine.archive(project_id, body.version)
    return _project_response(project, "Project archived")


@router.post("/{project_id}/unarchive", response_model=ResponseSchema)
async def unarchive_project(
    body: VersionedRequest,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    engine = StageTransitionEngine(db, actor, emitter)
    project = await engine.unarchive(project_id, body.version)
    return _project_response(project, "Project restored from archive")


@router.patch("/{project_id}/reassign-lead", response_model=ResponseSchema)
async def reassign_lead(
    body: ReassignLeadRequest,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    engine = StageTransitionEngine(db, actor, emitter)
    project = await engine.reassign_lead(project_id, body.role, body.user_id, body.version)
    return _project_response(project, "Lead reassigned")


@router.patch("/{project_id}/change-deadline", response_model=ResponseSchema)
async def change_deadline(
    body: ChangeDeadlineRequest,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    engine = StageTransitionEngine(db, actor, emitter)
    project = await engine.change_deadline(
        project_id, body.new_deadline, body.justification, body.version
    )
    return _project_response(project, "Deadline updated")


# ---------------------------------------------------------------------- #
# Checklist
# ---------------------------------------------------------------------- #


@router.patch("/{project_id}/checklist/items/{item_id}", response_model=ResponseSchema)
async def toggle_checklist_item(
    body: ChecklistToggleRequest,
    project_id: UUID = Path(..., description="Project ID"),
    item_id: str = Path(..., description="Checklist item ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    service = ChecklistService(db, actor, emitter)
    project = await service.toggle_item(project_id, item_id, body.completed, body.version)
    return _project_response(project, "Checklist updated")


@router.post("/{project_id}/checklist/items", response_model=ResponseSchema, status_code=201)
async def add_checklist_item(
    body: ChecklistItemCreate,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    service = ChecklistService(db, actor, emitter)
    project = await service.add_item(project_id, body.label, body.version)
    return _project_response(project, "Checklist item added")


@router.delete("/{project_id}/checklist/items/{item_id}", response_model=ResponseSchema)
async def remove_checklist_item(
    project_id: UUID = Path(..., description="Project ID"),
    item_id: str = Path(..., description="Checklist item ID"),
    version: int = Query(..., description="Project version last read by the caller"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    service = ChecklistService(db, actor, emitter)
    project = await service.remove_item(project_id, item_id, version)
    return _project_response(project, "Checklist item removed")


# ---------------------------------------------------------------------- #
# Team members
# ---------------------------------------------------------------------- #


@router.get("/{project_id}/team-members", response_model=ResponseSchema)
async def list_team_members(
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    members = await TeamService(db, actor).list_members(project_id)
    return ResponseSchema(
        status="success",
        data=[TeamMemberResponse.model_validate(m).model_dump(mode="json") for m in members],
    )


@router.post("/{project_id}/team-members", response_model=ResponseSchema, status_code=201)
async def add_team_member(
    body: TeamMemberCreate,
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    member = await TeamService(db, actor, emitter).add_member(
        project_id, body.lead_role, body.name, body.role_title, body.version, notes=body.notes
    )
    return ResponseSchema(
        status="success",
        message="Team member added",
        data=TeamMemberResponse.model_validate(member).model_dump(mode="json"),
    )


@router.patch("/{project_id}/team-members/{member_id}", response_model=ResponseSchema)
async def update_team_member(
    body: TeamMemberUpdate,
    project_id: UUID = Path(..., description="Project ID"),
    member_id: UUID = Path(..., description="Team member ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    member = await TeamService(db, actor, emitter).update_member(
        project_id,
        member_id,
        body.version,
        name=body.name,
        role_title=body.role_title,
        notes=body.notes,
    )
    return ResponseSchema(
        status="success",
        message="Team member updated",
        data=TeamMemberResponse.model_validate(member).model_dump(mode="json"),
    )


@router.delete("/{project_id}/team-members/{member_id}", response_model=ResponseSchema)
async def remove_team_member(
    project_id: UUID = Path(..., description="Project ID"),
    member_id: UUID = Path(..., description="Team member ID"),
    version: int = Query(..., description="Project version last read by the caller"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    emitter: InvalidationEmitter = Depends(get_emitter),
):
    project = await TeamService(db, actor, emitter).remove_member(project_id, member_id, version)
    return _project_response(project, "Team member removed")


# ---------------------------------------------------------------------- #
# Timelines
# ---------------------------------------------------------------------- #


@router.get("/{project_id}/history", response_model=ResponseSchema)
async def get_project_history(
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    await ProjectService(db, actor).get_project(project_id)
    items = await HistoryLog(db).for_project(project_id, actor.tenant_id)
    return ResponseSchema(
        status="success",
        data=[HistoryItemResponse.model_validate(i).model_dump(mode="json") for i in items],
    )


@router.get("/{project_id}/scores", response_model=ResponseSchema)
async def get_project_scores(
    project_id: UUID = Path(..., description="Project ID"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    await ProjectService(db, actor).get_project(project_id)
    entries = await ScoringLedger(db).for_project(project_id, actor.tenant_id)
    return ResponseSchema(
        status="success",
        data=[ScoreEntryResponse.model_validate(e).model_dump(mode="json") for e in entries],
    )


@feed_router.get("/activity", response_model=ResponseSchema)
async def get_activity_feed(
    limit: int = Query(100, ge=1, le=200),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Latest history entries across the tenant's projects."""
    items = await HistoryLog(db).activity_feed(actor.tenant_id, limit=limit)
    return ResponseSchema(
        status="success",
        data=[ActivityItem.model_validate(i).model_dump(mode="json") for i in items],
    )


@feed_router.get("/scores", response_model=ResponseSchema)
async def get_tenant_scores(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    entries = await ScoringLedger(db).for_tenant(actor.tenant_id)
    return ResponseSchema(
        status="success",
        data=[ScoreEntryResponse.model_validate(e).model_dump(mode="json") for e in entries],
    )


@feed_router.get("/audit-logs", response_model=ResponseSchema)
async def get_audit_logs(
    limit: int = Query(100, ge=1, le=500),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Tenant audit trail, newest first (admin only)."""
    require_admin(actor, "Only admins can view the audit log")
    stmt = (
        select(AuditLog)
        .where(AuditLog.tenant_id == actor.tenant_id)
        .order_by(desc(AuditLog.timestamp))
        .limit(limit)
    )
    result = await db.execute(stmt)
    return ResponseSchema(
        status="success",
        data=[
            AuditLogResponse.model_validate(entry).model_dump(mode="json")
            for entry in result.scalars().all()
        ],
    )
