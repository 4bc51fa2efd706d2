"""Project service layer with business logic."""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import and_, delete, desc, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.domains.lifecycle.audit import record_audit
from app.domains.lifecycle.checklist import (
    CHECKLIST_FIELDS,
    completion_percent,
    get_active_checklist,
    template_items,
)
from app.domains.lifecycle.permissions import LEAD_SLOT_ROLE, Actor, require_admin
from app.exceptions.base import ValidationError
from app.exceptions.project import (
    InvalidDeadlineError,
    LeadRoleMismatchError,
    ProjectNotFoundError,
    UserNotFoundError,
)
from app.schemas.project import ProjectCreate, ProjectFilter
from app.services.invalidation import (
    InvalidateKey,
    InvalidationEmitter,
    get_invalidation_emitter,
)
from app.shared.pagination import PaginationParams, paginate
from models.base import as_naive_utc, utcnow
from models.comment import Comment
from models.enums import LeadRole, ProjectStage
from models.history import HistoryItem
from models.project import Project
from models.score import ScoreEntry
from models.team_member import ProjectTeamMember
from models.user import User

logger = logging.getLogger(__name__)

CHILD_MODELS = (HistoryItem, ScoreEntry, Comment, ProjectTeamMember)

ACTIVE_STAGES = (
    ProjectStage.DESIGN,
    ProjectStage.DEVELOPMENT,
    ProjectStage.QA,
    ProjectStage.ADMIN_REVIEW,
)


def project_summary(project: Project) -> Dict[str, Any]:
    """Column values plus the read-time derived fields."""
    key, items = get_active_checklist(project)
    data = {
        column.name: getattr(project, column.name) for column in Project.__table__.columns
    }
    data.update(
        is_delayed=project.is_delayed,
        active_checklist=key,
        checklist_completion=completion_percent(items),
    )
    return data


class ProjectService:
    """Service class for project business logic."""

    def __init__(
        self,
        db: AsyncSession,
        actor: Actor,
        emitter: Optional[InvalidationEmitter] = None,
    ):
        self.db = db
        self.actor = actor
        self.emitter = emitter or get_invalidation_emitter()

    async def create_project(self, project_data: ProjectCreate) -> Project:
        """Create a new project in UPCOMING with template checklists, version 1."""
        require_admin(self.actor, "Only admins can create projects")

        overall_deadline = as_naive_utc(project_data.overall_deadline)
        current_deadline = (
            as_naive_utc(project_data.current_deadline)
            if project_data.current_deadline
            else overall_deadline
        )
        if overall_deadline <= utcnow():
            raise InvalidDeadlineError("Project deadline must be in the future")

        leads = {
            LeadRole.DESIGN: project_data.assigned_designer_id,
            LeadRole.DEV: project_data.assigned_dev_manager_id,
            LeadRole.QA: project_data.assigned_qa_id,
        }
        for slot, user_id in leads.items():
            if user_id is not None:
                await self._validate_lead(slot, user_id)

        project = Project(
            tenant_id=self.actor.tenant_id,
            name=project_data.name,
            client_name=project_data.client_name,
            scope=project_data.scope,
            priority=project_data.priority,
            stage=ProjectStage.UPCOMING,
            overall_deadline=overall_deadline,
            current_deadline=current_deadline,
            assigned_designer_id=leads[LeadRole.DESIGN],
            assigned_dev_manager_id=leads[LeadRole.DEV],
            assigned_qa_id=leads[LeadRole.QA],
            qa_fail_count=0,
            **{field: template_items(key) for key, field in CHECKLIST_FIELDS.items()},
        )

        try:
            self.db.add(project)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to create project: {str(e)}")

        logger.info(f"✅ Project {project.id} created by {self.actor.id}")
        self._notify({InvalidateKey.PROJECTS, InvalidateKey.PROJECT_STATS})
        return project

    async def get_project(self, project_id: UUID) -> Project:
        """Get a project by ID within the caller's tenant."""
        stmt = (
            select(Project)
            .where(and_(Project.id == project_id, Project.tenant_id == self.actor.tenant_id))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        project = result.scalar_one_or_none()
        if project is None:
            raise ProjectNotFoundError()
        return project

    async def get_projects_list(
        self,
        filters: Optional[ProjectFilter] = None,
        pagination: Optional[PaginationParams] = None,
    ) -> Dict[str, Any]:
        """Get paginated list of projects with optional filters."""

        # Build base query
        stmt = select(Project).where(Project.tenant_id == self.actor.tenant_id)

        # Add filters
        if filters:
            if filters.stage:
                stmt = stmt.where(Project.stage == filters.stage)
            if filters.priority:
                stmt = stmt.where(Project.priority == filters.priority)
            if filters.search:
                search_term = f"%{filters.search}%"
                stmt = stmt.where(
                    or_(
                        Project.name.ilike(search_term),
                        Project.client_name.ilike(search_term),
                    )
                )

        # Add ordering
        stmt = stmt.order_by(desc(Project.updated_at))

        return await paginate(self.db, stmt, pagination or PaginationParams())

    async def get_project_stats(self) -> Dict[str, Any]:
        """Get project counts for the caller's tenant."""
        tenant_filter = Project.tenant_id == self.actor.tenant_id

        by_stage_stmt = (
            select(Project.stage, func.count(Project.id)).where(tenant_filter).group_by(Project.stage)
        )
        by_stage_result = await self.db.execute(by_stage_stmt)
        by_stage = {stage.value: count for stage, count in by_stage_result.all()}

        delayed_stmt = select(func.count(Project.id)).where(
            tenant_filter,
            Project.stage != ProjectStage.COMPLETED,
            Project.current_deadline < utcnow(),
        )
        delayed_result = await self.db.execute(delayed_stmt)

        return {
            "total_projects": sum(by_stage.values()),
            "active_projects": sum(by_stage.get(stage.value, 0) for stage in ACTIVE_STAGES),
            "completed_projects": by_stage.get(ProjectStage.COMPLETED.value, 0),
            "delayed_projects": delayed_result.scalar() or 0,
            "by_stage": by_stage,
        }

    async def delete_project(self, project_id: UUID) -> bool:
        """Delete a project together with its history, scores, comments and team."""
        require_admin(self.actor, "Only admins can delete projects")
        project = await self.get_project(project_id)

        try:
            await self.delete_projects([project])
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to delete project: {str(e)}")

        logger.info(f"🗑️ Project {project_id} deleted by {self.actor.id}")
        self._notify(
            {InvalidateKey.PROJECTS, InvalidateKey.PROJECT_STATS, InvalidateKey.RANKINGS}
        )
        return True

    async def delete_projects(self, projects: list[Project]) -> None:
        """Stage deletes for ``projects`` and their children without committing."""
        project_ids = [project.id for project in projects]
        for model in CHILD_MODELS:
            await self.db.execute(delete(model).where(model.project_id.in_(project_ids)))
        for project in projects:
            record_audit(
                self.db,
                self.actor,
                "PROJECT_DELETED",
                str(project.id),
                {"name": project.name, "client_name": project.client_name},
            )
        await self.db.execute(
            delete(Project).where(
                Project.id.in_(project_ids), Project.tenant_id == self.actor.tenant_id
            )
        )

    # Private helper methods
    async def _validate_lead(self, slot: LeadRole, user_id: UUID) -> User:
        stmt = select(User).where(
            and_(User.id == user_id, User.tenant_id == self.actor.tenant_id)
        )
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError()
        if user.role != LEAD_SLOT_ROLE[slot]:
            raise LeadRoleMismatchError(
                f"User {user.name} cannot be assigned as {slot.value} lead ({user.role.value})"
            )
        return user

    def _notify(self, keys: set[InvalidateKey]) -> None:
        try:
            self.emitter.notify(self.actor.tenant_id, keys)
        except Exception:
            logger.exception(f"Invalidation emitter failed for tenant {self.actor.tenant_id}")
