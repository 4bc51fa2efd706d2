"""Per-project sub-teams working under the design and development leads."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.base import ValidationError
from app.exceptions.project import LifecyclePermissionError, TeamMemberNotFoundError
from app.services.invalidation import InvalidationEmitter, get_invalidation_emitter
from models.enums import LeadRole
from models.project import Project
from models.team_member import ProjectTeamMember

from .audit import record_audit
from .permissions import Actor, lead_of
from .version_guard import VersionGuard

logger = logging.getLogger(__name__)

TEAM_LEAD_ROLES = (LeadRole.DESIGN, LeadRole.DEV)


class TeamService:
    """Adds, edits and removes team members; each change bumps the project version."""

    def __init__(
        self, db: AsyncSession, actor: Actor, emitter: InvalidationEmitter | None = None
    ):
        self.db = db
        self.actor = actor
        self.guard = VersionGuard(db, actor.tenant_id, emitter or get_invalidation_emitter())

    async def list_members(self, project_id: UUID) -> list[ProjectTeamMember]:
        await self.guard.load(project_id)
        stmt = (
            select(ProjectTeamMember)
            .where(
                ProjectTeamMember.project_id == project_id,
                ProjectTeamMember.tenant_id == self.actor.tenant_id,
            )
            .order_by(ProjectTeamMember.created_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def add_member(
        self,
        project_id: UUID,
        lead_role: LeadRole,
        name: str,
        role_title: str,
        expected_version: int,
        notes: str | None = None,
    ) -> ProjectTeamMember:
        lead_role = self._team_role(lead_role)
        created: list[ProjectTeamMember] = []

        async def mutate(project: Project):
            self._require_team_manager(project, lead_role)
            member = ProjectTeamMember(
                project_id=project.id,
                tenant_id=project.tenant_id,
                lead_role=lead_role,
                name=name,
                role_title=role_title,
                notes=notes,
            )
            self.db.add(member)
            await self.db.flush()
            record_audit(
                self.db,
                self.actor,
                "TEAM_MEMBER_ADDED",
                str(project.id),
                {"member_id": str(member.id), "name": name, "lead_role": lead_role.value},
            )
            created.append(member)

        await self.guard.apply_if_current(project_id, expected_version, mutate)
        logger.info(f"✅ Team member {created[0].id} added to project {project_id}")
        return created[0]

    async def update_member(
        self,
        project_id: UUID,
        member_id: UUID,
        expected_version: int,
        name: str | None = None,
        role_title: str | None = None,
        notes: str | None = None,
    ) -> ProjectTeamMember:
        updated: list[ProjectTeamMember] = []

        async def mutate(project: Project):
            member = await self._get_member(project, member_id)
            self._require_team_manager(project, member.lead_role)
            changes = {}
            for field, value in (("name", name), ("role_title", role_title), ("notes", notes)):
                if value is not None:
                    setattr(member, field, value)
                    changes[field] = value
            record_audit(
                self.db,
                self.actor,
                "TEAM_MEMBER_UPDATED",
                str(project.id),
                {"member_id": str(member.id), "changes": changes},
            )
            updated.append(member)

        await self.guard.apply_if_current(project_id, expected_version, mutate)
        return updated[0]

    async def remove_member(
        self, project_id: UUID, member_id: UUID, expected_version: int
    ) -> Project:
        async def mutate(project: Project):
            member = await self._get_member(project, member_id)
            self._require_team_manager(project, member.lead_role)
            record_audit(
                self.db,
                self.actor,
                "TEAM_MEMBER_REMOVED",
                str(project.id),
                {"member_id": str(member.id), "name": member.name},
            )
            await self.db.delete(member)

        return await self.guard.apply_if_current(project_id, expected_version, mutate)

    async def _get_member(self, project: Project, member_id: UUID) -> ProjectTeamMember:
        stmt = select(ProjectTeamMember).where(
            ProjectTeamMember.id == member_id,
            ProjectTeamMember.project_id == project.id,
            ProjectTeamMember.tenant_id == project.tenant_id,
        )
        result = await self.db.execute(stmt)
        member = result.scalar_one_or_none()
        if member is None:
            raise TeamMemberNotFoundError()
        return member

    def _require_team_manager(self, project: Project, lead_role: LeadRole) -> None:
        if self.actor.is_admin or lead_of(project, lead_role) == self.actor.id:
            return
        raise LifecyclePermissionError(
            "Only admins or the project's lead for this team can manage its members"
        )

    @staticmethod
    def _team_role(lead_role: LeadRole) -> LeadRole:
        lead_role = LeadRole(lead_role)
        if lead_role not in TEAM_LEAD_ROLES:
            raise ValidationError("Team members can only be added under the Design or Dev lead")
        return lead_role
