"""
Unit tests for TeamService.
"""

import uuid

import pytest

from app.domains.lifecycle.team import TeamService
from app.exceptions.base import ConflictError, ValidationError
from app.exceptions.project import LifecyclePermissionError, TeamMemberNotFoundError
from models import LeadRole, ProjectTeamMember
from tests.helpers import audit_actions, count_rows, reload_project


class TestTeamService:
    """Test cases for team member management."""

    @pytest.mark.asyncio
    async def test_admin_adds_member(self, test_db, tenant, design_project, admin, emitter):
        tenant_id, project_id = tenant.id, design_project.id
        service = TeamService(test_db, admin, emitter)

        member = await service.add_member(
            project_id, LeadRole.DEV, "Sam Frontend", "Frontend Developer", 1
        )

        assert member.id is not None
        assert member.lead_role == LeadRole.DEV
        assert (await reload_project(test_db, project_id)).version == 2
        assert await audit_actions(test_db, tenant_id) == ["TEAM_MEMBER_ADDED"]
        members = await service.list_members(project_id)
        assert [m.name for m in members] == ["Sam Frontend"]

    @pytest.mark.asyncio
    async def test_design_lead_manages_design_team(
        self, test_db, design_project, designer_actor, emitter
    ):
        service = TeamService(test_db, designer_actor, emitter)

        member = await service.add_member(
            design_project.id, LeadRole.DESIGN, "Ivy Illustrator", "Illustrator", 1
        )

        assert member.lead_role == LeadRole.DESIGN

    @pytest.mark.asyncio
    async def test_design_lead_cannot_touch_dev_team(
        self, test_db, design_project, designer_actor, emitter
    ):
        project_id = design_project.id
        service = TeamService(test_db, designer_actor, emitter)

        with pytest.raises(LifecyclePermissionError):
            await service.add_member(project_id, LeadRole.DEV, "Nope", "Developer", 1)

        assert await count_rows(test_db, ProjectTeamMember) == 0
        assert (await reload_project(test_db, project_id)).version == 1

    @pytest.mark.asyncio
    async def test_qa_slot_has_no_team(self, test_db, design_project, admin, emitter):
        service = TeamService(test_db, admin, emitter)

        with pytest.raises(ValidationError):
            await service.add_member(design_project.id, LeadRole.QA, "Tess", "Tester", 1)

    @pytest.mark.asyncio
    async def test_update_member(self, test_db, tenant, design_project, admin, emitter):
        tenant_id, project_id = tenant.id, design_project.id
        service = TeamService(test_db, admin, emitter)
        member = await service.add_member(project_id, LeadRole.DEV, "Sam", "Developer", 1)

        updated = await service.update_member(
            project_id, member.id, 2, role_title="Senior Developer", notes="Owns the CMS"
        )

        assert updated.name == "Sam"
        assert updated.role_title == "Senior Developer"
        assert updated.notes == "Owns the CMS"
        assert (await reload_project(test_db, project_id)).version == 3
        assert (await audit_actions(test_db, tenant_id))[-1] == "TEAM_MEMBER_UPDATED"

    @pytest.mark.asyncio
    async def test_remove_member(self, test_db, design_project, admin, emitter):
        project_id = design_project.id
        service = TeamService(test_db, admin, emitter)
        member = await service.add_member(project_id, LeadRole.DEV, "Sam", "Developer", 1)

        project = await service.remove_member(project_id, member.id, 2)

        assert project.version == 3
        assert await count_rows(test_db, ProjectTeamMember) == 0

    @pytest.mark.asyncio
    async def test_remove_unknown_member(self, test_db, design_project, admin, emitter):
        service = TeamService(test_db, admin, emitter)

        with pytest.raises(TeamMemberNotFoundError):
            await service.remove_member(design_project.id, uuid.uuid4(), 1)

    @pytest.mark.asyncio
    async def test_stale_version_conflicts(self, test_db, design_project, admin, emitter):
        service = TeamService(test_db, admin, emitter)

        with pytest.raises(ConflictError):
            await service.add_member(design_project.id, LeadRole.DEV, "Sam", "Developer", 4)

        assert await count_rows(test_db, ProjectTeamMember) == 0
