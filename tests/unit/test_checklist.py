"""
Unit tests for checklist helpers and ChecklistService.
"""

import pytest

from app.domains.lifecycle.checklist import (
    CHECKLIST_TEMPLATES,
    ChecklistService,
    checklist_key_for,
    completion_percent,
    frozen_copy,
    get_active_checklist,
    get_checklist,
    is_complete,
    reset_items,
    template_items,
)
from app.exceptions.base import ConflictError
from app.exceptions.project import (
    ChecklistItemNotFoundError,
    IllegalTransitionError,
    LifecyclePermissionError,
)
from models import ChecklistKey, ProjectStage
from tests.helpers import history_for, reload_project


class TestChecklistHelpers:
    """Test cases for the pure checklist functions."""

    def test_templates_have_expected_sizes(self):
        assert len(CHECKLIST_TEMPLATES[ChecklistKey.DESIGN]) == 5
        assert len(CHECKLIST_TEMPLATES[ChecklistKey.DEV]) == 14
        assert len(CHECKLIST_TEMPLATES[ChecklistKey.QA]) == 29
        assert len(CHECKLIST_TEMPLATES[ChecklistKey.FINAL]) == 5

    def test_template_items_start_open(self):
        items = template_items(ChecklistKey.FINAL)

        assert [i["id"] for i in items] == ["f1", "f2", "f3", "f4", "f5"]
        assert not any(i["completed"] for i in items)

    def test_template_items_are_independent_copies(self):
        first = template_items(ChecklistKey.DESIGN)
        first[0]["completed"] = True

        assert template_items(ChecklistKey.DESIGN)[0]["completed"] is False

    @pytest.mark.parametrize(
        "stage,key",
        [
            (ProjectStage.DESIGN, ChecklistKey.DESIGN),
            (ProjectStage.DEVELOPMENT, ChecklistKey.DEV),
            (ProjectStage.QA, ChecklistKey.QA),
            (ProjectStage.ADMIN_REVIEW, ChecklistKey.FINAL),
            (ProjectStage.UPCOMING, ChecklistKey.FINAL),
            (ProjectStage.COMPLETED, ChecklistKey.FINAL),
        ],
    )
    def test_active_checklist_for_stage(self, stage, key):
        assert checklist_key_for(stage) == key

    def test_empty_checklist_is_never_complete(self):
        assert is_complete([]) is False

    def test_is_complete(self):
        items = [{"id": "a", "completed": True}, {"id": "b", "completed": False}]

        assert is_complete(items) is False
        assert is_complete(reset_items(items)) is False
        assert is_complete([{**i, "completed": True} for i in items]) is True

    def test_completion_percent(self):
        items = [{"id": str(n), "completed": n < 1} for n in range(3)]

        assert completion_percent(items) == 33
        assert completion_percent([]) == 0

    def test_frozen_copy_is_deep(self):
        items = [{"id": "qa1", "label": "Check", "completed": True}]
        snapshot = frozen_copy(items)

        items[0]["completed"] = False

        assert snapshot[0]["completed"] is True


class TestChecklistService:
    """Test cases for version-guarded checklist edits."""

    @pytest.mark.asyncio
    async def test_stage_lead_toggles_item(self, test_db, design_project, designer_actor, emitter):
        project_id = design_project.id
        service = ChecklistService(test_db, designer_actor, emitter)

        result = await service.toggle_item(project_id, "d2", True, 1)

        items = get_checklist(result, ChecklistKey.DESIGN)
        assert [i["id"] for i in items if i["completed"]] == ["d2"]
        assert result.version == 2
        # Toggles are not timeline events
        assert await history_for(test_db, project_id) == []

    @pytest.mark.asyncio
    async def test_toggle_back_to_open(self, test_db, design_project, admin, emitter):
        service = ChecklistService(test_db, admin, emitter)
        await service.toggle_item(design_project.id, "d1", True, 1)

        result = await service.toggle_item(design_project.id, "d1", False, 2)

        assert not any(i["completed"] for i in get_checklist(result, ChecklistKey.DESIGN))
        assert result.version == 3

    @pytest.mark.asyncio
    async def test_toggle_with_stale_version_conflicts(
        self, test_db, design_project, designer_actor, emitter
    ):
        project_id = design_project.id
        service = ChecklistService(test_db, designer_actor, emitter)
        await service.toggle_item(project_id, "d1", True, 1)

        with pytest.raises(ConflictError) as exc_info:
            await service.toggle_item(project_id, "d2", True, 1)

        assert exc_info.value.current_version == 2
        stored = await reload_project(test_db, project_id)
        assert [i["id"] for i in stored.design_checklist if i["completed"]] == ["d1"]

    @pytest.mark.asyncio
    async def test_other_lead_cannot_toggle(self, test_db, design_project, qa_actor, emitter):
        project_id = design_project.id
        service = ChecklistService(test_db, qa_actor, emitter)

        with pytest.raises(LifecyclePermissionError):
            await service.toggle_item(project_id, "d1", True, 1)

        stored = await reload_project(test_db, project_id)
        assert stored.version == 1

    @pytest.mark.asyncio
    async def test_unknown_item(self, test_db, design_project, admin, emitter):
        service = ChecklistService(test_db, admin, emitter)

        with pytest.raises(ChecklistItemNotFoundError):
            await service.toggle_item(design_project.id, "qa1", True, 1)

    @pytest.mark.asyncio
    async def test_admin_adds_custom_item(self, test_db, design_project, admin, emitter):
        service = ChecklistService(test_db, admin, emitter)

        result = await service.add_item(design_project.id, "Client signed off on colours", 1)

        key, items = get_active_checklist(result)
        assert key == ChecklistKey.DESIGN
        assert len(items) == 6
        assert items[-1]["label"] == "Client signed off on colours"
        assert items[-1]["id"].startswith("custom-")
        assert items[-1]["completed"] is False

    @pytest.mark.asyncio
    async def test_added_item_reopens_checklist(self, test_db, tenant, designer, admin, emitter):
        from tests.factories import create_project

        project = await create_project(
            test_db,
            tenant.id,
            stage=ProjectStage.DESIGN,
            designer=designer,
            complete=(ChecklistKey.DESIGN,),
        )
        service = ChecklistService(test_db, admin, emitter)

        result = await service.add_item(project.id, "One more revision round", 1)

        assert is_complete(get_checklist(result, ChecklistKey.DESIGN)) is False

    @pytest.mark.asyncio
    async def test_admin_removes_item(self, test_db, design_project, admin, emitter):
        service = ChecklistService(test_db, admin, emitter)

        result = await service.remove_item(design_project.id, "d5", 1)

        assert [i["id"] for i in get_checklist(result, ChecklistKey.DESIGN)] == [
            "d1",
            "d2",
            "d3",
            "d4",
        ]

    @pytest.mark.asyncio
    async def test_remove_unknown_item(self, test_db, design_project, admin, emitter):
        service = ChecklistService(test_db, admin, emitter)

        with pytest.raises(ChecklistItemNotFoundError):
            await service.remove_item(design_project.id, "nope", 1)

    @pytest.mark.asyncio
    async def test_lead_cannot_add_items(self, test_db, design_project, designer_actor, emitter):
        service = ChecklistService(test_db, designer_actor, emitter)

        with pytest.raises(LifecyclePermissionError):
            await service.add_item(design_project.id, "Sneaky item", 1)

    @pytest.mark.asyncio
    async def test_upcoming_checklists_are_locked(self, test_db, staffed_project, admin, emitter):
        service = ChecklistService(test_db, admin, emitter)

        with pytest.raises(IllegalTransitionError):
            await service.add_item(staffed_project.id, "Too early", 1)
