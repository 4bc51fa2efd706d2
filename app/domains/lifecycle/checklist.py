"""Per-stage checklists and the edits allowed on them.

Each project carries four independent checklists; the current stage decides
which one is active. The active checklist being complete is the gate for
leaving DESIGN, DEVELOPMENT, QA and ADMIN_REVIEW.
"""

import copy
import uuid
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.project import ChecklistItemNotFoundError, IllegalTransitionError
from app.services.invalidation import InvalidationEmitter, get_invalidation_emitter
from models.enums import ChecklistKey, ProjectStage
from models.project import Project

from .permissions import Actor, require_admin, require_admin_or_stage_lead
from .version_guard import VersionGuard

ChecklistItem = dict[str, Any]

CHECKLIST_TEMPLATES: dict[ChecklistKey, list[tuple[str, str]]] = {
    ChecklistKey.DESIGN: [
        ("d1", "Home page design completed and shared with the client"),
        ("d2", "Feedback received, currently working on home page revisions"),
        ("d3", "Home page design approved and final files shared with the developer"),
        ("d4", "Inner page designs completed and shared with the client"),
        ("d5", "All inner page designs approved and final files shared with the developer"),
    ],
    ChecklistKey.DEV: [
        ("dev1", "Verify WordPress setting: Site is set to discourage search engine crawling"),
        ("dev2", "All links, buttons & CTAs working correctly"),
        ("dev3", "Forms validated and submit successfully"),
        ("dev4", "Navigation menu fully functional on every page"),
        ("dev5", "All pages with real content completed and functional"),
        ("dev6", "Desktop, Tablet & Mobile layouts implemented and tested"),
        ("dev7", "No overlapping or cut-off content in any resolution"),
        ("dev8", "Mobile menu opens/closes properly"),
        ("dev9", "Caching properly configured"),
        ("dev10", "Page loading speed reasonable (performance optimized)"),
        ("dev11", "Proper heading hierarchy applied (H1 -> H2 -> H3)"),
        ("dev12", "Development completed strictly as per client guidelines"),
        ("dev13", "No open questions regarding the content or images"),
        ("dev14", "Status updated: Development Completed -> Sent to QA"),
    ],
    ChecklistKey.QA: [
        ("qa1", "Design matches the approved designs (pixel-perfect check)"),
        ("qa2", "Brand colors, fonts, and icons are applied correctly"),
        ("qa3", "Hover and active button states are implemented as per design"),
        ("qa4", "Typography and sizing are consistent throughout"),
        ("qa5", "All links, buttons, and CTAs are working correctly"),
        ("qa6", "Forms are validated and submitted successfully"),
        ("qa7", "Email notifications are delivered properly"),
        ("qa8", "Interactive elements (sliders, tabs, galleries) work smoothly"),
        ("qa9", "Navigation menu functions correctly on all pages"),
        ("qa10", "No overlapping content or layout breaking issues"),
        ("qa11", "Proper spacing, padding, and alignment maintained across devices"),
        ("qa12", "Touch elements are fully usable on mobile"),
        ("qa13", "Images are optimized (WebP or compressed formats)"),
        ("qa14", "Pages load within reasonable time limits"),
        ("qa15", "Cache settings are properly applied"),
        ("qa16", "Lazy loading is enabled for media where required"),
        ("qa17", "SSL is active and HTTPS secure padlock visible"),
        ("qa18", "No console errors present in browser developer tools"),
        ("qa19", "Correct heading structure maintained (H1 -> H2 -> H3)"),
        ("qa20", "Meta titles and descriptions assigned for key pages"),
        ("qa21", "Sitemap and robots configurations working properly"),
        ("qa22", "No broken links (404 check validated)"),
        ("qa23", "Content reviewed for grammar, spelling, and accuracy"),
        ("qa24", "Cross-browser testing completed (Chrome, Firefox, Edge, Safari)"),
        ("qa25", "All pages contain final approved content and function properly"),
        ("qa26", "Desktop, tablet, and mobile layouts implemented and verified"),
        ("qa27", "Favicon added and visible on all devices"),
        ("qa28", "No open questions regarding the content or images"),
        ("qa29", "Project marked as QA Completed in the project management system"),
    ],
    ChecklistKey.FINAL: [
        ("f1", "Final Quality Polish & UI Checks"),
        ("f2", "Content Consistency & Spelling Verify"),
        ("f3", "Responsive Testing across all screens"),
        ("f4", "Functionality & Form Validation Final"),
        ("f5", "Client Communication Ready (Email/Files)"),
    ],
}

CHECKLIST_FIELDS = {
    ChecklistKey.DESIGN: "design_checklist",
    ChecklistKey.DEV: "dev_checklist",
    ChecklistKey.QA: "qa_checklist",
    ChecklistKey.FINAL: "final_checklist",
}

STAGE_CHECKLIST = {
    ProjectStage.DESIGN: ChecklistKey.DESIGN,
    ProjectStage.DEVELOPMENT: ChecklistKey.DEV,
    ProjectStage.QA: ChecklistKey.QA,
}


def template_items(key: ChecklistKey) -> list[ChecklistItem]:
    return [
        {"id": item_id, "label": label, "completed": False}
        for item_id, label in CHECKLIST_TEMPLATES[key]
    ]


def checklist_key_for(stage: ProjectStage) -> ChecklistKey:
    """Everything outside DESIGN/DEVELOPMENT/QA works off the final checklist."""
    return STAGE_CHECKLIST.get(stage, ChecklistKey.FINAL)


def get_checklist(project: Project, key: ChecklistKey) -> list[ChecklistItem]:
    return list(getattr(project, CHECKLIST_FIELDS[key]) or [])


def set_checklist(project: Project, key: ChecklistKey, items: list[ChecklistItem]) -> None:
    # Always a new list object so the JSON column is flagged as changed
    setattr(project, CHECKLIST_FIELDS[key], [dict(item) for item in items])


def get_active_checklist(project: Project) -> tuple[ChecklistKey, list[ChecklistItem]]:
    key = checklist_key_for(project.stage)
    return key, get_checklist(project, key)


def is_complete(items: list[ChecklistItem]) -> bool:
    return len(items) > 0 and all(item.get("completed") for item in items)


def completion_percent(items: list[ChecklistItem]) -> int:
    if not items:
        return 0
    done = sum(1 for item in items if item.get("completed"))
    return round(done * 100 / len(items))


def reset_items(items: list[ChecklistItem]) -> list[ChecklistItem]:
    return [{**item, "completed": False} for item in items]


def frozen_copy(items: list[ChecklistItem]) -> list[ChecklistItem]:
    """Deep copy for audit snapshots; later checklist edits must not reach it."""
    return copy.deepcopy(items)


class ChecklistService:
    """Version-guarded edits to a project's active checklist."""

    def __init__(
        self, db: AsyncSession, actor: Actor, emitter: InvalidationEmitter | None = None
    ):
        self.db = db
        self.actor = actor
        self.guard = VersionGuard(db, actor.tenant_id, emitter or get_invalidation_emitter())

    async def toggle_item(
        self, project_id: UUID, item_id: str, completed: bool, expected_version: int
    ) -> Project:
        """Mark one item of the active checklist (un)done.

        Only an admin, or the lead of the stage the project is in, may toggle.
        """

        async def mutate(project: Project):
            require_admin_or_stage_lead(
                self.actor,
                project,
                "Only admins or the lead of the current stage can update this checklist",
            )
            key, items = get_active_checklist(project)
            item = next((i for i in items if i.get("id") == item_id), None)
            if item is None:
                raise ChecklistItemNotFoundError()
            set_checklist(
                project,
                key,
                [{**i, "completed": completed} if i.get("id") == item_id else i for i in items],
            )

        return await self.guard.apply_if_current(project_id, expected_version, mutate)

    async def add_item(self, project_id: UUID, label: str, expected_version: int) -> Project:
        """Append a custom item to the active checklist (admins, not while UPCOMING)."""
        require_admin(self.actor, "Only admins can add checklist items")

        async def mutate(project: Project):
            self._ensure_editable(project)
            key, items = get_active_checklist(project)
            items.append({"id": f"custom-{uuid.uuid4().hex[:12]}", "label": label, "completed": False})
            set_checklist(project, key, items)

        return await self.guard.apply_if_current(project_id, expected_version, mutate)

    async def remove_item(self, project_id: UUID, item_id: str, expected_version: int) -> Project:
        require_admin(self.actor, "Only admins can remove checklist items")

        async def mutate(project: Project):
            self._ensure_editable(project)
            key, items = get_active_checklist(project)
            remaining = [i for i in items if i.get("id") != item_id]
            if len(remaining) == len(items):
                raise ChecklistItemNotFoundError()
            set_checklist(project, key, remaining)

        return await self.guard.apply_if_current(project_id, expected_version, mutate)

    @staticmethod
    def _ensure_editable(project: Project) -> None:
        if project.stage == ProjectStage.UPCOMING:
            raise IllegalTransitionError("Checklists cannot be edited before the project starts")
