"""Stage transition engine.

The only code that changes a project's stage, lead assignments or working
deadline. Each public method validates the caller, hands a mutator to the
``VersionGuard`` and lets it commit the stage change together with the
history row and any score entries in one transaction.

Stage graph::

    UPCOMING -> DESIGN -> DEVELOPMENT -> QA -> ADMIN_REVIEW -> COMPLETED
                              ^            |
                              +------------+  (QA rejection only)

plus the admin shortcuts ``archive`` (any stage -> COMPLETED) and
``unarchive`` (COMPLETED -> ADMIN_REVIEW).
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import settings
from app.exceptions.project import (
    ChecklistIncompleteError,
    IllegalTransitionError,
    InvalidDeadlineError,
    LeadRoleMismatchError,
    LeadRoleUnfilledError,
    LifecyclePermissionError,
    UserNotFoundError,
)
from app.services.invalidation import (
    InvalidateKey,
    InvalidationEmitter,
    get_invalidation_emitter,
)
from models.base import as_naive_utc, utcnow
from models.enums import ChecklistKey, LeadRole, ProjectStage
from models.project import Project
from models.user import User

from .audit import record_audit
from .checklist import (
    checklist_key_for,
    frozen_copy,
    get_checklist,
    is_complete,
    reset_items,
    set_checklist,
)
from .history import HistoryLog
from .permissions import (
    LEAD_SLOT_FIELD,
    LEAD_SLOT_ROLE,
    Actor,
    is_stage_lead,
    lead_of,
    require_admin,
)
from .scoring import ScoringLedger, ScoringPolicy
from .version_guard import VersionGuard

logger = logging.getLogger(__name__)

FORWARD_CHAIN = [
    ProjectStage.UPCOMING,
    ProjectStage.DESIGN,
    ProjectStage.DEVELOPMENT,
    ProjectStage.QA,
    ProjectStage.ADMIN_REVIEW,
    ProjectStage.COMPLETED,
]

LEAD_LABELS = {
    LeadRole.DESIGN: "Design Lead",
    LeadRole.DEV: "Dev Lead",
    LeadRole.QA: "QA Lead",
}


def next_stage(stage: ProjectStage) -> ProjectStage | None:
    """The single forward successor of ``stage``, or None when there is none."""
    if stage not in FORWARD_CHAIN:
        return None
    index = FORWARD_CHAIN.index(stage)
    if index + 1 >= len(FORWARD_CHAIN):
        return None
    return FORWARD_CHAIN[index + 1]


def _stage_label(stage: ProjectStage) -> str:
    if stage == ProjectStage.QA:
        return "QA"
    return stage.value.replace("_", " ").title()


class StageTransitionEngine:
    """Runs lifecycle transitions for one acting user."""

    def __init__(
        self,
        db: AsyncSession,
        actor: Actor,
        emitter: InvalidationEmitter | None = None,
        policy: ScoringPolicy | None = None,
    ):
        self.db = db
        self.actor = actor
        self.guard = VersionGuard(db, actor.tenant_id, emitter or get_invalidation_emitter())
        self.history = HistoryLog(db)
        self.ledger = ScoringLedger(db, policy)

    # ------------------------------------------------------------------ #
    # Forward movement
    # ------------------------------------------------------------------ #

    async def start(self, project_id: UUID, expected_version: int) -> Project:
        """UPCOMING -> DESIGN once designer, dev manager and QA are all assigned."""
        require_admin(self.actor, "Only admins can start a project")

        async def mutate(project: Project):
            if project.stage != ProjectStage.UPCOMING:
                raise IllegalTransitionError(
                    f"Only upcoming projects can be started (current stage: {project.stage.value})"
                )
            return self._start(project)

        return await self._apply(project_id, expected_version, mutate, "start")

    async def advance(
        self, project_id: UUID, requested_stage: ProjectStage, expected_version: int
    ) -> Project:
        """Move the project one step forward along the chain.

        ``requested_stage`` must be exactly the canonical successor of the
        current stage; anything else is rejected without touching the row.
        """
        try:
            requested_stage = ProjectStage(requested_stage)
        except ValueError:
            raise IllegalTransitionError(f"Unknown stage: {requested_stage}")

        async def mutate(project: Project):
            current = project.stage
            expected_next = next_stage(current)
            if expected_next is None or requested_stage != expected_next:
                raise IllegalTransitionError(
                    f"Cannot move a project from {current.value} to {requested_stage.value}"
                )

            if current == ProjectStage.UPCOMING:
                require_admin(self.actor, "Only admins can start a project")
                return self._start(project)
            if current == ProjectStage.ADMIN_REVIEW:
                require_admin(self.actor, "Only admins can complete a project")
                return self._complete(project)

            if not (self.actor.is_admin or is_stage_lead(self.actor, project)):
                raise LifecyclePermissionError(
                    f"Only admins or the {_stage_label(current)} lead can advance this project"
                )
            if current == ProjectStage.QA:
                return self._pass_qa(project)

            self._require_active_checklist_complete(project)
            project.stage = expected_next
            self.history.append(
                project, self.actor, f"Moved to {_stage_label(expected_next)}", expected_next
            )
            return {InvalidateKey.PROJECT_STATS}

        return await self._apply(project_id, expected_version, mutate, "advance")

    async def qa_feedback(self, project_id: UUID, passed: bool, expected_version: int) -> Project:
        """Record the QA verdict for a project in QA.

        A pass moves it to ADMIN_REVIEW exactly as ``advance`` does. A
        rejection sends it back to DEVELOPMENT with a fresh dev checklist and
        a frozen copy of the QA checklist in the history entry.
        """

        async def mutate(project: Project):
            if project.stage != ProjectStage.QA:
                raise IllegalTransitionError(
                    f"QA feedback is only accepted in QA (current stage: {project.stage.value})"
                )
            if not (self.actor.is_admin or project.assigned_qa_id == self.actor.id):
                raise LifecyclePermissionError(
                    "Only admins or the assigned QA engineer can record QA feedback"
                )
            if passed:
                return self._pass_qa(project)
            return self._reject_qa(project)

        action = "qa_pass" if passed else "qa_reject"
        return await self._apply(project_id, expected_version, mutate, action)

    # ------------------------------------------------------------------ #
    # Admin overrides
    # ------------------------------------------------------------------ #

    async def archive(self, project_id: UUID, expected_version: int) -> Project:
        """Jump straight to COMPLETED without checklist checks or scoring."""
        require_admin(self.actor, "Only admins can archive projects")

        async def mutate(project: Project):
            if project.stage == ProjectStage.COMPLETED:
                raise IllegalTransitionError("Project is already completed")
            project.completed_at = utcnow()
            project.stage = ProjectStage.COMPLETED
            self.history.append(project, self.actor, "Project Archived", ProjectStage.COMPLETED)
            return {InvalidateKey.PROJECT_STATS}

        return await self._apply(project_id, expected_version, mutate, "archive")

    async def unarchive(self, project_id: UUID, expected_version: int) -> Project:
        require_admin(self.actor, "Only admins can restore archived projects")

        async def mutate(project: Project):
            if project.stage != ProjectStage.COMPLETED:
                raise IllegalTransitionError("Only completed projects can be restored")
            project.completed_at = None
            project.stage = ProjectStage.ADMIN_REVIEW
            self.history.append(
                project, self.actor, "Project Restored from Archive", ProjectStage.ADMIN_REVIEW
            )
            return {InvalidateKey.PROJECT_STATS}

        return await self._apply(project_id, expected_version, mutate, "unarchive")

    async def reassign_lead(
        self, project_id: UUID, lead_role: LeadRole, user_id: UUID, expected_version: int
    ) -> Project:
        """Put ``user_id`` into the lead slot; the user's role must fit the slot."""
        require_admin(self.actor, "Only admins can reassign project leads")
        lead_role = LeadRole(lead_role)
        user = await self._load_tenant_user(user_id)
        required_role = LEAD_SLOT_ROLE[lead_role]
        if user.role != required_role:
            raise LeadRoleMismatchError(
                f"{LEAD_LABELS[lead_role]} must be a {required_role.value} user "
                f"(got {user.role.value})"
            )
        user_name = user.name

        async def mutate(project: Project):
            previous = lead_of(project, lead_role)
            setattr(project, LEAD_SLOT_FIELD[lead_role], user_id)
            self.history.append(
                project, self.actor, f"{LEAD_LABELS[lead_role]} reassigned to {user_name}"
            )
            record_audit(
                self.db,
                self.actor,
                "LEAD_REASSIGNED",
                str(project.id),
                {
                    "lead_role": lead_role.value,
                    "previous_user_id": str(previous) if previous else None,
                    "new_user_id": str(user_id),
                },
            )
            return {InvalidateKey.NOTIFICATIONS}

        return await self._apply(project_id, expected_version, mutate, "reassign_lead")

    async def change_deadline(
        self,
        project_id: UUID,
        new_deadline: datetime,
        justification: str,
        expected_version: int,
    ) -> Project:
        """Move the working deadline. The baseline ``overall_deadline`` never changes."""
        require_admin(self.actor, "Only admins can change deadlines")
        new_deadline = as_naive_utc(new_deadline)
        reason = (justification or "").strip()
        min_length = settings.min_deadline_justification_length
        if len(reason) < min_length:
            raise InvalidDeadlineError(
                f"Justification must be at least {min_length} characters long"
            )
        if new_deadline <= utcnow():
            raise InvalidDeadlineError("New deadline must be in the future")

        async def mutate(project: Project):
            previous = project.current_deadline
            project.current_deadline = new_deadline
            self.history.append(
                project,
                self.actor,
                f"Deadline changed to {new_deadline.date().isoformat()}: {reason}",
            )
            record_audit(
                self.db,
                self.actor,
                "DEADLINE_CHANGED",
                str(project.id),
                {
                    "previous_deadline": previous.isoformat() if previous else None,
                    "new_deadline": new_deadline.isoformat(),
                    "justification": reason,
                },
            )

        return await self._apply(project_id, expected_version, mutate, "change_deadline")

    # ------------------------------------------------------------------ #
    # Transition bodies (run inside the guard)
    # ------------------------------------------------------------------ #

    def _start(self, project: Project) -> set[InvalidateKey]:
        missing = [
            LEAD_LABELS[slot] for slot in LeadRole if lead_of(project, slot) is None
        ]
        if missing:
            raise LeadRoleUnfilledError(
                f"Assign all leads before starting the project (missing: {', '.join(missing)})"
            )
        project.stage = ProjectStage.DESIGN
        self.history.append(project, self.actor, "Project Started", ProjectStage.DESIGN)
        return {InvalidateKey.PROJECT_STATS}

    def _pass_qa(self, project: Project) -> set[InvalidateKey]:
        self.ledger.require_dev_lead(project)
        self._require_active_checklist_complete(project)
        awarded = self.ledger.record_qa_pass(project)
        project.stage = ProjectStage.ADMIN_REVIEW
        self.history.append(
            project, self.actor, "QA Passed - Advanced to Admin Review", ProjectStage.ADMIN_REVIEW
        )
        keys = {InvalidateKey.PROJECT_STATS}
        if awarded:
            keys.add(InvalidateKey.RANKINGS)
        return keys

    def _reject_qa(self, project: Project) -> set[InvalidateKey]:
        self.ledger.require_dev_lead(project)
        qa_items = get_checklist(project, ChecklistKey.QA)
        snapshot = frozen_copy(qa_items)

        project.qa_fail_count = (project.qa_fail_count or 0) + 1
        set_checklist(project, ChecklistKey.DEV, reset_items(get_checklist(project, ChecklistKey.DEV)))
        set_checklist(project, ChecklistKey.QA, reset_items(qa_items))
        project.stage = ProjectStage.DEVELOPMENT

        self.ledger.record_qa_rejection(project)
        self.history.append(
            project,
            self.actor,
            "QA Failed - Returned to Development",
            ProjectStage.DEVELOPMENT,
            rejection_snapshot=snapshot,
        )
        return {
            InvalidateKey.PROJECT_STATS,
            InvalidateKey.RANKINGS,
            InvalidateKey.NOTIFICATIONS,
        }

    def _complete(self, project: Project) -> set[InvalidateKey]:
        self.ledger.require_dev_lead(project)
        self._require_active_checklist_complete(project)
        completed_at = utcnow()
        project.completed_at = completed_at
        project.stage = ProjectStage.COMPLETED
        self.ledger.record_completion(project, completed_at)
        self.history.append(project, self.actor, "Project Completed", ProjectStage.COMPLETED)
        return {InvalidateKey.PROJECT_STATS, InvalidateKey.RANKINGS}

    @staticmethod
    def _require_active_checklist_complete(project: Project) -> None:
        key = checklist_key_for(project.stage)
        if not is_complete(get_checklist(project, key)):
            raise ChecklistIncompleteError(
                f"Complete every item of the {key.value} before moving on"
            )

    async def _load_tenant_user(self, user_id: UUID) -> User:
        stmt = select(User).where(
            User.id == user_id,
            User.tenant_id == self.actor.tenant_id,
            User.is_active.is_(True),
        )
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError()
        return user

    async def _apply(self, project_id: UUID, expected_version: int, mutate, action: str) -> Project:
        project = await self.guard.apply_if_current(project_id, expected_version, mutate)
        logger.info(
            f"✅ {action} on project {project_id} by {self.actor.id}: "
            f"stage={project.stage.value} version={project.version}"
        )
        return project
