"""Role checks for lifecycle operations."""

from dataclasses import dataclass
from uuid import UUID

from app.exceptions.project import LifecyclePermissionError
from models.enums import LeadRole, ProjectStage, UserRole
from models.project import Project
from models.user import User

# Lead slot that owns the work in each stage
STAGE_LEAD_SLOT = {
    ProjectStage.DESIGN: LeadRole.DESIGN,
    ProjectStage.DEVELOPMENT: LeadRole.DEV,
    ProjectStage.QA: LeadRole.QA,
}

# Only users holding this role may occupy the slot
LEAD_SLOT_ROLE = {
    LeadRole.DESIGN: UserRole.DESIGNER,
    LeadRole.DEV: UserRole.DEV_MANAGER,
    LeadRole.QA: UserRole.QA_ENGINEER,
}

LEAD_SLOT_FIELD = {
    LeadRole.DESIGN: "assigned_designer_id",
    LeadRole.DEV: "assigned_dev_manager_id",
    LeadRole.QA: "assigned_qa_id",
}


@dataclass(frozen=True)
class Actor:
    """The calling user, detached from the ORM session.

    Services keep this instead of the ``User`` row so a rollback in the
    middle of a batch cannot expire the caller's identity.
    """

    id: UUID
    tenant_id: UUID
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, tenant_id=user.tenant_id, role=user.role)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def lead_of(project: Project, slot: LeadRole) -> UUID | None:
    return getattr(project, LEAD_SLOT_FIELD[slot])


def is_stage_lead(actor: Actor, project: Project) -> bool:
    """True when the actor occupies the lead slot of the project's current stage."""
    slot = STAGE_LEAD_SLOT.get(project.stage)
    if slot is None:
        return False
    return lead_of(project, slot) == actor.id and actor.role == LEAD_SLOT_ROLE[slot]


def require_admin(actor: Actor, message: str = "Only admins can perform this action") -> None:
    if not actor.is_admin:
        raise LifecyclePermissionError(message)


def require_admin_or_stage_lead(actor: Actor, project: Project, message: str) -> None:
    if not (actor.is_admin or is_stage_lead(actor, project)):
        raise LifecyclePermissionError(message)
