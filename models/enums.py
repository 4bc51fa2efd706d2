"""Enumerations shared by the ORM models and the API schemas."""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    DESIGNER = "DESIGNER"
    DEV_MANAGER = "DEV_MANAGER"
    QA_ENGINEER = "QA_ENGINEER"


class ProjectStage(str, Enum):
    UPCOMING = "UPCOMING"
    DESIGN = "DESIGN"
    DEVELOPMENT = "DEVELOPMENT"
    QA = "QA"
    ADMIN_REVIEW = "ADMIN_REVIEW"
    SEND_TO_CLIENT = "SEND_TO_CLIENT"
    SENT_TO_CLIENT = "SENT_TO_CLIENT"
    COMPLETED = "COMPLETED"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class LeadRole(str, Enum):
    """Lead slots on a project; each slot only accepts one user role."""

    DESIGN = "DESIGN"
    DEV = "DEV"
    QA = "QA"


class ChecklistKey(str, Enum):
    DESIGN = "designChecklist"
    DEV = "devChecklist"
    QA = "qaChecklist"
    FINAL = "finalChecklist"
