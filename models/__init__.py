"""
Models package initialization.
"""

from .audit_log import AuditLog
from .base import Base, BaseModel
from .comment import Comment
from .enums import ChecklistKey, LeadRole, Priority, ProjectStage, UserRole
from .history import HistoryItem
from .project import Project
from .score import ScoreEntry
from .team_member import ProjectTeamMember
from .tenant import Tenant
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "Tenant",
    "User",
    "Project",
    "HistoryItem",
    "ScoreEntry",
    "Comment",
    "ProjectTeamMember",
    "AuditLog",
    # Enums
    "UserRole",
    "ProjectStage",
    "Priority",
    "LeadRole",
    "ChecklistKey",
]
