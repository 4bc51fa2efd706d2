"""
Project team member model.

Team members are people working under a project's design or development
lead. They are not users of the system, only named entries on the project.
"""

from sqlalchemy import Column, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel
from .enums import LeadRole


class ProjectTeamMember(BaseModel):
    __tablename__ = "project_team_members"

    project_id = Column(UUID(), ForeignKey("projects.id"), nullable=False, index=True)
    tenant_id = Column(UUID(), ForeignKey("tenants.id"), nullable=False)
    lead_role = Column(Enum(LeadRole, native_enum=False, length=10), nullable=False)
    name = Column(String(255), nullable=False)
    role_title = Column(String(255), nullable=False)
    notes = Column(Text)

    project = relationship("Project", back_populates="team_members")
