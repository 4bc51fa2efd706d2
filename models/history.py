"""
History model: the append-only per-project timeline.

One row is written for every stage change, lead reassignment and deadline
change. Rows are never updated; they disappear only with their project.
"""

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel, utcnow
from .enums import ProjectStage


class HistoryItem(BaseModel):
    __tablename__ = "history_items"

    project_id = Column(UUID(), ForeignKey("projects.id"), nullable=False, index=True)
    tenant_id = Column(UUID(), ForeignKey("tenants.id"), nullable=False, index=True)
    user_id = Column(UUID(), ForeignKey("users.id"), nullable=False)
    stage = Column(Enum(ProjectStage, native_enum=False, length=20), nullable=False)
    action = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=utcnow, index=True)
    # Frozen copy of the QA checklist at the moment of a rejection
    rejection_snapshot = Column(JSON)

    project = relationship("Project", back_populates="history")
