"""
Score ledger model.

Entries are derived points written only as a side effect of lifecycle
transitions; there is no code path that creates or edits one directly.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel, utcnow


class ScoreEntry(BaseModel):
    __tablename__ = "score_entries"

    project_id = Column(UUID(), ForeignKey("projects.id"), nullable=False, index=True)
    tenant_id = Column(UUID(), ForeignKey("tenants.id"), nullable=False, index=True)
    user_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False, default=utcnow)
    points = Column(Integer, nullable=False)
    reason = Column(String(200), nullable=False)

    project = relationship("Project", back_populates="scores")
