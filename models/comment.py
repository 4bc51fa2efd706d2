"""
Comment model.

Free-form discussion on a project. Comments carry no lifecycle meaning and
are kept apart from the history timeline.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel, utcnow


class Comment(BaseModel):
    __tablename__ = "comments"

    project_id = Column(UUID(), ForeignKey("projects.id"), nullable=False, index=True)
    tenant_id = Column(UUID(), ForeignKey("tenants.id"), nullable=False)
    user_id = Column(UUID(), ForeignKey("users.id"), nullable=False)
    text = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=utcnow)

    project = relationship("Project", back_populates="comments")
