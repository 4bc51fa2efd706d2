"""
Tenant model.

Every user and project belongs to exactly one tenant; all reads and writes
are scoped by ``tenant_id``.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class Tenant(BaseModel):
    """An organisation whose users and projects are isolated from other tenants."""

    __tablename__ = "tenants"

    name = Column(String(255), nullable=False, unique=True)

    users = relationship("User", back_populates="tenant")
