"""
Tenant-level audit log.

Records administrative actions (reassignments, deadline changes, team
changes, deletes and batch operations) together with the acting user.
Written in the same transaction as the action it describes.
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String

from .base import UUID, BaseModel, utcnow


class AuditLog(BaseModel):
    __tablename__ = "audit_logs"

    tenant_id = Column(UUID(), ForeignKey("tenants.id"), nullable=False, index=True)
    actor_id = Column(UUID(), ForeignKey("users.id"), nullable=False)
    action = Column(String(100), nullable=False)
    target = Column(String(255), nullable=False)
    details = Column(JSON, nullable=False, default=dict)
    timestamp = Column(DateTime, nullable=False, default=utcnow)
