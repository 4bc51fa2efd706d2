"""Tenant audit log writer."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from models.audit_log import AuditLog

from .permissions import Actor

logger = logging.getLogger(__name__)


def record_audit(
    db: AsyncSession,
    actor: Actor,
    action: str,
    target: str,
    details: dict[str, Any] | None = None,
) -> AuditLog:
    """Stage an audit row; it commits or rolls back with the surrounding transaction."""
    entry = AuditLog(
        tenant_id=actor.tenant_id,
        actor_id=actor.id,
        action=action,
        target=target,
        details=details or {},
    )
    db.add(entry)
    logger.debug(f"Audit {action} on {target} by {actor.id}")
    return entry
