"""Invalidation emitter: tells clients which cached read-views are stale.

The lifecycle services call ``notify`` after a mutation has been committed.
How the event reaches browsers (WebSocket gateway, polling) is not handled
here; the Celery emitter only hands the event to a Redis channel.
"""

import logging
from enum import Enum
from typing import Iterable, Protocol
from uuid import UUID

from app.core.config import settings

logger = logging.getLogger(__name__)


class InvalidateKey(str, Enum):
    PROJECTS = "projects"
    PROJECT_STATS = "projectStats"
    NOTIFICATIONS = "notifications"
    RANKINGS = "rankings"


class InvalidationEmitter(Protocol):
    def notify(self, tenant_id: UUID, keys: Iterable[InvalidateKey]) -> None: ...


def _ordered(keys: Iterable[InvalidateKey]) -> list[str]:
    return sorted({InvalidateKey(k).value for k in keys})


class LoggingInvalidationEmitter:
    """Writes invalidation events to the log only."""

    def notify(self, tenant_id: UUID, keys: Iterable[InvalidateKey]) -> None:
        logger.info(f"🔄 Invalidate {_ordered(keys)} for tenant {tenant_id}")


class CeleryInvalidationEmitter:
    """Queues invalidation events for the realtime gateway via Celery."""

    def notify(self, tenant_id: UUID, keys: Iterable[InvalidateKey]) -> None:
        from app.tasks.invalidation_tasks import publish_invalidation

        key_values = _ordered(keys)
        try:
            publish_invalidation.delay(str(tenant_id), key_values)
        except Exception as e:
            # The mutation is already committed; a lost event only delays a refetch
            logger.error(f"❌ Failed to queue invalidation {key_values} for tenant {tenant_id}: {e}")


class RecordingInvalidationEmitter:
    """Keeps every event in memory."""

    def __init__(self):
        self.events: list[tuple[UUID, set[InvalidateKey]]] = []

    def notify(self, tenant_id: UUID, keys: Iterable[InvalidateKey]) -> None:
        self.events.append((tenant_id, {InvalidateKey(k) for k in keys}))

    @property
    def last_keys(self) -> set[InvalidateKey] | None:
        return self.events[-1][1] if self.events else None

    def clear(self) -> None:
        self.events.clear()


_emitter: InvalidationEmitter | None = None


def get_invalidation_emitter() -> InvalidationEmitter:
    """Return the process-wide emitter selected by ``settings.invalidation_backend``."""
    global _emitter
    if _emitter is None:
        if settings.uses_celery_invalidation:
            _emitter = CeleryInvalidationEmitter()
        else:
            _emitter = LoggingInvalidationEmitter()
    return _emitter
