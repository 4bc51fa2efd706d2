"""Celery tasks delivering invalidation events."""

import json
import logging

import redis

from app.celery_app import celery_app
from app.core.config import settings

logger = logging.getLogger(__name__)


def tenant_channel(tenant_id: str) -> str:
    """Redis pub/sub channel the realtime gateway subscribes to for a tenant."""
    return f"{settings.invalidation_channel_prefix}:tenant:{tenant_id}"


def get_redis_client() -> redis.Redis:
    return redis.Redis.from_url(settings.redis_url)


@celery_app.task(
    name="app.tasks.invalidation_tasks.publish_invalidation",
    bind=True,
    max_retries=3,
)
def publish_invalidation(self, tenant_id: str, keys: list[str]) -> int:
    """Publish one INVALIDATE event to the tenant's channel.

    Returns:
        Number of subscribers that received the event
    """
    event = json.dumps({"type": "INVALIDATE", "keys": keys})
    channel = tenant_channel(tenant_id)

    try:
        receivers = get_redis_client().publish(channel, event)
        logger.debug(f"Published {keys} to {channel} ({receivers} receivers)")
        return receivers
    except redis.RedisError as e:
        logger.error(f"❌ Publishing invalidation to {channel} failed: {str(e)}")
        raise self.retry(exc=e, countdown=2)
