"""Celery application configuration."""

from celery import Celery

from app.core.config import settings

# Create Celery instance
celery_app = Celery(
    "pipeline",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.tasks.invalidation_tasks"],
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_ignore_result=True,
    task_time_limit=60,
    task_soft_time_limit=30,
    worker_prefetch_multiplier=4,
    worker_max_tasks_per_child=1000,
)

# Invalidation events are small and time-sensitive; keep them off other queues
celery_app.conf.task_routes = {
    "app.tasks.invalidation_tasks.*": {"queue": "invalidation"},
}
