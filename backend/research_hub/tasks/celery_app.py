"""Celery application configuration and beat schedule."""

from celery import Celery
from celery.schedules import crontab

from research_hub.config import get_settings

settings = get_settings()

celery_app = Celery(
    "research_hub",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "research_hub.tasks.ingestion_tasks",
        "research_hub.tasks.maintenance_tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    task_track_started=True,
    # Hard kill a minute after the soft limit gives the run time to record itself
    task_soft_time_limit=settings.scrape_timeout,
    task_time_limit=settings.scrape_timeout + 60,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

celery_app.conf.beat_schedule = {
    "purge-expired-sessions": {
        "task": "research_hub.tasks.maintenance_tasks.purge_expired_sessions",
        "schedule": crontab(minute=0, hour=3),
    },
    "deduplicate-jobs": {
        "task": "research_hub.tasks.maintenance_tasks.deduplicate_jobs",
        "schedule": crontab(minute=30, hour=3),
    },
}
