"""Maintenance tasks: session expiry sweep and job dedup."""

import logging

from sqlalchemy import delete, select

from research_hub.models.base import open_sync_session, utcnow
from research_hub.models.job import Job
from research_hub.models.user_session import UserSession
from research_hub.services.job_service import redundant_job_ids
from research_hub.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="research_hub.tasks.maintenance_tasks.purge_expired_sessions")
def purge_expired_sessions():
    """Delete sessions past their expiry."""
    db = open_sync_session()
    try:
        result = db.execute(delete(UserSession).where(UserSession.expires_at <= utcnow()))
        db.commit()
        logger.info(f"Purged {result.rowcount} expired sessions")
        return {"purged": result.rowcount}
    finally:
        db.close()


@celery_app.task(name="research_hub.tasks.maintenance_tasks.deduplicate_jobs")
def deduplicate_jobs():
    """Drop older ingested copies of jobs sharing company, title and location."""
    db = open_sync_session()
    try:
        jobs = db.execute(select(Job)).scalars().all()
        doomed = redundant_job_ids(jobs)
        if doomed:
            db.execute(delete(Job).where(Job.id.in_(doomed)))
            db.commit()
        logger.info(f"Removed {len(doomed)} duplicate jobs")
        return {"deleted": len(doomed)}
    finally:
        db.close()
