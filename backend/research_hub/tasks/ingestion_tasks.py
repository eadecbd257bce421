"""Ingestion tasks."""

import logging

from research_hub.models.base import open_sync_session
from research_hub.services.ingestion_service import execute_run
from research_hub.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(name="research_hub.tasks.ingestion_tasks.run_ingestion")
def run_ingestion(run_id: str):
    """Execute a queued IngestionRun. Bound by the app's soft time limit."""
    db = open_sync_session()
    try:
        run = execute_run(db, run_id)
        if run is None:
            return {"run_id": run_id, "status": "missing"}
        return {
            "run_id": run_id,
            "status": run.status,
            "items_found": run.items_found,
            "items_new": run.items_new,
            "items_updated": run.items_updated,
        }
    finally:
        db.close()
