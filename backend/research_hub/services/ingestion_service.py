"""Ingestion runs: queueing from the API and execution in workers."""

import logging
from datetime import timedelta

from celery.exceptions import SoftTimeLimitExceeded
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.config import get_settings
from research_hub.extractors.registry import get_extractor_class  # package import registers extractors
from research_hub.extractors.sources import SOURCES, get_source
from research_hub.models.base import as_utc, utcnow
from research_hub.models.ingestion_run import IngestionRun
from research_hub.services.targets import parse_uuid

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = ("queued", "running")


def execute_run(db, run_id, client=None, enrich: bool = True) -> IngestionRun | None:
    """Run one queued ingestion on a sync session.

    A soft time limit ends the run as "timeout"; rows saved before it stay.
    """
    run = db.get(IngestionRun, parse_uuid(run_id))
    if run is None:
        logger.error(f"Ingestion run {run_id} not found")
        return None

    run.status = "running"
    run.started_at = utcnow()
    db.commit()

    extractor = None
    try:
        source = get_source(run.source)
        if source is None:
            raise ValueError(f"Unknown source: {run.source}")
        extractor_class = get_extractor_class(source.platform)
        if extractor_class is None:
            raise ValueError(f"No extractor registered for platform: {source.platform}")

        extractor = extractor_class(source=source, db=db, client=client, enrich=enrich)
        extractor.run()
        run.status = "success"
        logger.info(f"Ingested {source.key}: {extractor.stats}")
    except SoftTimeLimitExceeded:
        db.rollback()
        run.status = "timeout"
        run.error_message = f"Timed out after {get_settings().scrape_timeout}s; rows saved so far were kept"
        logger.warning(f"Ingestion {run.source} timed out")
    except Exception as e:
        db.rollback()
        run.status = "failed"
        run.error_message = str(e)[:2000]
        logger.error(f"Failed to ingest {run.source}: {e}")

    if extractor is not None:
        run.items_found = extractor.stats["items_found"]
        run.items_new = extractor.stats["items_new"]
        run.items_updated = extractor.stats["items_updated"]
    run.finished_at = utcnow()
    db.commit()
    return run


async def active_run(db: AsyncSession, source_key: str) -> IngestionRun | None:
    result = await db.execute(
        select(IngestionRun)
        .where(IngestionRun.source == source_key, IngestionRun.status.in_(ACTIVE_STATUSES))
        .order_by(IngestionRun.created_at.desc())
        .limit(1)
    )
    run = result.scalar_one_or_none()
    if run is not None and is_stale(run):
        return None
    return run


def is_stale(run: IngestionRun) -> bool:
    """An active run older than the wall-clock limit (plus slack) is dead."""
    started = as_utc(run.started_at or run.created_at)
    limit = timedelta(seconds=get_settings().scrape_timeout + 300)
    return run.status in ACTIVE_STATUSES and utcnow() - started > limit


def keys_for(company: str) -> list[str]:
    """Source keys matching a key or a company name."""
    needle = company.strip().lower()
    if needle in SOURCES:
        return [needle]
    return [s.key for s in SOURCES.values() if s.name.lower() == needle]


async def latest_run(db: AsyncSession, keys: list[str]) -> IngestionRun | None:
    if not keys:
        return None
    result = await db.execute(
        select(IngestionRun)
        .where(IngestionRun.source.in_(keys))
        .order_by(IngestionRun.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


def describe(run: IngestionRun | None) -> dict:
    """Status payload for polling clients."""
    if run is None:
        return {"isActive": False, "status": None, "message": "No active scraping"}

    started = as_utc(run.started_at or run.created_at)
    finished = as_utc(run.finished_at)
    duration = ((finished or utcnow()) - started).total_seconds()
    body = {
        "runId": str(run.id),
        "source": run.source,
        "status": run.status,
        "startTime": started.isoformat(),
        "duration": round(duration, 1),
        "itemsFound": run.items_found,
        "itemsNew": run.items_new,
    }

    if is_stale(run):
        return {**body, "isActive": False, "status": "timeout", "message": "Scraping timed out"}
    if run.status in ACTIVE_STATUSES:
        return {**body, "isActive": True, "message": "Scraping in progress"}

    messages = {
        "success": "Scraping finished",
        "failed": f"Scraping failed: {run.error_message}",
        "timeout": "Scraping timed out",
    }
    return {**body, "isActive": False, "message": messages.get(run.status, run.status)}
