"""Ingestion endpoints: queue scrapes, inspect runs, poll status."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import require_admin
from research_hub.errors import ConflictError, NotFoundError, ServiceUnavailableError, ValidationError
from research_hub.extractors.sources import get_source, list_sources
from research_hub.models.base import get_db
from research_hub.models.ingestion_run import IngestionRun
from research_hub.schemas.ingestion import IngestionRunRead, ScrapeRequest, SourceRead
from research_hub.services import ingestion_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scrape", tags=["ingestion"])
status_router = APIRouter(tags=["ingestion"])


def _dispatch(run_id: str) -> str:
    from research_hub.tasks.ingestion_tasks import run_ingestion
    return run_ingestion.delay(run_id).id


async def _queue(db: AsyncSession, kind: str, body: ScrapeRequest) -> JSONResponse:
    source = get_source(body.source)
    if source is None:
        raise ValidationError("Unknown source", f"No ingestion source named {body.source!r}")
    if source.kind != kind:
        raise ValidationError("Wrong source kind", f"Source {source.key} ingests {source.kind}, not {kind}")

    if await ingestion_service.active_run(db, source.key) is not None:
        raise ConflictError("Scraping already in progress", f"Source {source.key} has an active run")

    run = IngestionRun(source=source.key, kind=kind, status="queued", requested_by="admin")
    db.add(run)
    await db.flush()
    # The worker must see the row before it starts
    await db.commit()

    try:
        run.task_id = _dispatch(str(run.id))
    except Exception as e:
        logger.error(f"Failed to dispatch ingestion for {source.key}: {e}")
        run.status = "failed"
        run.error_message = f"Dispatch failed: {e}"[:2000]
        await db.commit()
        raise ServiceUnavailableError("Task queue not available", "Could not reach the background worker queue")

    await db.commit()
    logger.info(f"Queued ingestion run {run.id} for {source.key}")
    return JSONResponse(
        status_code=202,
        content={
            "success": True,
            "message": f"Started scraping for {source.name}",
            "runId": str(run.id),
            "taskId": run.task_id,
            "source": source.key,
            "status": run.status,
        },
    )


@router.post("/jobs")
async def scrape_jobs(
    body: ScrapeRequest,
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    """Queue a background job scrape; poll /scraping-status for progress."""
    return await _queue(db, "jobs", body)


@router.post("/papers")
async def scrape_papers(
    body: ScrapeRequest,
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    return await _queue(db, "papers", body)


@router.get("/sources")
async def sources(_admin: str = Depends(require_admin)):
    return {
        "success": True,
        "sources": [
            SourceRead(key=s.key, name=s.name, kind=s.kind, platform=s.platform, url=s.url).model_dump()
            for s in list_sources()
        ],
    }


@router.get("/runs")
async def list_runs(
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin),
    source: str | None = Query(None),
    status: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
):
    query = select(IngestionRun)
    if source:
        query = query.where(IngestionRun.source == source)
    if status:
        query = query.where(IngestionRun.status == status)
    runs = (await db.execute(query.order_by(IngestionRun.created_at.desc()).limit(limit))).scalars().all()
    return {"success": True, "runs": [IngestionRunRead.model_validate(r).model_dump() for r in runs]}


@router.get("/runs/{run_id}")
async def get_run(
    run_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    run = await db.get(IngestionRun, run_id)
    if run is None:
        raise NotFoundError("Run not found")
    return {"success": True, "run": IngestionRunRead.model_validate(run).model_dump()}


@status_router.get("/scraping-status")
async def scraping_status(
    company: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Latest run for a source key or company name."""
    if not company or not company.strip():
        raise ValidationError("Company parameter required")
    run = await ingestion_service.latest_run(db, ingestion_service.keys_for(company))
    return ingestion_service.describe(run)
