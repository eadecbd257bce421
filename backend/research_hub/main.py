"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from sqlalchemy import func, select

from research_hub.config import get_settings
from research_hub.errors import register_exception_handlers
from research_hub.models import Base
from research_hub.models.base import dispose_engine, get_engine, get_session_factory
from research_hub.models.ingestion_run import IngestionRun
from research_hub.services.ingestion_service import ACTIVE_STATUSES
from research_hub.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s...", settings.app_name)
    engine = get_engine()
    if engine is None:
        logger.warning("DATABASE_URL not set; database-backed endpoints will return 503")
    else:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables verified")
    if not settings.jwt_secret:
        logger.warning("JWT_SECRET not set; login and registration are disabled")
    yield
    logger.info("Shutting down...")
    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    description="Job market research: listings, papers, bookmarks, discussion and projects",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(GZipMiddleware, minimum_size=500)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_v1_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name}


@app.get("/health/detailed")
async def detailed_health_check():
    """Database, broker and worker reachability, plus the ingestion backlog."""
    checks = {"database": await _check_database(), "broker": await _check_broker()}
    if checks["broker"]["ok"]:
        checks["workers"] = await run_in_threadpool(_check_workers)
    else:
        checks["workers"] = {"ok": False, "message": "Skipped: broker unreachable"}

    return {
        "status": "healthy" if all(c["ok"] for c in checks.values()) else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }


async def _check_database() -> dict:
    factory = get_session_factory()
    if factory is None:
        return {"ok": False, "message": "Database connection is not configured"}
    try:
        async with factory() as session:
            result = await session.execute(
                select(func.count()).select_from(IngestionRun).where(IngestionRun.status.in_(ACTIVE_STATUSES))
            )
            return {"ok": True, "activeRuns": result.scalar_one()}
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        return {"ok": False, "message": str(e)}


async def _check_broker() -> dict:
    client = aioredis.from_url(settings.redis_url, socket_timeout=5, socket_connect_timeout=5)
    try:
        await client.ping()
        return {"ok": True}
    except Exception as e:
        return {"ok": False, "message": str(e)}
    finally:
        await client.aclose()


def _check_workers() -> dict:
    from research_hub.tasks.celery_app import celery_app

    try:
        replies = celery_app.control.ping(timeout=2) or []
    except Exception as e:
        return {"ok": False, "message": str(e)}
    workers = sorted(name for reply in replies for name in reply)
    return {"ok": bool(workers), "workers": workers}
