"""Base database configuration and mixins."""

import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy import JSON, Column, DateTime, Uuid, func, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Session, declared_attr, sessionmaker

from research_hub.config import get_settings
from research_hub.errors import database_unavailable

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker | None = None
_sync_session_factory: sessionmaker | None = None


def _engine_kwargs(url: str) -> dict:
    settings = get_settings()
    kwargs = {"echo": settings.debug}
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=10, max_overflow=20, pool_timeout=30)
    return kwargs


def get_engine() -> AsyncEngine | None:
    """Async engine for FastAPI, or None when no database is configured."""
    global _engine
    settings = get_settings()
    if _engine is None and settings.database_url:
        _engine = create_async_engine(settings.database_url, **_engine_kwargs(settings.database_url))
    return _engine


def get_session_factory() -> async_sessionmaker | None:
    global _session_factory
    engine = get_engine()
    if _session_factory is None and engine is not None:
        _session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


def get_sync_session_factory() -> sessionmaker | None:
    """Sync sessions for Celery tasks and scripts."""
    global _sync_session_factory
    settings = get_settings()
    if _sync_session_factory is None and settings.database_url:
        sync_url = (
            settings.database_url
            .replace("postgresql+asyncpg://", "postgresql://")
            .replace("sqlite+aiosqlite://", "sqlite://")
        )
        sync_engine = create_engine(sync_url, **_engine_kwargs(sync_url))
        _sync_session_factory = sessionmaker(
            bind=sync_engine,
            autocommit=False,
            autoflush=False,
        )
    return _sync_session_factory


def open_sync_session() -> Session:
    factory = get_sync_session_factory()
    if factory is None:
        raise database_unavailable()
    return factory()


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


class Base(DeclarativeBase):
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"


class TimestampMixin:
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


class UUIDMixin:
    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


async def get_optional_db() -> AsyncGenerator[AsyncSession | None, None]:
    """Request-scoped session, or None when no database is configured."""
    factory = get_session_factory()
    if factory is None:
        yield None
        return
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db(session: AsyncSession | None = Depends(get_optional_db)) -> AsyncSession:
    """Request-scoped session; 503 when no database is configured.

    Shares the cached get_optional_db session, so auth lookups and handler
    writes run in the same transaction.
    """
    if session is None:
        raise database_unavailable()
    return session
