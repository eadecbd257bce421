"""Pydantic schemas for ingestion runs and sources."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ScrapeRequest(BaseModel):
    source: str


class IngestionRunRead(BaseModel):
    """Full ingestion run output."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    source: str
    kind: str
    status: str
    task_id: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    items_found: int = 0
    items_new: int = 0
    items_updated: int = 0
    error_message: str | None = None
    requested_by: str | None = None
    created_at: datetime


class SourceRead(BaseModel):
    key: str
    name: str
    kind: str
    platform: str
    url: str
