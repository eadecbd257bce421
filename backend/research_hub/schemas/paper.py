"""Pydantic schemas for ResearchPaper."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PaperBase(BaseModel):
    title: str
    url: str
    authors: list[str] = []
    publication_date: date | None = None
    abstract: str | None = None
    arxiv_id: str | None = None
    github_url: str | None = None
    company: str | None = None
    tags: list[str] = []


class PaperCreate(PaperBase):
    """Upserted on url."""


class PaperUpdate(BaseModel):
    title: str | None = None
    authors: list[str] | None = None
    publication_date: date | None = None
    abstract: str | None = None
    arxiv_id: str | None = None
    github_url: str | None = None
    company: str | None = None
    tags: list[str] | None = None


class PaperRead(PaperBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


class PaperSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    url: str
    company: str | None = None
    publication_date: date | None = None
