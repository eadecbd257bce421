"""Pydantic schemas for Job and job/paper relations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class JobBase(BaseModel):
    """Base fields for a job listing."""

    title: str
    company: str
    location: str | None = None
    department: str | None = None
    salary: str | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    skills: list[str] = []
    description: str | None = None
    url: str | None = None


class JobCreate(JobBase):
    """Manual save. Re-saving the same id updates the row."""

    id: str | None = None


class JobUpdate(BaseModel):
    title: str | None = None
    company: str | None = None
    location: str | None = None
    department: str | None = None
    salary: str | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    skills: list[str] | None = None
    description: str | None = None
    url: str | None = None


class JobRead(JobBase):
    """Full job output."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


class JobSummary(BaseModel):
    """Minimal job info for embedding in bookmarks and recommendations."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company: str
    location: str | None = None
    salary: str | None = None
    salary_max: int | None = None


class RelationCreate(BaseModel):
    job_id: str
    paper_id: UUID
    relevance_score: float = Field(0.5, ge=0, le=1)
    relevance_reason: str | None = None


class RelationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: str
    paper_id: UUID
    relevance_score: float
    relevance_reason: str | None = None
    created_at: datetime
