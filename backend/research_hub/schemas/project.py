"""Pydantic schemas for projects."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ProjectStatus = Literal["planning", "in_progress", "completed", "on_hold"]
ProjectPriority = Literal["low", "medium", "high"]
ProjectCategory = Literal["job_search", "skill_development", "research", "networking", "other"]


class ProjectCreate(BaseModel):
    title: str
    description: str = ""
    status: ProjectStatus = "planning"
    priority: ProjectPriority = "medium"
    category: ProjectCategory = "job_search"
    progress: int = Field(0, ge=0, le=100)
    target_date: date | None = None
    tags: list[str] = []
    linked_jobs: list[str] = []
    linked_papers: list[str] = []
    linked_resources: list[str] = []
    notes: str = ""
    is_public: bool = False


class ProjectUpdate(BaseModel):
    """Partial update. Linked lists, when given, replace the stored ones."""

    title: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    priority: ProjectPriority | None = None
    category: ProjectCategory | None = None
    progress: int | None = Field(None, ge=0, le=100)
    target_date: date | None = None
    tags: list[str] | None = None
    linked_jobs: list[str] | None = None
    linked_papers: list[str] | None = None
    linked_resources: list[str] | None = None
    notes: str | None = None
    is_public: bool | None = None


class ProgressUpdate(BaseModel):
    progress: int = Field(..., ge=0, le=100)


class ProjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str
    status: str
    priority: str
    category: str
    progress: int
    target_date: date | None = None
    tags: list[str] = []
    linked_jobs: list[str] = []
    linked_papers: list[str] = []
    linked_resources: list[str] = []
    notes: str
    is_public: bool
    created_at: datetime
    updated_at: datetime
