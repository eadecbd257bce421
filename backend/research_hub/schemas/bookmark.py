"""Pydantic schemas for bookmarks."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

BookmarkType = Literal["job", "paper", "resource", "user_resource"]
ResourceKind = Literal["job_resource", "interview_resource"]


class BookmarkCreate(BaseModel):
    bookmark_type: BookmarkType
    job_id: str | None = None
    paper_id: UUID | None = None
    resource_id: UUID | None = None
    resource_type: ResourceKind | None = None
    notes: str | None = None
    tags: list[str] = []
    is_favorite: bool = False


class BookmarkUpdate(BaseModel):
    notes: str | None = None
    tags: list[str] | None = None
    is_favorite: bool | None = None


class BookmarkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    bookmark_type: str
    job_id: str | None = None
    paper_id: UUID | None = None
    resource_id: UUID | None = None
    resource_type: str | None = None
    notes: str | None = None
    tags: list[str] = []
    is_favorite: bool
    created_at: datetime
    target: dict[str, Any] | None = None
