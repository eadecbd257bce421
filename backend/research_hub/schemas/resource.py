"""Pydantic schemas for user, job and interview resources."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ResourceBase(BaseModel):
    title: str
    url: str | None = None
    resource_type: str = "other"
    tags: list[str] = []


class UserResourceCreate(ResourceBase):
    description: str
    content: str | None = None
    visibility: Literal["public", "private"] = "public"


class JobResourceCreate(ResourceBase):
    description: str | None = None
    job_id: str | None = None


class InterviewResourceCreate(ResourceBase):
    content: str
    job_id: str | None = None


class ResourceUpdate(BaseModel):
    """Partial update shared by all three resource kinds; unknown columns are ignored."""

    title: str | None = None
    url: str | None = None
    resource_type: str | None = None
    tags: list[str] | None = None
    description: str | None = None
    content: str | None = None
    visibility: Literal["public", "private"] | None = None
    job_id: str | None = None


class ResourceRead(ResourceBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    description: str | None = None
    content: str | None = None
    visibility: str | None = None
    job_id: str | None = None
    created_at: datetime
    updated_at: datetime
