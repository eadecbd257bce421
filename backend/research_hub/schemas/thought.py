"""Pydantic schemas for thoughts on jobs, papers and resources."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from research_hub.schemas.targets import TargetRef

Visibility = Literal["private", "public"]


class ThoughtCreate(TargetRef):
    content: str
    thought_type: str = "general"
    rating: int | None = Field(None, ge=1, le=5)
    is_interested: bool = True
    visibility: Visibility = "private"


class ThoughtUpdate(BaseModel):
    content: str | None = None
    thought_type: str | None = None
    rating: int | None = Field(None, ge=1, le=5)
    is_interested: bool | None = None
    visibility: Visibility | None = None


class ThoughtRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    target_type: str
    target_id: str
    thought_type: str
    content: str
    rating: int | None = None
    is_interested: bool
    visibility: str
    created_at: datetime
    updated_at: datetime
