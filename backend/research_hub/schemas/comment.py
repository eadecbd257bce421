"""Pydantic schemas for comments."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from research_hub.schemas.targets import TargetRef

CommentTargetType = Literal["job", "paper", "resource", "user_resource"]


class CommentCreate(TargetRef):
    target_type: CommentTargetType
    content: str
    parent_comment_id: UUID | None = None


class CommentUpdate(BaseModel):
    content: str


class CommentAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    display_name: str


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    target_type: str
    target_id: str
    content: str
    parent_comment_id: UUID | None = None
    is_edited: bool
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
    upvotes: int = 0
    downvotes: int = 0
    author: CommentAuthor | None = None
    replies: list["CommentRead"] = []
