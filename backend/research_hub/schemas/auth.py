"""Pydantic schemas for registration, login and the current user."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    email: str
    password: str
    display_name: str | None = Field(None, alias="displayName")


class LoginRequest(BaseModel):
    email: str
    password: str


class LogoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    logout_all: bool = Field(False, alias="logoutAll")


class UserRead(BaseModel):
    """Public profile of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    display_name: str
    is_verified: bool
    created_at: datetime
    last_login_at: datetime | None = None
