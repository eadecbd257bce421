"""Authentication dependencies for FastAPI routes."""

import secrets

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.config import get_settings
from research_hub.errors import AuthenticationError, ServiceUnavailableError
from research_hub.models.base import get_optional_db
from research_hub.services.auth_service import AuthUser, verify_token


def extract_token(request: Request) -> str | None:
    """Cookie first, then `Authorization: Bearer`."""
    token = request.cookies.get(get_settings().auth_cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


async def get_current_user(
    request: Request,
    db: AsyncSession | None = Depends(get_optional_db),
) -> AuthUser | None:
    """Return the caller's identity or None. Never rejects."""
    token = extract_token(request)
    if not token:
        return None
    return await verify_token(token, db)


async def require_user(
    request: Request,
    db: AsyncSession | None = Depends(get_optional_db),
) -> AuthUser:
    """Return the caller's identity or raise 401."""
    token = extract_token(request)
    if not token:
        raise AuthenticationError("Authentication required", "No authentication token provided")
    user = await verify_token(token, db)
    if user is None:
        raise AuthenticationError("Invalid or expired token", "Please log in again")
    return user


def require_admin(request: Request) -> str:
    """Check the X-Admin-Key header against the configured key."""
    expected = get_settings().admin_api_key
    if not expected:
        raise ServiceUnavailableError("Admin access not configured", "ADMIN_API_KEY is not set")
    provided = request.headers.get("X-Admin-Key", "")
    if not provided or not secrets.compare_digest(provided, expected):
        raise AuthenticationError("Invalid admin key")
    return "admin"
