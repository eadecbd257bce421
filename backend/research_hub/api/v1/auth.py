"""Authentication endpoints: register, login, logout, current user."""

import logging
import re

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.config import get_settings
from research_hub.dependencies.auth import extract_token, get_current_user, require_user
from research_hub.errors import (
    AccountDisabledError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    require_fields,
)
from research_hub.models.base import get_db, get_optional_db, utcnow
from research_hub.models.bookmark import Bookmark
from research_hub.models.comment import Comment
from research_hub.models.resource import UserResource
from research_hub.models.user import User
from research_hub.schemas.auth import LoginRequest, LogoutRequest, RegisterRequest, UserRead
from research_hub.services import auth_service
from research_hub.services.auth_service import AuthUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _set_auth_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.token_ttl_days * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


def _clear_auth_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Create an account and log it in."""
    require_fields(username=body.username, email=body.email, password=body.password)
    username = body.username.strip()
    email = body.email.strip().lower()

    if len(body.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password too short", f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format", "Please provide a valid email address")

    result = await db.execute(
        select(User.username, User.email).where(
            or_(func.lower(User.username) == username.lower(), User.email == email)
        )
    )
    for existing_username, existing_email in result.all():
        if existing_username.lower() == username.lower():
            raise ConflictError("Username already exists", "Please choose a different username")
        if existing_email == email:
            raise ConflictError("Email already registered", "Please use a different email or try logging in")

    user = User(
        username=username,
        email=email,
        password_hash=auth_service.hash_password(body.password),
        display_name=(body.display_name or "").strip() or username,
        is_active=True,
        is_verified=False,
        last_login_at=utcnow(),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("User already exists", "Username or email is already taken")

    token = await auth_service.issue_token(db, user)
    _set_auth_cookie(response, token)
    logger.info("Registered user %s", user.username)

    return {
        "success": True,
        "message": "User registered successfully",
        "user": UserRead.model_validate(user).model_dump(),
        "token": token,
    }


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    require_fields(email=body.email, password=body.password)
    email = body.email.strip().lower()

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    # Same answer for unknown email and wrong password
    if user is None or not auth_service.verify_password(body.password, user.password_hash):
        raise AuthenticationError("Invalid credentials", "Email or password is incorrect")
    if not user.is_active:
        raise AccountDisabledError("Account disabled", "This account has been deactivated")

    await auth_service.purge_expired_sessions(db, user.id)
    token = await auth_service.issue_token(db, user)
    user.last_login_at = utcnow()
    await db.flush()

    _set_auth_cookie(response, token)
    return {
        "success": True,
        "message": "Login successful",
        "user": UserRead.model_validate(user).model_dump(),
        "token": token,
    }


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    body: LogoutRequest | None = None,
    user: AuthUser | None = Depends(get_current_user),
    db: AsyncSession | None = Depends(get_optional_db),
):
    """Best-effort session removal; always clears the cookie."""
    token = extract_token(request)
    if db is not None and token:
        try:
            await auth_service.revoke_token(db, token)
            if body is not None and body.logout_all and user is not None:
                await auth_service.revoke_all_sessions(db, user.user_id)
            await db.commit()
        except Exception:
            logger.warning("Failed to delete session on logout", exc_info=True)
            await db.rollback()

    _clear_auth_cookie(response)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def me(
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    account = await db.get(User, user.user_id)
    if account is None:
        raise NotFoundError("User not found")

    async def count(query) -> int:
        return (await db.execute(query)).scalar_one()

    bookmarks = await count(select(func.count()).select_from(Bookmark).where(Bookmark.user_id == account.id))
    comments = await count(select(func.count()).select_from(Comment).where(Comment.user_id == account.id))
    resources = await count(select(func.count()).select_from(UserResource).where(UserResource.user_id == account.id))
    public_resources = await count(
        select(func.count()).select_from(UserResource).where(
            UserResource.user_id == account.id, UserResource.visibility == "public"
        )
    )

    return {
        "success": True,
        "user": {
            **UserRead.model_validate(account).model_dump(),
            "is_active": account.is_active,
            "stats": {
                "bookmarks": bookmarks,
                "comments": comments,
                "resources": resources,
                "publicResources": public_resources,
            },
        },
    }
