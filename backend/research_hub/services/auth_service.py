"""Authentication helpers: bcrypt password hashing and JWT session tokens.

Tokens are HS256 JWTs that also get a `user_sessions` row, so a token can be
revoked server-side before it expires.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

import bcrypt
import jwt
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.config import get_settings
from research_hub.errors import ServiceUnavailableError
from research_hub.models.base import as_utc, utcnow
from research_hub.models.user import User
from research_hub.models.user_session import UserSession

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


@dataclass
class AuthUser:
    """Identity resolved from a verified token."""

    user_id: UUID
    username: str
    email: str
    is_verified: bool
    token: str


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


async def issue_token(db: AsyncSession, user: User) -> str:
    """Sign a token for `user` and record the session."""
    settings = get_settings()
    if not settings.jwt_secret:
        raise ServiceUnavailableError("Authentication not configured", "JWT secret is not set")

    now = utcnow()
    expires_at = now + timedelta(days=settings.token_ttl_days)
    payload = {
        "userId": str(user.id),
        "username": user.username,
        "email": user.email,
        "isVerified": bool(user.is_verified),
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": expires_at,
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)

    db.add(UserSession(user_id=user.id, session_token=token, expires_at=expires_at))
    await db.flush()
    return token


async def _drop_session(db: AsyncSession, token: str) -> None:
    # Commit now; the request that follows is about to fail with 401
    try:
        await db.execute(delete(UserSession).where(UserSession.session_token == token))
        await db.commit()
    except Exception:
        logger.warning("Could not remove expired session", exc_info=True)
        await db.rollback()


async def verify_token(token: str, db: AsyncSession | None) -> AuthUser | None:
    """Resolve a token to an identity, or None. Never raises.

    With a database, the session row must exist and be unexpired and the
    account must still be active.
    """
    settings = get_settings()
    if not token or not settings.jwt_secret:
        return None

    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
        identity = AuthUser(
            user_id=UUID(claims["userId"]),
            username=claims["username"],
            email=claims["email"],
            is_verified=bool(claims.get("isVerified", False)),
            token=token,
        )
    except jwt.ExpiredSignatureError:
        if db is not None:
            await _drop_session(db, token)
        return None
    except (jwt.PyJWTError, KeyError, ValueError):
        return None

    if db is None:
        return identity

    try:
        result = await db.execute(
            select(UserSession.expires_at, User.is_active)
            .join(User, User.id == UserSession.user_id)
            .where(UserSession.session_token == token)
        )
        row = result.first()
    except Exception:
        logger.warning("Session lookup failed", exc_info=True)
        return None

    if row is None:
        return None
    expires_at, is_active = row
    if as_utc(expires_at) <= utcnow():
        await _drop_session(db, token)
        return None
    if not is_active:
        return None
    return identity


async def revoke_token(db: AsyncSession, token: str) -> int:
    result = await db.execute(delete(UserSession).where(UserSession.session_token == token))
    return result.rowcount or 0


async def revoke_all_sessions(db: AsyncSession, user_id: UUID) -> int:
    result = await db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    return result.rowcount or 0


async def purge_expired_sessions(db: AsyncSession, user_id: UUID | None = None) -> int:
    """Delete expired sessions, optionally only for one user."""
    stmt = delete(UserSession).where(UserSession.expires_at <= utcnow())
    if user_id is not None:
        stmt = stmt.where(UserSession.user_id == user_id)
    result = await db.execute(stmt)
    return result.rowcount or 0
