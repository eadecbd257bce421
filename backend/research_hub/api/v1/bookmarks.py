"""Bookmark endpoints for the signed-in user."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import require_user
from research_hub.errors import ConflictError, NotFoundError, ValidationError
from research_hub.models.base import get_db
from research_hub.models.bookmark import Bookmark
from research_hub.schemas.bookmark import BookmarkCreate, BookmarkRead, BookmarkType, BookmarkUpdate
from research_hub.services.auth_service import AuthUser
from research_hub.services.targets import parse_uuid, resource_kind, target_exists, target_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user/bookmarks", tags=["bookmarks"])

# Column holding the target for each bookmark type
TARGET_COLUMNS = {
    "job": "job_id",
    "paper": "paper_id",
    "resource": "resource_id",
    "user_resource": "resource_id",
}


async def _bookmark_dict(db: AsyncSession, bookmark: Bookmark, with_target: bool = True) -> dict:
    data = BookmarkRead.model_validate(bookmark).model_dump()
    if with_target:
        data["target"] = await target_summary(db, bookmark.bookmark_type, bookmark.target_id, bookmark.resource_type)
    return data


@router.get("")
async def list_bookmarks(
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    bookmark_type: BookmarkType | None = Query(None, alias="type"),
    favorites_only: bool = Query(False),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """The caller's bookmarks, newest first, with a summary of each target."""
    query = select(Bookmark).where(Bookmark.user_id == user.user_id)
    if bookmark_type:
        query = query.where(Bookmark.bookmark_type == bookmark_type)
    if favorites_only:
        query = query.where(Bookmark.is_favorite.is_(True))

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    query = query.order_by(Bookmark.created_at.desc()).offset(offset).limit(limit)
    bookmarks = (await db.execute(query)).scalars().all()

    items = [await _bookmark_dict(db, b) for b in bookmarks]
    return {"success": True, "bookmarks": items, "total": total, "limit": limit, "offset": offset}


@router.post("", status_code=201)
async def add_bookmark(
    body: BookmarkCreate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    column = TARGET_COLUMNS[body.bookmark_type]
    target_id = getattr(body, column)
    if target_id is None or (isinstance(target_id, str) and not target_id.strip()):
        raise ValidationError("Missing required fields", f"Required: {column} for {body.bookmark_type} bookmarks")

    resource_type = None
    if body.bookmark_type == "resource":
        resource_type = body.resource_type or await resource_kind(db, target_id)

    if not await target_exists(db, body.bookmark_type, target_id, resource_type):
        raise NotFoundError("Target not found", f"No {body.bookmark_type} with id {target_id}")

    existing = await db.execute(
        select(Bookmark.id).where(
            Bookmark.user_id == user.user_id,
            Bookmark.bookmark_type == body.bookmark_type,
            getattr(Bookmark, column) == target_id,
        )
    )
    if existing.first() is not None:
        raise ConflictError("Already bookmarked", "This item is already in your bookmarks")

    bookmark = Bookmark(
        user_id=user.user_id,
        bookmark_type=body.bookmark_type,
        resource_type=resource_type,
        notes=body.notes,
        tags=body.tags,
        is_favorite=body.is_favorite,
        **{column: target_id},
    )
    db.add(bookmark)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Already bookmarked", "This item is already in your bookmarks")

    return {"success": True, "bookmark": await _bookmark_dict(db, bookmark)}


@router.put("/{bookmark_id}")
async def update_bookmark(
    bookmark_id: UUID,
    body: BookmarkUpdate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Bookmark).where(Bookmark.id == bookmark_id, Bookmark.user_id == user.user_id)
    )
    bookmark = result.scalar_one_or_none()
    if bookmark is None:
        raise NotFoundError("Bookmark not found")

    changes = body.model_dump(exclude_unset=True)
    if "tags" in changes and changes["tags"] is None:
        changes["tags"] = []
    if "is_favorite" in changes and changes["is_favorite"] is None:
        changes.pop("is_favorite")
    for field, value in changes.items():
        setattr(bookmark, field, value)
    await db.flush()
    return {"success": True, "bookmark": await _bookmark_dict(db, bookmark, with_target=False)}


@router.delete("")
async def remove_bookmark(
    bookmark_type: BookmarkType = Query(...),
    target_id: str = Query(..., description="Id of the bookmarked job, paper or resource"),
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Remove the bookmark matching (type, target). 404 when none matched."""
    column = TARGET_COLUMNS[bookmark_type]
    value = target_id if column == "job_id" else parse_uuid(target_id)
    if value is None:
        raise NotFoundError("Bookmark not found")

    result = await db.execute(
        delete(Bookmark).where(
            Bookmark.user_id == user.user_id,
            Bookmark.bookmark_type == bookmark_type,
            getattr(Bookmark, column) == value,
        )
    )
    if not result.rowcount:
        raise NotFoundError("Bookmark not found")
    return {"success": True, "message": "Bookmark removed"}
