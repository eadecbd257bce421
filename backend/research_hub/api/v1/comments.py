"""Threaded comments on jobs, papers and resources."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import require_user
from research_hub.errors import NotFoundError, ValidationError
from research_hub.models.base import get_db
from research_hub.models.comment import Comment
from research_hub.schemas.comment import CommentCreate, CommentTargetType, CommentUpdate
from research_hub.services import comment_service
from research_hub.services.auth_service import AuthUser
from research_hub.services.targets import canonical_target_id

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("")
async def list_comments(
    target_type: CommentTargetType = Query(...),
    target_id: str = Query(...),
    parent_only: bool = Query(False, description="Top-level comments with nested replies"),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """Comments on one target, oldest first. Deleted comments stay as tombstones."""
    target_id = canonical_target_id(target_type, target_id)
    base = select(Comment).where(Comment.target_type == target_type, Comment.target_id == target_id)

    if not parent_only:
        total = (await db.execute(select(func.count()).select_from(base.subquery()))).scalar_one()
        rows = (
            await db.execute(base.order_by(Comment.created_at, Comment.id).offset(offset).limit(limit))
        ).scalars().all()
        items = await comment_service.serialize_comments(db, list(rows))
        return {"success": True, "comments": items, "total": total, "limit": limit, "offset": offset}

    # Paginate the roots, then attach every reply in the target
    rows = (await db.execute(base.order_by(Comment.created_at, Comment.id))).scalars().all()
    threads = comment_service.build_threads(await comment_service.serialize_comments(db, list(rows)))
    return {
        "success": True,
        "comments": threads[offset:offset + limit],
        "total": len(threads),
        "limit": limit,
        "offset": offset,
    }


@router.get("/{comment_id}")
async def get_comment(comment_id: UUID, db: AsyncSession = Depends(get_db)):
    comment = await db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    replies = (
        await db.execute(
            select(Comment).where(Comment.parent_comment_id == comment.id).order_by(Comment.created_at)
        )
    ).scalars().all()
    items = await comment_service.serialize_comments(db, [comment, *replies])
    return {"success": True, "comment": {**items[0], "replies": items[1:]}}


@router.post("", status_code=201)
async def create_comment(
    body: CommentCreate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    target_id = canonical_target_id(body.target_type, body.resolve_target_id(body.target_type))
    if not target_id:
        raise ValidationError("Missing required fields", f"Required: target id for {body.target_type}")

    comment = await comment_service.create_comment(
        db,
        user_id=user.user_id,
        target_type=body.target_type,
        target_id=target_id,
        content=body.content,
        parent_comment_id=body.parent_comment_id,
    )
    items = await comment_service.serialize_comments(db, [comment])
    return {"success": True, "comment": items[0]}


@router.put("/{comment_id}")
async def update_comment(
    comment_id: UUID,
    body: CommentUpdate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await comment_service.update_comment(db, comment_id, user.user_id, body.content)
    items = await comment_service.serialize_comments(db, [comment])
    return {"success": True, "comment": items[0]}


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: UUID,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    mode = await comment_service.delete_comment(db, comment_id, user.user_id)
    return {"success": True, "deleted": mode is not None, "mode": mode}
