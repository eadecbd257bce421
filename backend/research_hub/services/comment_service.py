"""Comment threads: creation, editing and the soft/hard delete rule."""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.errors import NotFoundError, ValidationError
from research_hub.models.comment import Comment, TOMBSTONE
from research_hub.models.user import User
from research_hub.models.vote import Vote
from research_hub.schemas.comment import CommentAuthor, CommentRead
from research_hub.services.targets import target_exists
from research_hub.services.vote_service import vote_stats

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 5000


def clean_content(content: str | None) -> str:
    """Trim and bounds-check comment text."""
    text = (content or "").strip()
    if not text:
        raise ValidationError("Missing required fields", "Required: content")
    if len(text) > MAX_CONTENT_LENGTH:
        raise ValidationError("Comment too long", f"Comment must be at most {MAX_CONTENT_LENGTH} characters")
    return text


async def create_comment(
    db: AsyncSession,
    user_id: UUID,
    target_type: str,
    target_id: str,
    content: str,
    parent_comment_id: UUID | None = None,
) -> Comment:
    text = clean_content(content)

    if not await target_exists(db, target_type, target_id):
        raise NotFoundError("Target not found", f"No {target_type} with id {target_id}")

    if parent_comment_id is not None:
        parent = await db.get(Comment, parent_comment_id)
        if parent is None or parent.is_deleted:
            raise NotFoundError("Parent comment not found")
        if parent.target_type != target_type or parent.target_id != str(target_id):
            raise ValidationError(
                "Reply target mismatch with parent comment",
                "A reply must target the same item as its parent",
            )

    comment = Comment(
        user_id=user_id,
        target_type=target_type,
        target_id=str(target_id),
        content=text,
        parent_comment_id=parent_comment_id,
    )
    db.add(comment)
    await db.flush()
    return comment


async def _owned_comment(db: AsyncSession, comment_id: UUID, user_id: UUID) -> Comment | None:
    result = await db.execute(
        select(Comment).where(Comment.id == comment_id, Comment.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def update_comment(db: AsyncSession, comment_id: UUID, user_id: UUID, content: str) -> Comment:
    comment = await _owned_comment(db, comment_id, user_id)
    if comment is None or comment.is_deleted:
        raise NotFoundError("Comment not found")
    comment.content = clean_content(content)
    comment.is_edited = True
    await db.flush()
    return comment


async def _descendants(db: AsyncSession, comment_id: UUID) -> list[Comment]:
    """Every reply below `comment_id`, level by level."""
    found: list[Comment] = []
    frontier = [comment_id]
    while frontier:
        result = await db.execute(select(Comment).where(Comment.parent_comment_id.in_(frontier)))
        level = list(result.scalars().all())
        found.extend(level)
        frontier = [c.id for c in level]
    return found


async def delete_comment(db: AsyncSession, comment_id: UUID, user_id: UUID) -> str | None:
    """Soft-delete while any reply below is live, hard-delete otherwise.

    A hard delete also removes the tombstones beneath the comment, so no
    reply is left without its parent. Returns "soft", "hard", or None when
    there was nothing of the caller's to delete.
    """
    comment = await _owned_comment(db, comment_id, user_id)
    if comment is None or comment.is_deleted:
        return None

    descendants = await _descendants(db, comment.id)
    if any(not reply.is_deleted for reply in descendants):
        comment.content = TOMBSTONE
        comment.is_deleted = True
        await db.flush()
        return "soft"

    doomed = [str(c.id) for c in (comment, *descendants)]
    await db.execute(delete(Vote).where(Vote.target_type == "comment", Vote.target_id.in_(doomed)))
    await db.execute(delete(Comment).where(Comment.id.in_([comment.id, *(c.id for c in descendants)])))
    await db.flush()
    return "hard"


async def serialize_comments(db: AsyncSession, comments: list[Comment]) -> list[dict]:
    """Comment rows to response dicts with author and vote counts attached."""
    if not comments:
        return []

    user_ids = {c.user_id for c in comments}
    result = await db.execute(select(User).where(User.id.in_(user_ids)))
    authors = {u.id: CommentAuthor.model_validate(u) for u in result.scalars().all()}
    stats = await vote_stats(db, "comment", [str(c.id) for c in comments])

    items = []
    for comment in comments:
        counts = stats[str(comment.id)]
        read = CommentRead.model_validate(comment).model_copy(
            update={
                "upvotes": counts["upvotes"],
                "downvotes": counts["downvotes"],
                "author": authors.get(comment.user_id),
            }
        )
        items.append(read.model_dump(exclude={"replies"}))
    return items


def build_threads(items: list[dict]) -> list[dict]:
    """Nest serialized comments under their parents; orphans become roots."""
    by_id = {item["id"]: {**item, "replies": []} for item in items}
    roots = []
    for item in by_id.values():
        parent = by_id.get(item["parent_comment_id"])
        if parent is not None:
            parent["replies"].append(item)
        else:
            roots.append(item)
    return roots
