"""Personal thoughts on jobs, insights on papers and notes on shared resources.

The three share one table and one router shape, mounted once per target type.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import get_current_user, require_user
from research_hub.errors import NotFoundError, ValidationError
from research_hub.models.base import get_db
from research_hub.models.comment import Comment
from research_hub.models.thought import THOUGHT_KINDS, Thought
from research_hub.schemas.targets import TARGET_ID_FIELDS
from research_hub.schemas.thought import ThoughtCreate, ThoughtRead, ThoughtUpdate
from research_hub.services.auth_service import AuthUser
from research_hub.services.targets import canonical_target_id, target_exists, target_summary

MAX_CONTENT_LENGTH = 5000


def _clean_content(content: str | None) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationError("Missing required fields", "Required: content")
    if len(text) > MAX_CONTENT_LENGTH:
        raise ValidationError("Content too long", f"Content must be at most {MAX_CONTENT_LENGTH} characters")
    return text


def _thought_dict(thought: Thought, user: AuthUser | None) -> dict:
    mine = user is not None and thought.user_id == user.user_id
    return {**ThoughtRead.model_validate(thought).model_dump(), "canEdit": mine, "canDelete": mine}


def build_thought_router(prefix: str, target_type: str, openapi_tag: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[openapi_tag])
    id_field = TARGET_ID_FIELDS[target_type]

    @router.get("")
    async def list_thoughts(
        target_id: str | None = Query(None, alias=id_field),
        mine_only: bool = Query(False),
        user: AuthUser | None = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        offset: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=200),
    ):
        """Newest first: the caller's own thoughts plus everyone's public ones."""
        query = select(Thought).where(Thought.target_type == target_type)
        if target_id:
            query = query.where(Thought.target_id == canonical_target_id(target_type, target_id))
        if mine_only:
            if user is None:
                return {"success": True, "thoughts": [], "total": 0}
            query = query.where(Thought.user_id == user.user_id)
        elif user is None:
            query = query.where(Thought.visibility == "public")
        else:
            query = query.where(or_(Thought.visibility == "public", Thought.user_id == user.user_id))

        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        rows = (
            await db.execute(query.order_by(Thought.created_at.desc()).offset(offset).limit(limit))
        ).scalars().all()
        return {"success": True, "thoughts": [_thought_dict(t, user) for t in rows], "total": total}

    @router.post("", status_code=201)
    async def create_thought(
        body: ThoughtCreate,
        user: AuthUser = Depends(require_user),
        db: AsyncSession = Depends(get_db),
    ):
        target_id = canonical_target_id(target_type, body.resolve_target_id(target_type))
        if not target_id:
            raise ValidationError("Missing required fields", f"Required: {id_field}")
        content = _clean_content(body.content)
        if not await target_exists(db, target_type, target_id):
            raise NotFoundError("Target not found", f"No {target_type} with id {target_id}")

        thought = Thought(
            user_id=user.user_id,
            target_type=target_type,
            target_id=target_id,
            content=content,
            thought_type=(body.thought_type or "").strip() or "general",
            rating=body.rating,
            is_interested=body.is_interested,
            visibility=body.visibility,
        )
        db.add(thought)
        await db.flush()
        return {"success": True, "thought": _thought_dict(thought, user)}

    @router.put("/{thought_id}")
    async def update_thought(
        thought_id: UUID,
        body: ThoughtUpdate,
        user: AuthUser = Depends(require_user),
        db: AsyncSession = Depends(get_db),
    ):
        result = await db.execute(
            select(Thought).where(
                Thought.id == thought_id,
                Thought.target_type == target_type,
                Thought.user_id == user.user_id,
            )
        )
        thought = result.scalar_one_or_none()
        if thought is None:
            raise NotFoundError("Thought not found")

        changes = body.model_dump(exclude_unset=True)
        if "content" in changes:
            changes["content"] = _clean_content(changes["content"])
        for field in ("thought_type", "is_interested", "visibility"):
            if changes.get(field, "") is None:
                changes.pop(field)
        for field, value in changes.items():
            setattr(thought, field, value)
        await db.flush()
        return {"success": True, "thought": _thought_dict(thought, user)}

    @router.delete("/{thought_id}")
    async def delete_thought(
        thought_id: UUID,
        user: AuthUser = Depends(require_user),
        db: AsyncSession = Depends(get_db),
    ):
        result = await db.execute(
            delete(Thought).where(
                Thought.id == thought_id,
                Thought.target_type == target_type,
                Thought.user_id == user.user_id,
            )
        )
        return {"success": True, "deleted": bool(result.rowcount)}

    return router


job_router = build_thought_router("/job-thoughts", "job", "thoughts")
paper_router = build_thought_router("/paper-insights", "paper", "thoughts")
resource_router = build_thought_router("/resource-thoughts", "resource", "thoughts")


# --- Activity feed ---

activity_router = APIRouter(prefix="/user/activity", tags=["activity"])


@activity_router.get("")
async def user_activity(
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
):
    """The caller's thoughts and live comments, newest first."""
    thought_query = select(Thought).where(Thought.user_id == user.user_id)
    comment_query = select(Comment).where(Comment.user_id == user.user_id, Comment.is_deleted.is_(False))

    async def count(query) -> int:
        return (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()

    total = await count(thought_query) + await count(comment_query)
    thoughts = (await db.execute(thought_query.order_by(Thought.created_at.desc()).limit(limit))).scalars().all()
    comments = (await db.execute(comment_query.order_by(Comment.created_at.desc()).limit(limit))).scalars().all()

    entries = [(t, THOUGHT_KINDS[t.target_type], t.rating) for t in thoughts]
    entries += [(c, "comment", None) for c in comments]
    entries.sort(key=lambda e: e[0].created_at, reverse=True)

    activities = []
    for row, kind, rating in entries[:limit]:
        summary = await target_summary(db, row.target_type, row.target_id)
        activities.append({
            "id": str(row.id),
            "type": kind,
            "content": row.content,
            "rating": rating,
            "created_at": row.created_at.isoformat(),
            "target": {"type": row.target_type, **(summary or {"id": row.target_id, "title": None})},
        })
    return {"success": True, "activities": activities, "total": total}
