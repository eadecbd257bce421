"""Up/down votes on jobs, papers, resources and comments."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import get_current_user, require_user
from research_hub.errors import ValidationError
from research_hub.models.base import get_db
from research_hub.schemas.vote import VoteCreate, VoteTargetType
from research_hub.services import vote_service
from research_hub.services.auth_service import AuthUser
from research_hub.services.targets import canonical_target_id

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("")
async def cast_vote(
    body: VoteCreate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """201 for a new vote, 200 when an opposite vote is flipped, 409 for a repeat."""
    target_id = canonical_target_id(body.target_type, body.resolve_target_id(body.target_type))
    if not target_id:
        raise ValidationError("Missing required fields", f"Required: target id for {body.target_type}")

    vote, action = await vote_service.cast_vote(db, user.user_id, body.target_type, target_id, body.vote_type)
    stats = await vote_service.vote_stats(db, body.target_type, [target_id])
    return JSONResponse(
        status_code=201 if action == "created" else 200,
        content={
            "success": True,
            "action": action,
            "vote": {
                "id": str(vote.id),
                "target_type": vote.target_type,
                "target_id": vote.target_id,
                "vote_type": vote.vote_type,
            },
            "stats": stats[target_id],
        },
    )


@router.delete("")
async def remove_vote(
    target_type: VoteTargetType = Query(...),
    target_id: str = Query(...),
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    target_id = canonical_target_id(target_type, target_id)
    removed = await vote_service.remove_vote(db, user.user_id, target_type, target_id)
    stats = await vote_service.vote_stats(db, target_type, [target_id])
    return {"success": True, "deleted": removed, "stats": stats[target_id]}


@router.get("")
async def vote_status(
    target_type: VoteTargetType = Query(...),
    target_id: str = Query(...),
    user: AuthUser | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Caller's own vote (null when anonymous) plus recomputed counts."""
    target_id = canonical_target_id(target_type, target_id)
    stats = await vote_service.vote_stats(db, target_type, [target_id])
    mine = await vote_service.user_votes(db, user.user_id if user else None, target_type, [target_id])
    return {"success": True, "userVote": mine.get(target_id), "stats": stats[target_id]}
