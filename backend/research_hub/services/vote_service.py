"""Vote casting and aggregation.

Counts are recomputed from the vote rows on every read.
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.errors import ConflictError, NotFoundError
from research_hub.models.vote import Vote
from research_hub.services.targets import target_exists

logger = logging.getLogger(__name__)


async def cast_vote(
    db: AsyncSession,
    user_id: UUID,
    target_type: str,
    target_id: str,
    vote_type: int,
) -> tuple[Vote, str]:
    """Insert, flip or reject a vote. Returns the row and "created" or "updated"."""
    if not await target_exists(db, target_type, target_id):
        raise NotFoundError("Target not found", f"No {target_type} with id {target_id}")

    result = await db.execute(
        select(Vote).where(
            Vote.user_id == user_id,
            Vote.target_type == target_type,
            Vote.target_id == target_id,
        )
    )
    existing = result.scalar_one_or_none()

    if existing is not None:
        if existing.vote_type == vote_type:
            raise ConflictError("Already voted", "You have already cast this vote")
        existing.vote_type = vote_type
        await db.flush()
        return existing, "updated"

    vote = Vote(user_id=user_id, target_type=target_type, target_id=target_id, vote_type=vote_type)
    db.add(vote)
    try:
        await db.flush()
    except IntegrityError:
        # Lost the check-then-insert race to a concurrent request
        await db.rollback()
        raise ConflictError("Already voted", "You have already cast this vote")
    return vote, "created"


async def remove_vote(db: AsyncSession, user_id: UUID, target_type: str, target_id: str) -> bool:
    result = await db.execute(
        delete(Vote).where(
            Vote.user_id == user_id,
            Vote.target_type == target_type,
            Vote.target_id == target_id,
        )
    )
    return bool(result.rowcount)


def _empty_stats() -> dict:
    return {"upvotes": 0, "downvotes": 0, "total": 0, "score": 0}


async def vote_stats(db: AsyncSession, target_type: str, target_ids: list[str]) -> dict[str, dict]:
    """Aggregate counts per target id. Ids without votes get zeroed stats."""
    stats = {str(tid): _empty_stats() for tid in target_ids}
    if not stats:
        return stats

    result = await db.execute(
        select(Vote.target_id, Vote.vote_type, func.count())
        .where(Vote.target_type == target_type, Vote.target_id.in_(list(stats)))
        .group_by(Vote.target_id, Vote.vote_type)
    )
    for target_id, vote_type, count in result.all():
        entry = stats[target_id]
        if vote_type == 1:
            entry["upvotes"] += count
        else:
            entry["downvotes"] += count

    for entry in stats.values():
        entry["total"] = entry["upvotes"] + entry["downvotes"]
        entry["score"] = entry["upvotes"] - entry["downvotes"]
    return stats


async def user_votes(db: AsyncSession, user_id: UUID | None, target_type: str, target_ids: list[str]) -> dict[str, int]:
    """The caller's own vote per target id (absent keys mean no vote)."""
    if user_id is None or not target_ids:
        return {}
    result = await db.execute(
        select(Vote.target_id, Vote.vote_type).where(
            Vote.user_id == user_id,
            Vote.target_type == target_type,
            Vote.target_id.in_([str(t) for t in target_ids]),
        )
    )
    return {target_id: vote_type for target_id, vote_type in result.all()}
