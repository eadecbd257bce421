"""Personalised job and paper recommendations."""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import require_user
from research_hub.models.base import get_db
from research_hub.services.auth_service import AuthUser
from research_hub.services.recommendation_service import recommend

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get("")
async def get_recommendations(
    kind: Literal["all", "job", "paper"] = Query("all", alias="type"),
    limit: int = Query(10, ge=1, le=50),
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    items = await recommend(db, user.user_id, kind, limit)
    return {"success": True, "recommendations": items, "total": len(items)}
