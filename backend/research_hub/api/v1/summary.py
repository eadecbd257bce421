"""Company salary and skills summary, and comparisons between companies."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.models.base import get_db
from research_hub.schemas.summary import CompareRequest
from research_hub.services.summary_service import compare_companies, get_summary

router = APIRouter(tags=["summary"])


@router.get("/get-summary")
async def summary(
    company: str | None = Query(None, description="Company name (case-insensitive)"),
    db: AsyncSession = Depends(get_db),
):
    """An unknown company yields an all-zero summary, not an error."""
    return {"success": True, "summary": await get_summary(db, company)}


@router.post("/compare-companies")
async def compare(body: CompareRequest, db: AsyncSession = Depends(get_db)):
    """400 unless at least two of the named companies have jobs."""
    return {"success": True, **await compare_companies(db, body.companies)}
