"""Research paper and job/paper relation endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import String, cast, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import require_user
from research_hub.errors import ConflictError, NotFoundError, require_fields
from research_hub.models.base import get_db
from research_hub.models.job import Job
from research_hub.models.job_paper_relation import JobPaperRelation
from research_hub.models.research_paper import ResearchPaper
from research_hub.schemas.job import JobSummary, RelationCreate, RelationRead
from research_hub.schemas.paper import PaperCreate, PaperRead, PaperUpdate
from research_hub.services.auth_service import AuthUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/research", tags=["research"])


def _paper_dict(paper: ResearchPaper) -> dict:
    return PaperRead.model_validate(paper).model_dump()


@router.get("/papers")
async def list_papers(
    db: AsyncSession = Depends(get_db),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    company: str | None = Query(None, description="Company name (case-insensitive equality)"),
    tag: str | None = Query(None),
    search: str | None = Query(None, description="Search in title and abstract"),
):
    query = select(ResearchPaper)
    if company:
        query = query.where(func.lower(ResearchPaper.company) == company.strip().lower())
    if tag:
        query = query.where(cast(ResearchPaper.tags, String).ilike(f"%{tag.strip()}%"))
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(ResearchPaper.title.ilike(pattern), ResearchPaper.abstract.ilike(pattern)))

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    query = query.order_by(
        ResearchPaper.publication_date.desc().nullslast(), ResearchPaper.created_at.desc()
    ).offset(offset).limit(limit)
    papers = (await db.execute(query)).scalars().all()
    return {
        "success": True,
        "papers": [_paper_dict(p) for p in papers],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.get("/papers/{paper_id}")
async def get_paper(paper_id: UUID, db: AsyncSession = Depends(get_db)):
    paper = await db.get(ResearchPaper, paper_id)
    if paper is None:
        raise NotFoundError("Paper not found", f"No paper with id {paper_id}")
    return {"success": True, "paper": _paper_dict(paper)}


@router.post("/papers")
async def save_paper(
    body: PaperCreate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Save a paper, keyed by url. Re-saving your own paper updates it."""
    require_fields(title=body.title, url=body.url)
    fields = body.model_dump()
    fields["url"] = fields["url"].strip()

    result = await db.execute(select(ResearchPaper).where(ResearchPaper.url == fields["url"]))
    paper = result.scalar_one_or_none()
    if paper is not None:
        if paper.user_id != user.user_id:
            raise ConflictError("Paper already exists", "A paper with this url is already saved")
        for field, value in fields.items():
            setattr(paper, field, value)
        await db.flush()
        return {"success": True, "action": "updated", "paper": _paper_dict(paper)}

    paper = ResearchPaper(user_id=user.user_id, **fields)
    db.add(paper)
    await db.flush()
    return {"success": True, "action": "created", "paper": _paper_dict(paper)}


@router.put("/papers/{paper_id}")
async def update_paper(
    paper_id: UUID,
    body: PaperUpdate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(ResearchPaper).where(ResearchPaper.id == paper_id, ResearchPaper.user_id == user.user_id)
    )
    paper = result.scalar_one_or_none()
    if paper is None:
        raise NotFoundError("Paper not found", f"No paper with id {paper_id}")

    changes = body.model_dump(exclude_unset=True)
    if "title" in changes:
        require_fields(title=changes["title"])
    for field in ("authors", "tags"):
        if field in changes and changes[field] is None:
            changes[field] = []
    for field, value in changes.items():
        setattr(paper, field, value)
    await db.flush()
    return {"success": True, "paper": _paper_dict(paper)}


@router.delete("/papers/{paper_id}")
async def delete_paper(
    paper_id: UUID,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        delete(ResearchPaper).where(ResearchPaper.id == paper_id, ResearchPaper.user_id == user.user_id)
    )
    return {"success": True, "deleted": bool(result.rowcount)}


# --- Job / paper relations ---

@router.post("/relate-paper")
async def relate_paper(
    body: RelationCreate,
    _user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Link a job to a paper, or update the existing link's score."""
    if await db.get(Job, body.job_id) is None:
        raise NotFoundError("Job not found", f"No job with id {body.job_id}")
    if await db.get(ResearchPaper, body.paper_id) is None:
        raise NotFoundError("Paper not found", f"No paper with id {body.paper_id}")

    result = await db.execute(
        select(JobPaperRelation).where(
            JobPaperRelation.job_id == body.job_id,
            JobPaperRelation.paper_id == body.paper_id,
        )
    )
    relation = result.scalar_one_or_none()
    action = "updated"
    if relation is None:
        relation = JobPaperRelation(job_id=body.job_id, paper_id=body.paper_id)
        db.add(relation)
        action = "created"
    relation.relevance_score = body.relevance_score
    relation.relevance_reason = body.relevance_reason
    await db.flush()
    return {"success": True, "action": action, "relation": RelationRead.model_validate(relation).model_dump()}


@router.delete("/relate-paper")
async def unrelate_paper(
    job_id: str = Query(...),
    paper_id: UUID = Query(...),
    _user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        delete(JobPaperRelation).where(
            JobPaperRelation.job_id == job_id,
            JobPaperRelation.paper_id == paper_id,
        )
    )
    return {"success": True, "deleted": bool(result.rowcount)}


@router.get("/jobs/{job_id}/papers")
async def related_papers(job_id: str, db: AsyncSession = Depends(get_db)):
    """Papers related to a job, most relevant first."""
    result = await db.execute(
        select(ResearchPaper, JobPaperRelation)
        .join(JobPaperRelation, JobPaperRelation.paper_id == ResearchPaper.id)
        .where(JobPaperRelation.job_id == job_id)
        .order_by(JobPaperRelation.relevance_score.desc())
    )
    papers = [
        {
            **_paper_dict(paper),
            "relevance_score": relation.relevance_score,
            "relevance_reason": relation.relevance_reason,
        }
        for paper, relation in result.all()
    ]
    return {"success": True, "job_id": job_id, "papers": papers}


@router.get("/papers/{paper_id}/jobs")
async def related_jobs(paper_id: UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Job, JobPaperRelation)
        .join(JobPaperRelation, JobPaperRelation.job_id == Job.id)
        .where(JobPaperRelation.paper_id == paper_id)
        .order_by(JobPaperRelation.relevance_score.desc())
    )
    jobs = [
        {
            **JobSummary.model_validate(job).model_dump(),
            "relevance_score": relation.relevance_score,
            "relevance_reason": relation.relevance_reason,
        }
        for job, relation in result.all()
    ]
    return {"success": True, "paper_id": str(paper_id), "jobs": jobs}
