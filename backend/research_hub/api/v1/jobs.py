"""Job listing API endpoints."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import String, cast, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.dependencies.auth import get_current_user, require_admin, require_user
from research_hub.errors import ConflictError, NotFoundError, require_fields
from research_hub.models.base import get_db
from research_hub.models.bookmark import Bookmark
from research_hub.models.job import Job
from research_hub.schemas.job import JobCreate, JobRead, JobUpdate
from research_hub.services.auth_service import AuthUser
from research_hub.services.job_service import find_duplicate_groups, make_job_id, redundant_job_ids
from research_hub.services.vote_service import user_votes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _job_dict(job: Job) -> dict:
    return JobRead.model_validate(job).model_dump()


@router.get("")
async def list_jobs(
    db: AsyncSession = Depends(get_db),
    user: AuthUser | None = Depends(get_current_user),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    company: str | None = Query(None, description="Company name (case-insensitive substring)"),
    skill: str | None = Query(None, description="Skill (case-insensitive substring)"),
    location: str | None = Query(None, description="Location (case-insensitive substring)"),
    search: str | None = Query(None, description="Search in title, company and description"),
):
    """List jobs with filters; signed-in callers get bookmark and vote state."""
    query = select(Job)
    if company:
        query = query.where(Job.company.ilike(f"%{company.strip()}%"))
    if skill:
        query = query.where(cast(Job.skills, String).ilike(f"%{skill.strip()}%"))
    if location:
        query = query.where(Job.location.ilike(f"%{location.strip()}%"))
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(Job.title.ilike(pattern), Job.company.ilike(pattern), Job.description.ilike(pattern))
        )

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    query = query.order_by(Job.created_at.desc(), Job.id).offset(offset).limit(limit)
    jobs = (await db.execute(query)).scalars().all()

    items = [_job_dict(job) for job in jobs]
    if user is not None and jobs:
        ids = [job.id for job in jobs]
        result = await db.execute(
            select(Bookmark.job_id).where(
                Bookmark.user_id == user.user_id,
                Bookmark.bookmark_type == "job",
                Bookmark.job_id.in_(ids),
            )
        )
        bookmarked = set(result.scalars().all())
        votes = await user_votes(db, user.user_id, "job", ids)
        for item in items:
            item["isBookmarked"] = item["id"] in bookmarked
            item["userVote"] = votes.get(item["id"])

    return {"success": True, "jobs": items, "total": total, "limit": limit, "offset": offset}


@router.get("/check-duplicates")
async def check_duplicates(
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    """Report jobs sharing company, title and location."""
    jobs = (await db.execute(select(Job))).scalars().all()
    groups = find_duplicate_groups(jobs)
    return {
        "success": True,
        "duplicate_groups": len(groups),
        "duplicate_jobs": sum(len(g) - 1 for g in groups),
        "groups": [
            {
                "company": g[0].company,
                "title": g[0].title,
                "location": g[0].location,
                "ids": [j.id for j in g],
            }
            for g in groups
        ],
    }


@router.post("/clean-duplicates")
async def clean_duplicates(
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    """Delete all but the newest copy of each duplicated ingested job."""
    jobs = (await db.execute(select(Job))).scalars().all()
    doomed = redundant_job_ids(jobs)
    if doomed:
        await db.execute(delete(Job).where(Job.id.in_(doomed)))
    logger.info("Removed %d duplicate jobs", len(doomed))
    return {"success": True, "deleted": len(doomed), "ids": doomed}


@router.get("/{job_id}")
async def get_job(job_id: str, db: AsyncSession = Depends(get_db)):
    job = await db.get(Job, job_id)
    if job is None:
        raise NotFoundError("Job not found", f"No job with id {job_id}")
    return {"success": True, "job": _job_dict(job)}


@router.post("")
async def save_job(
    body: JobCreate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Save a job; re-saving the caller's own id updates it in place."""
    require_fields(title=body.title, company=body.company)
    fields = body.model_dump(exclude={"id"})
    job_id = body.id.strip() if body.id and body.id.strip() else make_job_id(body.company)

    job = await db.get(Job, job_id)
    if job is not None:
        if job.user_id != user.user_id:
            raise ConflictError("Job already exists", f"Job {job_id} belongs to another source")
        for field, value in fields.items():
            setattr(job, field, value)
        await db.flush()
        return {"success": True, "action": "updated", "job": _job_dict(job)}

    job = Job(id=job_id, user_id=user.user_id, **fields)
    db.add(job)
    await db.flush()
    return {"success": True, "action": "created", "job": _job_dict(job)}


@router.put("/{job_id}")
async def update_job(
    job_id: str,
    body: JobUpdate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Job).where(Job.id == job_id, Job.user_id == user.user_id))
    job = result.scalar_one_or_none()
    if job is None:
        raise NotFoundError("Job not found", f"No job with id {job_id}")

    changes = body.model_dump(exclude_unset=True)
    require_fields(**{k: changes[k] for k in ("title", "company") if k in changes})
    if "skills" in changes and changes["skills"] is None:
        changes["skills"] = []
    for field, value in changes.items():
        setattr(job, field, value)
    await db.flush()
    return {"success": True, "job": _job_dict(job)}


@router.delete("/{job_id}")
async def delete_job(
    job_id: str,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(delete(Job).where(Job.id == job_id, Job.user_id == user.user_id))
    return {"success": True, "deleted": bool(result.rowcount)}
