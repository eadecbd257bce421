"""Existence checks and summaries for the things users bookmark, vote and comment on."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.models.comment import Comment
from research_hub.models.job import Job
from research_hub.models.research_paper import ResearchPaper
from research_hub.models.resource import InterviewResource, JobResource, UserResource

RESOURCE_MODELS = {
    "job_resource": JobResource,
    "interview_resource": InterviewResource,
}


def parse_uuid(value) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


def canonical_target_id(target_type: str, value) -> str | None:
    """Stored form of a target id: job ids as given, anything else as a lowercase hyphenated UUID."""
    if value is None:
        return None
    if target_type == "job":
        return str(value)
    uid = parse_uuid(value)
    return str(uid) if uid is not None else str(value)


async def resource_kind(db: AsyncSession, resource_id) -> str | None:
    """Which resource table holds `resource_id`, if any."""
    uid = parse_uuid(resource_id)
    if uid is None:
        return None
    for kind, model in RESOURCE_MODELS.items():
        if await _exists(db, select(model.id).where(model.id == uid)):
            return kind
    return None


async def _exists(db: AsyncSession, query) -> bool:
    result = await db.execute(query.limit(1))
    return result.first() is not None


async def target_exists(
    db: AsyncSession,
    target_type: str,
    target_id,
    resource_type: str | None = None,
) -> bool:
    """Whether a votable/commentable/bookmarkable target exists and is visible.

    User resources count only when public; comments only while not deleted.
    A `resource` target is looked up in the table named by `resource_type`,
    or in both resource tables when it is not given.
    """
    if target_id is None:
        return False

    if target_type == "job":
        return await _exists(db, select(Job.id).where(Job.id == str(target_id)))

    uid = parse_uuid(target_id)
    if uid is None:
        return False

    if target_type == "paper":
        return await _exists(db, select(ResearchPaper.id).where(ResearchPaper.id == uid))
    if target_type == "user_resource":
        return await _exists(
            db,
            select(UserResource.id).where(UserResource.id == uid, UserResource.visibility == "public"),
        )
    if target_type == "resource":
        models = [RESOURCE_MODELS[resource_type]] if resource_type in RESOURCE_MODELS else RESOURCE_MODELS.values()
        for model in models:
            if await _exists(db, select(model.id).where(model.id == uid)):
                return True
        return False
    if target_type == "comment":
        return await _exists(db, select(Comment.id).where(Comment.id == uid, Comment.is_deleted.is_(False)))
    return False


async def target_summary(db: AsyncSession, target_type: str, target_id, resource_type: str | None = None) -> dict | None:
    """Small embeddable description of a target, or None if it is gone."""
    if target_type == "job":
        job = await db.get(Job, str(target_id))
        if job is None:
            return None
        return {"id": job.id, "title": job.title, "company": job.company, "location": job.location, "salary": job.salary}

    uid = parse_uuid(target_id)
    if uid is None:
        return None

    if target_type == "paper":
        paper = await db.get(ResearchPaper, uid)
        if paper is None:
            return None
        return {"id": str(paper.id), "title": paper.title, "url": paper.url, "company": paper.company}

    if target_type == "user_resource":
        model = UserResource
    else:
        model = RESOURCE_MODELS.get(resource_type or await resource_kind(db, uid) or "")
    if model is None:
        return None
    resource = await db.get(model, uid)
    if resource is None:
        return None
    return {"id": str(resource.id), "title": resource.title, "url": resource.url, "resource_type": resource.resource_type}
