"""Heuristic recommendations from a user's bookmarks and up-votes.

Scoring is a pure function so it can be tested without a database:

    +30  candidate company matches a company the user engaged with
    +10  per skill (jobs) or tag (papers) the user engaged with
    +5   high salary (jobs) or published in the last 30 days (papers)
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from research_hub.models.base import utcnow
from research_hub.models.bookmark import Bookmark
from research_hub.models.job import Job
from research_hub.models.research_paper import ResearchPaper
from research_hub.models.vote import Vote
from research_hub.services.targets import parse_uuid

logger = logging.getLogger(__name__)

COMPANY_WEIGHT = 30
SKILL_WEIGHT = 10
BONUS_WEIGHT = 5
HIGH_SALARY_THRESHOLD = 200  # thousands
RECENT_DAYS = 30
CANDIDATE_LIMIT = 50


@dataclass
class UserProfile:
    companies: set[str] = field(default_factory=set)
    skills: set[str] = field(default_factory=set)
    seen_jobs: set[str] = field(default_factory=set)
    seen_papers: set[str] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return not self.companies and not self.skills


def _norm(value: str | None) -> str:
    return (value or "").strip().lower()


def build_profile(jobs: list, papers: list, seen_jobs=(), seen_papers=()) -> UserProfile:
    """Collect companies and skills/tags from jobs and papers the user liked."""
    profile = UserProfile(seen_jobs=set(seen_jobs), seen_papers=set(seen_papers))
    for job in jobs:
        if job.company:
            profile.companies.add(_norm(job.company))
        profile.skills.update(_norm(s) for s in (job.skills or []) if s)
    for paper in papers:
        if paper.company:
            profile.companies.add(_norm(paper.company))
        profile.skills.update(_norm(t) for t in (paper.tags or []) if t)
    return profile


def score(candidate, profile: UserProfile, now: datetime | None = None) -> tuple[int, list[str]]:
    """Score a Job or ResearchPaper against a profile. Returns (score, reasons)."""
    now = now or utcnow()
    total = 0
    reasons = []

    company = _norm(getattr(candidate, "company", None))
    if company and company in profile.companies:
        total += COMPANY_WEIGHT
        reasons.append(f"You've shown interest in {candidate.company}")

    is_job = hasattr(candidate, "skills")
    labels = candidate.skills if is_job else getattr(candidate, "tags", None)
    matched = [label for label in (labels or []) if _norm(label) in profile.skills]
    if matched:
        total += SKILL_WEIGHT * len(matched)
        noun = "skills" if is_job else "topics"
        reasons.append(f"Matches your {noun}: {', '.join(matched[:3])}")

    if is_job:
        if (candidate.salary_max or 0) > HIGH_SALARY_THRESHOLD:
            total += BONUS_WEIGHT
            reasons.append("High salary")
    else:
        published = getattr(candidate, "publication_date", None)
        if isinstance(published, datetime):
            published = published.date()
        if isinstance(published, date) and now.date() - published < timedelta(days=RECENT_DAYS):
            total += BONUS_WEIGHT
            reasons.append("Recently published")

    return total, reasons


async def load_profile(db: AsyncSession, user_id: UUID) -> UserProfile:
    """Profile from bookmarked and up-voted jobs and papers."""
    result = await db.execute(select(Bookmark).where(Bookmark.user_id == user_id))
    bookmarks = result.scalars().all()
    result = await db.execute(
        select(Vote).where(Vote.user_id == user_id, Vote.target_type.in_(("job", "paper")))
    )
    votes = result.scalars().all()

    seen_jobs = {b.job_id for b in bookmarks if b.job_id}
    seen_papers = {str(b.paper_id) for b in bookmarks if b.paper_id}
    seen_jobs |= {v.target_id for v in votes if v.target_type == "job"}
    seen_papers |= {v.target_id for v in votes if v.target_type == "paper"}

    liked_jobs = {b.job_id for b in bookmarks if b.job_id}
    liked_jobs |= {v.target_id for v in votes if v.target_type == "job" and v.vote_type == 1}
    liked_papers = {b.paper_id for b in bookmarks if b.paper_id}
    liked_papers |= {parse_uuid(v.target_id) for v in votes if v.target_type == "paper" and v.vote_type == 1}
    liked_papers.discard(None)

    jobs, papers = [], []
    if liked_jobs:
        jobs = (await db.execute(select(Job).where(Job.id.in_(liked_jobs)))).scalars().all()
    if liked_papers:
        papers = (
            await db.execute(select(ResearchPaper).where(ResearchPaper.id.in_(liked_papers)))
        ).scalars().all()

    return build_profile(jobs, papers, seen_jobs, seen_papers)


def _job_item(job: Job) -> dict:
    return {
        "id": job.id,
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "salary": job.salary,
        "salary_max": job.salary_max,
        "skills": job.skills or [],
        "url": job.url,
    }


def _paper_item(paper: ResearchPaper) -> dict:
    return {
        "id": str(paper.id),
        "title": paper.title,
        "company": paper.company,
        "url": paper.url,
        "tags": paper.tags or [],
        "publication_date": paper.publication_date.isoformat() if paper.publication_date else None,
    }


async def recommend(db: AsyncSession, user_id: UUID, kind: str = "all", limit: int = 10) -> list[dict]:
    profile = await load_profile(db, user_id)
    if profile.is_empty:
        return []

    now = utcnow()
    scored = []

    if kind in ("all", "job"):
        query = select(Job).order_by(Job.created_at.desc()).limit(CANDIDATE_LIMIT)
        if profile.seen_jobs:
            query = query.where(Job.id.not_in(profile.seen_jobs))
        for job in (await db.execute(query)).scalars().all():
            points, reasons = score(job, profile, now)
            if points > 0:
                scored.append({"type": "job", "score": points, "reasons": reasons, "item": _job_item(job)})

    if kind in ("all", "paper"):
        query = select(ResearchPaper).order_by(ResearchPaper.created_at.desc()).limit(CANDIDATE_LIMIT)
        seen = [parse_uuid(p) for p in profile.seen_papers]
        seen = [p for p in seen if p is not None]
        if seen:
            query = query.where(ResearchPaper.id.not_in(seen))
        for paper in (await db.execute(query)).scalars().all():
            points, reasons = score(paper, profile, now)
            if points > 0:
                scored.append({"type": "paper", "score": points, "reasons": reasons, "item": _paper_item(paper)})

    scored.sort(key=lambda r: r["score"], reverse=True)
    logger.debug("Scored %d recommendations for user %s", len(scored), user_id)
    return scored[:limit]
