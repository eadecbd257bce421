"""API v1 router aggregation."""

from fastapi import APIRouter

from research_hub.api.v1.auth import router as auth_router
from research_hub.api.v1.jobs import router as jobs_router
from research_hub.api.v1.papers import router as papers_router
from research_hub.api.v1.bookmarks import router as bookmarks_router
from research_hub.api.v1.votes import router as votes_router
from research_hub.api.v1.comments import router as comments_router
from research_hub.api.v1.thoughts import job_router as job_thoughts_router
from research_hub.api.v1.thoughts import paper_router as paper_insights_router
from research_hub.api.v1.thoughts import resource_router as resource_thoughts_router
from research_hub.api.v1.thoughts import activity_router
from research_hub.api.v1.projects import router as projects_router
from research_hub.api.v1.resources import user_router as user_resources_router
from research_hub.api.v1.resources import job_router as job_resources_router
from research_hub.api.v1.resources import interview_router as interview_resources_router
from research_hub.api.v1.recommendations import router as recommendations_router
from research_hub.api.v1.summary import router as summary_router
from research_hub.api.v1.ingestion import router as ingestion_router
from research_hub.api.v1.ingestion import status_router as scraping_status_router

router = APIRouter(prefix="/api/v1")

router.include_router(auth_router)
router.include_router(jobs_router)
router.include_router(papers_router)
router.include_router(bookmarks_router)
router.include_router(votes_router)
router.include_router(comments_router)
router.include_router(job_thoughts_router)
router.include_router(paper_insights_router)
router.include_router(resource_thoughts_router)
router.include_router(activity_router)
router.include_router(projects_router)
router.include_router(user_resources_router)
router.include_router(job_resources_router)
router.include_router(interview_resources_router)
router.include_router(recommendations_router)
router.include_router(summary_router)
router.include_router(ingestion_router)
router.include_router(scraping_status_router)
