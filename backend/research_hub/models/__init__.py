"""Database models: import all so metadata and relationships resolve."""

from research_hub.models.base import Base
from research_hub.models.user import User
from research_hub.models.user_session import UserSession
from research_hub.models.job import Job
from research_hub.models.research_paper import ResearchPaper
from research_hub.models.job_paper_relation import JobPaperRelation
from research_hub.models.bookmark import Bookmark
from research_hub.models.vote import Vote
from research_hub.models.comment import Comment
from research_hub.models.thought import Thought
from research_hub.models.project import Project
from research_hub.models.resource import UserResource, JobResource, InterviewResource
from research_hub.models.ingestion_run import IngestionRun

__all__ = [
    "Base",
    "User",
    "UserSession",
    "Job",
    "ResearchPaper",
    "JobPaperRelation",
    "Bookmark",
    "Vote",
    "Comment",
    "Thought",
    "Project",
    "UserResource",
    "JobResource",
    "InterviewResource",
    "IngestionRun",
]
