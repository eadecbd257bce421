"""Pydantic schemas package."""

from research_hub.schemas.auth import RegisterRequest, LoginRequest, LogoutRequest, UserRead
from research_hub.schemas.job import (
    JobBase,
    JobCreate,
    JobUpdate,
    JobRead,
    JobSummary,
    RelationCreate,
    RelationRead,
)
from research_hub.schemas.paper import PaperCreate, PaperUpdate, PaperRead, PaperSummary
from research_hub.schemas.bookmark import BookmarkCreate, BookmarkUpdate, BookmarkRead
from research_hub.schemas.vote import VoteCreate
from research_hub.schemas.comment import CommentCreate, CommentUpdate, CommentRead, CommentAuthor
from research_hub.schemas.project import ProjectCreate, ProjectUpdate, ProgressUpdate, ProjectRead
from research_hub.schemas.resource import (
    UserResourceCreate,
    JobResourceCreate,
    InterviewResourceCreate,
    ResourceUpdate,
    ResourceRead,
)
from research_hub.schemas.ingestion import ScrapeRequest, IngestionRunRead, SourceRead

# Resolve the self-referencing replies field
CommentRead.model_rebuild()

__all__ = [
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "LogoutRequest",
    "UserRead",
    # Jobs
    "JobBase",
    "JobCreate",
    "JobUpdate",
    "JobRead",
    "JobSummary",
    "RelationCreate",
    "RelationRead",
    # Papers
    "PaperCreate",
    "PaperUpdate",
    "PaperRead",
    "PaperSummary",
    # Bookmarks / votes / comments
    "BookmarkCreate",
    "BookmarkUpdate",
    "BookmarkRead",
    "VoteCreate",
    "CommentCreate",
    "CommentUpdate",
    "CommentRead",
    "CommentAuthor",
    # Projects
    "ProjectCreate",
    "ProjectUpdate",
    "ProgressUpdate",
    "ProjectRead",
    # Resources
    "UserResourceCreate",
    "JobResourceCreate",
    "InterviewResourceCreate",
    "ResourceUpdate",
    "ResourceRead",
    # Ingestion
    "ScrapeRequest",
    "IngestionRunRead",
    "SourceRead",
]
