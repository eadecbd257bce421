"""Project model: a user's plan linking jobs, papers and resources."""

from sqlalchemy import Column, String, Text, Integer, Boolean, Date, ForeignKey, Uuid

from research_hub.models.base import Base, JSONType, TimestampMixin, UUIDMixin

PROJECT_STATUSES = ("planning", "in_progress", "completed", "on_hold")
PROJECT_PRIORITIES = ("low", "medium", "high")
PROJECT_CATEGORIES = ("job_search", "skill_development", "research", "networking", "other")


class Project(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "projects"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="", nullable=False)
    status = Column(String(20), default="planning", nullable=False)
    priority = Column(String(10), default="medium", nullable=False)
    category = Column(String(30), default="job_search", nullable=False)
    progress = Column(Integer, default=0, nullable=False)
    target_date = Column(Date)
    tags = Column(JSONType, default=list, nullable=False)

    # Replaced wholesale on update
    linked_jobs = Column(JSONType, default=list, nullable=False)
    linked_papers = Column(JSONType, default=list, nullable=False)
    linked_resources = Column(JSONType, default=list, nullable=False)

    notes = Column(Text, default="", nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)
