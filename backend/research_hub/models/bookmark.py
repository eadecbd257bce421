"""Bookmark model: a user's saved jobs, papers and resources."""

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid

from research_hub.models.base import Base, JSONType, UUIDMixin, utcnow

BOOKMARK_TYPES = ("job", "paper", "resource", "user_resource")


class Bookmark(UUIDMixin, Base):
    __tablename__ = "user_bookmarks"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    bookmark_type = Column(String(20), nullable=False)  # job, paper, resource, user_resource

    # Exactly one target is set, matching bookmark_type
    job_id = Column(String(255), ForeignKey("jobs.id", ondelete="CASCADE"))
    paper_id = Column(Uuid(as_uuid=True), ForeignKey("research_papers.id", ondelete="CASCADE"))
    resource_id = Column(Uuid(as_uuid=True))
    resource_type = Column(String(30))  # job_resource, interview_resource (for "resource" bookmarks)

    notes = Column(Text)
    tags = Column(JSONType, default=list, nullable=False)
    is_favorite = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "bookmark_type", "job_id", name="uq_bookmarks_user_job"),
        UniqueConstraint("user_id", "bookmark_type", "paper_id", name="uq_bookmarks_user_paper"),
        UniqueConstraint("user_id", "bookmark_type", "resource_id", name="uq_bookmarks_user_resource"),
    )

    @property
    def target_id(self) -> str | None:
        value = self.job_id or self.paper_id or self.resource_id
        return str(value) if value is not None else None
