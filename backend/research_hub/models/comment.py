"""Comment model: threaded discussion on jobs, papers and resources."""

from sqlalchemy import Column, String, Text, Boolean, ForeignKey, Index, Uuid

from research_hub.models.base import Base, TimestampMixin, UUIDMixin

COMMENT_TARGET_TYPES = ("job", "paper", "resource", "user_resource")
TOMBSTONE = "[This comment has been deleted]"


class Comment(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "comments"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_type = Column(String(20), nullable=False)
    target_id = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    parent_comment_id = Column(Uuid(as_uuid=True), ForeignKey("comments.id", ondelete="SET NULL"), index=True)
    is_edited = Column(Boolean, default=False, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("idx_comments_target", "target_type", "target_id"),
    )
