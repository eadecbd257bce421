"""Vote model: one up/down vote per user per target."""

from sqlalchemy import Column, String, SmallInteger, ForeignKey, UniqueConstraint, Index, Uuid

from research_hub.models.base import Base, TimestampMixin, UUIDMixin

VOTE_TARGET_TYPES = ("job", "paper", "resource", "user_resource", "comment")


class Vote(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "votes"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_type = Column(String(20), nullable=False)
    target_id = Column(String(255), nullable=False)
    vote_type = Column(SmallInteger, nullable=False)  # 1 or -1

    __table_args__ = (
        UniqueConstraint("user_id", "target_type", "target_id", name="uq_votes_user_target"),
        Index("idx_votes_target", "target_type", "target_id"),
    )
