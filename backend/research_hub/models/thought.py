"""Personal notes on a job, paper or shared resource."""

from sqlalchemy import Column, String, Text, Boolean, Integer, ForeignKey, Index, Uuid

from research_hub.models.base import Base, TimestampMixin, UUIDMixin

# Activity-feed label per target type
THOUGHT_KINDS = {
    "job": "job_thought",
    "paper": "paper_insight",
    "resource": "resource_thought",
}


class Thought(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "thoughts"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_type = Column(String(20), nullable=False)
    target_id = Column(String(255), nullable=False)
    # Free-form category, e.g. general, pros, cons, question, note
    thought_type = Column(String(50), nullable=False, default="general")
    content = Column(Text, nullable=False)
    rating = Column(Integer)  # 1-5
    is_interested = Column(Boolean, nullable=False, default=True)
    visibility = Column(String(20), nullable=False, default="private")  # private, public

    __table_args__ = (
        Index("idx_thoughts_target", "target_type", "target_id"),
    )
