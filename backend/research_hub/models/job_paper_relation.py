"""Job to paper relation: surfaces related research for a job."""

from sqlalchemy import Column, String, Text, Float, DateTime, ForeignKey, UniqueConstraint, Uuid

from research_hub.models.base import Base, UUIDMixin, utcnow


class JobPaperRelation(UUIDMixin, Base):
    __tablename__ = "job_paper_relations"

    job_id = Column(String(255), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    paper_id = Column(Uuid(as_uuid=True), ForeignKey("research_papers.id", ondelete="CASCADE"), nullable=False, index=True)
    relevance_score = Column(Float, nullable=False, default=0.5)
    relevance_reason = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("job_id", "paper_id", name="uq_job_paper_relations_pair"),
    )
