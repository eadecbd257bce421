"""Job model: scraped or manually saved job listings."""

from sqlalchemy import Column, String, Text, Integer, ForeignKey, Index, Uuid

from research_hub.models.base import Base, JSONType, TimestampMixin


class Job(TimestampMixin, Base):
    __tablename__ = "jobs"

    # Natural key (e.g. "anthropic-4012345008"); upserts key on it
    id = Column(String(255), primary_key=True)

    title = Column(Text, nullable=False)
    company = Column(String(255), nullable=False, index=True)
    location = Column(String(255))
    department = Column(String(255))

    # Salary in thousands of currency units; `salary` keeps the display text
    salary = Column(String(255))
    salary_min = Column(Integer)
    salary_max = Column(Integer)

    skills = Column(JSONType, default=list, nullable=False)
    description = Column(Text)
    url = Column(Text)

    # Null for ingested rows, set for manual saves
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), index=True)

    __table_args__ = (
        Index("idx_jobs_company_title", "company", "title"),
    )
