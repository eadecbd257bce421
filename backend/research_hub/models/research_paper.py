"""Research paper model."""

from sqlalchemy import Column, String, Text, Date, ForeignKey, Uuid

from research_hub.models.base import Base, JSONType, TimestampMixin, UUIDMixin


class ResearchPaper(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "research_papers"

    title = Column(Text, nullable=False)
    authors = Column(JSONType, default=list, nullable=False)  # ordered
    publication_date = Column(Date)
    abstract = Column(Text)
    url = Column(Text, unique=True, nullable=False)  # upsert conflict key
    arxiv_id = Column(String(50))
    github_url = Column(Text)
    company = Column(String(255), index=True)
    tags = Column(JSONType, default=list, nullable=False)

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), index=True)
