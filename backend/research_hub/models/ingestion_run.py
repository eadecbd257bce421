"""Ingestion run model: audit log and status record per background scrape."""

from sqlalchemy import Column, String, Integer, DateTime, Text, Index

from research_hub.models.base import Base, UUIDMixin, utcnow


class IngestionRun(UUIDMixin, Base):
    __tablename__ = "ingestion_runs"

    source = Column(String(100), nullable=False)  # key into extractors.sources.SOURCES
    kind = Column(String(20), nullable=False)  # jobs, papers
    status = Column(String(20), nullable=False, default="queued")  # queued, running, success, failed, timeout
    task_id = Column(String(255))

    started_at = Column(DateTime(timezone=True))
    finished_at = Column(DateTime(timezone=True))
    items_found = Column(Integer, default=0, nullable=False)
    items_new = Column(Integer, default=0, nullable=False)
    items_updated = Column(Integer, default=0, nullable=False)
    error_message = Column(Text)

    requested_by = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_ingestion_runs_source_created", "source", "created_at"),
    )
