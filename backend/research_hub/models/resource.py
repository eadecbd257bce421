"""Resource models: user, job and interview resources share one shape."""

from sqlalchemy import Column, String, Text, ForeignKey, Uuid
from sqlalchemy.orm import declared_attr

from research_hub.models.base import Base, JSONType, TimestampMixin, UUIDMixin


class ResourceMixin:
    title = Column(String(255), nullable=False)
    url = Column(Text)
    resource_type = Column(String(50), default="other", nullable=False)
    tags = Column(JSONType, default=list, nullable=False)

    @declared_attr
    def user_id(cls):
        return Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class UserResource(ResourceMixin, UUIDMixin, TimestampMixin, Base):
    __tablename__ = "user_resources"

    description = Column(Text, nullable=False)
    content = Column(Text)
    visibility = Column(String(10), default="public", nullable=False)  # public, private


class JobResource(ResourceMixin, UUIDMixin, TimestampMixin, Base):
    __tablename__ = "job_resources"

    description = Column(Text)
    job_id = Column(String(255), ForeignKey("jobs.id", ondelete="SET NULL"), index=True)


class InterviewResource(ResourceMixin, UUIDMixin, TimestampMixin, Base):
    __tablename__ = "interview_resources"

    content = Column(Text, nullable=False)
    job_id = Column(String(255), ForeignKey("jobs.id", ondelete="SET NULL"), index=True)
