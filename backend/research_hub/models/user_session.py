"""User session model: server-side record of issued tokens, for revocation."""

from sqlalchemy import Column, Text, DateTime, ForeignKey, Uuid

from research_hub.models.base import Base, UUIDMixin, utcnow


class UserSession(UUIDMixin, Base):
    __tablename__ = "user_sessions"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    session_token = Column(Text, unique=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
