"""Notification SQLAlchemy model"""

import uuid

from sqlalchemy import Column, Text, ForeignKey, Boolean, DateTime, Uuid, Index

from .base import Base, utcnow


class Notification(Base):
    """In-app notification addressed to one user."""
    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_id_is_read", "user_id", "is_read"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Text, nullable=False, default="info")
    entity_type = Column(Text, nullable=True)
    entity_id = Column(Uuid, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
