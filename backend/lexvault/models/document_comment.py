"""DocumentComment SQLAlchemy model"""

import uuid

from sqlalchemy import Column, Text, ForeignKey, Integer, DateTime, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class DocumentComment(Base):
    """Review comment on a document, optionally anchored to a page.

    Replies point at their parent comment on the same document. Comments go
    with their document when it is purged.
    """
    __tablename__ = "document_comment"
    __table_args__ = (
        Index("ix_document_comment_document_id_created_at", "document_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    document_id = Column(Uuid, ForeignKey("document.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    parent_id = Column(Uuid, ForeignKey("document_comment.id", ondelete="CASCADE"), nullable=True)
    content = Column(Text, nullable=False)
    page_number = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    author = relationship("User")
