"""DocumentPermission SQLAlchemy model"""

import uuid

from sqlalchemy import Column, ForeignKey, DateTime, Uuid, UniqueConstraint, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship

from .base import Base, utcnow
from ..permissions.levels import PermissionLevel


class DocumentPermission(Base):
    """Explicit grant of a permission level on one document to one user.

    At most one row exists per (document, user). Rows are never deleted:
    revoking access sets the level to NONE, and document_id carries no foreign
    key so the grant history outlives a purge of the document.
    """
    __tablename__ = "document_permission"
    __table_args__ = (
        UniqueConstraint("document_id", "user_id", name="uq_document_permission_document_user"),
        Index("ix_document_permission_user_id", "user_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    document_id = Column(Uuid, nullable=False)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    level = Column(
        SQLEnum(PermissionLevel, name="permissionlevel", native_enum=False),
        nullable=False,
        default=PermissionLevel.NONE
    )
    granted_by = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    document = relationship("Document", primaryjoin="foreign(DocumentPermission.document_id) == Document.id")
    user = relationship("User", foreign_keys=[user_id])
