"""Document SQLAlchemy model

Document represents one stored file of the firm (Word, PDF or spreadsheet).
Tracks ownership, lifecycle status, sharing status and the soft-delete marker.
"""

import enum
import uuid

from sqlalchemy import (
    Column, Text, ForeignKey, BigInteger, Boolean, CheckConstraint, DateTime, Uuid, Index, Enum as SQLEnum
)
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class DocumentType(str, enum.Enum):
    """Declared file type of a document."""
    DOCX = "DOCX"  # Word processor
    PDF = "PDF"
    XLSX = "XLSX"  # Spreadsheet


class FileStatus(str, enum.Enum):
    """Lifecycle status of a document.

    State flow: any status may move to any other via status change;
    archive/unarchive toggles between ARCHIVED and ACTIVE.
    """
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    ARCHIVED = "ARCHIVED"


class SharingStatus(str, enum.Enum):
    """Sharing status of a document.

    ASSIGNED holds only while at least one open assignment references the document.
    """
    NONE = "NONE"
    SENT = "SENT"
    ASSIGNED = "ASSIGNED"


class Document(Base):
    """Document model.

    Soft-deleted documents keep their row (is_deleted/deleted_at) and their
    file_status so that restore brings them back unchanged. Only purge removes
    the row.
    """
    __tablename__ = "document"
    __table_args__ = (
        Index("ix_document_owner_id", "owner_id"),
        Index("ix_document_group_id", "group_id"),
        Index("ix_document_is_deleted_updated_at", "is_deleted", "updated_at"),
        # Trash marker and timestamp move together
        CheckConstraint("is_deleted = (deleted_at IS NOT NULL)", name="ck_document_deleted_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    type = Column(SQLEnum(DocumentType, name="documenttype", native_enum=False), nullable=False)
    owner_id = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    group_id = Column(Uuid, ForeignKey("group.id", ondelete="SET NULL"), nullable=True)
    description = Column(Text, nullable=True)
    size_bytes = Column(BigInteger, nullable=False, default=0)
    mime_type = Column(Text, nullable=True)
    storage_key = Column(Text, nullable=True)  # Location in file storage (external)
    file_status = Column(
        SQLEnum(FileStatus, name="filestatus", native_enum=False),
        nullable=False,
        default=FileStatus.ACTIVE
    )
    sharing_status = Column(
        SQLEnum(SharingStatus, name="sharingstatus", native_enum=False),
        nullable=False,
        default=SharingStatus.NONE
    )
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User", foreign_keys=[owner_id])
    deleter = relationship("User", foreign_keys=[deleted_by])
    group = relationship("Group")
