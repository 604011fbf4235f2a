"""DocumentAssignment SQLAlchemy model"""

import enum
import uuid

from sqlalchemy import Column, Text, ForeignKey, DateTime, Uuid, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class AssignmentStatus(str, enum.Enum):
    """Status values for a document hand-off.

    State flow: PENDING → ACCEPTED → COMPLETED, or PENDING → REJECTED.
    Terminal states: COMPLETED, REJECTED
    """
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class DocumentAssignment(Base):
    """Hand-off of a document from an assigner to an assignee.

    Assignments are retained for audit and never deleted. document_id carries
    no foreign key so the row outlives a purge of its document.
    """
    __tablename__ = "document_assignment"
    __table_args__ = (
        Index("ix_document_assignment_assigned_to", "assigned_to", "status"),
        Index("ix_document_assignment_assigned_by", "assigned_by", "status"),
        Index("ix_document_assignment_document_id", "document_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    document_id = Column(Uuid, nullable=False)
    assigned_by = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    assigned_to = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    status = Column(
        SQLEnum(AssignmentStatus, name="assignmentstatus", native_enum=False),
        nullable=False,
        default=AssignmentStatus.PENDING
    )
    due_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    document = relationship("Document", primaryjoin="foreign(DocumentAssignment.document_id) == Document.id")
    assigner = relationship("User", foreign_keys=[assigned_by])
    assignee = relationship("User", foreign_keys=[assigned_to])
