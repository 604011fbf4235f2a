"""AuditLog SQLAlchemy model"""

import uuid

from sqlalchemy import Column, Text, ForeignKey, DateTime, Uuid, Index, event
from sqlalchemy.orm import relationship

from .base import Base, PortableJSONB, utcnow


class AuditLogImmutableError(Exception):
    """Raised when code attempts to modify or delete an existing audit entry."""
    pass


class AuditLog(Base):
    """AuditLog model for immutable activity logging.

    Records every state-changing action on documents, assignments, grants and
    groups. Entries are append-only: the mapper events below refuse UPDATE and
    DELETE. entity_id carries no foreign key so entries survive a purge.
    """
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_created_at", "created_at"),
        Index("ix_audit_log_actor_id_created_at", "actor_id", "created_at"),
        Index("ix_audit_log_entity", "entity_type", "entity_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    actor_id = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=True)
    entity_id = Column(Uuid, nullable=True)
    entity_name = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    ip_address = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    actor = relationship("User")


@event.listens_for(AuditLog, "before_update")
def _reject_audit_update(mapper, connection, target):
    raise AuditLogImmutableError(f"Audit entry {target.id} is append-only and cannot be updated")


@event.listens_for(AuditLog, "before_delete")
def _reject_audit_delete(mapper, connection, target):
    raise AuditLogImmutableError(f"Audit entry {target.id} is append-only and cannot be deleted")
