"""Audit recorder for state-changing actions.

This service is the single write path into the audit log. Every lifecycle,
assignment, permission and group mutation records exactly one entry in the
same session as the change it describes, so the entry commits or rolls back
together with it.

The recorder is write-only. Reading the log (activity feed, statistics) lives
in audit.router and never feeds back into business decisions.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Request
from sqlalchemy.orm import Session

from ..models.audit_log import AuditLog
from .actions import AuditAction, EntityType


class AuditRecorder:
    """Appends immutable AuditLog entries within the caller's transaction.

    Example:
        recorder = AuditRecorder.from_request(db, request)
        recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_DELETED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            description=f"Document moved to trash: {document.name}",
            entity_name=document.name,
        )
    """

    def __init__(
        self,
        db: Session,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ):
        self.db = db
        self.ip_address = ip_address
        self.user_agent = user_agent

    @classmethod
    def from_request(cls, db: Session, request: Request) -> "AuditRecorder":
        """Build a recorder carrying the client IP and User-Agent of a request."""
        # Extract client IP (handle proxies via X-Forwarded-For)
        ip_address = request.client.host if request.client else None
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # Use first IP in chain (original client)
            ip_address = forwarded_for.split(",")[0].strip()

        return cls(db, ip_address=ip_address, user_agent=request.headers.get("User-Agent"))

    def record(
        self,
        actor_id: Optional[UUID],
        action: AuditAction,
        entity_type: EntityType,
        entity_id: Optional[UUID],
        description: str,
        entity_name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        """Append one audit entry.

        Args:
            actor_id: User who performed the action
            action: Closed-vocabulary action kind
            entity_type: Type of entity affected
            entity_id: ID of affected entity, stored by value
            description: Human-readable summary
            entity_name: Display name of the entity at the time of the action
            metadata: Additional context as JSON (e.g. {"from": "ACTIVE", "to": "ARCHIVED"})

        Returns:
            AuditLog: The created entry (flushed, not committed)
        """
        entry = AuditLog(
            actor_id=actor_id,
            action=AuditAction(action).value,
            entity_type=EntityType(entity_type).value,
            entity_id=entity_id,
            entity_name=entity_name,
            description=description,
            metadata_json=metadata,
            ip_address=self.ip_address,
            user_agent=self.user_agent,
        )

        self.db.add(entry)
        self.db.flush()  # Get ID without committing transaction

        return entry
