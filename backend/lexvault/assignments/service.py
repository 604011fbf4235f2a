"""Assignment service - hand-off of documents between users.

Creating an assignment runs three side effects in a fixed order: the
assignment row (and the document's sharing status) is written, the assignee
is notified, and the action is recorded in the audit log. A notification
failure is logged and reported through ``notification_sent`` but never undoes
the assignment.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..audit.actions import AuditAction, EntityType
from ..audit.service import AuditRecorder
from ..auth.principal import Principal
from ..config import get_settings
from ..documents.queries import load_document, resolve_sharing_status
from ..errors import InvalidTransitionError, NotFoundError, UnauthorizedError
from ..models.base import utcnow
from ..models.document import Document, SharingStatus
from ..models.document_assignment import AssignmentStatus, DocumentAssignment
from ..models.user import User
from ..notifications.ports import NotificationError, NotificationSender
from ..notifications.service import DatabaseNotificationSender
from ..observability.metrics import (
    assignment_transitions_total,
    invalid_transitions_total,
    notification_failures_total,
)
from ..permissions.levels import PermissionLevel
from ..permissions.service import PermissionService
from .status import OPEN_STATUSES, validate_transition

logger = logging.getLogger(__name__)

NOTIFICATION_TYPE = "assignment"


@dataclass
class AssignmentResult:
    """Outcome of creating an assignment."""
    assignment: DocumentAssignment
    notification_sent: bool


class AssignmentService:
    """Service for assignment operations."""

    def __init__(
        self,
        db: Session,
        sender: Optional[NotificationSender] = None,
        recorder: Optional[AuditRecorder] = None
    ):
        self.db = db
        self.sender = sender or DatabaseNotificationSender(db)
        self.recorder = recorder or AuditRecorder(db)
        self.permissions = PermissionService(db, self.recorder)

    def _live(self):
        """Assignments whose document exists and is not in the trash."""
        return self.db.query(DocumentAssignment).join(
            Document, Document.id == DocumentAssignment.document_id
        ).filter(Document.is_deleted.is_(False))

    def _get_assignment(self, assignment_id: UUID, lock: bool = False) -> DocumentAssignment:
        query = self._live().filter(DocumentAssignment.id == assignment_id)
        if lock:
            query = query.with_for_update()
        assignment = query.first()
        if not assignment:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        return assignment

    def create_assignment(
        self,
        principal: Principal,
        document_id: UUID,
        assignee_id: UUID,
        notes: Optional[str] = None,
        due_date: Optional[datetime] = None
    ) -> AssignmentResult:
        """Assign a document to another user (requires WRITE on the document).

        Args:
            principal: Assigner
            document_id: Document to hand off
            assignee_id: Active user receiving the document
            notes: Free-text instructions (optional)
            due_date: Deadline (optional)

        Returns:
            AssignmentResult with the new PENDING assignment and whether the
            assignee notification was stored

        Raises:
            NotFoundError: If the document is missing/trashed or the assignee
                does not exist or is disabled
            UnauthorizedError: If the principal lacks WRITE
        """
        document = load_document(self.db, document_id, lock=True)
        self.permissions.require(principal, document, PermissionLevel.WRITE, "assign this document")

        assignee = self.db.query(User).filter(
            User.id == assignee_id,
            User.status == "ACTIVE"
        ).first()
        if not assignee:
            raise NotFoundError(f"User {assignee_id} not found")

        # 1. Persistence write
        assignment = DocumentAssignment(
            document_id=document.id,
            assigned_by=principal.id,
            assigned_to=assignee.id,
            status=AssignmentStatus.PENDING,
            notes=notes,
            due_date=due_date,
        )
        self.db.add(assignment)
        document.sharing_status = SharingStatus.ASSIGNED
        self.db.flush()
        assignment_transitions_total.labels(to_status=AssignmentStatus.PENDING.value).inc()

        # 2. Notification (non-fatal)
        notification_sent = self._notify_assignee(principal, assignment, document)

        # 3. Audit
        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_ASSIGNED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description=f"Document assigned to {assignee.name}",
            metadata={
                "assignment_id": str(assignment.id),
                "assigned_to": str(assignee.id),
                "due_date": due_date.isoformat() if due_date else None,
                "notification_sent": notification_sent,
            },
        )

        logger.info(
            f"Document assigned to {assignee.id}",
            extra={
                "actor_id": principal.id,
                "document_id": document.id,
                "assignment_id": assignment.id,
            }
        )
        return AssignmentResult(assignment=assignment, notification_sent=notification_sent)

    def _notify_assignee(self, principal: Principal, assignment: DocumentAssignment, document) -> bool:
        settings = get_settings()
        if not settings.NOTIFICATIONS_ENABLED:
            return False

        sender_name = principal.name or "A colleague"
        try:
            self.sender.send(
                recipient_id=assignment.assigned_to,
                title=settings.ASSIGNMENT_NOTIFICATION_TITLE,
                message=f"{sender_name} assigned you the document: {document.name}",
                notification_type=NOTIFICATION_TYPE,
                entity_type=EntityType.DOCUMENT.value,
                entity_id=document.id,
            )
        except NotificationError as e:
            notification_failures_total.labels(notification_type=NOTIFICATION_TYPE).inc()
            logger.error(
                f"Assignment notification failed: {e}",
                extra={"assignment_id": assignment.id, "document_id": document.id}
            )
            return False
        return True

    def update_status(
        self,
        principal: Principal,
        assignment_id: UUID,
        new_status: AssignmentStatus
    ) -> DocumentAssignment:
        """Move an assignment along PENDING → ACCEPTED → COMPLETED or PENDING → REJECTED.

        Only the assignee may do this. Completing stamps ``completed_at``.
        Closing the last open assignment of a document drops its sharing
        status back to SENT or NONE.

        Raises:
            NotFoundError: If the assignment does not exist or its document is
                trashed or purged
            UnauthorizedError: If the principal is not the assignee
            InvalidTransitionError: If the transition is not allowed
        """
        new_status = AssignmentStatus(new_status)
        assignment = self._get_assignment(assignment_id, lock=True)

        if assignment.assigned_to != principal.id:
            raise UnauthorizedError(
                "Only the assignee can change the status of an assignment",
                details={"assignment_id": str(assignment.id)},
            )

        old_status = AssignmentStatus(assignment.status)
        try:
            validate_transition(old_status, new_status)
        except InvalidTransitionError:
            invalid_transitions_total.labels(entity_type=EntityType.ASSIGNMENT.value).inc()
            raise

        assignment.status = new_status
        if new_status == AssignmentStatus.COMPLETED:
            assignment.completed_at = utcnow()
        self.db.flush()

        document = load_document(self.db, assignment.document_id, lock=True)
        if new_status not in OPEN_STATUSES:
            document.sharing_status = resolve_sharing_status(self.db, document)
            self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.ASSIGNMENT_STATUS_CHANGED,
            entity_type=EntityType.ASSIGNMENT,
            entity_id=assignment.id,
            entity_name=document.name,
            description=f"Assignment of {document.name} moved from {old_status.value} to {new_status.value}",
            metadata={
                "document_id": str(document.id),
                "from": old_status.value,
                "to": new_status.value,
            },
        )
        assignment_transitions_total.labels(to_status=new_status.value).inc()

        logger.info(
            f"Assignment status changed: {old_status.value} -> {new_status.value}",
            extra={
                "actor_id": principal.id,
                "assignment_id": assignment.id,
                "from_status": old_status.value,
                "to_status": new_status.value,
            }
        )
        return assignment

    def update_notes(self, principal: Principal, assignment_id: UUID, notes: Optional[str]) -> DocumentAssignment:
        """Replace the notes of an assignment (assigner only)."""
        assignment = self._get_assignment(assignment_id, lock=True)

        if assignment.assigned_by != principal.id:
            raise UnauthorizedError(
                "Only the assigner can edit the notes of an assignment",
                details={"assignment_id": str(assignment.id)},
            )

        assignment.notes = notes
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.ASSIGNMENT_NOTES_UPDATED,
            entity_type=EntityType.ASSIGNMENT,
            entity_id=assignment.id,
            description="Assignment notes updated",
            metadata={"document_id": str(assignment.document_id)},
        )
        return assignment

    def _paginate(
        self,
        query,
        status: Optional[AssignmentStatus],
        limit: int,
        offset: int
    ) -> Tuple[List[DocumentAssignment], int]:
        if status:
            query = query.filter(DocumentAssignment.status == status)

        total = query.count()
        assignments = (
            query.order_by(desc(DocumentAssignment.created_at))
            .limit(limit)
            .offset(offset)
            .all()
        )
        return assignments, total

    def list_received(
        self,
        principal: Principal,
        status: Optional[AssignmentStatus] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[DocumentAssignment], int]:
        """Assignments where the principal is the assignee, newest first.

        Assignments of trashed or purged documents are left out.
        """
        query = self._live().filter(DocumentAssignment.assigned_to == principal.id)
        return self._paginate(query, status, limit, offset)

    def list_sent(
        self,
        principal: Principal,
        status: Optional[AssignmentStatus] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[DocumentAssignment], int]:
        """Assignments the principal handed out, newest first."""
        query = self._live().filter(DocumentAssignment.assigned_by == principal.id)
        return self._paginate(query, status, limit, offset)

    def list_for_document(
        self,
        principal: Principal,
        document_id: UUID,
        status: Optional[AssignmentStatus] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[DocumentAssignment], int]:
        """All assignments of one document (requires DOWNLOAD)."""
        document = load_document(self.db, document_id)
        self.permissions.require(principal, document, PermissionLevel.DOWNLOAD, "view assignments")

        query = self.db.query(DocumentAssignment).filter(DocumentAssignment.document_id == document.id)
        return self._paginate(query, status, limit, offset)
