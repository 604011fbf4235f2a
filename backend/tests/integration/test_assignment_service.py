"""Integration tests for the assignment workflow

Tests cover:
- Creation (permission, assignee checks, sharing status, notification, audit)
- Status workflow driven by the assignee
- Non-fatal notification failures
- Sharing status fallback when the last open assignment closes
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from lexvault.assignments.service import AssignmentService
from lexvault.audit.actions import AuditAction
from lexvault.config import get_settings
from lexvault.documents.service import DocumentService
from lexvault.errors import InvalidTransitionError, NotFoundError, UnauthorizedError
from lexvault.models import (
    AssignmentStatus,
    AuditLog,
    DocumentAssignment,
    DocumentPermission,
    Notification,
    SharingStatus,
)
from lexvault.notifications.ports import NotificationError, NotificationSender
from lexvault.notifications.service import DatabaseNotificationSender
from lexvault.permissions.levels import PermissionLevel


pytestmark = pytest.mark.integration


class FailingSender(NotificationSender):
    """Sender whose delivery always fails."""

    def __init__(self):
        self.calls = 0

    def send(self, recipient_id, title, message, notification_type="info", entity_type=None, entity_id=None):
        self.calls += 1
        raise NotificationError("notification backend unavailable")


class RecordingSender(NotificationSender):
    """Sender that keeps every notification in memory."""

    def __init__(self):
        self.sent = []

    def send(self, recipient_id, title, message, notification_type="info", entity_type=None, entity_id=None):
        self.sent.append({
            "recipient_id": recipient_id,
            "title": title,
            "message": message,
            "notification_type": notification_type,
            "entity_type": entity_type,
            "entity_id": entity_id,
        })


class TestCreateAssignment:
    """Test creating assignments"""

    def test_owner_assigns_document(self, db_session: Session, owner, other, document):
        """Test PENDING assignment, ASSIGNED document, stored notification and one audit entry"""
        result = AssignmentService(db_session).create_assignment(owner, document.id, other.id, notes="Please review")
        db_session.commit()

        assert result.notification_sent is True
        assert result.assignment.status == AssignmentStatus.PENDING
        assert result.assignment.assigned_by == owner.id
        assert result.assignment.assigned_to == other.id

        db_session.refresh(document)
        assert document.sharing_status == SharingStatus.ASSIGNED

        notification = db_session.query(Notification).filter_by(user_id=other.id).one()
        assert notification.title == get_settings().ASSIGNMENT_NOTIFICATION_TITLE
        assert notification.type == "assignment"
        assert notification.entity_id == document.id
        assert document.name in notification.message

        entry = db_session.query(AuditLog).filter_by(action=AuditAction.DOCUMENT_ASSIGNED.value).one()
        assert entry.entity_id == document.id
        assert entry.metadata_json["notification_sent"] is True

    def test_notification_failure_is_not_fatal(self, db_session: Session, owner, other, document):
        """Test a failing sender still leaves the assignment and audit entry in place"""
        sender = FailingSender()
        result = AssignmentService(db_session, sender=sender).create_assignment(owner, document.id, other.id)
        db_session.commit()

        assert sender.calls == 1
        assert result.notification_sent is False
        assert result.assignment.id is not None

        db_session.refresh(document)
        assert document.sharing_status == SharingStatus.ASSIGNED
        entry = db_session.query(AuditLog).filter_by(action=AuditAction.DOCUMENT_ASSIGNED.value).one()
        assert entry.metadata_json["notification_sent"] is False

    def test_sender_receives_document_reference(self, db_session: Session, owner, other, document):
        """Test the notification points at the document"""
        sender = RecordingSender()
        AssignmentService(db_session, sender=sender).create_assignment(owner, document.id, other.id)

        assert len(sender.sent) == 1
        assert sender.sent[0]["recipient_id"] == other.id
        assert sender.sent[0]["entity_type"] == "document"
        assert sender.sent[0]["entity_id"] == document.id

    def test_notifications_disabled(self, db_session: Session, owner, other, document, monkeypatch):
        """Test no notification is sent when notifications are switched off"""
        monkeypatch.setattr(get_settings(), "NOTIFICATIONS_ENABLED", False)
        sender = RecordingSender()

        result = AssignmentService(db_session, sender=sender).create_assignment(owner, document.id, other.id)

        assert result.notification_sent is False
        assert sender.sent == []

    def test_read_grant_cannot_assign(self, db_session: Session, member, other, document):
        """Test assigning needs WRITE"""
        db_session.add(DocumentPermission(document_id=document.id, user_id=member.id, level=PermissionLevel.READ))
        db_session.commit()

        with pytest.raises(UnauthorizedError):
            AssignmentService(db_session).create_assignment(member, document.id, other.id)

    def test_unknown_assignee(self, db_session: Session, owner, document):
        """Test assigning to a missing user raises NotFoundError"""
        with pytest.raises(NotFoundError):
            AssignmentService(db_session).create_assignment(owner, document.id, uuid4())

    def test_disabled_assignee(self, db_session: Session, owner, disabled_user, document):
        """Test disabled users cannot receive assignments"""
        with pytest.raises(NotFoundError):
            AssignmentService(db_session).create_assignment(owner, document.id, disabled_user.id)

    def test_trashed_document(self, db_session: Session, owner, other, document):
        """Test trashed documents cannot be assigned"""
        document.is_deleted = True
        document.deleted_at = document.updated_at
        db_session.commit()

        with pytest.raises(NotFoundError):
            AssignmentService(db_session).create_assignment(owner, document.id, other.id)


class TestAssignmentStatus:
    """Test the assignee-driven status workflow"""

    @pytest.fixture
    def assignment(self, db_session: Session, owner, other, document):
        result = AssignmentService(db_session).create_assignment(owner, document.id, other.id)
        db_session.commit()
        return result.assignment

    def test_accept_then_complete(self, db_session: Session, other, assignment):
        """Test PENDING -> ACCEPTED -> COMPLETED stamps completed_at"""
        service = AssignmentService(db_session)

        accepted = service.update_status(other, assignment.id, AssignmentStatus.ACCEPTED)
        assert accepted.status == AssignmentStatus.ACCEPTED
        assert accepted.completed_at is None

        completed = service.update_status(other, assignment.id, AssignmentStatus.COMPLETED)
        assert completed.status == AssignmentStatus.COMPLETED
        assert completed.completed_at is not None

    def test_pending_to_completed_rejected(self, db_session: Session, other, assignment):
        """Test skipping ACCEPTED raises and leaves the assignment PENDING"""
        with pytest.raises(InvalidTransitionError):
            AssignmentService(db_session).update_status(other, assignment.id, AssignmentStatus.COMPLETED)

        db_session.refresh(assignment)
        assert assignment.status == AssignmentStatus.PENDING

    def test_due_tomorrow_cannot_complete_while_pending(self, db_session: Session, owner, other, document):
        """Test an assignment due tomorrow cannot jump from PENDING to COMPLETED"""
        service = AssignmentService(db_session)
        due = datetime.now(timezone.utc) + timedelta(days=1)
        assignment = service.create_assignment(owner, document.id, other.id, due_date=due).assignment
        db_session.commit()

        with pytest.raises(InvalidTransitionError):
            service.update_status(other, assignment.id, AssignmentStatus.COMPLETED)

    def test_terminal_state_is_final(self, db_session: Session, other, assignment):
        """Test a rejected assignment cannot be accepted afterwards"""
        service = AssignmentService(db_session)
        service.update_status(other, assignment.id, AssignmentStatus.REJECTED)

        with pytest.raises(InvalidTransitionError):
            service.update_status(other, assignment.id, AssignmentStatus.ACCEPTED)

    def test_only_assignee_changes_status(self, db_session: Session, owner, member, assignment):
        """Test assigner and strangers are refused"""
        service = AssignmentService(db_session)
        with pytest.raises(UnauthorizedError):
            service.update_status(owner, assignment.id, AssignmentStatus.ACCEPTED)
        with pytest.raises(UnauthorizedError):
            service.update_status(member, assignment.id, AssignmentStatus.ACCEPTED)

    def test_unknown_assignment(self, db_session: Session, other):
        """Test a missing assignment raises NotFoundError"""
        with pytest.raises(NotFoundError):
            AssignmentService(db_session).update_status(other, uuid4(), AssignmentStatus.ACCEPTED)

    def test_status_change_is_audited(self, db_session: Session, other, assignment):
        """Test the status change records from/to"""
        AssignmentService(db_session).update_status(other, assignment.id, AssignmentStatus.ACCEPTED)
        db_session.commit()

        entry = db_session.query(AuditLog).filter_by(action=AuditAction.ASSIGNMENT_STATUS_CHANGED.value).one()
        assert entry.entity_id == assignment.id
        assert entry.metadata_json["from"] == "PENDING"
        assert entry.metadata_json["to"] == "ACCEPTED"


class TestSharingStatusFallback:
    """Test sharing status after the last open assignment closes"""

    def test_falls_back_to_none(self, db_session: Session, owner, other, document):
        """Test rejecting the only assignment of an unshared document gives NONE"""
        service = AssignmentService(db_session)
        assignment = service.create_assignment(owner, document.id, other.id).assignment
        service.update_status(other, assignment.id, AssignmentStatus.REJECTED)
        db_session.commit()

        db_session.refresh(document)
        assert document.sharing_status == SharingStatus.NONE

    def test_falls_back_to_sent(self, db_session: Session, owner, member, other, document):
        """Test completing the assignment of a shared document gives SENT"""
        db_session.add(DocumentPermission(document_id=document.id, user_id=member.id, level=PermissionLevel.READ))
        db_session.commit()

        service = AssignmentService(db_session)
        assignment = service.create_assignment(owner, document.id, other.id).assignment
        service.update_status(other, assignment.id, AssignmentStatus.ACCEPTED)
        service.update_status(other, assignment.id, AssignmentStatus.COMPLETED)
        db_session.commit()

        db_session.refresh(document)
        assert document.sharing_status == SharingStatus.SENT

    def test_stays_assigned_while_another_is_open(self, db_session: Session, owner, member, other, document):
        """Test closing one of two open assignments keeps ASSIGNED"""
        service = AssignmentService(db_session)
        first = service.create_assignment(owner, document.id, other.id).assignment
        service.create_assignment(owner, document.id, member.id)
        service.update_status(other, first.id, AssignmentStatus.REJECTED)
        db_session.commit()

        db_session.refresh(document)
        assert document.sharing_status == SharingStatus.ASSIGNED


class TestNotesAndListing:
    """Test notes editing and inbox listings"""

    def test_only_assigner_edits_notes(self, db_session: Session, owner, other, document):
        """Test the assigner can edit notes, the assignee cannot"""
        service = AssignmentService(db_session)
        assignment = service.create_assignment(owner, document.id, other.id).assignment

        assert service.update_notes(owner, assignment.id, "Updated instructions").notes == "Updated instructions"
        with pytest.raises(UnauthorizedError):
            service.update_notes(other, assignment.id, "Nope")

    def test_received_and_sent(self, db_session: Session, owner, other, document):
        """Test inboxes split by assignee and assigner, with status filter"""
        service = AssignmentService(db_session)
        service.create_assignment(owner, document.id, other.id)
        db_session.commit()

        assert service.list_received(other)[1] == 1
        assert service.list_received(owner)[1] == 0
        assert service.list_sent(owner)[1] == 1
        assert service.list_received(other, status=AssignmentStatus.ACCEPTED)[1] == 0

    def test_document_assignments_need_access(self, db_session: Session, owner, member, other, document):
        """Test listing a document's assignments requires DOWNLOAD"""
        service = AssignmentService(db_session)
        service.create_assignment(owner, document.id, other.id)
        db_session.commit()

        assert service.list_for_document(owner, document.id)[1] == 1
        with pytest.raises(UnauthorizedError):
            service.list_for_document(member, document.id)

    def test_purged_document_is_hidden_but_assignment_kept(self, db_session: Session, owner, other, document):
        """Test a purge hides the assignment from both inboxes while the row stays"""
        service = AssignmentService(db_session)
        assignment_id = service.create_assignment(owner, document.id, other.id).assignment.id
        db_session.commit()

        documents = DocumentService(db_session)
        documents.soft_delete(owner, document.id)
        assert service.list_received(other) == ([], 0)
        documents.purge(owner, document.id)
        db_session.commit()

        assert service.list_received(other) == ([], 0)
        assert service.list_sent(owner) == ([], 0)
        with pytest.raises(NotFoundError):
            service.update_notes(owner, assignment_id, "Too late")
        assert db_session.query(DocumentAssignment).filter_by(id=assignment_id).count() == 1


class TestDatabaseNotificationSender:
    """Test the stored-notification adapter"""

    def test_failed_insert_is_isolated(self, db_session: Session, owner, other, document):
        """Test a failing insert raises NotificationError and keeps the session usable"""
        sender = DatabaseNotificationSender(db_session)

        with pytest.raises(NotificationError):
            sender.send(recipient_id=other.id, title=None, message="broken")

        assert db_session.query(Notification).count() == 0
        result = AssignmentService(db_session).create_assignment(owner, document.id, other.id)
        db_session.commit()
        assert result.notification_sent is True
        assert db_session.query(Notification).count() == 1
