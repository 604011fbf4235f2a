"""Integration tests for document comments

Tests cover:
- READ minimum for reading and writing comments
- Replies bound to the same document
- DOCUMENT_COMMENT_ADDED audit entries
- Comment endpoints over HTTP
"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lexvault.audit.actions import AuditAction
from lexvault.comments.service import CommentService
from lexvault.documents.service import DocumentService
from lexvault.errors import NotFoundError, UnauthorizedError
from lexvault.models import AuditLog, Document, DocumentPermission, DocumentType
from lexvault.permissions.levels import PermissionLevel


pytestmark = pytest.mark.integration

API = "/api/v1"


def _grant(db_session: Session, document: Document, user_id, level: PermissionLevel) -> None:
    db_session.add(DocumentPermission(document_id=document.id, user_id=user_id, level=level))
    db_session.commit()


class TestCommentService:
    """Test the comment service"""

    def test_reader_can_comment(self, db_session: Session, member, document):
        """Test a READ grant is enough to comment; the comment is audited"""
        _grant(db_session, document, member.id, PermissionLevel.READ)

        comment = CommentService(db_session).add_comment(member, document.id, "Clause 4 needs a date", page_number=2)
        db_session.commit()

        assert comment.user_id == member.id
        assert comment.page_number == 2
        entry = db_session.query(AuditLog).filter_by(action=AuditAction.DOCUMENT_COMMENT_ADDED.value).one()
        assert entry.entity_id == document.id
        assert entry.metadata_json["comment_id"] == str(comment.id)

    def test_download_grant_is_not_enough(self, db_session: Session, member, document):
        """Test DOWNLOAD holders can neither comment nor read comments"""
        _grant(db_session, document, member.id, PermissionLevel.DOWNLOAD)
        service = CommentService(db_session)

        with pytest.raises(UnauthorizedError):
            service.add_comment(member, document.id, "Looks fine")
        with pytest.raises(UnauthorizedError):
            service.list_comments(member, document.id)
        assert db_session.query(AuditLog).filter_by(action=AuditAction.DOCUMENT_COMMENT_ADDED.value).count() == 0

    def test_reply_thread(self, db_session: Session, owner, member, document):
        """Test replies keep their parent"""
        _grant(db_session, document, member.id, PermissionLevel.READ)
        service = CommentService(db_session)

        first = service.add_comment(owner, document.id, "Please check the dates")
        reply = service.add_comment(member, document.id, "Done", parent_id=first.id)
        db_session.commit()

        comments, total = service.list_comments(owner, document.id)
        assert total == 2
        by_id = {c.id: c for c in comments}
        assert set(by_id) == {first.id, reply.id}
        assert by_id[reply.id].parent_id == first.id
        assert by_id[first.id].parent_id is None

    def test_reply_to_comment_on_other_document(self, db_session: Session, owner, document):
        """Test a parent from another document is refused"""
        service = CommentService(db_session)
        other_document = DocumentService(db_session).create_document(
            owner, name="NDA.pdf", document_type=DocumentType.PDF
        )
        foreign = service.add_comment(owner, other_document.id, "Unrelated")
        db_session.commit()

        with pytest.raises(NotFoundError):
            service.add_comment(owner, document.id, "Reply", parent_id=foreign.id)
        with pytest.raises(NotFoundError):
            service.add_comment(owner, document.id, "Reply", parent_id=uuid4())

    def test_trashed_document_has_no_comments(self, db_session: Session, owner, document):
        """Test comments on a trashed document are unreachable"""
        CommentService(db_session).add_comment(owner, document.id, "Before trash")
        DocumentService(db_session).soft_delete(owner, document.id)
        db_session.commit()

        with pytest.raises(NotFoundError):
            CommentService(db_session).list_comments(owner, document.id)


class TestCommentEndpoints:
    """Test comments over HTTP"""

    def test_post_and_list(self, owner_client: TestClient, owner_user, document):
        response = owner_client.post(
            f"{API}/documents/{document.id}/comments", json={"content": "Sign on page 3", "page_number": 3}
        )
        assert response.status_code == 201
        data = response.json()
        assert data["author"]["id"] == str(owner_user.id)
        assert data["page_number"] == 3

        listing = owner_client.get(f"{API}/documents/{document.id}/comments").json()
        assert listing["total"] == 1
        assert listing["items"][0]["content"] == "Sign on page 3"

    def test_stranger_is_forbidden(self, member_client: TestClient, document):
        response = member_client.post(f"{API}/documents/{document.id}/comments", json={"content": "Hello"})
        assert response.status_code == 403
        assert response.json()["error"] == "unauthorized"

    def test_empty_comment_rejected(self, owner_client: TestClient, document):
        response = owner_client.post(f"{API}/documents/{document.id}/comments", json={"content": ""})
        assert response.status_code == 422
