"""Comment service - review comments on documents.

Reading and writing comments both require READ on the document. A reply must
point at a comment on the same document.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from ..audit.actions import AuditAction, EntityType
from ..audit.service import AuditRecorder
from ..auth.principal import Principal
from ..documents.queries import load_document
from ..errors import NotFoundError
from ..models.document_comment import DocumentComment
from ..permissions.levels import PermissionLevel
from ..permissions.service import PermissionService

logger = logging.getLogger(__name__)


class CommentService:
    """Service for document comments."""

    def __init__(self, db: Session, recorder: Optional[AuditRecorder] = None):
        self.db = db
        self.recorder = recorder or AuditRecorder(db)
        self.permissions = PermissionService(db, self.recorder)

    def list_comments(self, principal: Principal, document_id: UUID) -> Tuple[List[DocumentComment], int]:
        """Comments of a document, oldest first (requires READ)."""
        document = load_document(self.db, document_id)
        self.permissions.require(principal, document, PermissionLevel.READ, "read comments")

        comments = (
            self.db.query(DocumentComment)
            .options(joinedload(DocumentComment.author))
            .filter(DocumentComment.document_id == document.id)
            .order_by(DocumentComment.created_at)
            .all()
        )
        return comments, len(comments)

    def add_comment(
        self,
        principal: Principal,
        document_id: UUID,
        content: str,
        parent_id: Optional[UUID] = None,
        page_number: Optional[int] = None
    ) -> DocumentComment:
        """Add a comment or a reply to a document (requires READ).

        Raises:
            NotFoundError: If the document is missing or trashed, or the parent
                comment does not belong to the document
            UnauthorizedError: If the principal lacks READ
        """
        document = load_document(self.db, document_id)
        self.permissions.require(principal, document, PermissionLevel.READ, "comment on this document")

        if parent_id is not None:
            parent = self.db.query(DocumentComment).filter(
                DocumentComment.id == parent_id,
                DocumentComment.document_id == document.id
            ).first()
            if not parent:
                raise NotFoundError(f"Comment {parent_id} not found on document {document.id}")

        comment = DocumentComment(
            document_id=document.id,
            user_id=principal.id,
            parent_id=parent_id,
            content=content,
            page_number=page_number,
        )
        self.db.add(comment)
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_COMMENT_ADDED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description="Comment added",
            metadata={
                "comment_id": str(comment.id),
                "parent_id": str(parent_id) if parent_id else None,
            },
        )
        logger.info(
            "Comment added",
            extra={"actor_id": principal.id, "document_id": document.id}
        )
        return comment
