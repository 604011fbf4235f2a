"""Document service - Business logic for the document lifecycle.

Every mutating operation follows the same discipline: load the document
(row-locked), check the caller's effective permission, validate the
transition, apply exactly one change, then record it in the audit log. All
checks run before the first write so a rejected request leaves nothing behind.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, or_
from sqlalchemy.orm import Session

from ..audit.actions import AuditAction, EntityType
from ..audit.service import AuditRecorder
from ..auth.principal import Principal
from ..errors import InvalidTransitionError, NotFoundError
from ..models.base import utcnow
from ..models.document import Document, DocumentType, FileStatus, SharingStatus
from ..models.document_comment import DocumentComment
from ..models.group import Group
from ..models.notification import Notification
from ..observability.metrics import document_transitions_total, invalid_transitions_total
from ..permissions.levels import PermissionLevel
from ..permissions.service import PermissionService
from .lifecycle import (
    archive_toggle_target,
    validate_purge,
    validate_restore,
    validate_status_transition,
)
from .queries import load_document

logger = logging.getLogger(__name__)


class DocumentService:
    """Service for document operations."""

    def __init__(self, db: Session, recorder: Optional[AuditRecorder] = None):
        self.db = db
        self.recorder = recorder or AuditRecorder(db)
        self.permissions = PermissionService(db, self.recorder)

    def _validate(self, check, *args) -> None:
        try:
            check(*args)
        except InvalidTransitionError:
            invalid_transitions_total.labels(entity_type=EntityType.DOCUMENT.value).inc()
            raise

    def _load_group(self, group_id: Optional[UUID]) -> Optional[Group]:
        if group_id is None:
            return None
        group = self.db.query(Group).filter(Group.id == group_id, Group.is_active.is_(True)).first()
        if not group:
            raise NotFoundError(f"Group {group_id} not found")
        return group

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_document(self, principal: Principal, document_id: UUID) -> Document:
        """Get a visible document (requires DOWNLOAD).

        Raises:
            NotFoundError: If the document does not exist or is trashed
            UnauthorizedError: If the principal cannot see it
        """
        document = load_document(self.db, document_id)
        self.permissions.require(principal, document, PermissionLevel.DOWNLOAD, "view this document")
        return document

    def list_documents(
        self,
        principal: Principal,
        search: Optional[str] = None,
        document_type: Optional[DocumentType] = None,
        file_status: Optional[FileStatus] = None,
        group_id: Optional[UUID] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Document], int]:
        """List non-trashed documents the principal can see.

        Args:
            principal: Acting principal
            search: Case-insensitive substring of the document name
            document_type: Filter by type (optional)
            file_status: Filter by lifecycle status (optional)
            group_id: Filter by group (optional)
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of Documents, total count)
        """
        query = self.db.query(Document).filter(Document.is_deleted.is_(False))

        visible = self.permissions.visibility_clause(principal)
        if visible is not None:
            query = query.filter(visible)

        if search:
            query = query.filter(Document.name.ilike(f"%{search}%"))
        if document_type:
            query = query.filter(Document.type == document_type)
        if file_status:
            query = query.filter(Document.file_status == file_status)
        if group_id:
            query = query.filter(Document.group_id == group_id)

        total = query.count()
        documents = (
            query.order_by(desc(Document.updated_at))
            .limit(limit)
            .offset(offset)
            .all()
        )
        return documents, total

    def list_trash(
        self,
        principal: Principal,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Document], int]:
        """List trashed documents the principal could restore.

        System admins see the whole trash; everyone else sees documents they
        trashed themselves or hold WRITE on.
        """
        query = self.db.query(Document).filter(Document.is_deleted.is_(True))

        restorable = self.permissions.visibility_clause(principal, PermissionLevel.WRITE)
        if restorable is not None:
            query = query.filter(or_(restorable, Document.deleted_by == principal.id))

        total = query.count()
        documents = (
            query.order_by(desc(Document.deleted_at))
            .limit(limit)
            .offset(offset)
            .all()
        )
        return documents, total

    # ------------------------------------------------------------------
    # Creation and metadata
    # ------------------------------------------------------------------

    def create_document(
        self,
        principal: Principal,
        name: str,
        document_type: DocumentType,
        size_bytes: int = 0,
        mime_type: Optional[str] = None,
        storage_key: Optional[str] = None,
        description: Optional[str] = None,
        group_id: Optional[UUID] = None
    ) -> Document:
        """Register an uploaded file as a document owned by the principal.

        New documents start ACTIVE with sharing status NONE.

        Raises:
            NotFoundError: If group_id references a missing group
        """
        self._load_group(group_id)

        document = Document(
            name=name,
            type=document_type,
            owner_id=principal.id,
            group_id=group_id,
            description=description,
            size_bytes=size_bytes,
            mime_type=mime_type,
            storage_key=storage_key,
            file_status=FileStatus.ACTIVE,
            sharing_status=SharingStatus.NONE,
        )
        self.db.add(document)
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_CREATED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description=f"Document uploaded: {document.name}",
            metadata={"type": DocumentType(document_type).value, "size_bytes": size_bytes},
        )
        document_transitions_total.labels(transition="created").inc()

        logger.info(
            f"Document created: {document.name}",
            extra={"actor_id": principal.id, "document_id": document.id}
        )
        return document

    def update_document(
        self,
        principal: Principal,
        document_id: UUID,
        update_data: Dict[str, Any]
    ) -> Document:
        """Update name, description or group of a document (requires WRITE).

        Args:
            principal: Acting principal
            document_id: Document to update
            update_data: Fields to change; keys outside name/description/group_id are ignored

        Returns:
            Updated Document
        """
        document = load_document(self.db, document_id, lock=True)
        self.permissions.require(principal, document, PermissionLevel.WRITE, "edit this document")

        if "group_id" in update_data:
            self._load_group(update_data["group_id"])

        changes = {}
        for field in ("name", "description", "group_id"):
            if field not in update_data:
                continue
            before = getattr(document, field)
            after = update_data[field]
            if before != after:
                changes[field] = {
                    "from": str(before) if before is not None else None,
                    "to": str(after) if after is not None else None,
                }
                setattr(document, field, after)

        if not changes:
            return document

        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_UPDATED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description=f"Document updated: {document.name}",
            metadata=changes,
        )
        return document

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    def set_status(self, principal: Principal, document_id: UUID, new_status: FileStatus) -> Document:
        """Move a document to another file status (requires WRITE).

        Raises:
            NotFoundError: If the document does not exist or is trashed
            UnauthorizedError: If the principal lacks WRITE
            InvalidTransitionError: If new_status equals the current status
        """
        new_status = FileStatus(new_status)
        document = load_document(self.db, document_id, lock=True)
        self.permissions.require(principal, document, PermissionLevel.WRITE, "change the status")

        old_status = FileStatus(document.file_status)
        self._validate(validate_status_transition, old_status, new_status)

        document.file_status = new_status
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_STATUS_CHANGED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description=f"Status of {document.name} changed from {old_status.value} to {new_status.value}",
            metadata={"from": old_status.value, "to": new_status.value},
        )
        document_transitions_total.labels(transition="status_changed").inc()

        logger.info(
            f"Document status changed: {old_status.value} -> {new_status.value}",
            extra={
                "actor_id": principal.id,
                "document_id": document.id,
                "from_status": old_status.value,
                "to_status": new_status.value,
            }
        )
        return document

    def toggle_archive(self, principal: Principal, document_id: UUID) -> Document:
        """Archive a document, or unarchive it back to ACTIVE (requires WRITE)."""
        document = load_document(self.db, document_id, lock=True)
        self.permissions.require(principal, document, PermissionLevel.WRITE, "archive this document")

        old_status = FileStatus(document.file_status)
        new_status = archive_toggle_target(old_status)
        document.file_status = new_status
        self.db.flush()

        archived = new_status == FileStatus.ARCHIVED
        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_ARCHIVED if archived else AuditAction.DOCUMENT_UNARCHIVED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description=f"Document {'archived' if archived else 'unarchived'}: {document.name}",
            metadata={"from": old_status.value, "to": new_status.value},
        )
        document_transitions_total.labels(transition="archived" if archived else "unarchived").inc()

        logger.info(
            f"Document {'archived' if archived else 'unarchived'}",
            extra={
                "actor_id": principal.id,
                "document_id": document.id,
                "from_status": old_status.value,
                "to_status": new_status.value,
            }
        )
        return document

    def soft_delete(self, principal: Principal, document_id: UUID) -> Document:
        """Move a document to the trash (requires WRITE).

        A document already in the trash is invisible here and raises NotFoundError.
        """
        document = load_document(self.db, document_id, lock=True)
        self.permissions.require(principal, document, PermissionLevel.WRITE, "delete this document")

        document.is_deleted = True
        document.deleted_at = utcnow()
        document.deleted_by = principal.id
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_DELETED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description=f"Document moved to trash: {document.name}",
            metadata={"file_status": FileStatus(document.file_status).value},
        )
        document_transitions_total.labels(transition="deleted").inc()

        logger.info(
            "Document moved to trash",
            extra={"actor_id": principal.id, "document_id": document.id}
        )
        return document

    def restore(self, principal: Principal, document_id: UUID) -> Document:
        """Bring a trashed document back with its file status unchanged (requires WRITE).

        Raises:
            NotFoundError: If the document does not exist at all
            UnauthorizedError: If the principal lacks WRITE
            InvalidTransitionError: If the document is not in the trash
        """
        document = load_document(self.db, document_id, include_deleted=True, lock=True)
        self.permissions.require(principal, document, PermissionLevel.WRITE, "restore this document")
        self._validate(validate_restore, document.is_deleted)

        document.is_deleted = False
        document.deleted_at = None
        document.deleted_by = None
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_RESTORED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description=f"Document restored from trash: {document.name}",
            metadata={"file_status": FileStatus(document.file_status).value},
        )
        document_transitions_total.labels(transition="restored").inc()

        logger.info(
            "Document restored",
            extra={"actor_id": principal.id, "document_id": document.id}
        )
        return document

    def purge(self, principal: Principal, document_id: UUID) -> None:
        """Permanently remove a trashed document (requires ADMIN).

        The audit entry is written first and references the id by value, so
        it survives the removal of the row. Grants and assignments keep the id
        by value too and are retained; comments and inbox notifications about
        the document are dropped.

        Raises:
            NotFoundError: If the document does not exist (e.g. already purged)
            UnauthorizedError: If the principal lacks ADMIN
            InvalidTransitionError: If the document is not in the trash
        """
        document = load_document(self.db, document_id, include_deleted=True, lock=True)
        self.permissions.require(principal, document, PermissionLevel.ADMIN, "purge this document")
        self._validate(validate_purge, document.is_deleted)

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.DOCUMENT_PURGED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description=f"Document permanently deleted: {document.name}",
            metadata={
                "file_status": FileStatus(document.file_status).value,
                "owner_id": str(document.owner_id),
            },
        )

        self.db.query(Notification).filter(
            Notification.entity_type == EntityType.DOCUMENT.value,
            Notification.entity_id == document.id
        ).delete(synchronize_session=False)
        self.db.query(DocumentComment).filter(
            DocumentComment.document_id == document.id
        ).delete(synchronize_session=False)

        self.db.delete(document)
        self.db.flush()
        document_transitions_total.labels(transition="purged").inc()

        logger.info(
            "Document purged",
            extra={"actor_id": principal.id, "document_id": document_id}
        )
