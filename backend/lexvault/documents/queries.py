"""Document lookups shared by the document, permission and assignment services."""

from uuid import UUID

from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models.document import Document, SharingStatus
from ..models.document_assignment import DocumentAssignment, AssignmentStatus
from ..models.document_permission import DocumentPermission
from ..permissions.levels import PermissionLevel


def load_document(
    db: Session,
    document_id: UUID,
    include_deleted: bool = False,
    lock: bool = False
) -> Document:
    """Fetch a document by id.

    Args:
        db: Database session
        document_id: Document to load
        include_deleted: Trash-aware callers (restore, purge) also see
            soft-deleted documents
        lock: Take a row lock (SELECT ... FOR UPDATE) so the precondition
            check and the write that follows cannot interleave with another
            transition on the same document

    Raises:
        NotFoundError: If the document does not exist or is hidden by soft delete
    """
    query = db.query(Document).filter(Document.id == document_id)
    if not include_deleted:
        query = query.filter(Document.is_deleted.is_(False))
    if lock:
        query = query.with_for_update()

    document = query.first()
    if not document:
        raise NotFoundError(f"Document {document_id} not found")
    return document


def resolve_sharing_status(db: Session, document: Document) -> SharingStatus:
    """Derive the sharing status from open assignments and explicit grants.

    ASSIGNED while any assignment is PENDING or ACCEPTED, SENT while someone
    other than the owner holds a grant above NONE, NONE otherwise.
    """
    open_assignments = db.query(DocumentAssignment).filter(
        DocumentAssignment.document_id == document.id,
        DocumentAssignment.status.in_([AssignmentStatus.PENDING, AssignmentStatus.ACCEPTED])
    ).count()
    if open_assignments:
        return SharingStatus.ASSIGNED

    shared = db.query(DocumentPermission).filter(
        DocumentPermission.document_id == document.id,
        DocumentPermission.user_id != document.owner_id,
        DocumentPermission.level.in_(PermissionLevel.at_least(PermissionLevel.DOWNLOAD))
    ).count()
    if shared:
        return SharingStatus.SENT

    return SharingStatus.NONE
