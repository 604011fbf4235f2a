"""Documents API Router - listing, registration, metadata and lifecycle endpoints.

Every endpoint resolves the caller's Principal from the bearer token and
delegates to DocumentService, which enforces the per-document permission
minimums. Domain errors (403/404/409) are rendered by the handlers in main.py.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from ..audit.service import AuditRecorder
from ..auth.dependencies import get_principal
from ..auth.principal import Principal
from ..database import get_db
from ..models.document import DocumentType, FileStatus
from ..pagination import PageParams, page_params
from ..permissions.service import PermissionService
from .queries import load_document
from .schemas import (
    DocumentCreate,
    DocumentListResponse,
    DocumentResponse,
    DocumentStatusUpdate,
    DocumentUpdate,
    EffectivePermissionResponse,
)
from .service import DocumentService


router = APIRouter(prefix="/documents", tags=["documents"])


def _service(db: Session, request: Request) -> DocumentService:
    return DocumentService(db, AuditRecorder.from_request(db, request))


@router.get(
    "",
    response_model=DocumentListResponse,
    summary="List documents",
    description="""
    List documents visible to the caller (owner, explicit grant, group
    membership; system admins see everything). Trashed documents are excluded.

    **Filters:**
    - search: case-insensitive match on the document name
    - type: DOCX, PDF or XLSX
    - status: ACTIVE, PENDING or ARCHIVED
    - group_id: documents filed under one group
    """
)
def list_documents(
    search: Optional[str] = Query(None, description="Name contains (case-insensitive)"),
    type: Optional[DocumentType] = Query(None, description="Filter by document type"),
    file_status: Optional[FileStatus] = Query(None, alias="status", description="Filter by status"),
    group_id: Optional[UUID] = Query(None, description="Filter by group"),
    pagination: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> DocumentListResponse:
    service = DocumentService(db)
    documents, total = service.list_documents(
        principal,
        search=search,
        document_type=type,
        file_status=file_status,
        group_id=group_id,
        limit=pagination.per_page,
        offset=pagination.offset,
    )

    return DocumentListResponse(
        items=[DocumentResponse.model_validate(d) for d in documents],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        total_pages=pagination.total_pages(total),
    )


@router.post(
    "",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an uploaded document",
)
def create_document(
    data: DocumentCreate,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> DocumentResponse:
    """Register a file already stored in file storage as a new ACTIVE document.

    The caller becomes the owner. Logs DOCUMENT_CREATED.
    """
    document = _service(db, request).create_document(
        principal,
        name=data.name,
        document_type=data.type,
        size_bytes=data.size_bytes,
        mime_type=data.mime_type,
        storage_key=data.storage_key,
        description=data.description,
        group_id=data.group_id,
    )
    db.commit()
    db.refresh(document)
    return DocumentResponse.model_validate(document)


@router.get(
    "/trash",
    response_model=DocumentListResponse,
    summary="List trashed documents",
    description="Documents in the trash the caller could restore. System admins see the whole trash.",
)
def list_trash(
    pagination: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> DocumentListResponse:
    documents, total = DocumentService(db).list_trash(
        principal, limit=pagination.per_page, offset=pagination.offset
    )
    return DocumentListResponse(
        items=[DocumentResponse.model_validate(d) for d in documents],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        total_pages=pagination.total_pages(total),
    )


@router.get("/{document_id}", response_model=DocumentResponse, summary="Get document")
def get_document(
    document_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> DocumentResponse:
    """Get one document (requires DOWNLOAD)."""
    document = DocumentService(db).get_document(principal, document_id)
    return DocumentResponse.model_validate(document)


@router.patch("/{document_id}", response_model=DocumentResponse, summary="Update document metadata")
def update_document(
    document_id: UUID,
    data: DocumentUpdate,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> DocumentResponse:
    """Update name, description or group (requires WRITE). Logs DOCUMENT_UPDATED."""
    document = _service(db, request).update_document(
        principal, document_id, data.model_dump(exclude_unset=True)
    )
    db.commit()
    db.refresh(document)
    return DocumentResponse.model_validate(document)


@router.get(
    "/{document_id}/permission",
    response_model=EffectivePermissionResponse,
    summary="Get caller's effective permission",
)
def get_effective_permission(
    document_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> EffectivePermissionResponse:
    """Return the caller's resolved access level (NONE when they have no access)."""
    document = load_document(db, document_id)
    level = PermissionService(db).effective_permission(principal, document)
    return EffectivePermissionResponse(document_id=document.id, level=level)


@router.post(
    "/{document_id}/status",
    response_model=DocumentResponse,
    summary="Change document status",
    description="""
    Move a document to another status (ACTIVE, PENDING, ARCHIVED).

    **Permissions:** WRITE on the document

    **Errors:**
    - 403: insufficient permission
    - 404: document not found or in the trash
    - 409: document already has the requested status
    """
)
def set_document_status(
    document_id: UUID,
    data: DocumentStatusUpdate,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> DocumentResponse:
    document = _service(db, request).set_status(principal, document_id, data.status)
    db.commit()
    db.refresh(document)
    return DocumentResponse.model_validate(document)


@router.post(
    "/{document_id}/archive",
    response_model=DocumentResponse,
    summary="Archive or unarchive document",
    description="Archives the document, or returns an archived document to ACTIVE. Requires WRITE.",
)
def toggle_archive(
    document_id: UUID,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> DocumentResponse:
    document = _service(db, request).toggle_archive(principal, document_id)
    db.commit()
    db.refresh(document)
    return DocumentResponse.model_validate(document)


@router.delete(
    "/{document_id}",
    response_model=DocumentResponse,
    summary="Move document to trash",
)
def soft_delete_document(
    document_id: UUID,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> DocumentResponse:
    """Soft-delete a document (requires WRITE). It stays restorable from the trash."""
    document = _service(db, request).soft_delete(principal, document_id)
    db.commit()
    db.refresh(document)
    return DocumentResponse.model_validate(document)


@router.post(
    "/{document_id}/restore",
    response_model=DocumentResponse,
    summary="Restore document from trash",
)
def restore_document(
    document_id: UUID,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> DocumentResponse:
    """Restore a trashed document with its previous status (requires WRITE).

    Raises:
        409: Document is not in the trash
    """
    document = _service(db, request).restore(principal, document_id)
    db.commit()
    db.refresh(document)
    return DocumentResponse.model_validate(document)


@router.delete(
    "/{document_id}/purge",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Permanently delete document",
    description="""
    Irreversibly remove a document that is already in the trash, together with
    its comments and notifications. Grants, assignments and the audit trail
    are kept.

    **Permissions:** ADMIN on the document

    **Errors:**
    - 404: document does not exist (e.g. already purged)
    - 409: document is not in the trash
    """
)
def purge_document(
    document_id: UUID,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> Response:
    _service(db, request).purge(principal, document_id)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
