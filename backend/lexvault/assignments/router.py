"""Assignments API Router - received/sent inboxes, creation and status workflow."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ..audit.service import AuditRecorder
from ..auth.dependencies import get_principal
from ..auth.principal import Principal
from ..database import get_db
from ..models.document_assignment import AssignmentStatus
from ..notifications.service import DatabaseNotificationSender
from ..pagination import PageParams, page_params
from .schemas import (
    AssignmentCreate,
    AssignmentCreatedResponse,
    AssignmentListResponse,
    AssignmentNotesUpdate,
    AssignmentResponse,
    AssignmentStatusUpdate,
)
from .service import AssignmentService


router = APIRouter(prefix="/assignments", tags=["assignments"])
document_router = APIRouter(prefix="/documents", tags=["assignments"])


def _service(db: Session, request: Request) -> AssignmentService:
    return AssignmentService(
        db,
        sender=DatabaseNotificationSender(db),
        recorder=AuditRecorder.from_request(db, request),
    )


def _list_response(assignments, total: int, pagination: PageParams) -> AssignmentListResponse:
    return AssignmentListResponse(
        items=[AssignmentResponse.model_validate(a) for a in assignments],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        total_pages=pagination.total_pages(total),
    )


@router.get("", response_model=AssignmentListResponse, summary="List assignments received")
def list_received(
    status_filter: Optional[AssignmentStatus] = Query(None, alias="status", description="Filter by status"),
    pagination: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> AssignmentListResponse:
    assignments, total = AssignmentService(db).list_received(
        principal, status=status_filter, limit=pagination.per_page, offset=pagination.offset
    )
    return _list_response(assignments, total, pagination)


@router.get("/sent", response_model=AssignmentListResponse, summary="List assignments sent")
def list_sent(
    status_filter: Optional[AssignmentStatus] = Query(None, alias="status", description="Filter by status"),
    pagination: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> AssignmentListResponse:
    assignments, total = AssignmentService(db).list_sent(
        principal, status=status_filter, limit=pagination.per_page, offset=pagination.offset
    )
    return _list_response(assignments, total, pagination)


@router.post(
    "",
    response_model=AssignmentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign a document",
    description="""
    Hand a document to another active user. Sets the document's sharing
    status to ASSIGNED, notifies the assignee and logs DOCUMENT_ASSIGNED.

    A failed notification does not fail the request; it is reported through
    `notification_sent = false`.

    **Permissions:** WRITE on the document
    """
)
def create_assignment(
    data: AssignmentCreate,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> AssignmentCreatedResponse:
    result = _service(db, request).create_assignment(
        principal,
        document_id=data.document_id,
        assignee_id=data.assigned_to,
        notes=data.notes,
        due_date=data.due_date,
    )
    db.commit()
    db.refresh(result.assignment)

    payload = AssignmentResponse.model_validate(result.assignment).model_dump()
    return AssignmentCreatedResponse(**payload, notification_sent=result.notification_sent)


@router.patch(
    "/{assignment_id}/status",
    response_model=AssignmentResponse,
    summary="Accept, reject or complete an assignment",
    description="""
    Allowed transitions (assignee only):
    - PENDING → ACCEPTED
    - PENDING → REJECTED
    - ACCEPTED → COMPLETED

    Anything else returns 409.
    """
)
def update_assignment_status(
    assignment_id: UUID,
    data: AssignmentStatusUpdate,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> AssignmentResponse:
    assignment = _service(db, request).update_status(principal, assignment_id, data.status)
    db.commit()
    db.refresh(assignment)
    return AssignmentResponse.model_validate(assignment)


@router.patch("/{assignment_id}/notes", response_model=AssignmentResponse, summary="Edit assignment notes")
def update_assignment_notes(
    assignment_id: UUID,
    data: AssignmentNotesUpdate,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> AssignmentResponse:
    """Replace the notes of an assignment (assigner only)."""
    assignment = _service(db, request).update_notes(principal, assignment_id, data.notes)
    db.commit()
    db.refresh(assignment)
    return AssignmentResponse.model_validate(assignment)


@document_router.get(
    "/{document_id}/assignments",
    response_model=AssignmentListResponse,
    summary="List assignments of a document",
)
def list_document_assignments(
    document_id: UUID,
    status_filter: Optional[AssignmentStatus] = Query(None, alias="status", description="Filter by status"),
    pagination: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> AssignmentListResponse:
    assignments, total = AssignmentService(db).list_for_document(
        principal, document_id, status=status_filter, limit=pagination.per_page, offset=pagination.offset
    )
    return _list_response(assignments, total, pagination)
