"""Document comment endpoints (READ on the document)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ..audit.service import AuditRecorder
from ..auth.dependencies import get_principal
from ..auth.principal import Principal
from ..database import get_db
from .schemas import CommentCreate, CommentListResponse, CommentResponse
from .service import CommentService


router = APIRouter(prefix="/documents", tags=["comments"])


@router.get(
    "/{document_id}/comments",
    response_model=CommentListResponse,
    summary="List comments on a document",
)
def list_comments(
    document_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> CommentListResponse:
    comments, total = CommentService(db).list_comments(principal, document_id)
    return CommentListResponse(
        items=[CommentResponse.model_validate(c) for c in comments],
        total=total,
    )


@router.post(
    "/{document_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a document",
    description="""
    Add a comment, or a reply when parent_id is given. Logs
    DOCUMENT_COMMENT_ADDED.

    **Permissions:** READ on the document
    """
)
def add_comment(
    document_id: UUID,
    data: CommentCreate,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> CommentResponse:
    service = CommentService(db, AuditRecorder.from_request(db, request))
    comment = service.add_comment(
        principal,
        document_id,
        content=data.content,
        parent_id=data.parent_id,
        page_number=data.page_number,
    )
    db.commit()
    db.refresh(comment)
    return CommentResponse.model_validate(comment)
