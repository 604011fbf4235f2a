"""Document permission grant endpoints (ADMIN on the document)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..audit.service import AuditRecorder
from ..auth.dependencies import get_principal
from ..auth.principal import Principal
from ..database import get_db
from .schemas import PermissionGrantListResponse, PermissionGrantResponse, PermissionGrantUpdate
from .service import PermissionService


router = APIRouter(prefix="/documents", tags=["permissions"])


@router.get(
    "/{document_id}/permissions",
    response_model=PermissionGrantListResponse,
    summary="List explicit grants on a document",
)
def list_permissions(
    document_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> PermissionGrantListResponse:
    grants = PermissionService(db).list_grants(principal, document_id)
    return PermissionGrantListResponse(
        items=[PermissionGrantResponse.model_validate(g) for g in grants]
    )


@router.put(
    "/{document_id}/permissions/{user_id}",
    response_model=PermissionGrantResponse,
    summary="Set a user's permission on a document",
    description="""
    Create or update the explicit grant of one user. Level "none" revokes
    access. Logs PERMISSION_CHANGED.

    **Permissions:** ADMIN on the document
    """
)
def set_permission(
    document_id: UUID,
    user_id: UUID,
    data: PermissionGrantUpdate,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> PermissionGrantResponse:
    service = PermissionService(db, AuditRecorder.from_request(db, request))
    grant = service.set_permission_grant(principal, document_id, user_id, data.level)
    db.commit()
    db.refresh(grant)
    return PermissionGrantResponse.model_validate(grant)
