"""Notification inbox endpoints for the current user."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth.dependencies import get_principal
from ..auth.principal import Principal
from ..database import get_db
from ..pagination import PageParams, page_params
from .schemas import MarkAllReadResponse, NotificationListResponse, NotificationResponse
from .service import NotificationService


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse, summary="List my notifications")
def list_notifications(
    unread_only: bool = Query(False, description="Only unread notifications"),
    pagination: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> NotificationListResponse:
    notifications, total, unread = NotificationService(db).list_notifications(
        principal.id,
        unread_only=unread_only,
        limit=pagination.per_page,
        offset=pagination.offset,
    )
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in notifications],
        total=total,
        unread_count=unread,
        page=pagination.page,
        per_page=pagination.per_page,
    )


@router.patch("/{notification_id}/read", response_model=NotificationResponse, summary="Mark notification read")
def mark_read(
    notification_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> NotificationResponse:
    notification = NotificationService(db).mark_read(principal.id, notification_id)
    db.commit()
    db.refresh(notification)
    return NotificationResponse.model_validate(notification)


@router.post("/read-all", response_model=MarkAllReadResponse, summary="Mark all notifications read")
def mark_all_read(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> MarkAllReadResponse:
    updated = NotificationService(db).mark_all_read(principal.id)
    db.commit()
    return MarkAllReadResponse(updated=updated)
