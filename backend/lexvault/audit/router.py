"""Activity feed endpoints (read side of the audit log).

All endpoints in this router are read-only. Audit entries are immutable and
cannot be created, updated, or deleted through the API.

System admins see every entry and may filter by user; everyone else sees
only the entries they caused themselves.
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from ..auth.dependencies import get_principal, require_system_admin
from ..auth.principal import Principal
from ..database import get_db
from ..models.audit_log import AuditLog
from ..models.base import utcnow
from ..pagination import PageParams, page_params
from .schemas import ActionCount, ActivityEntryResponse, ActivityListResponse, ActivityStatsResponse


router = APIRouter(prefix="/activity", tags=["activity"])

TOP_ACTIONS_LIMIT = 5


@router.get(
    "",
    response_model=ActivityListResponse,
    summary="Query activity",
    description="Audit entries, newest first. Members only see their own activity."
)
def query_activity(
    action: Optional[str] = Query(None, description="Filter by action (e.g. DOCUMENT_ARCHIVED)"),
    entity_type: Optional[str] = Query(None, description="Filter by entity type (e.g. document)"),
    user_id: Optional[UUID] = Query(None, description="Filter by actor (system admins only)"),
    start_date: Optional[datetime] = Query(None, alias="from", description="Minimum created_at (ISO 8601)"),
    end_date: Optional[datetime] = Query(None, alias="to", description="Maximum created_at (ISO 8601)"),
    pagination: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> ActivityListResponse:
    """Query the activity feed with filtering and pagination.

    Example:
        GET /activity?action=DOCUMENT_PURGED&from=2026-01-01T00:00:00Z&page=1
    """
    query = db.query(AuditLog)

    if principal.is_system_admin:
        if user_id:
            query = query.filter(AuditLog.actor_id == user_id)
    else:
        query = query.filter(AuditLog.actor_id == principal.id)

    if action:
        query = query.filter(AuditLog.action == action)

    if entity_type:
        query = query.filter(AuditLog.entity_type == entity_type)

    if start_date:
        query = query.filter(AuditLog.created_at >= start_date)

    if end_date:
        query = query.filter(AuditLog.created_at <= end_date)

    total = query.count()
    entries = (
        query.order_by(desc(AuditLog.created_at))
        .offset(pagination.offset)
        .limit(pagination.per_page)
        .all()
    )

    return ActivityListResponse(
        entries=[ActivityEntryResponse.model_validate(e) for e in entries],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page
    )


@router.get(
    "/stats",
    response_model=ActivityStatsResponse,
    summary="Activity statistics (system admin only)",
)
def activity_stats(
    principal: Principal = Depends(require_system_admin),
    db: Session = Depends(get_db)
) -> ActivityStatsResponse:
    """Entry counts for today and the last 7 days, plus the most frequent actions."""
    now = utcnow()
    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago = now - timedelta(days=7)

    today = db.query(func.count(AuditLog.id)).filter(AuditLog.created_at >= start_of_today).scalar()
    last_7_days = db.query(func.count(AuditLog.id)).filter(AuditLog.created_at >= week_ago).scalar()

    rows = (
        db.query(AuditLog.action, func.count(AuditLog.id).label("count"))
        .group_by(AuditLog.action)
        .order_by(desc("count"))
        .limit(TOP_ACTIONS_LIMIT)
        .all()
    )

    return ActivityStatsResponse(
        today=today or 0,
        last_7_days=last_7_days or 0,
        top_actions=[ActionCount(action=action, count=count) for action, count in rows],
    )
