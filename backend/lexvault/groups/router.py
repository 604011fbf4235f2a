"""Groups API Router - groups and membership."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from ..audit.service import AuditRecorder
from ..auth.dependencies import get_principal
from ..auth.principal import Principal
from ..database import get_db
from ..pagination import PageParams, page_params
from .schemas import (
    GroupCreate,
    GroupJoin,
    GroupListResponse,
    GroupMemberAdd,
    GroupMemberResponse,
    GroupResponse,
)
from .service import GroupService


router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=GroupListResponse, summary="List my groups")
def list_groups(
    pagination: PageParams = Depends(page_params),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> GroupListResponse:
    """Groups the caller owns or belongs to (system admins see all)."""
    groups, total = GroupService(db).list_groups(
        principal, limit=pagination.per_page, offset=pagination.offset
    )
    return GroupListResponse(
        items=[GroupResponse.model_validate(g) for g in groups],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        total_pages=pagination.total_pages(total),
    )


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED, summary="Create group")
def create_group(
    data: GroupCreate,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> GroupResponse:
    """Create a group; the caller becomes its owner and an ADMIN member."""
    group = GroupService(db, AuditRecorder.from_request(db, request)).create_group(
        principal, name=data.name, description=data.description
    )
    db.commit()
    db.refresh(group)
    return GroupResponse.model_validate(group)


@router.post(
    "/join",
    response_model=GroupMemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Join a group with an invite code",
    description="Joins the group as VIEWER, which grants READ on documents filed under it.",
)
def join_group(
    data: GroupJoin,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> GroupMemberResponse:
    member = GroupService(db, AuditRecorder.from_request(db, request)).join_by_invite_code(
        principal, data.invite_code
    )
    db.commit()
    db.refresh(member)
    return GroupMemberResponse.model_validate(member)


@router.get("/{group_id}", response_model=GroupResponse, summary="Get group")
def get_group(
    group_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> GroupResponse:
    return GroupResponse.model_validate(GroupService(db).get_group(principal, group_id))


@router.post(
    "/{group_id}/members",
    response_model=GroupMemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add group member",
    description="Adds a user to the group, or changes the role of an existing member. "
                "Group owner, group ADMIN members and system admins only.",
)
def add_member(
    group_id: UUID,
    data: GroupMemberAdd,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> GroupMemberResponse:
    member = GroupService(db, AuditRecorder.from_request(db, request)).add_member(
        principal, group_id, data.user_id, data.role
    )
    db.commit()
    db.refresh(member)
    return GroupMemberResponse.model_validate(member)


@router.delete(
    "/{group_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove group member",
)
def remove_member(
    group_id: UUID,
    user_id: UUID,
    request: Request,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
) -> Response:
    GroupService(db, AuditRecorder.from_request(db, request)).remove_member(principal, group_id, user_id)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
