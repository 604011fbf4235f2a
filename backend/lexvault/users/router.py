"""User endpoints.

Users are provisioned externally (identity provider); this router exposes the
current user and the directory of active users used to pick assignees and
grant recipients.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_user
from ..database import get_db
from ..models.user import User
from .schemas import UserListResponse, UserResponse


router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse, summary="Get current user")
def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.get("", response_model=UserListResponse, summary="List active users")
def list_users(
    search: str = Query(None, description="Name or email contains (case-insensitive)"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> UserListResponse:
    query = db.query(User).filter(User.status == "ACTIVE")
    if search:
        pattern = f"%{search}%"
        query = query.filter(User.name.ilike(pattern) | User.email.ilike(pattern))

    users = query.order_by(User.name).all()
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=len(users),
    )
