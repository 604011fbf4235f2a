"""FastAPI dependencies for authentication and authorization.

This module provides dependency injection functions for:
- Extracting and validating JWT tokens from requests
- Loading the current authenticated user
- Resolving the request's Principal for the domain services
- Enforcing system-role access control

Usage:
    @router.get("/documents")
    def list_documents(principal: Principal = Depends(get_principal)):
        ...

    @router.get("/activity/stats")
    def stats(principal: Principal = Depends(require_system_admin)):
        ...
"""

import logging
from typing import Optional
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from .jwt import decode_token
from .principal import Principal
from .roles import UserRole, has_permission

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme; missing headers are reported as 401 below
security = HTTPBearer(auto_error=False)


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Extract and validate JWT token, returning the authenticated user.

    This dependency:
    1. Extracts Bearer token from Authorization header
    2. Validates token signature and expiration
    3. Loads user from database
    4. Checks user is ACTIVE (not DISABLED)

    Raises:
        HTTPException 401: If token is missing, invalid, expired, or user not found
        HTTPException 403: If user status is DISABLED
    """
    if credentials is None or not credentials.credentials:
        raise _unauthenticated("Not authenticated")

    try:
        payload = decode_token(credentials.credentials)

        user_id_str = payload.get("sub")
        if not user_id_str:
            raise _unauthenticated("Invalid token: missing user ID claim")

        user_id = UUID(user_id_str)

    except jwt.ExpiredSignatureError:
        raise _unauthenticated("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthenticated(f"Invalid token: {str(e)}")
    except ValueError as e:
        raise _unauthenticated(f"Invalid token claims: {str(e)}")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise _unauthenticated("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user


def get_principal(current_user: User = Depends(get_current_user)) -> Principal:
    """Resolve the authenticated user into the Principal used by services."""
    try:
        return Principal.from_user(current_user)
    except ValueError:
        # Invalid role in database (should never happen due to CHECK constraint)
        logger.error(f"User {current_user.id} has invalid role {current_user.role!r}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Invalid user role: {current_user.role}",
        )


def require_role(required_role: UserRole):
    """Create a dependency that enforces a minimum system role.

    Example:
        @router.get("/activity/stats")
        def stats(principal: Principal = Depends(require_role(UserRole.ADMIN))):
            ...
    """

    def role_dependency(principal: Principal = Depends(get_principal)) -> Principal:
        if not has_permission(principal.role, required_role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {required_role.value}",
            )
        return principal

    return role_dependency


require_system_admin = require_role(UserRole.ADMIN)
