"""JWT token generation and validation

Access tokens are issued by the firm's identity provider; this module only
verifies them and, for tooling and tests, can mint equivalent tokens.

JWT Token Claims Structure:
============================

Standard JWT Claims:
- sub (Subject): User ID as UUID string
- iat (Issued At): Unix timestamp when token was created
- exp (Expiration): Unix timestamp when token expires

Custom Claims:
- role: User's system role ("ADMIN" | "MEMBER")
- email: User's email address

The role claim is informational only. Authorization always uses the role
stored on the user row, so a tampered claim cannot escalate privileges.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from uuid import UUID

import jwt

from ..config import get_settings


def create_access_token(
    user_id: UUID,
    role: str,
    email: str,
    expires_in_minutes: Optional[int] = None
) -> str:
    """Create a signed JWT access token.

    Args:
        user_id: User's UUID
        role: User's system role (ADMIN, MEMBER)
        email: User's email address
        expires_in_minutes: Override for the configured token lifetime

    Returns:
        str: Signed JWT token
    """
    settings = get_settings()
    expiry_minutes = expires_in_minutes if expires_in_minutes is not None else settings.JWT_EXPIRY_MINUTES

    now = datetime.now(timezone.utc)
    expiration = now + timedelta(minutes=expiry_minutes)

    payload = {
        'sub': str(user_id),
        'role': role,
        'email': email,
        'iat': int(now.timestamp()),
        'exp': int(expiration.timestamp())
    }

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        dict: Decoded token payload with claims

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
    """
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
