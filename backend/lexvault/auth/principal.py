"""Authenticated principal passed into the domain services.

The principal is built per request from the verified token and the user
row; admin capabilities are derived from its role, never from process-wide
state.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from .roles import UserRole


@dataclass(frozen=True)
class Principal:
    """Actor performing an operation."""
    id: UUID
    role: UserRole
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_system_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(id=user.id, role=UserRole(user.role), name=user.name, email=user.email)
