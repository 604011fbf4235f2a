"""User SQLAlchemy model"""

import re
import uuid

from sqlalchemy import Column, Text, CheckConstraint, UniqueConstraint, DateTime, Uuid
from sqlalchemy.orm import validates

from .base import Base, utcnow


class User(Base):
    """User model representing authenticated members of the firm.

    The role column holds the system role: ADMIN users are system admins and
    hold implicit ADMIN access to every document; MEMBER users rely on
    ownership, explicit grants and group membership.
    """
    __tablename__ = "user"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="MEMBER")
    status = Column(Text, nullable=False, default="ACTIVE")
    avatar_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "role IN ('ADMIN', 'MEMBER')",
            name='ck_user_role'
        ),
        CheckConstraint(
            "status IN ('ACTIVE', 'DISABLED')",
            name='ck_user_status'
        ),
        UniqueConstraint('email', name='uq_user_email')
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"
