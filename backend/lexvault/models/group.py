"""Group and GroupMember SQLAlchemy models"""

import enum
import secrets
import uuid

from sqlalchemy import Column, Text, ForeignKey, Boolean, DateTime, Uuid, UniqueConstraint, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class GroupRole(str, enum.Enum):
    """Role of a member inside a group.

    The role determines the access level the member inherits on documents
    filed under the group (see permissions.evaluator.GROUP_ROLE_LEVELS).
    """
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


def new_invite_code() -> str:
    return secrets.token_hex(6).upper()


class Group(Base):
    """A team or practice area that documents can be filed under.

    Users join on their own with the invite code, as VIEWER.
    """
    __tablename__ = "group"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    invite_code = Column(Text, nullable=False, unique=True, default=new_invite_code)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User")
    members = relationship("GroupMember", back_populates="group", cascade="all, delete-orphan")


class GroupMember(Base):
    """Membership of a user in a group."""
    __tablename__ = "group_member"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_member_group_user"),
        Index("ix_group_member_user_id", "user_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    group_id = Column(Uuid, ForeignKey("group.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    role = Column(SQLEnum(GroupRole, name="grouprole", native_enum=False), nullable=False, default=GroupRole.VIEWER)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    group = relationship("Group", back_populates="members")
    user = relationship("User")
