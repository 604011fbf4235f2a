"""Group service - groups and membership management.

Membership roles feed the permission evaluator: a member inherits a level on
every document filed under the group. Membership changes are therefore
permission changes and are audited like them.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, or_, select
from sqlalchemy.orm import Session, selectinload

from ..audit.actions import AuditAction, EntityType
from ..audit.service import AuditRecorder
from ..auth.principal import Principal
from ..errors import InvalidTransitionError, NotFoundError, UnauthorizedError
from ..models.group import Group, GroupMember, GroupRole
from ..models.user import User

logger = logging.getLogger(__name__)


class GroupService:
    """Service for group operations."""

    def __init__(self, db: Session, recorder: Optional[AuditRecorder] = None):
        self.db = db
        self.recorder = recorder or AuditRecorder(db)

    def _membership(self, group_id: UUID, user_id: UUID) -> Optional[GroupMember]:
        return self.db.query(GroupMember).filter(
            GroupMember.group_id == group_id,
            GroupMember.user_id == user_id
        ).first()

    def _can_manage(self, principal: Principal, group: Group) -> bool:
        if principal.is_system_admin or group.owner_id == principal.id:
            return True
        membership = self._membership(group.id, principal.id)
        return membership is not None and membership.role == GroupRole.ADMIN

    def get_group(self, principal: Principal, group_id: UUID) -> Group:
        """Get a group with its members (members, owner and system admins only)."""
        group = (
            self.db.query(Group)
            .options(selectinload(Group.members))
            .filter(Group.id == group_id, Group.is_active.is_(True))
            .first()
        )
        if not group:
            raise NotFoundError(f"Group {group_id} not found")

        if not (
            principal.is_system_admin
            or group.owner_id == principal.id
            or self._membership(group.id, principal.id)
        ):
            raise UnauthorizedError("You are not a member of this group")
        return group

    def list_groups(
        self,
        principal: Principal,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Group], int]:
        """Groups the principal owns or belongs to; system admins see all."""
        query = self.db.query(Group).filter(Group.is_active.is_(True))

        if not principal.is_system_admin:
            member_of = select(GroupMember.group_id).where(GroupMember.user_id == principal.id)
            query = query.filter(or_(Group.owner_id == principal.id, Group.id.in_(member_of)))

        total = query.count()
        groups = (
            query.options(selectinload(Group.members))
            .order_by(desc(Group.created_at))
            .limit(limit)
            .offset(offset)
            .all()
        )
        return groups, total

    def create_group(self, principal: Principal, name: str, description: Optional[str] = None) -> Group:
        """Create a group owned by the principal, who joins it as ADMIN."""
        group = Group(name=name, description=description, owner_id=principal.id)
        self.db.add(group)
        self.db.flush()

        self.db.add(GroupMember(group_id=group.id, user_id=principal.id, role=GroupRole.ADMIN))
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.GROUP_CREATED,
            entity_type=EntityType.GROUP,
            entity_id=group.id,
            entity_name=group.name,
            description=f"Group created: {group.name}",
        )
        logger.info(f"Group created: {group.name}", extra={"actor_id": principal.id})
        return group

    def add_member(
        self,
        principal: Principal,
        group_id: UUID,
        user_id: UUID,
        role: GroupRole = GroupRole.VIEWER
    ) -> GroupMember:
        """Add a user to a group, or change the role of an existing member.

        Raises:
            NotFoundError: If the group or the user does not exist
            UnauthorizedError: If the principal cannot manage the group
            InvalidTransitionError: If the group owner would get a role other
                than ADMIN
        """
        role = GroupRole(role)
        group = self.db.query(Group).filter(Group.id == group_id, Group.is_active.is_(True)).first()
        if not group:
            raise NotFoundError(f"Group {group_id} not found")
        if not self._can_manage(principal, group):
            raise UnauthorizedError("Only the group owner or a group admin can manage members")

        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"User {user_id} not found")

        member = self._membership(group.id, user.id)
        previous = GroupRole(member.role).value if member else None
        if user.id == group.owner_id and role != GroupRole.ADMIN:
            raise InvalidTransitionError("The group owner always holds the ADMIN role")
        if member is None:
            member = GroupMember(group_id=group.id, user_id=user.id, role=role)
            self.db.add(member)
        else:
            member.role = role
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.GROUP_MEMBER_ADDED,
            entity_type=EntityType.GROUP,
            entity_id=group.id,
            entity_name=group.name,
            description=f"Member {user.name} added to group {group.name} as {role.value}",
            metadata={"user_id": str(user.id), "from": previous, "to": role.value},
        )
        return member

    def remove_member(self, principal: Principal, group_id: UUID, user_id: UUID) -> None:
        """Remove a member from a group.

        Raises:
            NotFoundError: If the group or the membership does not exist
            UnauthorizedError: If the principal cannot manage the group
            InvalidTransitionError: If the member is the group owner
        """
        group = self.db.query(Group).filter(Group.id == group_id, Group.is_active.is_(True)).first()
        if not group:
            raise NotFoundError(f"Group {group_id} not found")
        if not self._can_manage(principal, group):
            raise UnauthorizedError("Only the group owner or a group admin can manage members")

        member = self._membership(group.id, user_id)
        if not member:
            raise NotFoundError(f"User {user_id} is not a member of group {group_id}")
        if user_id == group.owner_id:
            raise InvalidTransitionError("The group owner cannot be removed from the group")

        self.db.delete(member)
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.GROUP_MEMBER_REMOVED,
            entity_type=EntityType.GROUP,
            entity_id=group.id,
            entity_name=group.name,
            description=f"Member removed from group {group.name}",
            metadata={"user_id": str(user_id)},
        )

    def join_by_invite_code(self, principal: Principal, invite_code: str) -> GroupMember:
        """Join a group with its invite code, as VIEWER.

        Raises:
            NotFoundError: If no active group has this code
            InvalidTransitionError: If the principal is already a member
        """
        group = self.db.query(Group).filter(
            Group.invite_code == invite_code.strip().upper(),
            Group.is_active.is_(True)
        ).first()
        if not group:
            raise NotFoundError("Invalid invite code")
        if self._membership(group.id, principal.id):
            raise InvalidTransitionError("You are already a member of this group")

        member = GroupMember(group_id=group.id, user_id=principal.id, role=GroupRole.VIEWER)
        self.db.add(member)
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.GROUP_JOINED,
            entity_type=EntityType.GROUP,
            entity_id=group.id,
            entity_name=group.name,
            description=f"Joined group {group.name} with an invite code",
            metadata={"user_id": str(principal.id), "to": GroupRole.VIEWER.value},
        )
        logger.info(f"User joined group {group.id}", extra={"actor_id": principal.id})
        return member
