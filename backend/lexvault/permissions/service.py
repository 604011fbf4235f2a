"""Permission service - loads grants and memberships, evaluates and writes grants.

All authorization decisions go through PermissionService.require, which feeds
database rows into the pure evaluator and raises UnauthorizedError when the
effective level is below the operation's minimum.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..audit.actions import AuditAction, EntityType
from ..audit.service import AuditRecorder
from ..auth.principal import Principal
from ..documents.queries import load_document, resolve_sharing_status
from ..errors import NotFoundError, UnauthorizedError
from ..models.document import Document
from ..models.document_permission import DocumentPermission
from ..models.group import GroupMember
from ..models.user import User
from ..observability.metrics import authorization_denials_total, permission_changes_total
from .evaluator import GROUP_ROLE_LEVELS, get_effective_permission, require_permission
from .levels import PermissionLevel

logger = logging.getLogger(__name__)


class PermissionService:
    """Service for effective-permission lookups and explicit grants."""

    def __init__(self, db: Session, recorder: AuditRecorder = None):
        self.db = db
        self.recorder = recorder or AuditRecorder(db)

    def effective_permission(self, principal: Principal, document: Document) -> PermissionLevel:
        """Effective level of ``principal`` on ``document``."""
        if principal.is_system_admin or document.owner_id == principal.id:
            # Decided without touching grants; the evaluator returns ADMIN first
            return get_effective_permission(principal, document)

        grants = self.db.query(DocumentPermission).filter(
            DocumentPermission.document_id == document.id,
            DocumentPermission.user_id == principal.id
        ).all()

        memberships = []
        if document.group_id is not None:
            memberships = self.db.query(GroupMember).filter(
                GroupMember.group_id == document.group_id,
                GroupMember.user_id == principal.id
            ).all()

        return get_effective_permission(principal, document, grants, memberships)

    def require(
        self,
        principal: Principal,
        document: Document,
        minimum: PermissionLevel,
        action: str
    ) -> PermissionLevel:
        """Check that ``principal`` meets ``minimum`` on ``document``.

        Returns:
            PermissionLevel: The effective level (when sufficient)

        Raises:
            UnauthorizedError: If the effective level is too low
        """
        effective = self.effective_permission(principal, document)
        try:
            require_permission(effective, minimum, action)
        except UnauthorizedError:
            authorization_denials_total.labels(required_level=minimum.value).inc()
            logger.warning(
                f"Denied {action} on document {document.id}",
                extra={"actor_id": principal.id, "document_id": document.id, "action": action}
            )
            raise
        return effective

    def visibility_clause(self, principal: Principal, minimum: PermissionLevel = PermissionLevel.DOWNLOAD):
        """SQL filter selecting documents where ``principal`` holds at least ``minimum``.

        Mirrors the evaluator for list queries: owner, explicit grant at or
        above the minimum, or membership in the document's group with a role
        whose inherited level meets the minimum. Returns None for system
        admins (no restriction).
        """
        if principal.is_system_admin:
            return None

        granted = select(DocumentPermission.document_id).where(
            DocumentPermission.user_id == principal.id,
            DocumentPermission.level.in_(PermissionLevel.at_least(minimum))
        )
        roles = [role for role, level in GROUP_ROLE_LEVELS.items() if level >= minimum]
        member_of = select(GroupMember.group_id).where(
            GroupMember.user_id == principal.id,
            GroupMember.role.in_(roles)
        )
        return or_(
            Document.owner_id == principal.id,
            Document.id.in_(granted),
            Document.group_id.in_(member_of),
        )

    def list_grants(self, principal: Principal, document_id: UUID) -> List[DocumentPermission]:
        """List explicit grants on a document (requires ADMIN)."""
        document = load_document(self.db, document_id)
        self.require(principal, document, PermissionLevel.ADMIN, "view permissions")
        return (
            self.db.query(DocumentPermission)
            .filter(DocumentPermission.document_id == document_id)
            .order_by(DocumentPermission.created_at)
            .all()
        )

    def set_permission_grant(
        self,
        principal: Principal,
        document_id: UUID,
        target_user_id: UUID,
        level: PermissionLevel
    ) -> DocumentPermission:
        """Create or update the grant of ``target_user_id`` on a document.

        Revoking access means setting the level to NONE; grant rows are
        never deleted.

        Raises:
            NotFoundError: If the document or the target user does not exist
            UnauthorizedError: If the principal lacks ADMIN on the document
        """
        level = PermissionLevel(level)
        document = load_document(self.db, document_id, lock=True)
        self.require(principal, document, PermissionLevel.ADMIN, "change permissions")

        target = self.db.query(User).filter(User.id == target_user_id).first()
        if not target:
            raise NotFoundError(f"User {target_user_id} not found")

        grant = self.db.query(DocumentPermission).filter(
            DocumentPermission.document_id == document_id,
            DocumentPermission.user_id == target_user_id
        ).first()

        previous = grant.level if grant else PermissionLevel.NONE
        if grant is None:
            grant = DocumentPermission(
                document_id=document_id,
                user_id=target_user_id,
                level=level,
                granted_by=principal.id,
            )
            self.db.add(grant)
        else:
            grant.level = level
            grant.granted_by = principal.id
        self.db.flush()

        document.sharing_status = resolve_sharing_status(self.db, document)
        self.db.flush()

        self.recorder.record(
            actor_id=principal.id,
            action=AuditAction.PERMISSION_CHANGED,
            entity_type=EntityType.DOCUMENT,
            entity_id=document.id,
            entity_name=document.name,
            description=f"Permission of {target.name} on {document.name} set to {level.value}",
            metadata={
                "user_id": str(target_user_id),
                "from": PermissionLevel(previous).value,
                "to": level.value,
            },
        )
        permission_changes_total.labels(level=level.value).inc()

        logger.info(
            f"Permission set to {level.value} for user {target_user_id}",
            extra={"actor_id": principal.id, "document_id": document.id}
        )
        return grant
