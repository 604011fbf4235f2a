"""SQLAlchemy Models for LexVault"""

from .base import Base
from .user import User
from .group import Group, GroupMember, GroupRole
from .document import Document, DocumentType, FileStatus, SharingStatus
from .document_permission import DocumentPermission
from .document_assignment import DocumentAssignment, AssignmentStatus
from .document_comment import DocumentComment
from .notification import Notification
from .audit_log import AuditLog, AuditLogImmutableError

__all__ = [
    "Base",
    "User",
    "Group",
    "GroupMember",
    "GroupRole",
    "Document",
    "DocumentType",
    "FileStatus",
    "SharingStatus",
    "DocumentPermission",
    "DocumentAssignment",
    "AssignmentStatus",
    "DocumentComment",
    "Notification",
    "AuditLog",
    "AuditLogImmutableError",
]
