"""Closed vocabulary of audited actions and entity types."""

from enum import Enum


class AuditAction(str, Enum):
    """Action kinds written to the audit log."""
    DOCUMENT_CREATED = "DOCUMENT_CREATED"
    DOCUMENT_UPDATED = "DOCUMENT_UPDATED"
    DOCUMENT_STATUS_CHANGED = "DOCUMENT_STATUS_CHANGED"
    DOCUMENT_ARCHIVED = "DOCUMENT_ARCHIVED"
    DOCUMENT_UNARCHIVED = "DOCUMENT_UNARCHIVED"
    DOCUMENT_DELETED = "DOCUMENT_DELETED"
    DOCUMENT_RESTORED = "DOCUMENT_RESTORED"
    DOCUMENT_PURGED = "DOCUMENT_PURGED"
    DOCUMENT_COMMENT_ADDED = "DOCUMENT_COMMENT_ADDED"
    DOCUMENT_ASSIGNED = "DOCUMENT_ASSIGNED"
    ASSIGNMENT_STATUS_CHANGED = "ASSIGNMENT_STATUS_CHANGED"
    ASSIGNMENT_NOTES_UPDATED = "ASSIGNMENT_NOTES_UPDATED"
    PERMISSION_CHANGED = "PERMISSION_CHANGED"
    GROUP_CREATED = "GROUP_CREATED"
    GROUP_MEMBER_ADDED = "GROUP_MEMBER_ADDED"
    GROUP_MEMBER_REMOVED = "GROUP_MEMBER_REMOVED"
    GROUP_JOINED = "GROUP_JOINED"


class EntityType(str, Enum):
    """Entity types referenced by audit entries and notifications."""
    DOCUMENT = "document"
    ASSIGNMENT = "assignment"
    PERMISSION = "permission"
    GROUP = "group"
