"""System roles for LexVault.

Role Hierarchy (descending permissions):
- ADMIN: System admin. Implicit ADMIN level on every document, user
  directory, firm-wide activity log and statistics.
- MEMBER: Ordinary member of the firm. Access to a document comes from
  ownership, explicit grants or group membership.

Per-document access is not decided here; see permissions.evaluator.
"""

from enum import Enum


class UserRole(str, Enum):
    """System roles.

    Values are stored as TEXT in the database and must match exactly.
    """
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


# Role hierarchy: Each role includes permissions of all roles below it
ROLE_HIERARCHY = {
    UserRole.ADMIN: {UserRole.ADMIN, UserRole.MEMBER},
    UserRole.MEMBER: {UserRole.MEMBER},
}


def has_permission(user_role: UserRole, required_role: UserRole) -> bool:
    """Check if a user role satisfies a required system role.

    Examples:
        >>> has_permission(UserRole.ADMIN, UserRole.MEMBER)
        True
        >>> has_permission(UserRole.MEMBER, UserRole.ADMIN)
        False
    """
    return required_role in ROLE_HIERARCHY.get(user_role, set())
