"""Effective permission evaluation.

Resolution order:
    1. System admin            -> ADMIN
    2. Document owner          -> ADMIN
    3. Explicit grant on the document, combined with the level implied by
       membership in the document's group (highest wins), else NONE

The evaluator is pure: it only looks at the objects it is given, performs
no I/O and never reads the clock. PermissionService loads the grants and
memberships from the database and calls into this module.
"""

from typing import Iterable

from ..auth.principal import Principal
from ..errors import UnauthorizedError
from ..models.group import GroupRole
from .levels import PermissionLevel, highest, meets_minimum


# Level a group member inherits on documents filed under the group
GROUP_ROLE_LEVELS = {
    GroupRole.ADMIN: PermissionLevel.ADMIN,
    GroupRole.EDITOR: PermissionLevel.WRITE,
    GroupRole.VIEWER: PermissionLevel.READ,
}


def get_effective_permission(
    principal: Principal,
    document,
    grants: Iterable = (),
    memberships: Iterable = (),
) -> PermissionLevel:
    """Compute the effective permission level of a principal on a document.

    Args:
        principal: Acting principal (id + system role)
        document: Object with ``id``, ``owner_id`` and ``group_id``
        grants: Permission grants; only the one for (document, principal) counts
        memberships: Group memberships; only the principal's membership in the
            document's group counts

    Returns:
        PermissionLevel: The resolved access tier

    Examples:
        A system admin or the owner always resolves to ADMIN, whatever grant
        rows exist for them.
    """
    if principal.is_system_admin:
        return PermissionLevel.ADMIN

    if document.owner_id == principal.id:
        return PermissionLevel.ADMIN

    explicit = PermissionLevel.NONE
    for grant in grants:
        if grant.document_id == document.id and grant.user_id == principal.id:
            explicit = PermissionLevel(grant.level)
            break

    inherited = PermissionLevel.NONE
    if document.group_id is not None:
        for membership in memberships:
            if membership.group_id == document.group_id and membership.user_id == principal.id:
                inherited = GROUP_ROLE_LEVELS.get(GroupRole(membership.role), PermissionLevel.NONE)
                break

    return highest(explicit, inherited)


def require_permission(
    effective: PermissionLevel,
    minimum: PermissionLevel,
    action: str,
) -> None:
    """Reject with UnauthorizedError unless ``effective`` meets ``minimum``.

    Args:
        effective: Level returned by get_effective_permission
        minimum: Level the operation requires
        action: Human-readable operation name for the error message

    Raises:
        UnauthorizedError: If the level is insufficient
    """
    if not meets_minimum(effective, minimum):
        raise UnauthorizedError(
            f"Insufficient permission to {action}: requires {minimum.value}, have {effective.value}",
            details={"required": minimum.value, "effective": effective.value},
        )
