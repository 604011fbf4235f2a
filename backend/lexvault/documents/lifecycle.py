"""Document lifecycle state machine.

Two orthogonal dimensions:

file_status:
    ACTIVE ⇄ PENDING ⇄ ARCHIVED  (status change: any status to any other)
    archive toggle: ARCHIVED → ACTIVE, anything else → ARCHIVED

trash flag (is_deleted):
    not trashed → trashed        (soft delete)
    trashed → not trashed        (restore, file_status untouched)
    trashed → destroyed          (purge, terminal)

Every check here is side-effect free; DocumentService applies the change.
"""

from typing import List

from ..errors import InvalidTransitionError
from ..models.document import FileStatus


# Allowed status-change targets; no status pair is forbidden
ALLOWED_STATUS_TRANSITIONS = {
    FileStatus.ACTIVE: [FileStatus.PENDING, FileStatus.ARCHIVED],
    FileStatus.PENDING: [FileStatus.ACTIVE, FileStatus.ARCHIVED],
    FileStatus.ARCHIVED: [FileStatus.ACTIVE, FileStatus.PENDING],
}


def validate_status_transition(current_status: FileStatus, new_status: FileStatus) -> None:
    """Validate a status change.

    Raises:
        InvalidTransitionError: If the target equals the current status
    """
    allowed = ALLOWED_STATUS_TRANSITIONS.get(current_status, [])
    if new_status not in allowed:
        raise InvalidTransitionError(
            f"Invalid transition: {current_status.value} -> {new_status.value}. "
            f"Allowed transitions from {current_status.value}: "
            f"{[s.value for s in allowed]}",
            details={"from": current_status.value, "to": new_status.value},
        )


def can_transition(current_status: FileStatus, new_status: FileStatus) -> bool:
    """Check if a status change is allowed without raising."""
    return new_status in ALLOWED_STATUS_TRANSITIONS.get(current_status, [])


def get_allowed_transitions(status: FileStatus) -> List[FileStatus]:
    """Get list of allowed status-change targets from a given status."""
    return ALLOWED_STATUS_TRANSITIONS.get(status, [])


def archive_toggle_target(current_status: FileStatus) -> FileStatus:
    """Status an archive toggle lands on.

    Unarchiving always lands on ACTIVE, whatever the status was before the
    document got archived.
    """
    if current_status == FileStatus.ARCHIVED:
        return FileStatus.ACTIVE
    return FileStatus.ARCHIVED


def validate_restore(is_deleted: bool) -> None:
    """Restore is only reachable from the trash.

    Raises:
        InvalidTransitionError: If the document is not soft-deleted
    """
    if not is_deleted:
        raise InvalidTransitionError(
            "Document is not in the trash and cannot be restored",
            details={"transition": "restore"},
        )


def validate_purge(is_deleted: bool) -> None:
    """Purge is only reachable from the trash.

    Raises:
        InvalidTransitionError: If the document is not soft-deleted
    """
    if not is_deleted:
        raise InvalidTransitionError(
            "Document must be moved to the trash before it can be purged",
            details={"transition": "purge"},
        )
