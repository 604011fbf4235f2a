"""Assignment status state machine.

State Flow:
    PENDING → ACCEPTED → COMPLETED
    PENDING → REJECTED

Terminal States: COMPLETED, REJECTED
"""

from typing import List

from ..errors import InvalidTransitionError
from ..models.document_assignment import AssignmentStatus


ALLOWED_TRANSITIONS = {
    AssignmentStatus.PENDING: [
        AssignmentStatus.ACCEPTED,
        AssignmentStatus.REJECTED
    ],
    AssignmentStatus.ACCEPTED: [AssignmentStatus.COMPLETED],
    AssignmentStatus.COMPLETED: [],  # Terminal state
    AssignmentStatus.REJECTED: [],  # Terminal state
}

OPEN_STATUSES = (AssignmentStatus.PENDING, AssignmentStatus.ACCEPTED)


def validate_transition(
    current_status: AssignmentStatus,
    new_status: AssignmentStatus
) -> None:
    """Validate that an assignment status transition is allowed.

    Args:
        current_status: Current assignment status
        new_status: Target status to transition to

    Raises:
        InvalidTransitionError: If transition is not allowed
    """
    allowed = ALLOWED_TRANSITIONS.get(current_status, [])
    if new_status not in allowed:
        raise InvalidTransitionError(
            f"Invalid transition: {current_status.value} -> {new_status.value}. "
            f"Allowed transitions from {current_status.value}: "
            f"{[s.value for s in allowed]}",
            details={"from": current_status.value, "to": new_status.value},
        )


def can_transition(
    current_status: AssignmentStatus,
    new_status: AssignmentStatus
) -> bool:
    """Check if a transition is allowed without raising."""
    return new_status in ALLOWED_TRANSITIONS.get(current_status, [])


def get_allowed_transitions(status: AssignmentStatus) -> List[AssignmentStatus]:
    return ALLOWED_TRANSITIONS.get(status, [])


def is_terminal(status: AssignmentStatus) -> bool:
    return not ALLOWED_TRANSITIONS.get(status)
