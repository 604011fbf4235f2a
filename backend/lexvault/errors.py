"""Domain error taxonomy.

Services raise these exceptions; the FastAPI exception handlers in main.py
turn each into a distinct status code and error code so clients can tell
"request access" (403) apart from "pick a valid transition" (409) and
"refresh the list" (404).
"""

from typing import Any, Dict, Optional


class LexVaultError(Exception):
    """Base class for domain errors surfaced to API callers."""

    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class UnauthorizedError(LexVaultError):
    """Principal's effective permission is below the required minimum."""

    status_code = 403
    error_code = "unauthorized"


class InvalidTransitionError(LexVaultError):
    """Requested state change is not reachable from the current state."""

    status_code = 409
    error_code = "invalid_transition"


class NotFoundError(LexVaultError):
    """Referenced record does not exist or is hidden by soft delete."""

    status_code = 404
    error_code = "not_found"


class DependencyFailureError(LexVaultError):
    """An external collaborator (persistence, notifications) failed."""

    status_code = 502
    error_code = "dependency_failure"
