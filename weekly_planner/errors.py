"""Error taxonomy shared by the week store API and the sync client."""
from typing import Any, Dict, Optional


class PlannerError(Exception):
    """Base exception for planner errors."""

    status_code: int = 500
    code: str = "PLANNER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidPayload(PlannerError):
    """Malformed request body, e.g. `days` is not a mapping."""

    status_code = 400
    code = "INVALID_PAYLOAD"


class NotFound(PlannerError):
    """Referenced week, day or task does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class AuthError(PlannerError):
    status_code = 401
    code = "UNAUTHORIZED"


class InternalError(PlannerError):
    """Unexpected server fault. The message sent to clients is always generic."""

    status_code = 500
    code = "INTERNAL_ERROR"


class NetworkFailure(PlannerError):
    """Transport-level failure seen by the client (connection error, timeout)."""

    status_code = 0
    code = "NETWORK_FAILURE"
