"""
VidHub error kinds.

Every rejected precondition is raised as one of these and rendered by the
handlers in ``vidhub.main`` as ``{"detail": ..., "error": kind}``.
"""
from __future__ import annotations


class VidHubError(Exception):
    status_code: int = 500
    kind: str = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.kind}


class ValidationError(VidHubError):
    """Malformed or missing identifier/field. The client must fix its input."""
    status_code = 400
    kind = "validation"


class AuthenticationError(VidHubError):
    """A mutation arrived without a viewer context."""
    status_code = 401
    kind = "unauthenticated"


class UnauthorizedError(VidHubError):
    """Ownership check failed."""
    status_code = 403
    kind = "unauthorized"


class NotFoundError(VidHubError):
    status_code = 404
    kind = "not_found"


class PersistenceError(VidHubError):
    """A store write did not take effect. Not safe to blindly retry."""
    status_code = 409
    kind = "persistence_failure"


class InternalError(VidHubError):
    status_code = 500
    kind = "internal"
