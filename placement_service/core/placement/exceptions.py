"""
Errors raised by the placement engine and its collaborators.

Every error carries a user-safe ``message``; routers map the class onto an
HTTP status and never inspect the text.
"""
from typing import Any, Optional


class PlacementError(Exception):
    """Base class for placement engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PlacementError):
    """Unknown user, session or question."""


class InvalidArgumentError(PlacementError):
    """Unsupported subject or malformed answer payload."""


class InvalidStateError(PlacementError):
    """Operation not allowed in the session's (or user's) current state."""


class ResourceExhaustedError(PlacementError):
    """No question is available for the requested subject."""


class ConflictError(PlacementError):
    """Another writer changed the session since it was loaded."""


class PartialFailureError(PlacementError):
    """The session completed but the user profile was not updated.

    The completed session is already persisted; ``results`` are the scores
    that failed to propagate so an operator can reconcile them.
    """

    def __init__(
        self,
        message: str,
        session_id: Any,
        results: Any,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.session_id = session_id
        self.results = results
        self.cause = cause
