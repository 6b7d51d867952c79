"""
Standardized error response messages and builders.

Routers raise HTTP errors through the ``raise_*`` helpers below with text
from ``ErrorMessages``, so status codes and wording stay consistent.

Error Message Format Guidelines:
- Use sentence case (capitalize first letter only)
- End with a period for complete sentences
- Use "Please try again later." for transient server errors

Usage:
    from placement_service.core.error_responses import ErrorMessages, raise_not_found

    if not user:
        raise_not_found(ErrorMessages.USER_NOT_FOUND)

Placement engine errors are translated in one place by
``raise_for_placement_error``.
"""

from typing import Any, Dict, NoReturn, Optional

from fastapi import HTTPException, status

from placement_service.core.placement.exceptions import (
    ConflictError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    PartialFailureError,
    PlacementError,
    ResourceExhaustedError,
)


class ErrorMessages:
    """Centralized error message constants and templates.

    Naming Convention:
    - Constants: SCREAMING_SNAKE_CASE for static messages
    - Methods: snake_case for templates that accept parameters
    """

    # ==========================================================================
    # Authorization Errors (401)
    # ==========================================================================
    ADMIN_TOKEN_INVALID = "Invalid admin token."

    # ==========================================================================
    # Not Found Errors (404)
    # ==========================================================================
    USER_NOT_FOUND = "User not found."
    PLACEMENT_SESSION_NOT_FOUND = "Placement session not found."
    PLACEMENT_RESULTS_NOT_FOUND = "User has not completed a placement test."

    # ==========================================================================
    # Conflict Errors (409)
    # ==========================================================================
    USER_ALREADY_EXISTS = "A user with this ID already exists."

    # ==========================================================================
    # Server Errors (5xx)
    # ==========================================================================
    PROFILE_UPDATE_FAILED = (
        "Placement test completed but the user profile could not be updated. "
        "The results have been saved."
    )

    # ==========================================================================
    # Configuration Errors
    # ==========================================================================
    ADMIN_TOKEN_NOT_CONFIGURED = "Admin token not configured on server."

    # ==========================================================================
    # Template Methods for Dynamic Messages
    # ==========================================================================
    @staticmethod
    def question_not_found(question_id: int) -> str:
        """Message when a specific question is not found."""
        return f"Question {question_id} not found."

    @staticmethod
    def database_operation_failed(operation: str) -> str:
        """Generic message for database operation failures."""
        return f"Failed to {operation}. Please try again later."


# ==============================================================================
# HTTPException Builder Functions
# ==============================================================================


def raise_bad_request(detail: str) -> NoReturn:
    """Raise a 400 Bad Request exception.

    Args:
        detail: User-facing error message

    Raises:
        HTTPException: 400 Bad Request
    """
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def raise_unauthorized(
    detail: str,
    include_www_authenticate: bool = True,
) -> NoReturn:
    """Raise a 401 Unauthorized exception.

    Args:
        detail: User-facing error message
        include_www_authenticate: Whether to include WWW-Authenticate header

    Raises:
        HTTPException: 401 Unauthorized
    """
    headers = {"WWW-Authenticate": "Bearer"} if include_www_authenticate else None
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=headers,
    )


def raise_not_found(detail: str) -> NoReturn:
    """Raise a 404 Not Found exception.

    Raises:
        HTTPException: 404 Not Found
    """
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def raise_conflict(detail: str) -> NoReturn:
    """Raise a 409 Conflict exception.

    Use when the request conflicts with current state (duplicate creation,
    lost concurrent update).

    Raises:
        HTTPException: 409 Conflict
    """
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    )


def raise_bad_gateway(detail: Any) -> NoReturn:
    """Raise a 502 Bad Gateway exception.

    Use when the request's own work succeeded but a downstream update it
    depends on failed. ``detail`` may be a dict carrying what did succeed.

    Raises:
        HTTPException: 502 Bad Gateway
    """
    raise HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=detail,
    )


def raise_service_unavailable(detail: str) -> NoReturn:
    """Raise a 503 Service Unavailable exception.

    Use when the server lacks the data to serve the request right now
    (an unpopulated question bank).

    Raises:
        HTTPException: 503 Service Unavailable
    """
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=detail,
    )


def raise_server_error(
    detail: str,
    error_id: Optional[str] = None,
) -> NoReturn:
    """Raise a 500 Internal Server Error exception.

    Args:
        detail: User-facing error message (should be generic and friendly)
        error_id: Optional error tracking ID to include in response

    Raises:
        HTTPException: 500 Internal Server Error
    """
    if error_id:
        detail = f"{detail} (Error ID: {error_id})"

    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )


def raise_not_configured(detail: str) -> NoReturn:
    """Raise a 500 error for missing server configuration.

    Raises:
        HTTPException: 500 Internal Server Error
    """
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )


def partial_failure_detail(error: PartialFailureError) -> Dict[str, Any]:
    """Response body for a session that completed without a profile update."""
    results = error.results
    return {
        "message": ErrorMessages.PROFILE_UPDATE_FAILED,
        "session_id": error.session_id,
        "results": results.to_dict() if hasattr(results, "to_dict") else results,
    }


def raise_for_placement_error(error: PlacementError) -> NoReturn:
    """Translate a placement engine error into the matching HTTP error.

    NotFound 404, InvalidArgument and InvalidState 400, ResourceExhausted 503,
    Conflict 409, PartialFailure 502.
    """
    if isinstance(error, NotFoundError):
        raise_not_found(error.message)
    if isinstance(error, (InvalidArgumentError, InvalidStateError)):
        raise_bad_request(error.message)
    if isinstance(error, ResourceExhaustedError):
        raise_service_unavailable(error.message)
    if isinstance(error, ConflictError):
        raise_conflict(error.message)
    if isinstance(error, PartialFailureError):
        raise_bad_gateway(partial_failure_detail(error))
    raise_server_error(ErrorMessages.database_operation_failed("process placement"))
