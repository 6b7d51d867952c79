"""
Shared dependencies for v1 endpoints: database-backed placement engine and
admin token verification.
"""
import logging
import secrets

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from placement_service.core.config import settings
from placement_service.core.error_responses import (
    ErrorMessages,
    raise_unauthorized,
    raise_not_configured,
)
from placement_service.core.placement.engine import PlacementEngine
from placement_service.core.placement.storage import build_placement_engine
from placement_service.models import get_db

logger = logging.getLogger(__name__)


def get_placement_engine(db: Session = Depends(get_db)) -> PlacementEngine:
    """Placement engine bound to the request's database session."""
    return build_placement_engine(db)


def _verify_secret_header(
    header_value: str,
    expected_secret: str | None,
    not_configured_detail: str,
    invalid_detail: str,
) -> bool:
    """
    Check a secret header in constant time.

    Raises:
        HTTPException: 500 if the secret is not configured, 401 if invalid
    """
    if not expected_secret:
        raise_not_configured(not_configured_detail)

    if not secrets.compare_digest(header_value, expected_secret):
        logger.warning("Rejected request with invalid admin token")
        raise_unauthorized(invalid_detail, include_www_authenticate=False)

    return True


async def verify_admin_token(x_admin_token: str = Header(...)) -> bool:
    """
    Verify the admin token from the X-Admin-Token header.

    Raises:
        HTTPException: If the token is missing from config or does not match
    """
    return _verify_secret_header(
        header_value=x_admin_token,
        expected_secret=settings.ADMIN_TOKEN,
        not_configured_detail=ErrorMessages.ADMIN_TOKEN_NOT_CONFIGURED,
        invalid_detail=ErrorMessages.ADMIN_TOKEN_INVALID,
    )
