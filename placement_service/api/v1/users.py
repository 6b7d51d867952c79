"""
User profile endpoints.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from placement_service.core.error_responses import (
    ErrorMessages,
    raise_conflict,
    raise_not_found,
)
from placement_service.models import User, get_db
from placement_service.schemas.users import UserCreate, UserResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(request: UserCreate, db: Session = Depends(get_db)):
    """
    Create a learner profile for an opaque user id.

    Raises:
        HTTPException: 409 if the id is already taken
    """
    if db.get(User, request.id) is not None:
        raise_conflict(ErrorMessages.USER_ALREADY_EXISTS)

    user = User(id=request.id, display_name=request.display_name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the same id between the check and the insert
        db.rollback()
        logger.warning(f"Duplicate user creation for {request.id}")
        raise_conflict(ErrorMessages.USER_ALREADY_EXISTS)

    db.refresh(user)
    logger.info(f"Created user {user.id}")
    return user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    """
    Read a learner profile, including placement fields.

    Raises:
        HTTPException: 404 if the user does not exist
    """
    user = db.get(User, user_id)
    if user is None:
        raise_not_found(ErrorMessages.USER_NOT_FOUND)
    return user
