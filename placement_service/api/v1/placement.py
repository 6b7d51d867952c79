"""
Placement test endpoints.

A placement session is driven one question at a time: start, then answer
until ``test_complete`` is true. Engine errors are mapped onto HTTP statuses
by ``raise_for_placement_error``.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from placement_service.api.v1._dependencies import get_placement_engine
from placement_service.core.error_responses import (
    ErrorMessages,
    raise_for_placement_error,
    raise_not_found,
)
from placement_service.core.placement.engine import PlacementEngine
from placement_service.core.placement.exceptions import (
    ConflictError,
    PartialFailureError,
    PlacementError,
)
from placement_service.core.placement.types import PlacementSession
from placement_service.models import User, get_db
from placement_service.schemas.placement import (
    AskedQuestionResponse,
    PlacementConfigResponse,
    PlacementResultsResponse,
    PlacementSessionResponse,
    StartPlacementRequest,
    StartPlacementResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    UserPlacementResultsResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def build_session_response(session: PlacementSession) -> PlacementSessionResponse:
    """Session status without any correct answer indexes."""
    total = session.config.total_questions
    return PlacementSessionResponse(
        id=session.id,
        user_id=session.user_id,
        status=session.status,
        config=PlacementConfigResponse.model_validate(session.config),
        question_number=session.question_number,
        progress_percent=100 * session.question_number / total,
        started_at=session.started_at,
        completed_at=session.completed_at,
        time_limit_exceeded=session.time_limit_exceeded,
        questions=[AskedQuestionResponse.model_validate(q) for q in session.questions],
        results=PlacementResultsResponse.model_validate(session.results)
        if session.results
        else None,
    )


@router.post("/start", response_model=StartPlacementResponse)
def start_placement(
    request: StartPlacementRequest,
    engine: PlacementEngine = Depends(get_placement_engine),
):
    """
    Start a placement test and return its first question.

    Args:
        request: User, subject and optional session overrides
        engine: Placement engine bound to the request's database session

    Returns:
        Session id, first question, question number and total

    Raises:
        HTTPException: 400 for an unsupported subject or a user who already
            placed in it, 404 for an unknown user, 503 when the subject has
            no questions
    """
    try:
        started = engine.start_session(
            request.user_id,
            request.subject,
            total_questions=request.total_questions,
            time_limit_minutes=request.time_limit_minutes,
            adaptive_mode=request.adaptive_mode,
        )
    except PlacementError as e:
        logger.info(f"Could not start placement for user {request.user_id}: {e}")
        raise_for_placement_error(e)

    return StartPlacementResponse.model_validate(started)


@router.post("/{session_id}/answer", response_model=SubmitAnswerResponse)
def submit_answer(
    session_id: int,
    request: SubmitAnswerRequest,
    engine: PlacementEngine = Depends(get_placement_engine),
):
    """
    Answer the open question of a placement session.

    Returns the next question, or the final results once the last question
    is answered.

    Raises:
        HTTPException: 404 unknown session, 400 session not accepting answers,
            409 lost a concurrent answer, 503 no question left for the next
            turn, 502 completed but the user profile was not updated
    """
    try:
        outcome = engine.submit_answer(
            session_id,
            request.answer_index,
            request.time_spent_seconds,
        )
    except ConflictError as e:
        logger.warning(f"Conflicting answer for placement session {session_id}")
        raise_for_placement_error(e)
    except PartialFailureError as e:
        logger.error(
            f"Placement session {session_id} completed without profile update"
        )
        raise_for_placement_error(e)
    except PlacementError as e:
        raise_for_placement_error(e)

    return SubmitAnswerResponse.model_validate(outcome)


@router.get("/users/{user_id}/results", response_model=UserPlacementResultsResponse)
def get_user_placement_results(user_id: str, db: Session = Depends(get_db)):
    """
    Placement outcome stored on a user's profile.

    Raises:
        HTTPException: 404 if the user is unknown or has not placed yet
    """
    user = db.get(User, user_id)
    if user is None:
        raise_not_found(ErrorMessages.USER_NOT_FOUND)
    if not user.placement_test_taken:
        raise_not_found(ErrorMessages.PLACEMENT_RESULTS_NOT_FOUND)

    return UserPlacementResultsResponse(
        user_id=user.id,
        placement_test_taken=user.placement_test_taken,
        placement_test_date=user.placement_test_date,
        current_level_cap=user.current_level_cap,
        current_grade=user.current_grade,
        accessible_levels=list(user.accessible_levels or []),
        placement_subjects=list(user.placement_subjects or []),
        results=user.placement_results,
    )


@router.get("/{session_id}", response_model=PlacementSessionResponse)
def get_placement_session(
    session_id: int,
    engine: PlacementEngine = Depends(get_placement_engine),
):
    """
    Status, progress and (when completed) results of a placement session.

    Raises:
        HTTPException: 404 if the session does not exist
    """
    try:
        session = engine.get_session(session_id)
    except PlacementError as e:
        raise_for_placement_error(e)

    return build_session_response(session)
