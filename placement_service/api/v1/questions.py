"""
Question bank administration endpoints. All require X-Admin-Token.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from placement_service.api.v1._dependencies import verify_admin_token
from placement_service.core.error_responses import (
    ErrorMessages,
    raise_bad_request,
    raise_not_found,
    raise_server_error,
)
from placement_service.core.placement.types import Subject
from placement_service.core.question_analytics import (
    actual_difficulty,
    get_question_statistics,
)
from placement_service.models import Question, get_db
from placement_service.schemas.questions import (
    QuestionAdminResponse,
    QuestionCreate,
    QuestionListResponse,
    QuestionStatisticsResponse,
)

router = APIRouter(dependencies=[Depends(verify_admin_token)])
logger = logging.getLogger(__name__)


def question_to_admin_response(question: Question) -> QuestionAdminResponse:
    response = QuestionAdminResponse.model_validate(question)
    response.actual_difficulty = actual_difficulty(
        question.difficulty, question.times_asked or 0, question.correct_answers or 0
    )
    return response


def get_question_or_404(db: Session, question_id: int) -> Question:
    question = db.get(Question, question_id)
    if question is None:
        raise_not_found(ErrorMessages.question_not_found(question_id))
    return question


@router.get("", response_model=QuestionListResponse)
def list_questions(
    subject: Optional[Subject] = Query(None, description="Filter by subject"),
    min_difficulty: Optional[float] = Query(None, ge=1, le=10),
    max_difficulty: Optional[float] = Query(None, ge=1, le=10),
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """
    List bank questions, ordered by subject then difficulty.

    Raises:
        HTTPException: 400 if min_difficulty is greater than max_difficulty
    """
    if (
        min_difficulty is not None
        and max_difficulty is not None
        and min_difficulty > max_difficulty
    ):
        raise_bad_request("min_difficulty cannot be greater than max_difficulty.")

    query = db.query(Question)
    if subject is not None:
        query = query.filter(Question.subject == subject)
    if min_difficulty is not None:
        query = query.filter(Question.difficulty >= min_difficulty)
    if max_difficulty is not None:
        query = query.filter(Question.difficulty <= max_difficulty)
    if is_active is not None:
        query = query.filter(Question.is_active.is_(is_active))

    questions = (
        query.order_by(Question.subject, Question.difficulty, Question.id)
        .offset(offset)
        .limit(limit)
        .all()
    )
    return QuestionListResponse(
        questions=[question_to_admin_response(q) for q in questions],
        total_count=len(questions),
    )


@router.get("/{question_id}", response_model=QuestionAdminResponse)
def get_question(question_id: int, db: Session = Depends(get_db)):
    """
    Fetch one bank question with its usage analytics.

    Raises:
        HTTPException: 404 if the question does not exist
    """
    return question_to_admin_response(get_question_or_404(db, question_id))


@router.post(
    "",
    response_model=QuestionAdminResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_question(request: QuestionCreate, db: Session = Depends(get_db)):
    """Add a question to the bank."""
    question = Question(
        subject=request.subject,
        difficulty=request.difficulty,
        level=request.level,
        question_text=request.question_text,
        options=request.options,
        correct_answer_index=request.correct_answer_index,
        category=request.category,
        tags=request.tags,
        created_by=request.created_by,
    )
    db.add(question)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create question: {e}", exc_info=True)
        raise_server_error(ErrorMessages.database_operation_failed("create question"))

    db.refresh(question)
    logger.info(
        f"Created question {question.id} "
        f"({question.subject.value}, difficulty {question.difficulty})"
    )
    return question_to_admin_response(question)


@router.post("/{question_id}/deactivate", response_model=QuestionAdminResponse)
def deactivate_question(question_id: int, db: Session = Depends(get_db)):
    """
    Remove a question from future placement selection.

    Sessions that already asked it keep their snapshot.

    Raises:
        HTTPException: 404 if the question does not exist
    """
    question = get_question_or_404(db, question_id)
    if question.is_active:
        question.is_active = False  # type: ignore[assignment]
        db.commit()
        db.refresh(question)
        logger.info(f"Deactivated question {question_id}")
    return question_to_admin_response(question)


@router.get("/{question_id}/statistics", response_model=QuestionStatisticsResponse)
def question_statistics(question_id: int, db: Session = Depends(get_db)):
    """
    Usage analytics for one question: answer counts, success rate, mean
    answer time and the difficulty implied by them.

    Raises:
        HTTPException: 404 if the question does not exist
    """
    stats = get_question_statistics(db, question_id)
    if not stats["found"]:
        raise_not_found(ErrorMessages.question_not_found(question_id))
    return QuestionStatisticsResponse(**stats)
