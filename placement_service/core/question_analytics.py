"""
Question bank usage analytics.

Every answered placement question updates three counters on the bank row:
how often it was asked, how often it was answered correctly, and the running
mean of the time spent on it. Once a question has enough answers its
observed success rate can shift its effective difficulty by one step.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy import update as sa_update
from sqlalchemy.orm import Session

from placement_service.core.config import DIFFICULTY_MAX, DIFFICULTY_MIN
from placement_service.models.models import Question

logger = logging.getLogger(__name__)

# =============================================================================
# EMPIRICAL DIFFICULTY CONSTANTS
# =============================================================================
#
# With fewer answers than this the assigned difficulty is used as-is.
MIN_RESPONSES_FOR_ADJUSTMENT: int = 10

# Success rate above which a question plays easier than assigned, and below
# which it plays harder.
EASY_SUCCESS_RATE: float = 0.8
HARD_SUCCESS_RATE: float = 0.4

DIFFICULTY_ADJUSTMENT: float = 1.0


def record_answer(
    db: Session,
    question_id: int,
    was_correct: bool,
    time_spent_seconds: Optional[float],
) -> bool:
    """
    Fold one answer into a question's counters.

    The counters are updated by a single UPDATE statement so concurrent
    answers to the same question are all counted. A missing answer time
    leaves the running average unchanged.

    Args:
        db: Database session (not committed)
        question_id: Bank question ID
        was_correct: Whether the answer was correct
        time_spent_seconds: Seconds spent on the question, if reported

    Returns:
        False if no question has this ID
    """
    values: Dict[str, Any] = {"times_asked": Question.times_asked + 1}
    if was_correct:
        values["correct_answers"] = Question.correct_answers + 1
    if time_spent_seconds is not None:
        # Right-hand columns read the row as it was before the update
        values["average_time_spent"] = (
            Question.average_time_spent * Question.times_asked + time_spent_seconds
        ) / (Question.times_asked + 1)

    result = db.execute(
        sa_update(Question)
        .where(Question.id == question_id)
        .values(**values)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount > 0


def success_rate(times_asked: int, correct_answers: int) -> Optional[float]:
    if not times_asked:
        return None
    return correct_answers / times_asked


def actual_difficulty(
    difficulty: float, times_asked: int, correct_answers: int
) -> float:
    """
    Effective difficulty from observed performance.

    >>> actual_difficulty(5.0, times_asked=20, correct_answers=19)
    4.0
    >>> actual_difficulty(5.0, times_asked=3, correct_answers=0)
    5.0
    """
    if times_asked < MIN_RESPONSES_FOR_ADJUSTMENT:
        return difficulty

    rate = correct_answers / times_asked
    if rate > EASY_SUCCESS_RATE:
        return max(DIFFICULTY_MIN, difficulty - DIFFICULTY_ADJUSTMENT)
    if rate < HARD_SUCCESS_RATE:
        return min(DIFFICULTY_MAX, difficulty + DIFFICULTY_ADJUSTMENT)
    return difficulty


def get_question_statistics(db: Session, question_id: int) -> Dict:
    """
    Usage statistics for one question.

    Returns:
        Dictionary with counters and effective difficulty, or
        ``{"question_id": ..., "found": False}`` for unknown ids.
    """
    question = db.query(Question).filter(Question.id == question_id).first()
    if not question:
        return {"question_id": question_id, "found": False}

    times_asked = question.times_asked or 0
    correct = question.correct_answers or 0
    return {
        "question_id": question_id,
        "found": True,
        "times_asked": times_asked,
        "correct_answers": correct,
        "success_rate": success_rate(times_asked, correct),
        "average_time_spent": question.average_time_spent or 0.0,
        "assigned_difficulty": question.difficulty,
        "actual_difficulty": actual_difficulty(
            question.difficulty, times_asked, correct
        ),
        "has_sufficient_data": times_asked >= MIN_RESPONSES_FOR_ADJUSTMENT,
    }
