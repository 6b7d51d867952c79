"""
SQLAlchemy implementations of the placement engine's stores.

All three share the request's database session. Each mutating call commits
its own transaction so one engine call maps to one session write.
"""
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from placement_service.core.config import settings
from placement_service.core.datetime_utils import ensure_timezone_aware, utc_now
from placement_service.core.placement.engine import PlacementEngine
from placement_service.core.placement.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
)
from placement_service.core.placement.grades import accessible_levels, level_to_grade
from placement_service.core.placement.selection import DifficultyRange
from placement_service.core.placement.types import (
    AskedQuestion,
    BankQuestion,
    PlacementConfig,
    PlacementResults,
    PlacementSession,
    Subject,
)
from placement_service.core.question_analytics import record_answer
from placement_service.models.models import (
    PlacementTest,
    PlacementTestQuestion,
    Question,
    User,
)

logger = logging.getLogger(__name__)

SESSION_CONFLICT_MESSAGE = (
    "Placement session was modified by another request. "
    "Reload the session and try again."
)


def to_bank_question(question: Question) -> BankQuestion:
    return BankQuestion(
        id=question.id,
        subject=question.subject,
        difficulty=question.difficulty,
        question_text=question.question_text,
        options=list(question.options or []),
        correct_answer_index=question.correct_answer_index,
        is_active=question.is_active,
    )


class SqlQuestionRepository:
    """Question bank backed by the ``questions`` table."""

    def __init__(self, db: Session):
        self.db = db

    def find_candidates(
        self,
        subject: Subject,
        difficulty_range: Optional[DifficultyRange],
        exclude_ids: Iterable[int],
    ) -> List[BankQuestion]:
        query = self.db.query(Question).filter(
            Question.subject == subject,
            Question.is_active.is_(True),
        )
        if difficulty_range is not None:
            low, high = difficulty_range
            query = query.filter(Question.difficulty.between(low, high))

        excluded = list(exclude_ids)
        if excluded:
            query = query.filter(Question.id.notin_(excluded))

        return [to_bank_question(q) for q in query.order_by(Question.id).all()]

    def record_usage(
        self, question_id: int, was_correct: bool, time_spent_seconds: Optional[float]
    ) -> None:
        try:
            found = record_answer(self.db, question_id, was_correct, time_spent_seconds)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if not found:
            raise NotFoundError(f"Question {question_id} not found.")


class SqlUserProfileStore:
    """User placement profile backed by the ``users`` table."""

    def __init__(
        self,
        db: Session,
        *,
        allow_retake: Optional[bool] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.allow_retake = (
            settings.PLACEMENT_ALLOW_RETAKE if allow_retake is None else allow_retake
        )
        self.clock = clock

    def _get_user(self, user_id: str) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    def ensure_can_start(self, user_id: str, subject: Subject) -> None:
        user = self._get_user(user_id)
        if self.allow_retake:
            return
        if subject.value in (user.placement_subjects or []):
            raise InvalidStateError(
                f"User has already completed a placement test for {subject.value}."
            )

    def apply_placement_result(self, user_id: str, results: PlacementResults) -> None:
        """
        Record a completed placement on the user profile.

        Sets the level cap and the levels it unlocks, the grade for that
        level, the placement flag and date, and appends the tested subjects.
        """
        user = self._get_user(user_id)
        level = results.recommended_level
        tested_at = self.clock()

        subjects = list(user.placement_subjects or [])
        for score in results.subject_scores:
            if score.subject.value not in subjects:
                subjects.append(score.subject.value)

        # JSON columns are replaced, not mutated, so the change is tracked
        user.current_level_cap = level  # type: ignore[assignment]
        user.accessible_levels = accessible_levels(level)  # type: ignore[assignment]
        user.current_grade = level_to_grade(level)  # type: ignore[assignment]
        user.placement_test_taken = True  # type: ignore[assignment]
        user.placement_test_date = tested_at  # type: ignore[assignment]
        user.placement_subjects = subjects  # type: ignore[assignment]
        user.placement_results = {  # type: ignore[assignment]
            "overall_score": results.overall_score,
            "recommended_level": level,
            "percentile": results.percentile,
            "confidence_score": results.confidence_score,
            "subjects": [s.subject.value for s in results.subject_scores],
            "completed_at": tested_at.isoformat(),
        }

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Applied placement result to user {user_id}: "
            f"level={level}, grade={user.current_grade}"
        )


def _asked_from_row(row: PlacementTestQuestion) -> AskedQuestion:
    return AskedQuestion(
        question_id=row.question_id,
        subject=row.subject,
        difficulty=row.difficulty,
        question_text=row.question_text,
        options=list(row.options or []),
        correct_answer_index=row.correct_answer_index,
        user_answer_index=row.user_answer_index,
        is_correct=row.is_correct,
        time_spent_seconds=row.time_spent_seconds,
        answered_at=ensure_timezone_aware(row.answered_at)
        if row.answered_at
        else None,
    )


def _row_from_asked(position: int, asked: AskedQuestion) -> PlacementTestQuestion:
    return PlacementTestQuestion(
        position=position,
        question_id=asked.question_id,
        subject=asked.subject,
        difficulty=asked.difficulty,
        question_text=asked.question_text,
        options=list(asked.options),
        correct_answer_index=asked.correct_answer_index,
        user_answer_index=asked.user_answer_index,
        is_correct=asked.is_correct,
        time_spent_seconds=asked.time_spent_seconds,
        answered_at=asked.answered_at,
    )


def session_from_row(row: PlacementTest) -> PlacementSession:
    return PlacementSession(
        id=row.id,
        user_id=row.user_id,
        config=PlacementConfig.from_dict(row.config),
        started_at=ensure_timezone_aware(row.started_at),
        status=row.status,
        questions=[_asked_from_row(q) for q in row.questions],
        results=PlacementResults.from_dict(row.results) if row.results else None,
        completed_at=ensure_timezone_aware(row.completed_at)
        if row.completed_at
        else None,
        time_limit_exceeded=row.time_limit_exceeded,
        version=row.version,
    )


class SqlSessionStore:
    """
    Placement sessions backed by ``placement_tests``.

    Writes are guarded by the row's ``version`` column. A save whose loaded
    version is behind the stored one raises ConflictError and writes nothing.
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, session_id: int) -> PlacementTest:
        row = (
            self.db.query(PlacementTest)
            .populate_existing()
            .filter(PlacementTest.id == session_id)
            .first()
        )
        if row is None:
            raise NotFoundError("Placement session not found.")
        return row

    def create(self, session: PlacementSession) -> int:
        row = PlacementTest(
            user_id=session.user_id,
            status=session.status,
            config=session.config.to_dict(),
            started_at=session.started_at,
            updated_at=session.started_at,
            questions=[
                _row_from_asked(position, asked)
                for position, asked in enumerate(session.questions)
            ],
        )
        self.db.add(row)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        session.id = row.id
        session.version = row.version
        return row.id

    def load(self, session_id: int) -> PlacementSession:
        return session_from_row(self._get_row(session_id))

    def save(self, session: PlacementSession) -> None:
        if session.id is None:
            raise NotFoundError("Placement session has not been created.")

        row = self._get_row(session.id)
        if row.version != session.version:
            logger.warning(
                f"Rejected stale write to placement session {session.id}: "
                f"loaded version {session.version}, stored {row.version}"
            )
            raise ConflictError(SESSION_CONFLICT_MESSAGE)

        existing = {q.position: q for q in row.questions}
        for position, asked in enumerate(session.questions):
            stored = existing.get(position)
            if stored is None:
                row.questions.append(_row_from_asked(position, asked))
                continue
            if stored.question_id != asked.question_id:
                self.db.rollback()
                raise ConflictError(SESSION_CONFLICT_MESSAGE)
            stored.user_answer_index = asked.user_answer_index  # type: ignore[assignment]
            stored.is_correct = asked.is_correct  # type: ignore[assignment]
            stored.time_spent_seconds = asked.time_spent_seconds  # type: ignore[assignment]
            stored.answered_at = asked.answered_at  # type: ignore[assignment]

        row.status = session.status  # type: ignore[assignment]
        row.completed_at = session.completed_at  # type: ignore[assignment]
        row.time_limit_exceeded = session.time_limit_exceeded  # type: ignore[assignment]
        row.results = session.results.to_dict() if session.results else None  # type: ignore[assignment]
        row.updated_at = utc_now()  # type: ignore[assignment]

        try:
            self.db.commit()
        except (StaleDataError, IntegrityError) as e:
            self.db.rollback()
            logger.warning(
                f"Concurrent write to placement session {session.id} lost: {e}"
            )
            raise ConflictError(SESSION_CONFLICT_MESSAGE) from e
        except Exception:
            self.db.rollback()
            raise

        session.version = row.version


def build_placement_engine(db: Session, **engine_kwargs) -> PlacementEngine:
    """Placement engine wired to SQL stores sharing ``db``."""
    return PlacementEngine(
        question_repository=SqlQuestionRepository(db),
        profile_store=SqlUserProfileStore(db),
        session_store=SqlSessionStore(db),
        **engine_kwargs,
    )
