"""
Adaptive placement test engine.

A placement session asks a fixed number of questions for one subject. The
first question is drawn at the starting difficulty; each answer moves the
target difficulty up (correct) or down (incorrect) by one step on the 1-10
scale. When the last question is answered the session is scored, stored as
completed, and the result is pushed to the user's profile.

The engine holds no state of its own. Its collaborators are passed in:

    engine = PlacementEngine(
        question_repository=SqlQuestionRepository(db),
        profile_store=SqlUserProfileStore(db),
        session_store=SqlSessionStore(db),
    )
    started = engine.start_session("user-1", "Mathematics")
    step = engine.submit_answer(started.session_id, answer_index=2, time_spent_seconds=12)

Each call reads the session once and writes it at most once. Concurrent
answers to the same question are resolved by the session store's version
check: the loser gets ``ConflictError`` and nothing it computed is kept.
"""
import logging
import random
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol, Union

from placement_service.core.config import settings
from placement_service.core.datetime_utils import ensure_timezone_aware, utc_now
from placement_service.core.graceful_failure import graceful_failure
from placement_service.core.placement.exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    PartialFailureError,
)
from placement_service.core.placement.scoring import score_session
from placement_service.core.placement.selection import (
    QuestionRepository,
    next_difficulty,
    select_question,
    subject_for_turn,
)
from placement_service.core.placement.types import (
    AnswerResult,
    AskedQuestion,
    MAX_ANSWER_INDEX,
    PlacementConfig,
    PlacementResults,
    PlacementSession,
    QuestionView,
    SessionStatus,
    StartResult,
    Subject,
)

logger = logging.getLogger(__name__)


class UserProfileStore(Protocol):
    """User profile operations the engine depends on."""

    def ensure_can_start(self, user_id: str, subject: Subject) -> None:
        """Raise NotFoundError for unknown users and InvalidStateError when
        the user may not take another placement test for ``subject``."""
        ...

    def apply_placement_result(self, user_id: str, results: PlacementResults) -> None:
        ...


class SessionStore(Protocol):
    """Session persistence. Each call is atomic for one session."""

    def create(self, session: PlacementSession) -> int:
        """Persist a new session, set its ``id`` and ``version``, return the id."""
        ...

    def load(self, session_id: int) -> PlacementSession:
        """Raise NotFoundError for unknown ids."""
        ...

    def save(self, session: PlacementSession) -> None:
        """Raise ConflictError if the stored version moved since ``load``."""
        ...


class PlacementEngine:
    """Runs placement sessions against injected stores."""

    def __init__(
        self,
        question_repository: QuestionRepository,
        profile_store: UserProfileStore,
        session_store: SessionStore,
        *,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
        default_total_questions: Optional[int] = None,
        default_time_limit_minutes: Optional[int] = None,
        starting_difficulty: Optional[float] = None,
        difficulty_step: Optional[float] = None,
        difficulty_band: Optional[float] = None,
    ):
        self.questions = question_repository
        self.profiles = profile_store
        self.sessions = session_store
        self.clock = clock
        self.rng = rng or random.Random()

        self.default_total_questions = (
            default_total_questions or settings.PLACEMENT_DEFAULT_TOTAL_QUESTIONS
        )
        self.default_time_limit_minutes = (
            default_time_limit_minutes
            or settings.PLACEMENT_DEFAULT_TIME_LIMIT_MINUTES
        )
        self.starting_difficulty = (
            starting_difficulty
            if starting_difficulty is not None
            else settings.PLACEMENT_STARTING_DIFFICULTY
        )
        self.difficulty_step = difficulty_step or settings.PLACEMENT_DIFFICULTY_STEP
        self.difficulty_band = (
            difficulty_band
            if difficulty_band is not None
            else settings.PLACEMENT_DIFFICULTY_BAND
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def start_session(
        self,
        user_id: str,
        subject: Union[Subject, str],
        *,
        total_questions: Optional[int] = None,
        time_limit_minutes: Optional[int] = None,
        adaptive_mode: bool = True,
    ) -> StartResult:
        """
        Start a placement session and ask its first question.

        Args:
            user_id: Opaque id of an existing user
            subject: One of the supported subjects
            total_questions: Session length override
            time_limit_minutes: Time limit override
            adaptive_mode: Whether difficulty follows the answers

        Returns:
            StartResult with the session id and the first question

        Raises:
            InvalidArgumentError: Unsupported subject or bad override
            NotFoundError: Unknown user
            InvalidStateError: User may not take another test for the subject
            ResourceExhaustedError: No question exists for the subject.
                No session is stored in that case.
        """
        subject = self._parse_subject(subject)
        config = PlacementConfig(
            subjects=[subject],
            total_questions=self._positive_int(
                total_questions, self.default_total_questions, "total_questions"
            ),
            time_limit_minutes=self._positive_int(
                time_limit_minutes,
                self.default_time_limit_minutes,
                "time_limit_minutes",
            ),
            adaptive_mode=adaptive_mode,
        )

        self.profiles.ensure_can_start(user_id, subject)

        first = select_question(
            self.questions,
            subject,
            self.starting_difficulty,
            exclude_ids=(),
            rng=self.rng,
            band=self.difficulty_band,
        )

        session = PlacementSession(
            user_id=user_id,
            config=config,
            started_at=self.clock(),
            questions=[AskedQuestion.from_bank(first, self.starting_difficulty)],
        )
        session_id = self.sessions.create(session)

        logger.info(
            f"Started placement session {session_id} for user {user_id} "
            f"({subject.value}, {config.total_questions} questions)"
        )

        return StartResult(
            session_id=session_id,
            question=QuestionView.from_asked(session.questions[0]),
            question_number=1,
            total_questions=config.total_questions,
        )

    def submit_answer(
        self,
        session_id: int,
        answer_index: int,
        time_spent_seconds: Optional[float] = None,
    ) -> AnswerResult:
        """
        Answer the open question of a session.

        An ``answer_index`` past the end of the options is scored as
        incorrect, not rejected, as long as it fits ``MAX_ANSWER_INDEX``.

        Returns:
            AnswerResult with either the next question or the final results

        Raises:
            InvalidArgumentError: Answer index is not an integer in
                ``0..MAX_ANSWER_INDEX``, or the time is malformed
            NotFoundError: Unknown session
            InvalidStateError: Session completed or has no open question
            ResourceExhaustedError: No unasked question is left for the next
                turn. The session is left unchanged.
            ConflictError: Another answer for this session won the race
            PartialFailureError: Session completed and stored, but the user
                profile could not be updated
        """
        self._validate_answer(answer_index, time_spent_seconds)

        session = self.sessions.load(session_id)
        if session.status != SessionStatus.IN_PROGRESS:
            raise InvalidStateError(
                f"Placement session is already {session.status.value}. "
                "Only in-progress sessions accept answers."
            )

        current = session.open_question
        if current is None:
            raise InvalidStateError(
                "Placement session has no open question to answer."
            )

        current.user_answer_index = answer_index
        current.is_correct = answer_index == current.correct_answer_index
        current.time_spent_seconds = time_spent_seconds
        current.answered_at = self.clock()

        if len(session.questions) >= session.config.total_questions:
            return self._complete(session, current)

        return self._advance(session, current)

    def get_session(self, session_id: int) -> PlacementSession:
        """Load a session. Raises NotFoundError for unknown ids."""
        return self.sessions.load(session_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _advance(
        self, session: PlacementSession, answered: AskedQuestion
    ) -> AnswerResult:
        config = session.config
        difficulty = next_difficulty(
            answered.difficulty,
            bool(answered.is_correct),
            step=self.difficulty_step,
            adaptive=config.adaptive_mode,
        )
        subject = subject_for_turn(config.subjects, len(session.questions))

        # Select before writing: if this raises, the answer is not stored.
        question = select_question(
            self.questions,
            subject,
            difficulty,
            exclude_ids=session.asked_question_ids,
            rng=self.rng,
            band=self.difficulty_band,
        )
        asked = AskedQuestion.from_bank(question, difficulty)
        session.questions.append(asked)

        self.sessions.save(session)
        self._record_usage(session, answered)

        number = session.question_number
        return AnswerResult(
            session_id=session.id,
            test_complete=False,
            question=QuestionView.from_asked(asked),
            question_number=number,
            total_questions=config.total_questions,
            progress_percent=100 * number / config.total_questions,
        )

    def _complete(
        self, session: PlacementSession, answered: AskedQuestion
    ) -> AnswerResult:
        completed_at = self.clock()
        results = score_session(
            session.questions,
            session.config.subjects,
            session.config.total_questions,
        )

        session.status = SessionStatus.COMPLETED
        session.completed_at = completed_at
        session.results = results
        session.time_limit_exceeded = self._over_time(session, completed_at)

        self.sessions.save(session)
        self._record_usage(session, answered)

        logger.info(
            f"Completed placement session {session.id} for user {session.user_id}: "
            f"score={results.overall_score}, level={results.recommended_level}"
        )

        try:
            self.profiles.apply_placement_result(session.user_id, results)
        except Exception as e:
            logger.error(
                f"Placement session {session.id} completed but the profile of "
                f"user {session.user_id} was not updated: {e}",
                exc_info=True,
            )
            raise PartialFailureError(
                "Placement test completed but the user profile could not be updated.",
                session_id=session.id,
                results=results,
                cause=e,
            ) from e

        return AnswerResult(
            session_id=session.id,
            test_complete=True,
            results=results,
        )

    def _record_usage(self, session: PlacementSession, answered: AskedQuestion) -> None:
        with graceful_failure(
            "record question usage",
            logger,
            context={"session_id": session.id, "question_id": answered.question_id},
        ):
            self.questions.record_usage(
                answered.question_id,
                bool(answered.is_correct),
                answered.time_spent_seconds,
            )

    @staticmethod
    def _over_time(session: PlacementSession, completed_at: datetime) -> bool:
        elapsed = ensure_timezone_aware(completed_at) - ensure_timezone_aware(
            session.started_at
        )
        return elapsed > timedelta(minutes=session.config.time_limit_minutes)

    @staticmethod
    def _parse_subject(subject: Union[Subject, str]) -> Subject:
        if isinstance(subject, Subject):
            return subject
        try:
            return Subject(subject)
        except ValueError:
            supported = ", ".join(s.value for s in Subject)
            raise InvalidArgumentError(
                f"Unsupported subject '{subject}'. Supported subjects: {supported}."
            )

    @staticmethod
    def _positive_int(value: Optional[int], default: int, name: str) -> int:
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise InvalidArgumentError(f"{name} must be a positive integer.")
        return value

    @staticmethod
    def _validate_answer(answer_index: int, time_spent_seconds: Optional[float]) -> None:
        if (
            isinstance(answer_index, bool)
            or not isinstance(answer_index, int)
            or not 0 <= answer_index <= MAX_ANSWER_INDEX
        ):
            raise InvalidArgumentError(
                f"answer_index must be an integer between 0 and {MAX_ANSWER_INDEX}."
            )
        if time_spent_seconds is not None and (
            isinstance(time_spent_seconds, bool)
            or not isinstance(time_spent_seconds, (int, float))
            or time_spent_seconds < 0
        ):
            raise InvalidArgumentError(
                "time_spent_seconds must be a non-negative number."
            )
