"""
Tests for the placement engine against in-memory stores.
"""
import logging
from datetime import timedelta
from unittest.mock import patch

import pytest

from placement_service.core.placement.engine import PlacementEngine
from placement_service.core.placement.exceptions import (
    ConflictError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    PartialFailureError,
    ResourceExhaustedError,
)
from placement_service.core.placement.types import (
    MAX_ANSWER_INDEX,
    QuestionView,
    SessionStatus,
    Subject,
)


def answer(engine, session_store, session_id, correct=True, time_spent=10.0):
    """Answer the open question, correctly or not."""
    current = session_store.load(session_id).open_question
    index = current.correct_answer_index
    if not correct:
        index = (index + 1) % len(current.options)
    return engine.submit_answer(session_id, index, time_spent)


class TestStartSession:
    """Tests for PlacementEngine.start_session."""

    def test_returns_first_question_without_answer(self, placement_engine):
        """Test that the first question view never carries the correct index."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        assert started.session_id == 1
        assert started.question_number == 1
        assert started.total_questions == 20
        assert isinstance(started.question, QuestionView)
        assert not hasattr(started.question, "correct_answer_index")
        assert started.question.subject == Subject.MATHEMATICS
        assert len(started.question.options) == 4

    def test_first_question_drawn_at_starting_difficulty(
        self, placement_engine, question_repo, session_store
    ):
        """Test that the first question comes from the starting difficulty band."""
        started = placement_engine.start_session("learner-1", Subject.MATHEMATICS)

        session = session_store.load(started.session_id)
        asked = session.questions[0]
        assert asked.difficulty == 1.0
        assert question_repo.questions[asked.question_id].difficulty <= 1.5

    def test_session_stored_in_progress_with_config(
        self, placement_engine, session_store
    ):
        """Test that a new session is stored with one open question."""
        started = placement_engine.start_session(
            "learner-1",
            "English",
            total_questions=5,
            time_limit_minutes=10,
            adaptive_mode=False,
        )

        session = session_store.load(started.session_id)
        assert session.status == SessionStatus.IN_PROGRESS
        assert session.user_id == "learner-1"
        assert session.config.subjects == [Subject.ENGLISH]
        assert session.config.total_questions == 5
        assert session.config.time_limit_minutes == 10
        assert session.config.adaptive_mode is False
        assert len(session.questions) == 1
        assert session.open_question is session.questions[0]
        assert session.results is None
        assert session.version == 1

    def test_unsupported_subject(self, placement_engine, session_store):
        """Test that an unknown subject is rejected before anything is stored."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            placement_engine.start_session("learner-1", "Art")

        assert "Art" in exc_info.value.message
        assert session_store.sessions == {}

    @pytest.mark.parametrize(
        "overrides",
        [
            {"total_questions": 0},
            {"total_questions": -3},
            {"time_limit_minutes": 0},
            {"total_questions": True},
        ],
    )
    def test_invalid_overrides(self, placement_engine, overrides):
        """Test that non-positive or non-integer overrides are rejected."""
        with pytest.raises(InvalidArgumentError):
            placement_engine.start_session("learner-1", "Mathematics", **overrides)

    def test_unknown_user(self, placement_engine, session_store):
        """Test that an unknown user cannot start a session."""
        with pytest.raises(NotFoundError):
            placement_engine.start_session("nobody", "Mathematics")

        assert session_store.sessions == {}

    def test_subject_without_questions_stores_nothing(
        self, placement_engine, session_store
    ):
        """Test that an empty subject raises and leaves no session behind."""
        with pytest.raises(ResourceExhaustedError):
            placement_engine.start_session("learner-1", "History")

        assert session_store.sessions == {}

    def test_retake_refused(self, placement_engine, profile_store):
        """Test that a placed user cannot start again for the same subject."""
        profile_store.subjects["learner-1"].append("Mathematics")

        with pytest.raises(InvalidStateError):
            placement_engine.start_session("learner-1", "Mathematics")

        # Other subjects are still open
        started = placement_engine.start_session("learner-1", "English")
        assert started.session_id == 1

    def test_inactive_questions_never_asked(self, bank, repository_class, engine_factory):
        """Test that inactive bank questions are not selected."""
        inactive = bank(Subject.SCIENCE, [1.0], per_difficulty=3, active=False)
        active = bank(Subject.SCIENCE, [5.0], start_id=10)
        engine = engine_factory(repository_class(inactive + active))

        started = engine.start_session("learner-1", "Science")

        assert started.question.question_id == 10


class TestSubmitAnswer:
    """Tests for PlacementEngine.submit_answer."""

    def test_all_correct_scores_top_level(
        self, placement_engine, session_store, profile_store
    ):
        """Test a short session answered perfectly."""
        started = placement_engine.start_session(
            "learner-1", "Mathematics", total_questions=4
        )

        for _ in range(3):
            step = answer(placement_engine, session_store, started.session_id)
            assert step.test_complete is False
        final = answer(placement_engine, session_store, started.session_id)

        assert final.test_complete is True
        assert final.question is None
        results = final.results
        assert results.overall_score == 100
        assert results.recommended_level == 6
        assert results.percentile == 99
        assert results.correct_count == 4
        assert results.total_questions == 4

        session = session_store.load(started.session_id)
        assert session.status == SessionStatus.COMPLETED
        assert session.completed_at is not None
        assert len(session.questions) == 4
        assert all(q.is_answered for q in session.questions)
        assert session.results == results

        assert profile_store.applied == [("learner-1", results)]

    def test_all_incorrect_scores_base_level(self, placement_engine, session_store):
        """Test a short session with no correct answers."""
        started = placement_engine.start_session(
            "learner-1", "Mathematics", total_questions=4
        )

        for _ in range(4):
            step = answer(
                placement_engine, session_store, started.session_id, correct=False
            )

        assert step.results.overall_score == 0
        assert step.results.recommended_level == 1
        assert step.results.percentile == 0
        assert step.results.correct_count == 0

    def test_progress_reported(self, placement_engine, session_store):
        """Test question number and progress after an answer."""
        started = placement_engine.start_session(
            "learner-1", "Mathematics", total_questions=4
        )

        step = answer(placement_engine, session_store, started.session_id)

        assert step.question_number == 2
        assert step.total_questions == 4
        assert step.progress_percent == 50.0
        assert isinstance(step.question, QuestionView)

    def test_difficulty_rises_after_correct(self, placement_engine, session_store):
        """Test that a correct answer raises the target difficulty one step."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        answer(placement_engine, session_store, started.session_id, correct=True)
        answer(placement_engine, session_store, started.session_id, correct=True)

        difficulties = [
            q.difficulty for q in session_store.load(started.session_id).questions
        ]
        assert difficulties == [1.0, 2.0, 3.0]

    def test_difficulty_falls_after_incorrect(self, placement_engine, session_store):
        """Test that a miss lowers the difficulty and never goes below 1."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        answer(placement_engine, session_store, started.session_id, correct=True)
        answer(placement_engine, session_store, started.session_id, correct=False)
        answer(placement_engine, session_store, started.session_id, correct=False)

        difficulties = [
            q.difficulty for q in session_store.load(started.session_id).questions
        ]
        assert difficulties == [1.0, 2.0, 1.0, 1.0]

    def test_non_adaptive_keeps_difficulty(self, placement_engine, session_store):
        """Test that adaptive_mode=False holds the starting difficulty."""
        started = placement_engine.start_session(
            "learner-1", "Mathematics", adaptive_mode=False
        )

        answer(placement_engine, session_store, started.session_id, correct=True)
        answer(placement_engine, session_store, started.session_id, correct=True)

        difficulties = [
            q.difficulty for q in session_store.load(started.session_id).questions
        ]
        assert difficulties == [1.0, 1.0, 1.0]

    def test_no_question_repeats_and_one_open_question(
        self, placement_engine, session_store
    ):
        """Test a full default-length session for repeats and open questions."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        for turn in range(20):
            session = session_store.load(started.session_id)
            unanswered = [q for q in session.questions if not q.is_answered]
            assert len(unanswered) == 1
            assert session.questions[-1] is unanswered[0]
            answer(
                placement_engine,
                session_store,
                started.session_id,
                correct=turn % 3 != 0,
            )

        session = session_store.load(started.session_id)
        ids = session.asked_question_ids
        assert len(ids) == 20
        assert len(set(ids)) == 20
        assert session.open_question is None

    def test_out_of_range_answer_is_incorrect(self, placement_engine, session_store):
        """Test that an index past the options is scored, not rejected."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        step = placement_engine.submit_answer(started.session_id, 7, 5.0)

        assert step.test_complete is False
        first = session_store.load(started.session_id).questions[0]
        assert first.user_answer_index == 7
        assert first.is_correct is False

    def test_largest_answer_index_is_incorrect(self, placement_engine, session_store):
        """Test that the largest storable index is still scored, not rejected."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        placement_engine.submit_answer(started.session_id, MAX_ANSWER_INDEX)

        first = session_store.load(started.session_id).questions[0]
        assert first.user_answer_index == MAX_ANSWER_INDEX
        assert first.is_correct is False

    @pytest.mark.parametrize(
        "bad_index", [-1, 1.5, "2", None, True, MAX_ANSWER_INDEX + 1, 10**20]
    )
    def test_malformed_answer_index(self, placement_engine, session_store, bad_index):
        """Test that malformed indexes are rejected and nothing is written."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        with pytest.raises(InvalidArgumentError):
            placement_engine.submit_answer(started.session_id, bad_index)

        assert session_store.load(started.session_id).version == 1

    def test_negative_time_rejected(self, placement_engine):
        """Test that a negative time spent is rejected."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        with pytest.raises(InvalidArgumentError):
            placement_engine.submit_answer(started.session_id, 0, -1)

    def test_missing_time_allowed(self, placement_engine, session_store):
        """Test that the time spent is optional."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        placement_engine.submit_answer(started.session_id, 0)

        first = session_store.load(started.session_id).questions[0]
        assert first.time_spent_seconds is None
        assert first.answered_at is not None

    def test_unknown_session(self, placement_engine):
        """Test that answering an unknown session raises NotFoundError."""
        with pytest.raises(NotFoundError):
            placement_engine.submit_answer(999, 0)

    def test_completed_session_rejects_answers(self, placement_engine, session_store):
        """Test that a completed session accepts no further answers."""
        started = placement_engine.start_session(
            "learner-1", "Mathematics", total_questions=1
        )
        answer(placement_engine, session_store, started.session_id)

        with pytest.raises(InvalidStateError):
            placement_engine.submit_answer(started.session_id, 0)

        session = session_store.load(started.session_id)
        assert len(session.questions) == 1

    def test_usage_recorded_for_each_answer(
        self, placement_engine, session_store, question_repo
    ):
        """Test that every answer bumps the question's usage counters."""
        started = placement_engine.start_session(
            "learner-1", "Mathematics", total_questions=3
        )

        answer(placement_engine, session_store, started.session_id, time_spent=12.0)
        answer(placement_engine, session_store, started.session_id, correct=False)
        answer(placement_engine, session_store, started.session_id)

        session = session_store.load(started.session_id)
        assert [u[0] for u in question_repo.usage] == session.asked_question_ids
        assert [u[1] for u in question_repo.usage] == [True, False, True]
        assert question_repo.usage[0][2] == 12.0

    def test_usage_failure_does_not_fail_answer(
        self, placement_engine, session_store, question_repo
    ):
        """Test that an analytics failure is logged and swallowed."""
        question_repo.fail_usage = True
        started = placement_engine.start_session("learner-1", "Mathematics")

        with patch("placement_service.core.placement.engine.logger") as mock_logger:
            step = answer(placement_engine, session_store, started.session_id)

        assert step.test_complete is False
        assert len(session_store.load(started.session_id).questions) == 2
        mock_logger.log.assert_called_once()
        level, message = mock_logger.log.call_args[0][:2]
        assert level == logging.WARNING
        assert "Failed to record question usage" in message
        assert f"session_id={started.session_id}" in message

    def test_exhausted_bank_leaves_session_unchanged(
        self, bank, repository_class, engine_factory, session_store
    ):
        """Test that running out of questions mid-session stores nothing."""
        repository = repository_class(bank(Subject.GEOGRAPHY, [1.0, 2.0]))
        engine = engine_factory(repository)
        started = engine.start_session("learner-1", "Geography", total_questions=4)
        answer(engine, session_store, started.session_id)

        with pytest.raises(ResourceExhaustedError):
            answer(engine, session_store, started.session_id)

        session = session_store.load(started.session_id)
        assert session.version == 2
        assert len(session.questions) == 2
        assert session.open_question is session.questions[1]
        assert len(repository.usage) == 1

    def test_falls_back_to_any_difficulty(
        self, bank, repository_class, engine_factory, session_store
    ):
        """Test that a session keeps going when its difficulty band is empty."""
        repository = repository_class(bank(Subject.SCIENCE, [8.0, 9.0, 10.0]))
        engine = engine_factory(repository)

        started = engine.start_session("learner-1", "Science", total_questions=3)
        answer(engine, session_store, started.session_id, correct=False)
        final = answer(engine, session_store, started.session_id, correct=False)

        assert final.test_complete is False
        assert len(set(session_store.load(started.session_id).asked_question_ids)) == 3

    def test_concurrent_answers_conflict(
        self, placement_engine, session_store, question_repo
    ):
        """Test that of two answers read from the same state only one is kept."""
        started = placement_engine.start_session("learner-1", "Mathematics")
        session_store.pin(started.session_id)

        first = answer(placement_engine, session_store, started.session_id)
        with pytest.raises(ConflictError):
            answer(placement_engine, session_store, started.session_id, correct=False)
        session_store.unpin(started.session_id)

        assert first.question_number == 2
        session = session_store.load(started.session_id)
        assert len(session.questions) == 2
        assert session.questions[0].is_correct is True
        assert len(question_repo.usage) == 1

    def test_profile_failure_is_partial(
        self, placement_engine, session_store, profile_store
    ):
        """Test that a profile update failure keeps the completed session."""
        profile_store.fail_apply = True
        started = placement_engine.start_session(
            "learner-1", "Mathematics", total_questions=2
        )
        answer(placement_engine, session_store, started.session_id)

        with pytest.raises(PartialFailureError) as exc_info:
            answer(placement_engine, session_store, started.session_id)

        error = exc_info.value
        assert error.session_id == started.session_id
        assert error.results.overall_score == 100
        assert isinstance(error.__cause__, RuntimeError)

        session = session_store.load(started.session_id)
        assert session.status == SessionStatus.COMPLETED
        assert session.results == error.results

    def test_time_limit_exceeded_flagged(
        self, question_repo, engine_factory, stepping_clock, session_store
    ):
        """Test that finishing after the time limit is flagged, not refused."""
        engine = engine_factory(
            question_repo, clock=stepping_clock(step=timedelta(minutes=10))
        )
        started = engine.start_session(
            "learner-1", "Mathematics", total_questions=3, time_limit_minutes=5
        )

        for _ in range(3):
            final = answer(engine, session_store, started.session_id)

        assert final.test_complete is True
        assert session_store.load(started.session_id).time_limit_exceeded is True

    def test_within_time_limit(self, placement_engine, session_store):
        """Test that a quick session is not flagged."""
        started = placement_engine.start_session(
            "learner-1", "Mathematics", total_questions=2
        )
        answer(placement_engine, session_store, started.session_id)
        answer(placement_engine, session_store, started.session_id)

        assert session_store.load(started.session_id).time_limit_exceeded is False

    def test_confidence_in_range(self, placement_engine, session_store):
        """Test that confidence stays within 0-100."""
        started = placement_engine.start_session(
            "learner-1", "Mathematics", total_questions=6
        )
        for turn in range(6):
            final = answer(
                placement_engine,
                session_store,
                started.session_id,
                correct=turn % 2 == 0,
                time_spent=5.0 + turn * 20,
            )

        assert 0 <= final.results.confidence_score <= 100


class TestEngineDefaults:
    """Tests for engine construction."""

    def test_defaults_from_settings(
        self, question_repo, profile_store, session_store
    ):
        """Test that unset options fall back to settings."""
        from placement_service.core.config import settings

        engine = PlacementEngine(question_repo, profile_store, session_store)

        assert (
            engine.default_total_questions
            == settings.PLACEMENT_DEFAULT_TOTAL_QUESTIONS
        )
        assert engine.starting_difficulty == settings.PLACEMENT_STARTING_DIFFICULTY
        assert engine.difficulty_band == settings.PLACEMENT_DIFFICULTY_BAND

    def test_get_session(self, placement_engine):
        """Test that get_session returns the stored session."""
        started = placement_engine.start_session("learner-1", "Mathematics")

        session = placement_engine.get_session(started.session_id)

        assert session.id == started.session_id
        with pytest.raises(NotFoundError):
            placement_engine.get_session(42)
