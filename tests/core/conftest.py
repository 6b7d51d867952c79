"""
In-memory collaborators for exercising the placement engine without a database.
"""
import copy
import random
from datetime import datetime, timedelta, timezone

import pytest

from placement_service.core.placement.engine import PlacementEngine
from placement_service.core.placement.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
)
from placement_service.core.placement.types import BankQuestion, Subject


def make_bank(subject, difficulties, per_difficulty=1, start_id=1, active=True):
    """Bank questions with sequential ids; correct index cycles through 0-3."""
    questions = []
    next_id = start_id
    for difficulty in difficulties:
        for _ in range(per_difficulty):
            questions.append(
                BankQuestion(
                    id=next_id,
                    subject=subject,
                    difficulty=float(difficulty),
                    question_text=f"{subject.value} question {next_id}",
                    options=["a", "b", "c", "d"],
                    correct_answer_index=next_id % 4,
                    is_active=active,
                )
            )
            next_id += 1
    return questions


class InMemoryQuestionRepository:
    def __init__(self, questions=()):
        self.questions = {q.id: q for q in questions}
        self.usage = []
        self.fail_usage = False

    def find_candidates(self, subject, difficulty_range, exclude_ids):
        excluded = set(exclude_ids)
        found = []
        for question in sorted(self.questions.values(), key=lambda q: q.id):
            if question.subject != subject or not question.is_active:
                continue
            if question.id in excluded:
                continue
            if difficulty_range is not None:
                low, high = difficulty_range
                if not low <= question.difficulty <= high:
                    continue
            found.append(question)
        return found

    def record_usage(self, question_id, was_correct, time_spent_seconds):
        if self.fail_usage:
            raise RuntimeError("analytics store unavailable")
        self.usage.append((question_id, was_correct, time_spent_seconds))


class InMemoryProfileStore:
    def __init__(self, user_ids=("learner-1",), allow_retake=False):
        self.subjects = {user_id: [] for user_id in user_ids}
        self.applied = []
        self.allow_retake = allow_retake
        self.fail_apply = False

    def ensure_can_start(self, user_id, subject):
        if user_id not in self.subjects:
            raise NotFoundError("User not found.")
        if not self.allow_retake and subject.value in self.subjects[user_id]:
            raise InvalidStateError("Already placed.")

    def apply_placement_result(self, user_id, results):
        if self.fail_apply:
            raise RuntimeError("profile store unavailable")
        self.applied.append((user_id, results))
        for score in results.subject_scores:
            if score.subject.value not in self.subjects[user_id]:
                self.subjects[user_id].append(score.subject.value)


class InMemorySessionStore:
    """
    Stores deep copies so callers never share state with the store.

    ``pin`` freezes what ``load`` returns for a session, which lets a test
    model two requests that both read before either writes.
    """

    def __init__(self):
        self.sessions = {}
        self.pinned = {}
        self.next_id = 1
        self.saves = 0

    def create(self, session):
        session.id = self.next_id
        session.version = 1
        self.next_id += 1
        self.sessions[session.id] = copy.deepcopy(session)
        return session.id

    def load(self, session_id):
        if session_id in self.pinned:
            return copy.deepcopy(self.pinned[session_id])
        if session_id not in self.sessions:
            raise NotFoundError("Placement session not found.")
        return copy.deepcopy(self.sessions[session_id])

    def save(self, session):
        stored = self.sessions.get(session.id)
        if stored is None:
            raise NotFoundError("Placement session not found.")
        if stored.version != session.version:
            raise ConflictError("Placement session was modified by another request.")
        session.version += 1
        self.sessions[session.id] = copy.deepcopy(session)
        self.saves += 1

    def pin(self, session_id):
        self.pinned[session_id] = copy.deepcopy(self.sessions[session_id])

    def unpin(self, session_id):
        self.pinned.pop(session_id, None)


class SteppingClock:
    """Clock that advances by ``step`` on every call."""

    def __init__(self, start=None, step=timedelta(seconds=10)):
        self.now = start or datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def question_repo():
    """30 Mathematics questions (3 per difficulty) and 10 English ones."""
    math = make_bank(Subject.MATHEMATICS, range(1, 11), per_difficulty=3)
    english = make_bank(Subject.ENGLISH, range(1, 11), start_id=100)
    return InMemoryQuestionRepository(math + english)


@pytest.fixture
def profile_store():
    return InMemoryProfileStore()


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def placement_engine(question_repo, profile_store, session_store, clock):
    return PlacementEngine(
        question_repo,
        profile_store,
        session_store,
        clock=clock,
        rng=random.Random(42),
        default_total_questions=20,
        default_time_limit_minutes=20,
        starting_difficulty=1.0,
        difficulty_step=1.0,
        difficulty_band=0.5,
    )


@pytest.fixture
def bank():
    """Build bank questions: ``bank(subject, difficulties, per_difficulty, start_id)``."""
    return make_bank


@pytest.fixture
def engine_factory(profile_store, session_store):
    """Build an engine over a custom repository and clock."""

    def _build(repository, clock=None, **kwargs):
        options = {
            "default_total_questions": 20,
            "default_time_limit_minutes": 20,
            "starting_difficulty": 1.0,
            "difficulty_step": 1.0,
            "difficulty_band": 0.5,
        }
        options.update(kwargs)
        return PlacementEngine(
            repository,
            profile_store,
            session_store,
            clock=clock or SteppingClock(),
            rng=random.Random(7),
            **options,
        )

    return _build


@pytest.fixture
def stepping_clock():
    """The SteppingClock class, for tests that need a custom step."""
    return SteppingClock


@pytest.fixture
def repository_class():
    return InMemoryQuestionRepository
