"""
Pytest configuration and shared fixtures for testing.
"""
import os
from pathlib import Path

# Use SQLite for tests. The path is relative to this file so the .db lands
# inside tests/ regardless of the working directory. These must be set before
# anything from placement_service is imported.
_TEST_DB = Path(__file__).parent / "test.db"
SQLALCHEMY_DATABASE_URL = f"sqlite:///{_TEST_DB}"
os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL
os.environ["ENV"] = "test"
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["PLACEMENT_ALLOW_RETAKE"] = "False"

from contextlib import asynccontextmanager  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from placement_service.core.config import settings  # noqa: E402
from placement_service.core.placement.types import Subject  # noqa: E402
from placement_service.main import app  # noqa: E402
from placement_service.models import Base, Question, User, get_db  # noqa: E402


@asynccontextmanager
async def _test_lifespan(app):
    """No-op lifespan for tests."""
    yield


app.router.lifespan_context = _test_lifespan

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """
    Open extra, independent database sessions (simulating separate requests).

    All sessions opened through the factory are closed before the tables are
    dropped.
    """
    opened = []

    def _open():
        session = TestingSessionLocal()
        opened.append(session)
        return session

    yield _open

    for session in opened:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database dependency override.
    """

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db_session):
    """
    Create a test user in the database.
    """
    user = User(id="learner-1", display_name="Test Learner")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def add_questions(db, subject, difficulties, per_difficulty=1, active=True):
    """
    Add bank questions for ``subject``, ``per_difficulty`` at each difficulty.

    The correct answer index cycles through 0-3.
    """
    questions = []
    for difficulty in difficulties:
        for n in range(per_difficulty):
            index = len(questions)
            questions.append(
                Question(
                    subject=subject,
                    difficulty=float(difficulty),
                    level=max(1, min(20, int(difficulty) * 2)),
                    question_text=f"{subject.value} question {difficulty}-{n}",
                    options=[f"option {i}" for i in range(4)],
                    correct_answer_index=index % 4,
                    category="test",
                    is_active=active,
                )
            )
    db.add_all(questions)
    db.commit()
    for question in questions:
        db.refresh(question)
    return questions


@pytest.fixture
def test_questions(db_session):
    """
    Question bank: 30 Mathematics questions (3 per difficulty) and
    10 English questions (1 per difficulty). No History questions.
    """
    math = add_questions(db_session, Subject.MATHEMATICS, range(1, 11), per_difficulty=3)
    english = add_questions(db_session, Subject.ENGLISH, range(1, 11))
    return {"math": math, "english": english}


@pytest.fixture
def admin_headers():
    """
    Create headers with valid admin token for admin endpoints.
    """
    return {"X-Admin-Token": settings.ADMIN_TOKEN}


@pytest.fixture
def question_factory(db_session):
    """
    Add questions to the bank:
    ``question_factory(subject, difficulties, per_difficulty=1, active=True)``.
    """

    def _create(subject, difficulties, per_difficulty=1, active=True):
        return add_questions(db_session, subject, difficulties, per_difficulty, active)

    return _create
