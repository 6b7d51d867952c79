"""
Database models for the placement service.
"""
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    Enum,
    Float,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from placement_service.core.placement.types import SessionStatus, Subject

from .base import Base


class User(Base):
    """Learner profile, keyed by an opaque id issued by the identity provider."""

    __tablename__ = "users"

    id = Column(String(128), primary_key=True)
    display_name = Column(String(200))
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Placement outcome, written when a placement test completes
    current_level_cap = Column(Integer, default=1, nullable=False)
    accessible_levels = Column(JSON, default=lambda: [1], nullable=False)
    current_grade = Column(String(20), default="A1", nullable=False)
    placement_test_taken = Column(Boolean, default=False, nullable=False)
    placement_test_date = Column(DateTime(timezone=True))
    placement_subjects = Column(JSON, default=list, nullable=False)
    placement_results = Column(JSON)  # Summary of the latest completed test

    placement_tests = relationship(
        "PlacementTest", back_populates="user", cascade="all, delete-orphan"
    )


class Question(Base):
    """Bank question with usage counters."""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(Enum(Subject), nullable=False)
    difficulty = Column(Float, nullable=False)  # 1-10 scale
    level = Column(Integer, nullable=False, default=1)  # Curriculum level 1-20
    question_text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # Exactly four answer strings
    correct_answer_index = Column(Integer, nullable=False)
    category = Column(String(100))
    tags = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    created_by = Column(String(100))

    # Usage analytics, maintained by question_analytics.record_answer
    times_asked = Column(Integer, default=0, nullable=False)
    correct_answers = Column(Integer, default=0, nullable=False)
    average_time_spent = Column(Float, default=0.0, nullable=False)

    __table_args__ = (
        Index("ix_questions_subject_active_difficulty", "subject", "is_active", "difficulty"),
        CheckConstraint(
            "difficulty >= 1 AND difficulty <= 10", name="ck_questions_difficulty_range"
        ),
        CheckConstraint("level >= 1 AND level <= 20", name="ck_questions_level_range"),
        CheckConstraint(
            "correct_answer_index >= 0 AND correct_answer_index <= 3",
            name="ck_questions_correct_answer_index",
        ),
    )


class PlacementTest(Base):
    """One placement session.

    ``version`` is the optimistic lock: every UPDATE is issued with
    ``WHERE version = <loaded version>`` and bumps it.
    """

    __tablename__ = "placement_tests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String(128),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(
        Enum(SessionStatus),
        default=SessionStatus.IN_PROGRESS,
        nullable=False,
        index=True,
    )
    config = Column(JSON, nullable=False)
    results = Column(JSON)
    started_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    completed_at = Column(DateTime(timezone=True))
    # Touched on every save so each write goes through the version check
    updated_at = Column(DateTime(timezone=True))
    # Completed after the configured limit. Still scored.
    time_limit_exceeded = Column(Boolean, default=False, nullable=False)
    version = Column(Integer, nullable=False)

    user = relationship("User", back_populates="placement_tests")
    questions = relationship(
        "PlacementTestQuestion",
        back_populates="placement_test",
        cascade="all, delete-orphan",
        order_by="PlacementTestQuestion.position",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (Index("ix_placement_tests_user_status", "user_id", "status"),)


class PlacementTestQuestion(Base):
    """A question asked in a placement session, snapshotted at ask time."""

    __tablename__ = "placement_test_questions"

    id = Column(Integer, primary_key=True, index=True)
    placement_test_id = Column(
        Integer,
        ForeignKey("placement_tests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False)  # 0-based turn number
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    subject = Column(Enum(Subject), nullable=False)
    difficulty = Column(Float, nullable=False)  # Target difficulty of the turn
    question_text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)
    correct_answer_index = Column(Integer, nullable=False)
    user_answer_index = Column(Integer)
    is_correct = Column(Boolean)
    time_spent_seconds = Column(Float)
    answered_at = Column(DateTime(timezone=True))

    placement_test = relationship("PlacementTest", back_populates="questions")

    __table_args__ = (
        UniqueConstraint(
            "placement_test_id", "question_id", name="uq_placement_test_question"
        ),
        UniqueConstraint(
            "placement_test_id", "position", name="uq_placement_test_position"
        ),
    )
