"""
Domain types for placement sessions.

These are plain dataclasses so the engine can run against any store; the
SQLAlchemy store in ``storage`` converts to and from the ORM models.
"""
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

# Largest answer index a store has to hold (32-bit INTEGER column). Indexes
# up to this bound but past the last option are scored as incorrect.
MAX_ANSWER_INDEX: int = 2**31 - 1


class Subject(str, enum.Enum):
    """Subjects the question bank covers."""

    ENGLISH = "English"
    MATHEMATICS = "Mathematics"
    SCIENCE = "Science"
    HISTORY = "History"
    GEOGRAPHY = "Geography"


class SessionStatus(str, enum.Enum):
    """Placement session lifecycle. Transitions only forward."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class PlacementConfig:
    """Session settings fixed at start."""

    subjects: List[Subject]
    total_questions: int
    time_limit_minutes: int
    adaptive_mode: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subjects": [s.value for s in self.subjects],
            "total_questions": self.total_questions,
            "time_limit_minutes": self.time_limit_minutes,
            "adaptive_mode": self.adaptive_mode,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacementConfig":
        return cls(
            subjects=[Subject(s) for s in data["subjects"]],
            total_questions=data["total_questions"],
            time_limit_minutes=data["time_limit_minutes"],
            adaptive_mode=data.get("adaptive_mode", True),
        )


@dataclass
class BankQuestion:
    """A question as the repository hands it to the engine."""

    id: int
    subject: Subject
    difficulty: float
    question_text: str
    options: List[str]
    correct_answer_index: int
    is_active: bool = True


@dataclass
class AskedQuestion:
    """
    One turn of a session.

    Question text, options and the correct index are copied from the bank at
    ask time, so later edits to the bank never change a session's history.
    """

    question_id: int
    subject: Subject
    difficulty: float
    question_text: str
    options: List[str]
    correct_answer_index: int
    user_answer_index: Optional[int] = None
    is_correct: Optional[bool] = None
    time_spent_seconds: Optional[float] = None
    answered_at: Optional[datetime] = None

    @property
    def is_answered(self) -> bool:
        return self.user_answer_index is not None

    @classmethod
    def from_bank(cls, question: BankQuestion, difficulty: float) -> "AskedQuestion":
        """Snapshot a bank question asked at the given target difficulty."""
        return cls(
            question_id=question.id,
            subject=question.subject,
            difficulty=difficulty,
            question_text=question.question_text,
            options=list(question.options),
            correct_answer_index=question.correct_answer_index,
        )


@dataclass
class SubjectScore:
    subject: Subject
    score: int
    recommended_level: int
    correct_count: int
    total_count: int
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)


@dataclass
class LearningProfile:
    speed: str
    accuracy: str
    consistency: str
    recommended_pace: str


@dataclass
class PlacementAnalysis:
    processing_style: str
    strong_subjects: List[Subject] = field(default_factory=list)
    challenging_areas: List[Subject] = field(default_factory=list)
    suggested_start_path: str = "foundation"
    recommendations: List[str] = field(default_factory=list)


@dataclass
class PlacementResults:
    """Outcome of a completed session. Set once, never recomputed."""

    overall_score: int
    recommended_level: int
    percentile: int
    confidence_score: int
    correct_count: int
    total_questions: int
    subject_scores: List[SubjectScore]
    learning_profile: LearningProfile
    analysis: PlacementAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "recommended_level": self.recommended_level,
            "percentile": self.percentile,
            "confidence_score": self.confidence_score,
            "correct_count": self.correct_count,
            "total_questions": self.total_questions,
            "subject_scores": [
                {
                    "subject": s.subject.value,
                    "score": s.score,
                    "recommended_level": s.recommended_level,
                    "correct_count": s.correct_count,
                    "total_count": s.total_count,
                    "strengths": list(s.strengths),
                    "weaknesses": list(s.weaknesses),
                }
                for s in self.subject_scores
            ],
            "learning_profile": {
                "speed": self.learning_profile.speed,
                "accuracy": self.learning_profile.accuracy,
                "consistency": self.learning_profile.consistency,
                "recommended_pace": self.learning_profile.recommended_pace,
            },
            "analysis": {
                "processing_style": self.analysis.processing_style,
                "strong_subjects": [s.value for s in self.analysis.strong_subjects],
                "challenging_areas": [
                    s.value for s in self.analysis.challenging_areas
                ],
                "suggested_start_path": self.analysis.suggested_start_path,
                "recommendations": list(self.analysis.recommendations),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacementResults":
        analysis = data["analysis"]
        return cls(
            overall_score=data["overall_score"],
            recommended_level=data["recommended_level"],
            percentile=data["percentile"],
            confidence_score=data["confidence_score"],
            correct_count=data["correct_count"],
            total_questions=data["total_questions"],
            subject_scores=[
                SubjectScore(
                    subject=Subject(s["subject"]),
                    score=s["score"],
                    recommended_level=s["recommended_level"],
                    correct_count=s["correct_count"],
                    total_count=s["total_count"],
                    strengths=list(s.get("strengths", [])),
                    weaknesses=list(s.get("weaknesses", [])),
                )
                for s in data["subject_scores"]
            ],
            learning_profile=LearningProfile(**data["learning_profile"]),
            analysis=PlacementAnalysis(
                processing_style=analysis["processing_style"],
                strong_subjects=[Subject(s) for s in analysis["strong_subjects"]],
                challenging_areas=[
                    Subject(s) for s in analysis["challenging_areas"]
                ],
                suggested_start_path=analysis["suggested_start_path"],
                recommendations=list(analysis["recommendations"]),
            ),
        )


@dataclass
class PlacementSession:
    """
    A placement test for one user.

    ``questions`` is append-only. Only the last entry may be unanswered.
    ``version`` is the optimistic concurrency token: stores refuse a save
    whose version no longer matches what is stored.
    """

    user_id: str
    config: PlacementConfig
    started_at: datetime
    id: Optional[int] = None
    status: SessionStatus = SessionStatus.IN_PROGRESS
    questions: List[AskedQuestion] = field(default_factory=list)
    results: Optional[PlacementResults] = None
    completed_at: Optional[datetime] = None
    time_limit_exceeded: bool = False
    version: int = 0

    @property
    def open_question(self) -> Optional[AskedQuestion]:
        """The unanswered last question, if there is one."""
        if self.questions and not self.questions[-1].is_answered:
            return self.questions[-1]
        return None

    @property
    def asked_question_ids(self) -> List[int]:
        return [q.question_id for q in self.questions]

    @property
    def question_number(self) -> int:
        return len(self.questions)


@dataclass
class QuestionView:
    """A question as shown to the test taker. Never carries the answer."""

    question_id: int
    subject: Subject
    difficulty: float
    question_text: str
    options: List[str]

    @classmethod
    def from_asked(cls, asked: AskedQuestion) -> "QuestionView":
        return cls(
            question_id=asked.question_id,
            subject=asked.subject,
            difficulty=asked.difficulty,
            question_text=asked.question_text,
            options=list(asked.options),
        )


@dataclass
class StartResult:
    session_id: int
    question: QuestionView
    question_number: int
    total_questions: int


@dataclass
class AnswerResult:
    session_id: int
    test_complete: bool
    results: Optional[PlacementResults] = None
    question: Optional[QuestionView] = None
    question_number: Optional[int] = None
    total_questions: Optional[int] = None
    progress_percent: Optional[float] = None
