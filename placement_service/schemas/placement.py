"""
Pydantic schemas for placement test endpoints.

Question payloads returned to test takers never include the correct answer
index.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime

from placement_service.core.placement.types import (
    MAX_ANSWER_INDEX,
    SessionStatus,
    Subject,
)
from placement_service.core.validators import TextValidator


class StartPlacementRequest(BaseModel):
    """Schema for starting a placement test."""

    user_id: str = Field(..., description="Opaque ID of an existing user")
    # Kept as a string so unsupported subjects reach the engine and get a 400
    subject: str = Field(..., description="Subject to place the user in")
    total_questions: Optional[int] = Field(
        None, ge=1, le=100, description="Number of questions (default 20)"
    )
    time_limit_minutes: Optional[int] = Field(
        None, ge=1, le=180, description="Time limit in minutes (default 20)"
    )
    adaptive_mode: bool = Field(
        True, description="Adjust difficulty after every answer"
    )

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        return TextValidator.validate_user_id(v)

    class Config:
        """Pydantic configuration."""

        extra = "forbid"


class SubmitAnswerRequest(BaseModel):
    """Schema for answering the open question of a placement session."""

    answer_index: int = Field(
        ...,
        ge=0,
        le=MAX_ANSWER_INDEX,
        description="Index of the chosen option. Indexes past the last option "
        "are scored as incorrect.",
    )
    time_spent_seconds: Optional[float] = Field(
        None, description="Seconds spent on the question"
    )

    @field_validator("time_spent_seconds")
    @classmethod
    def validate_time_spent(cls, v: Optional[float]) -> Optional[float]:
        return TextValidator.validate_non_negative_number(v, "Time spent")

    class Config:
        """Pydantic configuration."""

        extra = "forbid"


class PlacementQuestionResponse(BaseModel):
    """A question as presented to the test taker."""

    question_id: int = Field(..., description="Bank question ID")
    subject: Subject = Field(..., description="Question subject")
    difficulty: float = Field(..., description="Target difficulty (1-10)")
    question_text: str = Field(..., description="The question text")
    options: List[str] = Field(..., description="Answer options, in order")

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class StartPlacementResponse(BaseModel):
    session_id: int = Field(..., description="Placement session ID")
    question: PlacementQuestionResponse = Field(..., description="First question")
    question_number: int = Field(..., description="1-based number of the question")
    total_questions: int = Field(..., description="Questions in this session")

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class SubjectScoreResponse(BaseModel):
    subject: Subject
    score: int = Field(..., description="Percent correct (0-100)")
    recommended_level: int
    correct_count: int
    total_count: int
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class LearningProfileResponse(BaseModel):
    speed: str = Field(..., description="fast, moderate or slow")
    accuracy: str = Field(..., description="high, medium or low")
    consistency: str
    recommended_pace: str = Field(..., description="accelerated or standard")

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class PlacementAnalysisResponse(BaseModel):
    processing_style: str
    strong_subjects: List[Subject] = Field(default_factory=list)
    challenging_areas: List[Subject] = Field(default_factory=list)
    suggested_start_path: str = Field(..., description="advanced or foundation")
    recommendations: List[str] = Field(default_factory=list)

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class PlacementResultsResponse(BaseModel):
    """Final results of a completed placement session."""

    overall_score: int = Field(..., description="Percent correct (0-100)")
    recommended_level: int = Field(..., description="Recommended level")
    percentile: int = Field(
        ...,
        description="Linear estimate from the score (0-99). Not derived from "
        "population data.",
    )
    confidence_score: int = Field(..., description="Placement confidence (0-100)")
    correct_count: int
    total_questions: int
    subject_scores: List[SubjectScoreResponse]
    learning_profile: LearningProfileResponse
    analysis: PlacementAnalysisResponse

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class SubmitAnswerResponse(BaseModel):
    """Schema for the response to an answer.

    When test_complete is False, question holds the next question.
    When test_complete is True, results holds the final scores.
    """

    session_id: int
    test_complete: bool = Field(..., description="Whether the session has ended")
    question: Optional[PlacementQuestionResponse] = Field(
        None, description="Next question (null when complete)"
    )
    question_number: Optional[int] = None
    total_questions: Optional[int] = None
    progress_percent: Optional[float] = Field(
        None, description="100 * question_number / total_questions"
    )
    results: Optional[PlacementResultsResponse] = Field(
        None, description="Final results (only when complete)"
    )

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class PlacementConfigResponse(BaseModel):
    subjects: List[Subject]
    total_questions: int
    time_limit_minutes: int
    adaptive_mode: bool

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class AskedQuestionResponse(BaseModel):
    """A question already asked in a session, without its correct answer."""

    question_id: int
    subject: Subject
    difficulty: float
    question_text: str
    options: List[str]
    user_answer_index: Optional[int] = None
    is_correct: Optional[bool] = None
    time_spent_seconds: Optional[float] = None
    answered_at: Optional[datetime] = None

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class PlacementSessionResponse(BaseModel):
    """Schema for checking placement session status."""

    id: int = Field(..., description="Placement session ID")
    user_id: str
    status: SessionStatus
    config: PlacementConfigResponse
    question_number: int = Field(..., description="Questions asked so far")
    progress_percent: float
    started_at: datetime
    completed_at: Optional[datetime] = None
    time_limit_exceeded: bool = False
    questions: List[AskedQuestionResponse]
    results: Optional[PlacementResultsResponse] = None

    class Config:
        """Pydantic configuration."""

        from_attributes = True


class UserPlacementResultsResponse(BaseModel):
    """Placement outcome stored on the user profile."""

    user_id: str
    placement_test_taken: bool
    placement_test_date: Optional[datetime] = None
    current_level_cap: int
    current_grade: str
    accessible_levels: List[int]
    placement_subjects: List[str]
    results: Optional[Dict[str, Any]] = Field(
        None, description="Summary of the latest completed placement test"
    )
