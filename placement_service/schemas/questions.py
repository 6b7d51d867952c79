"""
Pydantic schemas for question bank endpoints.
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional, Self
from datetime import datetime

from placement_service.core.placement.types import Subject
from placement_service.core.validators import StringSanitizer, TextValidator


class QuestionCreate(BaseModel):
    """Schema for adding a question to the bank."""

    subject: Subject = Field(..., description="Question subject")
    difficulty: float = Field(..., ge=1, le=10, description="Difficulty (1-10)")
    level: int = Field(1, ge=1, le=20, description="Curriculum level (1-20)")
    question_text: str = Field(..., max_length=2000)
    options: List[str] = Field(..., description="Exactly four answer options")
    correct_answer_index: int = Field(..., ge=0, le=3)
    category: Optional[str] = Field(None, max_length=100)
    tags: List[str] = Field(default_factory=list)
    created_by: Optional[str] = Field(None, max_length=100)

    @field_validator("question_text")
    @classmethod
    def validate_question_text(cls, v: str) -> str:
        v = StringSanitizer.sanitize_question_content(v)
        return TextValidator.validate_non_empty_text(v, "Question text")

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: List[str]) -> List[str]:
        return TextValidator.validate_answer_options(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return [t for t in (StringSanitizer.sanitize_string(tag) for tag in v) if t]

    @model_validator(mode="after")
    def validate_answer_in_options(self) -> Self:
        if self.correct_answer_index >= len(self.options):
            raise ValueError("correct_answer_index must point at one of the options")
        return self

    class Config:
        """Pydantic configuration."""

        extra = "forbid"


class QuestionAdminResponse(BaseModel):
    """Bank question as seen by administrators, including the answer."""

    id: int = Field(..., description="Question ID")
    subject: Subject
    difficulty: float
    level: int
    question_text: str
    options: List[str]
    correct_answer_index: int
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_active: bool
    created_at: datetime
    created_by: Optional[str] = None
    times_asked: int = 0
    correct_answers: int = 0
    average_time_spent: float = 0.0
    actual_difficulty: Optional[float] = Field(
        None, description="Difficulty adjusted by observed success rate"
    )

    class Config:
        """Pydantic configuration."""

        from_attributes = True  # Allows conversion from ORM models


class QuestionListResponse(BaseModel):
    questions: List[QuestionAdminResponse]
    total_count: int = Field(..., description="Number of questions returned")


class QuestionStatisticsResponse(BaseModel):
    """Usage analytics for one bank question."""

    question_id: int
    times_asked: int
    correct_answers: int
    success_rate: Optional[float] = Field(
        None, description="Share of correct answers; null until first asked"
    )
    average_time_spent: float
    assigned_difficulty: float
    actual_difficulty: float
    has_sufficient_data: bool = Field(
        ..., description="Whether enough answers exist to adjust difficulty"
    )
