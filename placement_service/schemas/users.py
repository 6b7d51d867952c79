"""
Pydantic schemas for user profile endpoints.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime

from placement_service.core.validators import StringSanitizer, TextValidator


class UserCreate(BaseModel):
    """Schema for creating a user profile."""

    id: str = Field(..., description="Opaque user ID from the identity provider")
    display_name: Optional[str] = Field(None, max_length=200)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        return TextValidator.validate_user_id(v)

    @field_validator("display_name")
    @classmethod
    def sanitize_display_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return StringSanitizer.sanitize_string(v) or None

    class Config:
        """Pydantic configuration."""

        extra = "forbid"


class UserResponse(BaseModel):
    id: str
    display_name: Optional[str] = None
    created_at: datetime
    current_level_cap: int
    accessible_levels: List[int]
    current_grade: str
    placement_test_taken: bool
    placement_test_date: Optional[datetime] = None
    placement_subjects: List[str] = Field(default_factory=list)
    placement_results: Optional[Dict[str, Any]] = None

    class Config:
        """Pydantic configuration."""

        from_attributes = True  # Allows conversion from ORM models
