"""
Application configuration settings.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Self


# Difficulty scale shared by the question bank and the placement engine
DIFFICULTY_MIN = 1.0
DIFFICULTY_MAX = 10.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Placement Service"
    APP_VERSION: str = "0.1.0"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_PREFIX: str = "/v1"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Admin token guarding question bank writes (X-Admin-Token header)
    ADMIN_TOKEN: str = Field(
        default="",
        description="Admin API token for question bank management endpoints",
    )

    # Placement test defaults. Per-session overrides are accepted at start.
    PLACEMENT_DEFAULT_TOTAL_QUESTIONS: int = Field(default=20, ge=1, le=100)
    PLACEMENT_DEFAULT_TIME_LIMIT_MINUTES: int = Field(default=20, ge=1, le=180)
    # First question is intentionally easy regardless of subject
    PLACEMENT_STARTING_DIFFICULTY: float = 1.0
    # Difficulty moves by this much after each answer (up if correct, down if not)
    PLACEMENT_DIFFICULTY_STEP: float = 1.0
    # Half-width of the difficulty window used to pick candidates
    PLACEMENT_DIFFICULTY_BAND: float = 0.5
    # When False, users who completed a subject's placement test cannot start another
    PLACEMENT_ALLOW_RETAKE: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @model_validator(mode="after")
    def validate_placement_difficulty(self) -> Self:
        """Validate the adaptive difficulty parameters against the 1-10 scale."""
        start = self.PLACEMENT_STARTING_DIFFICULTY
        if not DIFFICULTY_MIN <= start <= DIFFICULTY_MAX:
            raise ValueError(
                f"PLACEMENT_STARTING_DIFFICULTY must be within "
                f"[{DIFFICULTY_MIN}, {DIFFICULTY_MAX}], got {start}"
            )
        if self.PLACEMENT_DIFFICULTY_STEP <= 0:
            raise ValueError(
                f"PLACEMENT_DIFFICULTY_STEP must be positive, "
                f"got {self.PLACEMENT_DIFFICULTY_STEP}"
            )
        if self.PLACEMENT_DIFFICULTY_BAND < 0:
            raise ValueError(
                f"PLACEMENT_DIFFICULTY_BAND cannot be negative, "
                f"got {self.PLACEMENT_DIFFICULTY_BAND}"
            )
        return self


settings = Settings()
