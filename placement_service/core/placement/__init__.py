"""
Adaptive placement test engine.
"""
from placement_service.core.placement.engine import (
    PlacementEngine,
    SessionStore,
    UserProfileStore,
)
from placement_service.core.placement.exceptions import (
    ConflictError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    PartialFailureError,
    PlacementError,
    ResourceExhaustedError,
)
from placement_service.core.placement.selection import QuestionRepository
from placement_service.core.placement.types import (
    AnswerResult,
    AskedQuestion,
    BankQuestion,
    PlacementConfig,
    PlacementResults,
    PlacementSession,
    QuestionView,
    SessionStatus,
    StartResult,
    Subject,
)

__all__ = [
    "PlacementEngine",
    "QuestionRepository",
    "SessionStore",
    "UserProfileStore",
    "PlacementError",
    "NotFoundError",
    "InvalidArgumentError",
    "InvalidStateError",
    "ResourceExhaustedError",
    "ConflictError",
    "PartialFailureError",
    "AnswerResult",
    "AskedQuestion",
    "BankQuestion",
    "PlacementConfig",
    "PlacementResults",
    "PlacementSession",
    "QuestionView",
    "SessionStatus",
    "StartResult",
    "Subject",
]
