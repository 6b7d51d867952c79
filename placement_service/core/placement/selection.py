"""
Question selection and difficulty adaptation.

Selection is random within a soft difficulty window: candidates within
``band`` of the target difficulty are preferred, and when none remain any
unasked question for the subject is used instead. This keeps sessions moving
whenever the subject still has something unseen.
"""
import logging
import random
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from placement_service.core.config import DIFFICULTY_MAX, DIFFICULTY_MIN
from placement_service.core.placement.exceptions import ResourceExhaustedError
from placement_service.core.placement.types import BankQuestion, Subject

logger = logging.getLogger(__name__)

DifficultyRange = Tuple[float, float]


class QuestionRepository(Protocol):
    """Question bank operations the engine depends on."""

    def find_candidates(
        self,
        subject: Subject,
        difficulty_range: Optional[DifficultyRange],
        exclude_ids: Iterable[int],
    ) -> List[BankQuestion]:
        """Active questions for ``subject``, optionally within an inclusive
        difficulty range, minus ``exclude_ids``."""
        ...

    def record_usage(
        self, question_id: int, was_correct: bool, time_spent_seconds: Optional[float]
    ) -> None:
        ...


def clamp_difficulty(value: float) -> float:
    return max(DIFFICULTY_MIN, min(DIFFICULTY_MAX, value))


def difficulty_band(difficulty: float, band: float = 0.5) -> DifficultyRange:
    """Inclusive candidate window around ``difficulty``, clipped to the scale."""
    return (
        max(DIFFICULTY_MIN, difficulty - band),
        min(DIFFICULTY_MAX, difficulty + band),
    )


def select_question(
    repository: QuestionRepository,
    subject: Subject,
    difficulty: float,
    exclude_ids: Iterable[int],
    rng: random.Random,
    band: float = 0.5,
) -> BankQuestion:
    """
    Pick a question for ``subject`` near ``difficulty``.

    Args:
        repository: Question bank
        subject: Subject to draw from
        difficulty: Target difficulty on the 1-10 scale
        exclude_ids: Question ids already asked in the session
        rng: Random source (seeded in tests)
        band: Half-width of the preferred difficulty window

    Returns:
        The chosen bank question

    Raises:
        ResourceExhaustedError: If the subject has no unasked active question
    """
    excluded = set(exclude_ids)

    candidates = repository.find_candidates(
        subject, difficulty_band(difficulty, band), excluded
    )
    if not candidates:
        logger.debug(
            f"No {subject.value} question near difficulty {difficulty}, "
            "falling back to any difficulty"
        )
        candidates = repository.find_candidates(subject, None, excluded)

    if not candidates:
        raise ResourceExhaustedError(
            f"No {subject.value} questions are available. "
            "The question bank has not been populated for this subject."
        )

    return rng.choice(candidates)


def next_difficulty(
    current: float,
    was_correct: bool,
    step: float = 1.0,
    adaptive: bool = True,
) -> float:
    """Move up one step after a correct answer and down one step after a miss."""
    if not adaptive:
        return current
    if was_correct:
        return clamp_difficulty(current + step)
    return clamp_difficulty(current - step)


def subject_for_turn(subjects: Sequence[Subject], asked_count: int) -> Subject:
    """Subjects rotate in configured order, one per question."""
    return subjects[asked_count % len(subjects)]
