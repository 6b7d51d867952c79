"""
Scoring for completed placement sessions.

Turns the answered questions of a session into the overall score, the
recommended level, a percentile estimate, a confidence score, per-subject
scores and a short learning profile.

The percentile is a linear proxy of the score (``score * 1.2`` capped at 99).
No population data is available to the engine, so it is not a true
percentile and should not be presented as one.
"""
import math
import statistics
from typing import List, Optional, Sequence

from placement_service.core.config import DIFFICULTY_MAX, DIFFICULTY_MIN
from placement_service.core.placement.types import (
    AskedQuestion,
    LearningProfile,
    PlacementAnalysis,
    PlacementResults,
    Subject,
    SubjectScore,
)

# =============================================================================
# LEVEL THRESHOLDS
# =============================================================================
#
# (minimum overall score, level), checked from the top. Anything under the
# lowest threshold is level 1. Downstream curriculum access is gated on the
# level, so changes here move users between courses.
LEVEL_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (90, 6),
    (75, 5),
    (60, 4),
    (45, 3),
    (30, 2),
)
BASE_LEVEL = 1

PERCENTILE_MULTIPLIER = 1.2
PERCENTILE_CAP = 99

# =============================================================================
# CONFIDENCE
# =============================================================================
#
# confidence = 100 * n/(n + K) * (1 - 0.5 * volatility) * (1 - 0.5 * boundary_misses)
#
# n/(n + K) grows with the number of answered questions. Volatility is the
# coefficient of variation of answer time over the most recent answers.
# Boundary misses are wrong answers at the very top or bottom of the scale,
# where the adaptive step cannot move any further.
CONFIDENCE_SAMPLE_CONSTANT = 5
VOLATILITY_WINDOW = 10
VOLATILITY_WEIGHT = 0.5
BOUNDARY_MISS_WEIGHT = 0.5

# =============================================================================
# LEARNING PROFILE
# =============================================================================
DEFAULT_TIME_SPENT_SECONDS = 30.0
FAST_SECONDS = 20.0
MODERATE_SECONDS = 40.0
ACCELERATED_PACE_SECONDS = 30.0
ACCELERATED_PACE_ACCURACY = 0.7
HIGH_ACCURACY = 0.8
MEDIUM_ACCURACY = 0.6
MIN_ANSWERS_FOR_CONSISTENCY = 5

STRENGTH_SCORE = 70
WEAKNESS_SCORE = 50
STRONG_SUBJECT_SCORE = 70
CHALLENGING_SUBJECT_SCORE = 60


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def score_percent(correct: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(100 * correct / total)


def level_for_score(score: float) -> int:
    """Recommended level for an overall score. Non-decreasing in the score."""
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return BASE_LEVEL


def percentile_for_score(score: float) -> int:
    return min(PERCENTILE_CAP, round_half_up(score * PERCENTILE_MULTIPLIER))


def _answered(questions: Sequence[AskedQuestion]) -> List[AskedQuestion]:
    return [q for q in questions if q.is_answered]


def time_volatility(questions: Sequence[AskedQuestion]) -> float:
    """
    Coefficient of variation of answer time over the recent window, capped at 1.

    Returns 0.0 with fewer than two timed answers or a zero mean.
    """
    recent = _answered(questions)[-VOLATILITY_WINDOW:]
    times = [q.time_spent_seconds for q in recent if q.time_spent_seconds is not None]
    if len(times) < 2:
        return 0.0

    mean_time = statistics.mean(times)
    if mean_time <= 0:
        return 0.0

    return min(1.0, statistics.pstdev(times) / mean_time)


def boundary_miss_ratio(questions: Sequence[AskedQuestion]) -> float:
    answered = _answered(questions)
    if not answered:
        return 0.0
    misses = sum(
        1
        for q in answered
        if not q.is_correct and q.difficulty in (DIFFICULTY_MIN, DIFFICULTY_MAX)
    )
    return misses / len(answered)


def confidence_score(questions: Sequence[AskedQuestion]) -> int:
    """Confidence in the placement, 0-100."""
    n = len(_answered(questions))
    if n == 0:
        return 0

    sample_factor = n / (n + CONFIDENCE_SAMPLE_CONSTANT)
    volatility_factor = 1 - VOLATILITY_WEIGHT * time_volatility(questions)
    boundary_factor = 1 - BOUNDARY_MISS_WEIGHT * boundary_miss_ratio(questions)

    raw = 100 * sample_factor * volatility_factor * boundary_factor
    return max(0, min(100, round_half_up(raw)))


def consistency_rating(questions: Sequence[AskedQuestion]) -> str:
    """Label for the variance of correctness across answers."""
    answered = _answered(questions)
    if len(answered) < MIN_ANSWERS_FOR_CONSISTENCY:
        return "unknown"

    variance = statistics.pvariance([1 if q.is_correct else 0 for q in answered])
    if variance < 0.1:
        return "very consistent"
    if variance < 0.2:
        return "consistent"
    if variance < 0.3:
        return "variable"
    return "inconsistent"


def build_learning_profile(questions: Sequence[AskedQuestion]) -> LearningProfile:
    """Speed, accuracy and pace labels. Missing answer times count as 30s."""
    if not questions:
        return LearningProfile(
            speed="moderate",
            accuracy="low",
            consistency="unknown",
            recommended_pace="standard",
        )

    avg_time = statistics.mean(
        q.time_spent_seconds
        if q.time_spent_seconds is not None
        else DEFAULT_TIME_SPENT_SECONDS
        for q in questions
    )
    accuracy = sum(1 for q in questions if q.is_correct) / len(questions)

    if avg_time < FAST_SECONDS:
        speed = "fast"
    elif avg_time < MODERATE_SECONDS:
        speed = "moderate"
    else:
        speed = "slow"

    if accuracy > HIGH_ACCURACY:
        accuracy_label = "high"
    elif accuracy > MEDIUM_ACCURACY:
        accuracy_label = "medium"
    else:
        accuracy_label = "low"

    pace = (
        "accelerated"
        if avg_time < ACCELERATED_PACE_SECONDS and accuracy > ACCELERATED_PACE_ACCURACY
        else "standard"
    )

    return LearningProfile(
        speed=speed,
        accuracy=accuracy_label,
        consistency=consistency_rating(questions),
        recommended_pace=pace,
    )


def build_subject_scores(
    questions: Sequence[AskedQuestion], subjects: Sequence[Subject]
) -> List[SubjectScore]:
    """One score per configured subject, from that subject's questions only."""
    scores = []
    for subject in subjects:
        subject_questions = [q for q in questions if q.subject == subject]
        correct = sum(1 for q in subject_questions if q.is_correct)
        score = score_percent(correct, len(subject_questions))
        scores.append(
            SubjectScore(
                subject=subject,
                score=score,
                recommended_level=level_for_score(score),
                correct_count=correct,
                total_count=len(subject_questions),
                strengths=[f"Strong in {subject.value}"]
                if score > STRENGTH_SCORE
                else [],
                weaknesses=[f"Needs improvement in {subject.value}"]
                if score < WEAKNESS_SCORE
                else [],
            )
        )
    return scores


def build_analysis(
    subject_scores: Sequence[SubjectScore], profile: LearningProfile
) -> PlacementAnalysis:
    strong = [s.subject for s in subject_scores if s.score >= STRONG_SUBJECT_SCORE]
    challenging = [
        s.subject for s in subject_scores if s.score < CHALLENGING_SUBJECT_SCORE
    ]

    recommendations = []
    if profile.speed == "fast" and profile.accuracy == "high":
        recommendations.append("Consider the accelerated curriculum")
        recommendations.append("You can handle challenging material")
    if challenging:
        names = ", ".join(s.value for s in challenging)
        recommendations.append(f"Focus on strengthening: {names}")
    if strong:
        names = ", ".join(s.value for s in strong)
        recommendations.append(f"Leverage your strengths in: {names}")

    return PlacementAnalysis(
        processing_style="Quick learner"
        if profile.speed == "fast"
        else "Methodical learner",
        strong_subjects=strong,
        challenging_areas=challenging,
        suggested_start_path="advanced"
        if len(strong) >= len(challenging)
        else "foundation",
        recommendations=recommendations,
    )


def score_session(
    questions: Sequence[AskedQuestion],
    subjects: Sequence[Subject],
    total_questions: Optional[int] = None,
) -> PlacementResults:
    """
    Compute results for a finished session.

    Args:
        questions: Asked questions, all answered
        subjects: Configured subjects, in order
        total_questions: Configured session length. Defaults to the number
            of asked questions.

    Returns:
        PlacementResults for the session
    """
    total = total_questions if total_questions is not None else len(questions)
    correct = sum(1 for q in questions if q.is_correct)
    overall = score_percent(correct, total)

    subject_scores = build_subject_scores(questions, subjects)
    profile = build_learning_profile(questions)

    return PlacementResults(
        overall_score=overall,
        recommended_level=level_for_score(overall),
        percentile=percentile_for_score(overall),
        confidence_score=confidence_score(questions),
        correct_count=correct,
        total_questions=total,
        subject_scores=subject_scores,
        learning_profile=profile,
        analysis=build_analysis(subject_scores, profile),
    )
