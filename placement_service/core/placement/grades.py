"""
Mapping from placement level to the curriculum grade label.
"""

# (highest level in band, grade)
LEVEL_GRADES = (
    (3, "A1"),
    (6, "A2"),
    (9, "B1"),
    (12, "B2"),
    (15, "C1"),
    (18, "C2"),
    (19, "Expert"),
    (20, "Master"),
)

MIN_LEVEL = 1
MAX_LEVEL = 20


def level_to_grade(level: int) -> str:
    """
    Grade label for a level. Levels outside 1-20 are clamped first.

    >>> level_to_grade(5)
    'A2'
    """
    level = max(MIN_LEVEL, min(MAX_LEVEL, level))
    for upper, grade in LEVEL_GRADES:
        if level <= upper:
            return grade
    return LEVEL_GRADES[-1][1]


def accessible_levels(level_cap: int) -> list[int]:
    """Levels a user may open once placed at ``level_cap``."""
    level_cap = max(MIN_LEVEL, min(MAX_LEVEL, level_cap))
    return list(range(MIN_LEVEL, level_cap + 1))
