from __future__ import annotations

from enum import Enum


class ScoreTier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


_INTERPRETATIONS: tuple[tuple[float, str], ...] = (
    (90, "Exceptional! Your resume stands out from the competition."),
    (80, "Excellent! Your resume is well-aligned with market standards."),
    (70, "Good! Your resume has strong elements with minor improvements needed."),
    (60, "Fair. Your resume has some good points but needs improvement."),
    (40, "Needs Improvement. Several areas require attention."),
)
_POOR = "Poor. Significant improvements needed to be competitive."


def interpret_score(score: float) -> str:
    for floor, text in _INTERPRETATIONS:
        if score >= floor:
            return text
    return _POOR


def score_tier(score: float) -> ScoreTier:
    if score >= 80:
        return ScoreTier.HIGH
    if score >= 60:
        return ScoreTier.MEDIUM
    return ScoreTier.LOW
