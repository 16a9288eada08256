"""
Score → letter grade mapping.

Used identically for category grades and the overall grade.  Boundaries are
inclusive on the lower bound: with default thresholds a score of exactly
80.0 is a B, 79.999 is a C.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ads_grader.models.grading import Grade

if TYPE_CHECKING:
    from ads_grader.config import GradeThresholds


def letter_for(score: float, thresholds: "GradeThresholds") -> Grade:
    """Return the letter grade for a 0–100 score.

    Args:
        score:      Numeric score.  Values outside [0, 100] still map
                    (above 100 → A, below 0 → F).
        thresholds: ``AppConfig.grade_thresholds``.

    Returns:
        ``Grade`` member.
    """
    if score >= thresholds.a:
        return Grade.A
    if score >= thresholds.b:
        return Grade.B
    if score >= thresholds.c:
        return Grade.C
    if score >= thresholds.d:
        return Grade.D
    return Grade.F
