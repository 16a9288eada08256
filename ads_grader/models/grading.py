"""
Grading output models.

All models are frozen and carry no timestamps or run identifiers, so grading
the same snapshot twice yields results whose ``model_dump_json()`` output is
byte-identical.

``Grade`` is totally ordered A > B > C > D > F via ``Grade.rank``; comparing
the enum values as strings would order them the wrong way round.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ads_grader.taxonomy.categories import CategoryKey, CriterionKey

Score = Annotated[float, Field(ge=0.0, le=100.0)]


class Grade(StrEnum):
    """Letter grade derived from a 0–100 score."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"

    @property
    def rank(self) -> int:
        """Ordinal for comparisons: A=4 ... F=0."""
        return _GRADE_RANK[self]


_GRADE_RANK: dict[Grade, int] = {Grade.A: 4, Grade.B: 3, Grade.C: 2, Grade.D: 1, Grade.F: 0}


class Severity(StrEnum):
    """Display label for a recommendation's impact.  Never used for sorting."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


def severity_for(impact: float) -> Severity:
    """Map an impact in [0, 1] to its display label.

    ≥0.9 → Critical, ≥0.7 → High, ≥0.5 → Medium, otherwise Low.
    """
    if impact >= 0.9:
        return Severity.CRITICAL
    if impact >= 0.7:
        return Severity.HIGH
    if impact >= 0.5:
        return Severity.MEDIUM
    return Severity.LOW


class Recommendation(BaseModel):
    """A self-contained remediation hint.

    Attributes:
        category: Display name of the category whose evaluator authored it.
        text:     Human-readable advice, including the figures it refers to.
        impact:   Hand-tuned leverage estimate in [0, 1]; the sort key.
    """

    model_config = ConfigDict(frozen=True)

    category: str
    text: str
    impact: float

    @field_validator("impact")
    @classmethod
    def validate_impact(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"impact must be in [0, 1], got {v}.")
        return v

    @property
    def severity(self) -> Severity:
        return severity_for(self.impact)


class CriterionResult(BaseModel):
    """Output of one criterion evaluator.

    ``details`` holds the raw and derived figures that justify the score.
    It is for reporting only and never feeds back into scoring.
    """

    model_config = ConfigDict(frozen=True)

    score: Score
    details: dict[str, Any] = {}
    recommendations: tuple[Recommendation, ...] = ()


class CategoryResult(BaseModel):
    """Weighted roll-up of one category's criteria.

    Attributes:
        key:               Stable category key.
        name:              Display name.
        weight:            Category share of the overall score.
        score:             Weighted mean over the evaluated criteria.
        letter:            Grade for ``score``.
        criteria:          Evaluated criteria in declaration order.
        recommendations:   Concatenated criterion recommendations, in
                           declaration order.
        excluded_criteria: Declared criteria with no result (skipped or
                           faulted).  Not counted in ``score``.
    """

    model_config = ConfigDict(frozen=True)

    key: CategoryKey
    name: str
    weight: float
    score: Score
    letter: Grade
    criteria: dict[CriterionKey, CriterionResult]
    recommendations: tuple[Recommendation, ...] = ()
    excluded_criteria: tuple[CriterionKey, ...] = ()

    @property
    def evaluated(self) -> bool:
        """False when no criterion produced a result; ``score`` is then a placeholder 0."""
        return bool(self.criteria)


class OverallGrade(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: Score
    letter: Grade


WarningKind = Literal["evaluator_fault", "empty_category"]


class GradingWarning(BaseModel):
    """A recoverable problem recorded during an otherwise complete run."""

    model_config = ConfigDict(frozen=True)

    kind: WarningKind
    category: CategoryKey
    criterion: Optional[CriterionKey] = None
    message: str


class GradingResult(BaseModel):
    """Complete output of one grading run, handed to reporting collaborators.

    Attributes:
        overall_grade:               Weighted mean of category scores by category
                                     weight.  A category with no evaluated
                                     criterion (``evaluated`` is False) is left
                                     out and the remaining weights renormalised,
                                     rather than counted as 0; each such
                                     category has an ``empty_category`` warning.
                                     With every category evaluated this is the
                                     plain weighted mean of all ten.
        category_results:            Keyed by ``CategoryKey`` in declaration order.
        prioritized_recommendations: All recommendations, deduplicated and
                                     sorted by impact (stable).
        warnings:                    Excluded criteria and empty categories.
    """

    model_config = ConfigDict(frozen=True)

    overall_grade: OverallGrade
    category_results: dict[CategoryKey, CategoryResult]
    prioritized_recommendations: tuple[Recommendation, ...] = ()
    warnings: tuple[GradingWarning, ...] = ()
