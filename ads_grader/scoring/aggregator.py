"""
Category aggregation: criterion results → one ``CategoryResult``.

Score formula
-------------
    score = Σ(criterion.score × criterion.weight) / Σ(criterion.weight)

taken over the criteria PRESENT in the result mapping only.  A criterion
whose evaluator was skipped or faulted is left out of both numerator and
denominator; it is not counted as a zero.

When no declared criterion is present the denominator is 0.  The category
then scores 0, every criterion is listed in ``excluded_criteria``, and a
warning is logged; the orchestrator also records it on the run result.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Mapping, Optional

from ads_grader.models.grading import CategoryResult, CriterionResult, Recommendation
from ads_grader.scoring.grade_mapper import letter_for
from ads_grader.taxonomy.categories import CategoryDefinition, CriterionKey
from ads_grader.utils.numbers import clamp

if TYPE_CHECKING:
    from ads_grader.config import GradeThresholds

logger = logging.getLogger(__name__)


def weighted_mean(pairs: Iterable[tuple[float, float]]) -> Optional[float]:
    """Weighted mean of ``(value, weight)`` pairs.

    Returns:
        The mean clamped to [0, 100], or ``None`` if the total weight is 0.
    """
    numerator = 0.0
    denominator = 0.0
    for value, weight in pairs:
        numerator += value * weight
        denominator += weight
    if denominator <= 0:
        return None
    return clamp(numerator / denominator, 0.0, 100.0)


def aggregate_category(
    definition: CategoryDefinition,
    results: Mapping[CriterionKey, CriterionResult],
    thresholds: "GradeThresholds",
) -> CategoryResult:
    """Roll criterion results up into a category score and grade.

    Args:
        definition: The category being aggregated.
        results:    Criterion results keyed by ``CriterionKey``.  Keys the
                    category does not declare are ignored.
        thresholds: Grade boundaries for the category letter.

    Returns:
        ``CategoryResult`` with criteria and recommendations in declaration
        order.
    """
    present = [c for c in definition.criteria if c.key in results]
    excluded = tuple(c.key for c in definition.criteria if c.key not in results)

    stray = set(results) - set(definition.criterion_keys)
    if stray:
        logger.warning(
            "Ignoring results for criteria not declared in %s: %s",
            definition.name, sorted(stray),
        )

    score = weighted_mean((results[c.key].score, c.weight) for c in present)
    if score is None:
        logger.warning(
            "Category %s has no evaluated criteria; scoring it 0 and excluding it",
            definition.name,
        )
        score = 0.0

    recommendations: list[Recommendation] = []
    for crit in present:
        recommendations.extend(results[crit.key].recommendations)

    return CategoryResult(
        key=definition.key,
        name=definition.name,
        weight=definition.weight,
        score=score,
        letter=letter_for(score, thresholds),
        criteria={c.key: results[c.key] for c in present},
        recommendations=tuple(recommendations),
        excluded_criteria=excluded,
    )
