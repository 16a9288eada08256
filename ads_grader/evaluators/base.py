"""
Criterion evaluator contract and registry.

An evaluator is a pure function::

    (snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult

Rules every evaluator follows:
  - Bands are tested top-down; the first match wins and the last branch is
    an unconditional catch-all, so the function is total.
  - Boundaries use ``>=`` (a value on the boundary earns the better band)
    unless the metric is a "lower is better" rate, which uses ``<=``.
  - Ratios go through ``safe_ratio()``; a zero denominator yields 0.0.
  - No shared mutable state: evaluators may run in any order or in parallel.

Evaluators register themselves with ``@register(CriterionKey.X)``; the
category modules are imported by ``ads_grader.evaluators`` so importing that
package populates ``EVALUATOR_REGISTRY``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from ads_grader.exceptions import ConfigurationError
from ads_grader.models.grading import CriterionResult, Recommendation
from ads_grader.taxonomy.categories import CATEGORY_NAMES, CRITERION_CATEGORY, CriterionKey
from ads_grader.utils.numbers import clamp

if TYPE_CHECKING:
    from ads_grader.config import AppConfig
    from ads_grader.models.snapshot import MetricsSnapshot

Evaluator = Callable[["MetricsSnapshot", "AppConfig"], CriterionResult]

EVALUATOR_REGISTRY: dict[CriterionKey, Evaluator] = {}


def register(key: CriterionKey) -> Callable[[Evaluator], Evaluator]:
    """Decorator that records ``fn`` as the evaluator for ``key``.

    Raises:
        ConfigurationError: If ``key`` already has an evaluator.
    """

    def decorator(fn: Evaluator) -> Evaluator:
        if key in EVALUATOR_REGISTRY:
            raise ConfigurationError(
                f"Criterion '{key}' already has evaluator "
                f"{EVALUATOR_REGISTRY[key].__name__}; cannot register {fn.__name__}."
            )
        EVALUATOR_REGISTRY[key] = fn
        return fn

    return decorator


@dataclass
class Assessment:
    """Working state of one evaluator call, frozen into a ``CriterionResult``.

    Usage::

        a = Assessment.for_criterion(CriterionKey.REMARKETING)
        a.details["list_count"] = lists
        if lists >= 3:
            a.score = 90
        else:
            a.score = 20
            a.recommend("Create remarketing lists ...", 0.9)
        return a.result()
    """

    category: str
    score: float = 0.0
    details: dict[str, Any] = field(default_factory=dict)
    recommendations: list[Recommendation] = field(default_factory=list)

    @classmethod
    def for_criterion(cls, key: CriterionKey) -> "Assessment":
        return cls(category=CATEGORY_NAMES[CRITERION_CATEGORY[key]])

    def recommend(self, text: str, impact: float) -> None:
        self.recommendations.append(
            Recommendation(category=self.category, text=text, impact=impact)
        )

    def result(self) -> CriterionResult:
        return CriterionResult(
            score=clamp(float(self.score), 0.0, 100.0),
            details=dict(self.details),
            recommendations=tuple(self.recommendations),
        )


def pct(rate: float) -> str:
    """Format a fraction as a whole percentage: ``0.347`` → ``"35%"``."""
    return f"{rate * 100:.0f}%"
