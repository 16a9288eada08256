"""
Account grading orchestrator.

``AccountGrader`` runs every category's criterion evaluators over one
``MetricsSnapshot``, aggregates them into category grades and an overall
grade, and prioritizes the recommendations.  It is the only component that
sees every category, and it treats each category as a black box: it never
special-cases a category's criteria.

Run flow
--------
  1. Precondition: reject a missing or empty snapshot
     (``SnapshotPreconditionError``).
  2. For each ``CategoryDefinition`` (sequentially, or on a thread pool when
     ``grading.max_workers > 1``):
       - call each criterion evaluator;
       - on an evaluator exception apply ``grading.on_evaluator_error``:
         ``exclude`` records a warning and drops the criterion,
         ``abort`` raises ``EvaluatorFaultError``;
       - aggregate via ``aggregate_category()``.
  3. Overall score = weighted mean of category scores over categories with at
     least one evaluated criterion.  Empty categories are recorded as
     warnings; if every category is empty the run fails with ``GradingError``.
  4. Prioritize the union of all recommendation lists.

Results are assembled in category declaration order whether or not a thread
pool is used, so parallel and sequential runs produce identical output.

Configuration problems (weights, missing evaluators) are detected when the
grader is constructed, before any snapshot is scored.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from ads_grader.config import AppConfig
from ads_grader.evaluators import default_registry
from ads_grader.evaluators.base import Evaluator
from ads_grader.exceptions import (
    ConfigurationError,
    EvaluatorFaultError,
    GradingError,
    SnapshotPreconditionError,
)
from ads_grader.models.grading import (
    CategoryResult,
    CriterionResult,
    GradingResult,
    GradingWarning,
    OverallGrade,
)
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.scoring.aggregator import aggregate_category, weighted_mean
from ads_grader.scoring.grade_mapper import letter_for
from ads_grader.scoring.prioritizer import prioritize
from ads_grader.taxonomy.categories import (
    CategoryDefinition,
    CriterionKey,
    build_category_definitions,
    validate_definitions,
)
from ads_grader.utils.logging import log_context

logger = logging.getLogger(__name__)


@dataclass
class _CategoryOutcome:
    result: CategoryResult
    warnings: list[GradingWarning] = field(default_factory=list)


class AccountGrader:
    """Grades metrics snapshots against one fixed configuration.

    A grader holds no per-run state; one instance can grade many snapshots,
    including from several threads at once.

    Args:
        config:      Grading configuration.  Defaults to ``AppConfig()``.
        evaluators:  Criterion → evaluator mapping.  Defaults to the built-in
                     registry.  Must cover exactly the declared criteria.
        definitions: Category definitions.  Defaults to the built-in catalogue
                     weighted by ``config.category_weights``.

    Raises:
        ConfigurationError: If weights do not sum to 100 or the evaluator
            mapping does not match the declared criteria.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        evaluators: Optional[Mapping[CriterionKey, Evaluator]] = None,
        definitions: Optional[Sequence[CategoryDefinition]] = None,
    ) -> None:
        self.config = config if config is not None else AppConfig()

        if definitions is None:
            self.definitions = build_category_definitions(self.config.category_weights)
        else:
            self.definitions = tuple(definitions)
            validate_definitions(self.definitions)

        self.evaluators: dict[CriterionKey, Evaluator] = (
            dict(evaluators) if evaluators is not None else default_registry()
        )
        self._check_evaluators()

    # ── Public API ────────────────────────────────────────────────────────────

    def grade(self, snapshot: Optional[MetricsSnapshot]) -> GradingResult:
        """Grade one account snapshot.

        Args:
            snapshot: Normalized account metrics.

        Returns:
            Complete ``GradingResult``; recoverable problems are listed in
            ``result.warnings``.

        Raises:
            SnapshotPreconditionError: If ``snapshot`` is None, not a
                ``MetricsSnapshot``, or carries no data.
            EvaluatorFaultError: If an evaluator fails in ``abort`` mode.
            GradingError: If no category could be scored.
        """
        self._check_snapshot(snapshot)

        account = snapshot.account.name or snapshot.account.customer_id or "<unnamed>"
        ctx = log_context(snapshot.account.customer_id)
        logger.info(
            "Grading account %s across %d categories", account, len(self.definitions), extra=ctx,
        )

        outcomes = self._run_categories(snapshot)
        categories = [o.result for o in outcomes]
        warnings = [w for o in outcomes for w in o.warnings]

        evaluated = [c for c in categories if c.evaluated]
        overall_score = weighted_mean((c.score, c.weight) for c in evaluated)
        if overall_score is None:
            raise GradingError(
                "No category produced a score; every criterion was excluded. "
                f"Warnings: {[w.message for w in warnings]}"
            )

        overall = OverallGrade(
            score=overall_score,
            letter=letter_for(overall_score, self.config.grade_thresholds),
        )
        recommendations = prioritize((c.name, c.recommendations) for c in categories)

        logger.info(
            "Graded %s: overall %.1f (%s), %d recommendations, %d warnings",
            account, overall.score, overall.letter, len(recommendations), len(warnings),
            extra=ctx,
        )
        return GradingResult(
            overall_grade=overall,
            category_results={c.key: c for c in categories},
            prioritized_recommendations=recommendations,
            warnings=tuple(warnings),
        )

    # ── Internals ─────────────────────────────────────────────────────────────

    def _check_evaluators(self) -> None:
        declared = {key for d in self.definitions for key in d.criterion_keys}
        missing = sorted(declared - set(self.evaluators))
        stray = sorted(set(self.evaluators) - declared)
        if missing or stray:
            raise ConfigurationError(
                "Evaluator registry does not match category definitions: "
                f"missing={missing}, undeclared={stray}."
            )

    @staticmethod
    def _check_snapshot(snapshot: Optional[MetricsSnapshot]) -> None:
        if snapshot is None:
            raise SnapshotPreconditionError(
                "No metrics snapshot supplied; refusing to grade an account without data."
            )
        if not isinstance(snapshot, MetricsSnapshot):
            raise SnapshotPreconditionError(
                f"Expected a MetricsSnapshot, got {type(snapshot).__name__}."
            )
        if snapshot.is_empty():
            raise SnapshotPreconditionError(
                "Metrics snapshot is empty; the collector produced no data for this account."
            )

    def _run_categories(self, snapshot: MetricsSnapshot) -> list[_CategoryOutcome]:
        workers = min(self.config.grading.max_workers, len(self.definitions))
        if workers <= 1:
            return [self._evaluate_category(d, snapshot) for d in self.definitions]

        logger.debug("Evaluating categories on %d worker threads", workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="grader") as pool:
            futures = [pool.submit(self._evaluate_category, d, snapshot) for d in self.definitions]
            return [f.result() for f in futures]

    def _evaluate_category(
        self,
        definition: CategoryDefinition,
        snapshot: MetricsSnapshot,
    ) -> _CategoryOutcome:
        results: dict[CriterionKey, CriterionResult] = {}
        warnings: list[GradingWarning] = []
        customer_id = snapshot.account.customer_id

        for crit in definition.criteria:
            evaluator = self.evaluators[crit.key]
            try:
                result = evaluator(snapshot, self.config)
                if not isinstance(result, CriterionResult):
                    raise TypeError(
                        f"evaluator returned {type(result).__name__}, expected CriterionResult"
                    )
            except Exception as exc:
                if self.config.grading.on_evaluator_error == "abort":
                    raise EvaluatorFaultError(crit.key, definition.key, exc) from exc
                logger.warning(
                    "Evaluator for %s / %s failed; excluding it from the category score",
                    definition.name, crit.name, exc_info=True,
                    extra=log_context(customer_id, definition.key, crit.key),
                )
                warnings.append(GradingWarning(
                    kind="evaluator_fault",
                    category=definition.key,
                    criterion=crit.key,
                    message=f"{crit.name}: {type(exc).__name__}: {exc}",
                ))
                continue

            logger.debug(
                "%s / %s scored %.1f", definition.name, crit.name, result.score,
                extra=log_context(customer_id, definition.key, crit.key),
            )
            results[crit.key] = result

        category = aggregate_category(definition, results, self.config.grade_thresholds)
        if not category.evaluated:
            logger.warning(
                "%s has no evaluated criteria; excluding it from the overall grade",
                definition.name,
                extra=log_context(customer_id, definition.key),
            )
            warnings.append(GradingWarning(
                kind="empty_category",
                category=definition.key,
                message=(
                    f"{definition.name} has no evaluated criteria and is excluded "
                    "from the overall grade."
                ),
            ))
        return _CategoryOutcome(result=category, warnings=warnings)


def grade_account(snapshot: MetricsSnapshot, config: Optional[AppConfig] = None) -> GradingResult:
    """Grade ``snapshot`` with a one-off ``AccountGrader``."""
    return AccountGrader(config).grade(snapshot)
