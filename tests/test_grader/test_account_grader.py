"""
Tests for grader.py — AccountGrader orchestration.

What we test
------------
1. Preconditions: None, a non-snapshot, and an empty snapshot are rejected
   with SnapshotPreconditionError before any evaluator runs.
2. Constant evaluators: all-100 → overall 100.0 / A; all-0 → 0.0 / F.
3. Healthy account: top-band scores, A grade, no recommendations or warnings.
4. Evaluator faults:
     - exclude mode: criterion dropped from its category, warning recorded,
       category mean over the remaining criteria;
     - abort mode: EvaluatorFaultError naming criterion and category;
     - every evaluator faulting: GradingError;
     - fault log records carry customer_id, category and criterion.
5. Empty category: excluded from the overall mean, warning recorded.
6. A non-CriterionResult return value counts as a fault.
7. Construction: registry/definition mismatches and bad weights raise
   ConfigurationError.
8. Prioritization through the grader: equal impacts keep category order.
9. Determinism: repeated runs dump identical JSON; a thread pool yields
   the same result as a sequential run.
"""

from __future__ import annotations

import logging

import pytest

from ads_grader.config import AppConfig, GradingConfig
from ads_grader.exceptions import (
    ConfigurationError,
    EvaluatorFaultError,
    GradingError,
    SnapshotPreconditionError,
)
from ads_grader.grader import AccountGrader, grade_account
from ads_grader.models.grading import CriterionResult, Grade, Recommendation
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import (
    CategoryDefinition,
    CategoryKey,
    CriterionDefinition,
    CriterionKey,
    build_category_definitions,
)

_K = CriterionKey


def _config(**grading) -> AppConfig:
    return AppConfig(grading=GradingConfig(**grading))


def _boom(snapshot, config) -> CriterionResult:
    raise ZeroDivisionError("division by zero")


def _fixed(score: float, *recs: Recommendation):
    def _evaluator(snapshot, config) -> CriterionResult:
        return CriterionResult(score=score, recommendations=recs)

    return _evaluator


# ── Preconditions ─────────────────────────────────────────────────────────────


class TestPreconditions:
    def test_none_snapshot(self) -> None:
        with pytest.raises(SnapshotPreconditionError, match="No metrics snapshot"):
            AccountGrader().grade(None)

    def test_wrong_type(self) -> None:
        with pytest.raises(SnapshotPreconditionError, match="MetricsSnapshot"):
            AccountGrader().grade({"structure": {"campaign_count": 3}})

    def test_empty_snapshot(self) -> None:
        with pytest.raises(SnapshotPreconditionError, match="empty"):
            AccountGrader().grade(MetricsSnapshot())

    def test_no_evaluator_called_for_rejected_snapshot(self, stub_registry) -> None:
        calls: list[str] = []

        def _spy(snapshot, config) -> CriterionResult:
            calls.append("called")
            return CriterionResult(score=50)

        registry = {key: _spy for key in stub_registry()}
        with pytest.raises(SnapshotPreconditionError):
            AccountGrader(evaluators=registry).grade(MetricsSnapshot())
        assert calls == []


# ── Constant evaluators ───────────────────────────────────────────────────────


class TestConstantScores:
    def test_all_perfect(self, stub_registry, healthy_snapshot) -> None:
        result = AccountGrader(evaluators=stub_registry(100.0)).grade(healthy_snapshot)
        assert result.overall_grade.score == pytest.approx(100.0)
        assert result.overall_grade.letter == Grade.A
        assert all(c.letter == Grade.A for c in result.category_results.values())
        assert result.warnings == ()

    def test_all_zero(self, stub_registry, healthy_snapshot) -> None:
        result = AccountGrader(evaluators=stub_registry(0.0)).grade(healthy_snapshot)
        assert result.overall_grade.score == 0.0
        assert result.overall_grade.letter == Grade.F

    def test_minimal_snapshot_accepted(self, stub_registry) -> None:
        snap = MetricsSnapshot(structure={"campaign_count": 1})
        result = AccountGrader(evaluators=stub_registry(70.0)).grade(snap)
        assert result.overall_grade.letter == Grade.C


# ── Built-in evaluators ───────────────────────────────────────────────────────


class TestBuiltinEvaluators:
    def test_healthy_account(self, healthy_snapshot) -> None:
        result = AccountGrader().grade(healthy_snapshot)
        assert result.overall_grade.letter == Grade.A
        assert result.overall_grade.score >= 90.0
        assert result.prioritized_recommendations == ()
        assert result.warnings == ()
        assert list(result.category_results) == list(CategoryKey)

    def test_category_weights_come_from_config(self, healthy_snapshot) -> None:
        result = AccountGrader().grade(healthy_snapshot)
        weights = {k: c.weight for k, c in result.category_results.items()}
        assert weights[CategoryKey.CONVERSION_TRACKING] == 15.0
        assert sum(weights.values()) == pytest.approx(100.0)

    def test_sparse_account_gets_recommendations(self) -> None:
        snap = MetricsSnapshot(structure={"campaign_count": 2, "ad_group_count": 3})
        result = grade_account(snap)
        recs = result.prioritized_recommendations
        assert recs
        impacts = [r.impact for r in recs]
        assert impacts == sorted(impacts, reverse=True)
        assert recs[0].impact == pytest.approx(1.0)
        assert result.overall_grade.letter == Grade.F

    def test_category_recommendations_not_aliased(self, snapshot_factory) -> None:
        snap = snapshot_factory(conversion_tracking={"conversion_action_count": 0})
        result = AccountGrader().grade(snap)
        category = result.category_results[CategoryKey.CONVERSION_TRACKING]
        assert category.recommendations
        assert result.prioritized_recommendations is not category.recommendations


# ── Evaluator faults ──────────────────────────────────────────────────────────


class TestEvaluatorFaults:
    def test_exclude_mode_drops_criterion(self, stub_registry, healthy_snapshot) -> None:
        registry = stub_registry(100.0)
        registry[_K.GOAL_ALIGNED_BIDDING] = _boom
        registry[_K.AUTOMATED_BIDDING] = _fixed(40.0)

        result = AccountGrader(_config(), evaluators=registry).grade(healthy_snapshot)
        bidding = result.category_results[CategoryKey.BIDDING_STRATEGY]

        assert _K.GOAL_ALIGNED_BIDDING not in bidding.criteria
        assert bidding.excluded_criteria == (_K.GOAL_ALIGNED_BIDDING,)
        # remaining weights: automated 25, adjustments 20, budget 20
        assert bidding.score == pytest.approx((40 * 25 + 100 * 20 + 100 * 20) / 65)

        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.kind == "evaluator_fault"
        assert warning.category == CategoryKey.BIDDING_STRATEGY
        assert warning.criterion == _K.GOAL_ALIGNED_BIDDING
        assert "ZeroDivisionError" in warning.message

    def test_fault_log_carries_grading_context(self, stub_registry, healthy_snapshot, caplog) -> None:
        registry = stub_registry(100.0)
        registry[_K.GOAL_ALIGNED_BIDDING] = _boom

        with caplog.at_level(logging.WARNING, logger="ads_grader.grader"):
            AccountGrader(_config(), evaluators=registry).grade(healthy_snapshot)

        faults = [r for r in caplog.records if getattr(r, "criterion", "") == "goal_aligned_bidding"]
        assert len(faults) == 1
        assert faults[0].customer_id == healthy_snapshot.account.customer_id
        assert faults[0].category == "biddingstrategy"
        assert faults[0].exc_info is not None

    def test_abort_mode_raises(self, stub_registry, healthy_snapshot) -> None:
        registry = stub_registry(100.0)
        registry[_K.GOAL_ALIGNED_BIDDING] = _boom
        grader = AccountGrader(_config(on_evaluator_error="abort"), evaluators=registry)
        with pytest.raises(EvaluatorFaultError) as excinfo:
            grader.grade(healthy_snapshot)
        assert excinfo.value.criterion == _K.GOAL_ALIGNED_BIDDING
        assert excinfo.value.category == CategoryKey.BIDDING_STRATEGY
        assert isinstance(excinfo.value.__cause__, ZeroDivisionError)

    def test_wrong_return_type_is_a_fault(self, stub_registry, healthy_snapshot) -> None:
        registry = stub_registry(100.0)
        registry[_K.REMARKETING] = lambda snapshot, config: 95.0
        result = AccountGrader(evaluators=registry).grade(healthy_snapshot)
        assert result.warnings[0].criterion == _K.REMARKETING
        assert "TypeError" in result.warnings[0].message

    def test_empty_category_excluded_from_overall(self, stub_registry, healthy_snapshot) -> None:
        registry = stub_registry(80.0)
        for key in (_K.REMARKETING, _K.CUSTOMER_MATCH, _K.IN_MARKET_AFFINITY, _K.AUDIENCE_PERSONALIZATION):
            registry[key] = _boom

        result = AccountGrader(evaluators=registry).grade(healthy_snapshot)
        audience = result.category_results[CategoryKey.AUDIENCE_STRATEGY]

        assert audience.evaluated is False
        assert audience.score == 0.0
        # a zero-scored empty category must not drag the overall below 80
        assert result.overall_grade.score == pytest.approx(80.0)
        kinds = [w.kind for w in result.warnings]
        assert kinds.count("evaluator_fault") == 4
        assert kinds.count("empty_category") == 1

    def test_every_evaluator_faulting_raises(self, stub_registry, healthy_snapshot) -> None:
        registry = {key: _boom for key in stub_registry()}
        with pytest.raises(GradingError):
            AccountGrader(evaluators=registry).grade(healthy_snapshot)


# ── Construction ──────────────────────────────────────────────────────────────


class TestConstruction:
    def test_missing_evaluator(self, stub_registry) -> None:
        registry = stub_registry()
        del registry[_K.AB_TESTING]
        with pytest.raises(ConfigurationError, match="missing"):
            AccountGrader(evaluators=registry)

    def test_undeclared_evaluator(self, stub_registry) -> None:
        definitions = build_category_definitions(AppConfig().category_weights)
        trimmed = definitions[0]
        trimmed = CategoryDefinition(
            key=trimmed.key,
            name=trimmed.name,
            weight=100.0,
            criteria=trimmed.criteria,
        )
        with pytest.raises(ConfigurationError, match="undeclared"):
            AccountGrader(evaluators=stub_registry(), definitions=[trimmed])

    def test_bad_definition_weights(self, stub_registry) -> None:
        definition = CategoryDefinition(
            key=CategoryKey.QUALITY_SCORE,
            name="Quality Score",
            weight=60.0,
            criteria=(CriterionDefinition(_K.AD_RELEVANCE, "Ad relevance", 100.0),),
        )
        with pytest.raises(ConfigurationError, match="sum to"):
            AccountGrader(evaluators={_K.AD_RELEVANCE: _fixed(50.0)}, definitions=[definition])

    def test_custom_single_category(self, healthy_snapshot) -> None:
        definition = CategoryDefinition(
            key=CategoryKey.QUALITY_SCORE,
            name="Quality Score",
            weight=100.0,
            criteria=(
                CriterionDefinition(_K.AD_RELEVANCE, "Ad relevance", 50.0),
                CriterionDefinition(_K.EXPECTED_CTR, "Expected CTR", 50.0),
            ),
        )
        grader = AccountGrader(
            evaluators={_K.AD_RELEVANCE: _fixed(90.0), _K.EXPECTED_CTR: _fixed(70.0)},
            definitions=[definition],
        )
        result = grader.grade(healthy_snapshot)
        assert result.overall_grade.score == pytest.approx(80.0)
        assert result.overall_grade.letter == Grade.B


# ── Prioritization & determinism ──────────────────────────────────────────────


class TestOrderingAndDeterminism:
    def test_equal_impact_keeps_category_order(self, stub_registry, healthy_snapshot) -> None:
        bidding_rec = Recommendation(category="Bidding Strategy", text="bid", impact=0.8)
        keyword_rec = Recommendation(category="Keyword Strategy", text="kw", impact=0.8)
        registry = stub_registry(90.0)
        registry[_K.AUTOMATED_BIDDING] = _fixed(50.0, bidding_rec)
        registry[_K.KEYWORD_RESEARCH] = _fixed(50.0, keyword_rec)

        result = AccountGrader(evaluators=registry).grade(healthy_snapshot)
        assert [r.category for r in result.prioritized_recommendations] == [
            "Keyword Strategy",
            "Bidding Strategy",
        ]

    def test_repeat_runs_dump_identical_json(self, snapshot_factory) -> None:
        snap = snapshot_factory(
            conversion_tracking={"conversion_action_count": 1},
            ads={"rsa_rate": 0.5},
        )
        grader = AccountGrader()
        assert grader.grade(snap).model_dump_json() == grader.grade(snap).model_dump_json()

    def test_parallel_matches_sequential(self, snapshot_factory) -> None:
        snap = snapshot_factory(
            keywords={"has_brand_campaigns": False},
            bidding={"budget_lost_impression_share": 0.4},
            landing_page={"is_mobile_friendly": False},
        )
        sequential = AccountGrader(_config(max_workers=1)).grade(snap)
        parallel = AccountGrader(_config(max_workers=4)).grade(snap)
        assert parallel.model_dump_json() == sequential.model_dump_json()

    def test_parallel_fault_handling_matches(self, stub_registry, healthy_snapshot) -> None:
        registry = stub_registry(75.0)
        registry[_K.MESSAGE_MATCH] = _boom
        sequential = AccountGrader(_config(max_workers=1), evaluators=registry).grade(healthy_snapshot)
        parallel = AccountGrader(_config(max_workers=8), evaluators=registry).grade(healthy_snapshot)
        assert parallel == sequential
