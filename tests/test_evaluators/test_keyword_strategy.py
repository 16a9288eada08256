"""
Tests for evaluators/keyword_strategy.py.

What we test
------------
1. keyword_research: volume / long-tail bands; zero keywords stays finite
   and lands in the lowest band.
2. match_type_strategy: balanced, exact-light, broad-heavy and empty mixes.
3. brand_segmentation: dedicated brand campaigns vs mixed vs none.
4. keyword_optimization: low-quality / non-converting bands.
5. The whole keyword category scores finitely for an account with no
   keywords and no ad groups.
"""

from __future__ import annotations

import math

import pytest

from ads_grader.evaluators.keyword_strategy import (
    brand_segmentation,
    keyword_optimization,
    keyword_research,
    match_type_strategy,
)
from ads_grader.grader import AccountGrader
from ads_grader.taxonomy.categories import CategoryKey


def _lengths(short: int, medium: int, long: int) -> dict:
    return {"length_distribution": {"short": short, "medium": medium, "long": long}}


def _match(exact: int, phrase: int, broad: int) -> dict:
    return {"match_type_distribution": {"exact": exact, "phrase": phrase, "broad": broad}}


class TestKeywordResearch:
    def test_mid_volume_light_long_tail(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(structure={"keyword_count": 300}, keywords=_lengths(120, 100, 80))
        result = keyword_research(snap, config)
        assert result.details["long_tail_rate"] == pytest.approx(0.6)
        assert result.score == 75
        assert result.recommendations[0].impact == pytest.approx(0.6)

    def test_moderate_volume(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(structure={"keyword_count": 150}, keywords=_lengths(150, 0, 0))
        assert keyword_research(snap, config).score == 60

    def test_zero_keywords(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(structure={"keyword_count": 0}, keywords=_lengths(0, 0, 0))
        result = keyword_research(snap, config)
        assert result.score == 40
        assert result.details["long_tail_rate"] == 0.0
        assert result.recommendations[0].impact == pytest.approx(0.8)


class TestMatchTypeStrategy:
    def test_exact_light(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(keywords=_match(25, 40, 35))
        result = match_type_strategy(snap, config)
        assert result.score == 75
        assert "Exact match" in result.recommendations[0].text

    def test_broad_heavy(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(keywords=_match(10, 10, 80))
        result = match_type_strategy(snap, config)
        assert result.score == 60
        assert len(result.recommendations) == 2

    def test_no_keywords_scores_zero(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(keywords=_match(0, 0, 0))
        result = match_type_strategy(snap, config)
        assert result.score == 0
        assert result.recommendations == ()


class TestBrandSegmentation:
    def test_brand_heavy_account(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(keywords={"brand_keyword_rate": 0.6})
        assert brand_segmentation(snap, config).score == 75

    def test_brand_mixed_into_generic(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(keywords={"has_brand_campaigns": False, "brand_keyword_rate": 0.1})
        assert brand_segmentation(snap, config).score == 60

    def test_no_brand_terms(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(keywords={"has_brand_campaigns": False, "brand_keyword_rate": 0.0})
        result = brand_segmentation(snap, config)
        assert result.score == 50
        assert result.recommendations[0].impact == pytest.approx(0.6)


class TestKeywordOptimization:
    @pytest.mark.parametrize(
        "low_quality, non_converting, expected",
        [(0.1, 0.2, 90), (0.15, 0.25, 75), (0.1, 0.35, 50), (0.3, 0.1, 50)],
    )
    def test_bands(self, low_quality, non_converting, expected, snapshot_factory, config) -> None:
        snap = snapshot_factory(
            keywords={"low_quality_keyword_rate": low_quality, "non_converting_keyword_rate": non_converting}
        )
        assert keyword_optimization(snap, config).score == expected

    def test_both_problems_yield_two_recommendations(self, snapshot_factory, config) -> None:
        snap = snapshot_factory(
            keywords={"low_quality_keyword_rate": 0.4, "non_converting_keyword_rate": 0.5}
        )
        impacts = [r.impact for r in keyword_optimization(snap, config).recommendations]
        assert impacts == [0.8, 0.7]


def test_keyword_category_finite_without_keywords_or_ad_groups(snapshot_factory) -> None:
    snap = snapshot_factory(
        structure={"ad_group_count": 0, "keyword_count": 0, "duplicate_keyword_count": 0},
        keywords={**_lengths(0, 0, 0), **_match(0, 0, 0)},
    )
    result = AccountGrader().grade(snap)
    category = result.category_results[CategoryKey.KEYWORD_STRATEGY]
    assert math.isfinite(category.score)
    assert 0.0 <= category.score <= 100.0
    assert category.excluded_criteria == ()
