"""
Shared pytest fixtures for the Ads Account Grader test suite.

Provides:
  - ``config``: default ``AppConfig`` (built-in defaults, no TOML/env).
  - ``healthy_snapshot``: an account that lands in the top band of every
    criterion and therefore produces no recommendations.
  - ``snapshot_factory``: builds a ``MetricsSnapshot`` from the healthy
    payload with per-section overrides, e.g.
    ``snapshot_factory(structure={"keyword_count": 0})``.
  - ``stub_registry``: evaluator mapping where every criterion returns a
    fixed score, for orchestrator tests that must not depend on band logic.
"""

from __future__ import annotations

import copy
from typing import Any, Callable

import pytest

from ads_grader.config import AppConfig
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey


HEALTHY_PAYLOAD: dict[str, Any] = {
    "schema_version": 1,
    "account": {
        "name": "Acme Outdoor",
        "customer_id": "123-456-7890",
        "currency_code": "USD",
        "is_ecommerce": True,
    },
    "performance": {
        "impressions": 100_000,
        "clicks": 4_000,          # CTR 4.0%
        "cost": 8_000.0,          # CPC 2.00
        "conversions": 200.0,     # CVR 5.0%
        "conversion_value": 40_000.0,
    },
    "structure": {
        "campaign_count": 10,
        "ad_group_count": 50,
        "keyword_count": 600,
        "duplicate_keyword_count": 10,
    },
    "campaigns": [
        {"name": "North - Tents", "channel_type": "SEARCH"},
        {"name": "North - Boots", "channel_type": "SEARCH"},
        {"name": "South - Tents", "channel_type": "SEARCH"},
        {"name": "South - Boots", "channel_type": "SEARCH"},
        {"name": "East - Tents", "channel_type": "SEARCH"},
        {"name": "East - Boots", "channel_type": "SEARCH"},
        {"name": "West - Tents", "channel_type": "SHOPPING"},
        {"name": "West - Boots", "channel_type": "SHOPPING"},
        {"name": "National - Sale", "channel_type": "SHOPPING"},
        {"name": "Global - Sale", "channel_type": "DISPLAY"},
    ],
    "keywords": {
        "length_distribution": {"short": 100, "medium": 250, "long": 250},
        "match_type_distribution": {"exact": 240, "phrase": 180, "broad": 180},
        "brand_keyword_rate": 0.1,
        "has_brand_campaigns": True,
        "low_quality_keyword_rate": 0.05,
        "non_converting_keyword_rate": 0.1,
    },
    "negative_keywords": {
        "campaign_level_count": 200,
        "ad_group_level_count": 150,
        "shared_set_count": 4,
        "campaigns_using_shared_sets": 10,
        "has_exact_negatives": True,
        "has_phrase_negatives": True,
        "exact_negative_rate": 0.4,
    },
    "bidding": {
        "strategies": {"target_roas": 4, "target_cpa": 4, "maximize_conversions": 1, "manual_cpc": 1},
        "has_device_bid_adjustments": True,
        "has_location_bid_adjustments": True,
        "has_audience_bid_adjustments": True,
        "has_schedule_bid_adjustments": False,
        "budget_lost_impression_share": 0.02,
    },
    "ads": {
        "rsa_rate": 0.95,
        "average_headlines_per_rsa": 13,
        "average_descriptions_per_rsa": 4,
        "average_ads_per_ad_group": 3.5,
        "single_ad_ad_group_rate": 0.02,
        "disapproved_rate": 0.0,
        "limited_by_policy_rate": 0.01,
    },
    "extensions": {"extension_type_count": 5, "impressions_with_extensions": 80_000},
    "quality_score": {
        "average_quality_score": 8.2,
        "keywords_by_quality_score": {8: 400, 7: 150, 5: 40, 3: 10},
        "good_ad_relevance_rate": 0.8,
        "poor_ad_relevance_rate": 0.05,
        "good_expected_ctr_rate": 0.75,
        "poor_expected_ctr_rate": 0.05,
        "good_landing_page_rate": 0.8,
        "poor_landing_page_rate": 0.05,
        "landing_page_speed_score": 85,
    },
    "conversion_tracking": {
        "conversion_action_count": 4,
        "value_tracking_count": 4,
        "has_phone_call_tracking": True,
        "has_imported_conversions": True,
        "has_enhanced_conversions": True,
        "has_data_driven_attribution": True,
    },
    "audiences": {
        "remarketing_list_count": 5,
        "active_remarketing_campaigns": 6,
        "has_customer_match": True,
        "customer_match_list_count": 3,
        "has_in_market_audiences": True,
        "has_affinity_audiences": True,
        "in_market_audience_count": 4,
        "affinity_audience_count": 2,
        "audience_bid_adjustment_rate": 0.8,
    },
    "landing_page": {
        "conversion_rate": 5.0,
        "is_mobile_friendly": True,
        "mobile_conversion_rate": 4.8,
        "desktop_conversion_rate": 5.0,
        "has_ab_testing": True,
        "ab_test_count": 4,
    },
    "competitive": {
        "has_auction_insights_data": True,
        "impression_share": 0.75,
        "top_impression_share": 0.6,
        "absolute_top_impression_share": 0.3,
        "rank_lost_impression_share": 0.05,
        "has_competitor_campaigns": True,
        "competitor_keyword_count": 80,
        "has_competitive_ad_copy": True,
        "competitive_messaging_score": 85,
    },
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, val in override.items():
        if isinstance(result.get(key), dict) and isinstance(val, dict):
            result[key] = _merge(result[key], val)
        else:
            result[key] = val
    return result


def build_snapshot(**overrides: Any) -> MetricsSnapshot:
    """Healthy payload with per-section overrides merged in."""
    payload = _merge(copy.deepcopy(HEALTHY_PAYLOAD), overrides)
    return MetricsSnapshot.model_validate(payload)


@pytest.fixture
def config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def healthy_snapshot() -> MetricsSnapshot:
    return build_snapshot()


@pytest.fixture
def snapshot_factory() -> Callable[..., MetricsSnapshot]:
    return build_snapshot


@pytest.fixture
def healthy_payload() -> dict[str, Any]:
    """A deep copy of the healthy JSON payload, safe to mutate."""
    return copy.deepcopy(HEALTHY_PAYLOAD)


@pytest.fixture
def stub_registry() -> Callable[[float], dict]:
    """Factory: ``stub_registry(score)`` maps every criterion to a constant evaluator."""

    def _make(score: float = 100.0) -> dict:
        def _evaluator(snapshot, config) -> CriterionResult:
            return CriterionResult(score=score)

        return {key: _evaluator for key in CriterionKey}

    return _make
