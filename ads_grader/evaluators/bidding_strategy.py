"""
Bidding Strategy evaluators.

Criteria
--------
goal_aligned_bidding  (35) — bid strategy matches what is tracked (values →
                             target ROAS, conversions → target CPA).
automated_bidding     (25) — share of campaigns on conversion-based smart bidding.
bid_adjustments       (20) — device, location, audience and schedule adjustments.
budget_alignment      (20) — search impression share lost to budget.
"""

from __future__ import annotations

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey
from ads_grader.utils.numbers import safe_ratio


@register(CriterionKey.GOAL_ALIGNED_BIDDING)
def goal_aligned_bidding(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.GOAL_ALIGNED_BIDDING)
    ct = snapshot.conversion_tracking
    strategies = snapshot.bidding.strategies
    has_conversions = ct.conversion_action_count > 0
    has_values = ct.value_tracking_count > 0

    a.details.update(
        has_conversion_tracking=has_conversions,
        has_value_tracking=has_values,
        target_cpa_campaigns=strategies.target_cpa,
        target_roas_campaigns=strategies.target_roas,
    )

    if has_values and strategies.target_roas > 0:
        a.score = 90
    elif has_conversions and strategies.target_cpa > 0:
        a.score = 80
        if has_values:
            a.recommend(
                "Conversion values are tracked but no campaign uses target ROAS. "
                "Test value-based bidding on campaigns with enough conversion volume.",
                0.7,
            )
    elif has_conversions:
        a.score = 60
        a.recommend(
            "Conversions are tracked but bidding does not target them. Move "
            "campaigns to target CPA or maximize conversions.",
            0.8,
        )
    else:
        a.score = 30
        a.recommend(
            "Bidding cannot be aligned with business goals because no conversions "
            "are tracked. Set up conversion tracking, then adopt goal-based bidding.",
            1.0,
        )

    return a.result()


@register(CriterionKey.AUTOMATED_BIDDING)
def automated_bidding(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.AUTOMATED_BIDDING)
    strategies = snapshot.bidding.strategies
    smart_rate = safe_ratio(strategies.smart_count, snapshot.structure.campaign_count)

    a.details.update(
        smart_bidding_campaigns=strategies.smart_count,
        smart_bidding_rate=round(smart_rate, 4),
        manual_cpc_campaigns=strategies.manual_cpc,
    )

    if smart_rate >= 0.8:
        a.score = 90
    elif smart_rate >= 0.5:
        a.score = 75
        a.recommend(
            f"{pct(smart_rate)} of campaigns use smart bidding. Migrate the remaining "
            "campaigns once they have enough conversion history.",
            0.7,
        )
    elif smart_rate > 0:
        a.score = 50
        a.recommend(
            f"Only {pct(smart_rate)} of campaigns use smart bidding. Automated "
            "strategies use auction-time signals manual bids cannot.",
            0.8,
        )
    else:
        a.score = 20
        a.recommend(
            "No campaigns use conversion-based smart bidding. Test target CPA or "
            "maximize conversions on your highest-volume campaigns.",
            0.9,
        )

    return a.result()


@register(CriterionKey.BID_ADJUSTMENTS)
def bid_adjustments(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.BID_ADJUSTMENTS)
    bidding = snapshot.bidding
    used = {
        "device": bidding.has_device_bid_adjustments,
        "location": bidding.has_location_bid_adjustments,
        "audience": bidding.has_audience_bid_adjustments,
        "schedule": bidding.has_schedule_bid_adjustments,
    }
    count = sum(used.values())

    a.details.update(adjustment_types=used, adjustment_type_count=count)

    if count >= 3:
        a.score = 90
    elif count >= 2:
        a.score = 75
        if not used["device"]:
            a.recommend(
                "No device bid adjustments are set. Compare mobile and desktop "
                "performance and adjust bids accordingly.",
                0.6,
            )
        if not used["location"]:
            a.recommend(
                "No location bid adjustments are set. Raise bids where conversion "
                "rates are highest and lower them elsewhere.",
                0.6,
            )
    elif count >= 1:
        a.score = 60
        a.recommend(
            f"Only {count} out of 4 bid adjustment types are used. Add device, "
            "location, audience and ad schedule adjustments where data supports them.",
            0.7,
        )
    else:
        a.score = 40
        a.recommend(
            "No bid adjustments are used. Adjust bids by device, location, audience "
            "and time of day based on performance.",
            0.8,
        )

    return a.result()


@register(CriterionKey.BUDGET_ALIGNMENT)
def budget_alignment(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.BUDGET_ALIGNMENT)
    lost = snapshot.bidding.budget_lost_impression_share

    a.details["budget_lost_impression_share"] = round(lost, 4)

    if lost <= 0.05:
        a.score = 90
    elif lost <= 0.15:
        a.score = 75
        a.recommend(
            f"Campaigns lose {pct(lost)} of impression share to budget. Shift budget "
            "toward limited campaigns that convert efficiently.",
            0.6,
        )
    elif lost <= 0.30:
        a.score = 60
        a.recommend(
            f"{pct(lost)} of impression share is lost to budget. Raise budgets on "
            "profitable campaigns or tighten targeting so spend lasts the day.",
            0.7,
        )
    else:
        a.score = 40
        a.recommend(
            f"Budget constraints cost {pct(lost)} of impression share. Bid targets "
            "and budgets are misaligned; lower targets or increase budgets.",
            0.8,
        )

    return a.result()
