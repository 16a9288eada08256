"""
Conversion Tracking evaluators.

Criteria
--------
conversion_coverage        (40) — number and variety of conversion actions
                                  (phone calls, imported offline conversions).
tracking_accuracy          (35) — share of conversion actions that record a value.
enhanced_offline_tracking  (25) — enhanced conversions and data-driven attribution.
"""

from __future__ import annotations

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey
from ads_grader.utils.numbers import safe_ratio


@register(CriterionKey.CONVERSION_COVERAGE)
def conversion_coverage(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.CONVERSION_COVERAGE)
    ct = snapshot.conversion_tracking
    count = ct.conversion_action_count

    a.details.update(
        conversion_action_count=count,
        has_phone_call_tracking=ct.has_phone_call_tracking,
        has_imported_conversions=ct.has_imported_conversions,
        is_ecommerce=snapshot.account.is_ecommerce,
    )

    if count >= 3 and ct.has_phone_call_tracking and ct.has_imported_conversions:
        a.score = 95
    elif count >= 2:
        a.score = 80
        if not ct.has_phone_call_tracking:
            a.recommend(
                "Set up phone call conversion tracking to capture leads that call "
                "instead of converting on the site.",
                0.7,
            )
        if not ct.has_imported_conversions and snapshot.account.is_ecommerce:
            a.recommend(
                "Import offline or CRM conversions so bidding optimizes toward "
                "completed sales, not just online actions.",
                0.6,
            )
    elif count >= 1:
        a.score = 60
        a.recommend(
            "Only one conversion action is tracked. Add the other valuable actions "
            "(calls, form fills, purchases, sign-ups) so bidding sees the full funnel.",
            0.8,
        )
    else:
        a.score = 20
        a.recommend(
            "No conversion tracking is set up. Implement conversion tracking "
            "immediately; without it performance cannot be measured or optimized.",
            1.0,
        )

    return a.result()


@register(CriterionKey.TRACKING_ACCURACY)
def tracking_accuracy(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.TRACKING_ACCURACY)
    ct = snapshot.conversion_tracking
    value_rate = safe_ratio(ct.value_tracking_count, ct.conversion_action_count)

    a.details.update(
        value_tracking_count=ct.value_tracking_count,
        value_tracking_rate=round(value_rate, 4),
    )

    if value_rate >= 0.8:
        a.score = 90
    elif value_rate >= 0.5:
        a.score = 75
        a.recommend(
            f"Only {pct(value_rate)} of conversion actions record a value. Assign "
            "values to the rest to enable value-based bidding.",
            0.6,
        )
    elif ct.conversion_action_count > 0:
        a.score = 50
        a.recommend(
            f"Most conversion actions ({pct(1 - value_rate)}) have no conversion value. "
            "Track values so reporting and bidding reflect business outcomes.",
            0.8,
        )
    else:
        a.score = 0

    return a.result()


@register(CriterionKey.ENHANCED_OFFLINE_TRACKING)
def enhanced_offline_tracking(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.ENHANCED_OFFLINE_TRACKING)
    ct = snapshot.conversion_tracking

    a.details.update(
        has_enhanced_conversions=ct.has_enhanced_conversions,
        has_data_driven_attribution=ct.has_data_driven_attribution,
    )

    if ct.has_enhanced_conversions and ct.has_data_driven_attribution:
        a.score = 95
    elif ct.has_enhanced_conversions or ct.has_data_driven_attribution:
        a.score = 75
        if not ct.has_enhanced_conversions:
            a.recommend(
                "Enable enhanced conversions to recover conversions lost to cookie "
                "restrictions and improve measurement accuracy.",
                0.7,
            )
        if not ct.has_data_driven_attribution:
            a.recommend(
                "Switch to data-driven attribution so credit is shared across the "
                "keywords and ads that assist conversions.",
                0.6,
            )
    elif ct.conversion_action_count > 0:
        a.score = 50
        a.recommend(
            "Neither enhanced conversions nor data-driven attribution is in use. "
            "Enable both to improve conversion measurement.",
            0.7,
        )
    else:
        a.score = 0

    return a.result()
