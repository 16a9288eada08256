"""
Audience Strategy evaluators.

Criteria
--------
remarketing               (35) — remarketing lists and campaigns using them.
customer_match            (25) — first-party customer lists.
in_market_affinity        (25) — in-market and affinity audience targeting.
audience_personalization  (15) — audience bid adjustments as a proxy for
                                 audience-specific experiences.
"""

from __future__ import annotations

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey
from ads_grader.utils.numbers import safe_ratio


@register(CriterionKey.REMARKETING)
def remarketing(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.REMARKETING)
    aud = snapshot.audiences
    lists = aud.remarketing_list_count
    active = aud.active_remarketing_campaigns
    coverage = safe_ratio(active, snapshot.structure.campaign_count)

    a.details.update(
        remarketing_list_count=lists,
        active_remarketing_campaigns=active,
        remarketing_campaign_coverage=round(coverage, 4),
    )

    if lists >= 3 and coverage >= 0.5:
        a.score = 90
    elif lists >= 1 and active >= 1:
        a.score = 70
        if lists < 3:
            a.recommend(
                f"Only {lists} remarketing lists exist. Segment visitors by behaviour "
                "(cart abandoners, past buyers, product viewers).",
                0.7,
            )
        if coverage < 0.5:
            a.recommend(
                f"Remarketing is applied to {pct(coverage)} of campaigns. Add your "
                "lists to more campaigns, at least in observation mode.",
                0.6,
            )
    elif lists >= 1:
        a.score = 50
        a.recommend(
            f"{lists} remarketing lists exist but no campaign uses them. Attach them "
            "to campaigns to re-engage past visitors.",
            0.8,
        )
    else:
        a.score = 20
        a.recommend(
            "No remarketing lists were found. Create lists of site visitors and "
            "converters to re-engage your warmest audience.",
            0.9,
        )

    return a.result()


@register(CriterionKey.CUSTOMER_MATCH)
def customer_match(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.CUSTOMER_MATCH)
    aud = snapshot.audiences

    a.details.update(
        has_customer_match=aud.has_customer_match,
        customer_match_list_count=aud.customer_match_list_count,
    )

    if aud.has_customer_match and aud.customer_match_list_count >= 2:
        a.score = 90
    elif aud.has_customer_match:
        a.score = 70
        a.recommend(
            "Only one customer match list is used. Segment customers (high value, "
            "lapsed, recent) into separate lists for tailored bids.",
            0.6,
        )
    else:
        a.score = 30
        a.recommend(
            "Customer match is not used. Upload customer lists to target existing "
            "customers and seed similar audiences.",
            0.8,
        )

    return a.result()


@register(CriterionKey.IN_MARKET_AFFINITY)
def in_market_affinity(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.IN_MARKET_AFFINITY)
    aud = snapshot.audiences

    a.details.update(
        has_in_market_audiences=aud.has_in_market_audiences,
        has_affinity_audiences=aud.has_affinity_audiences,
        in_market_audience_count=aud.in_market_audience_count,
        affinity_audience_count=aud.affinity_audience_count,
    )

    if aud.has_in_market_audiences and aud.has_affinity_audiences:
        a.score = 90
    elif aud.has_in_market_audiences or aud.has_affinity_audiences:
        a.score = 70
        if not aud.has_in_market_audiences:
            a.recommend(
                "No in-market audiences are applied. Add those matching your products "
                "to reach users actively researching a purchase.",
                0.7,
            )
        if not aud.has_affinity_audiences:
            a.recommend(
                "No affinity audiences are applied. Layer relevant affinity segments "
                "in observation mode to learn which interests convert.",
                0.6,
            )
    else:
        a.score = 40
        a.recommend(
            "No in-market or affinity audiences are used. Add them in observation "
            "mode to gather audience performance data.",
            0.8,
        )

    return a.result()


@register(CriterionKey.AUDIENCE_PERSONALIZATION)
def audience_personalization(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.AUDIENCE_PERSONALIZATION)
    has_adjustments = snapshot.bidding.has_audience_bid_adjustments
    rate = snapshot.audiences.audience_bid_adjustment_rate

    a.details.update(
        has_audience_bid_adjustments=has_adjustments,
        audience_bid_adjustment_rate=round(rate, 4),
    )

    if has_adjustments and rate >= 0.7:
        a.score = 90
    elif has_adjustments:
        a.score = 70
        a.recommend(
            f"Bid adjustments cover {pct(rate)} of applied audiences. Set adjustments "
            "on every audience with enough data.",
            0.6,
        )
    else:
        a.score = 40
        a.recommend(
            "Audiences are not used to tailor bids or messaging. Adjust bids by "
            "audience and write ads for your most valuable segments.",
            0.7,
        )

    return a.result()
