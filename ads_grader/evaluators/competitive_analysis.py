"""
Competitive Analysis evaluators.

Criteria
--------
auction_insights          (35) — auction insights data and impression share.
competitor_research       (25) — mean of a competitor-keyword sub-score and a
                                 competitive-ad-copy sub-score.
performance_benchmarking  (25) — CTR, conversion rate and CPC against
                                 industry benchmarks.
competitive_adaptation    (15) — impression share lost to rank and top-of-page
                                 presence.
"""

from __future__ import annotations

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey


@register(CriterionKey.AUCTION_INSIGHTS)
def auction_insights(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.AUCTION_INSIGHTS)
    comp = snapshot.competitive
    share = comp.impression_share

    a.details.update(
        has_auction_insights_data=comp.has_auction_insights_data,
        impression_share=round(share, 4),
        top_impression_share=round(comp.top_impression_share, 4),
        absolute_top_impression_share=round(comp.absolute_top_impression_share, 4),
    )

    if comp.has_auction_insights_data and share >= 0.7:
        a.score = 90
    elif comp.has_auction_insights_data and share >= 0.5:
        a.score = 75
        a.recommend(
            f"Impression share is {pct(share)}. Check auction insights for the "
            "competitors outranking you and raise bids or quality on contested terms.",
            0.7,
        )
    elif comp.has_auction_insights_data:
        a.score = 60
        a.recommend(
            f"Impression share is low ({pct(share)}). Competitors win most auctions; "
            "review auction insights and focus budget on your strongest terms.",
            0.8,
        )
    else:
        a.score = 30
        a.recommend(
            "Auction insights are not being reviewed. Monitor them monthly to see "
            "who you compete with and how often you win.",
            0.9,
        )

    return a.result()


@register(CriterionKey.COMPETITOR_RESEARCH)
def competitor_research(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.COMPETITOR_RESEARCH)
    comp = snapshot.competitive

    a.details.update(
        has_competitor_campaigns=comp.has_competitor_campaigns,
        competitor_keyword_count=comp.competitor_keyword_count,
        has_competitive_ad_copy=comp.has_competitive_ad_copy,
        competitive_messaging_score=comp.competitive_messaging_score,
    )

    # ── Competitor keywords ───────────────────────────────────────────────
    if comp.has_competitor_campaigns and comp.competitor_keyword_count >= 50:
        keyword_score = 90
    elif comp.has_competitor_campaigns:
        keyword_score = 70
        a.recommend(
            f"Competitor campaigns target only {comp.competitor_keyword_count} "
            "keywords. Expand coverage to the competitors you meet most often.",
            0.7,
        )
    else:
        keyword_score = 40
        a.recommend(
            "No competitor campaigns exist. Test bidding on competitor terms with "
            "ads that state your advantage.",
            0.8,
        )

    # ── Competitive ad copy ───────────────────────────────────────────────
    if comp.has_competitive_ad_copy and comp.competitive_messaging_score >= 80:
        copy_score = 90
    elif comp.has_competitive_ad_copy:
        copy_score = 70
        a.recommend(
            f"Competitive messaging scores {comp.competitive_messaging_score:.0f}/100. "
            "Sharpen ads around price, guarantees or features competitors lack.",
            0.6,
        )
    else:
        copy_score = 40
        a.recommend(
            "Ad copy is not differentiated from competitors. Study competitor ads "
            "and highlight your unique selling points.",
            0.7,
        )

    a.details["competitor_keyword_score"] = keyword_score
    a.details["competitive_ad_copy_score"] = copy_score
    a.score = (keyword_score + copy_score) / 2
    return a.result()


@register(CriterionKey.PERFORMANCE_BENCHMARKING)
def performance_benchmarking(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.PERFORMANCE_BENCHMARKING)
    perf = snapshot.performance
    bench = config.industry_benchmarks

    beats = {
        "ctr": perf.ctr >= bench.ctr,
        "conversion_rate": perf.conversion_rate >= bench.conversion_rate,
        # CPC only means something once there are clicks.
        "cpc": perf.clicks > 0 and perf.average_cpc <= bench.cpc,
    }
    count = sum(beats.values())

    a.details.update(
        ctr=round(perf.ctr, 2),
        conversion_rate=round(perf.conversion_rate, 2),
        average_cpc=round(perf.average_cpc, 2),
        roas=round(perf.roas, 2),
        benchmark_ctr=bench.ctr,
        benchmark_conversion_rate=bench.conversion_rate,
        benchmark_cpc=bench.cpc,
        metrics_beating_benchmark=count,
    )

    if count >= 3:
        a.score = 90
    elif count == 2:
        a.score = 75
    elif count == 1:
        a.score = 60
    else:
        a.score = 40

    if not beats["ctr"]:
        a.recommend(
            f"CTR ({perf.ctr:.2f}%) is below the industry benchmark ({bench.ctr:.2f}%). "
            "Test more compelling ad copy and extensions.",
            0.7,
        )
    if not beats["conversion_rate"]:
        a.recommend(
            f"Conversion rate ({perf.conversion_rate:.2f}%) is below the industry "
            f"benchmark ({bench.conversion_rate:.2f}%). Improve landing pages and "
            "tighten targeting.",
            0.8,
        )
    if perf.clicks > 0 and not beats["cpc"]:
        a.recommend(
            f"Average CPC ({perf.average_cpc:.2f}) is above the industry benchmark "
            f"({bench.cpc:.2f}). Raise quality scores and prune expensive, "
            "non-converting keywords.",
            0.6,
        )

    return a.result()


@register(CriterionKey.COMPETITIVE_ADAPTATION)
def competitive_adaptation(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.COMPETITIVE_ADAPTATION)
    comp = snapshot.competitive
    rank_lost = comp.rank_lost_impression_share
    top_share = comp.top_impression_share

    a.details.update(
        has_auction_insights_data=comp.has_auction_insights_data,
        rank_lost_impression_share=round(rank_lost, 4),
        top_impression_share=round(top_share, 4),
    )

    if not comp.has_auction_insights_data:
        a.score = 30
        a.recommend(
            "Competitor moves cannot be tracked without auction data. Review auction "
            "insights regularly and adjust bids when competitors enter or leave.",
            0.6,
        )
    elif rank_lost <= 0.10 and top_share >= 0.5:
        a.score = 90
    elif rank_lost <= 0.20:
        a.score = 75
        a.recommend(
            f"{pct(rank_lost)} of impression share is lost to ad rank. Respond to "
            "competitor pressure with bid and quality improvements on key terms.",
            0.6,
        )
    elif rank_lost <= 0.35:
        a.score = 60
        a.recommend(
            f"Competitors outrank you often ({pct(rank_lost)} impression share lost "
            "to rank). Revisit bids, ad quality and landing pages on contested keywords.",
            0.7,
        )
    else:
        a.score = 40
        a.recommend(
            f"{pct(rank_lost)} of impression share is lost to ad rank. Your strategy "
            "is not keeping pace with competitors; rebuild bids and ads for core terms.",
            0.8,
        )

    return a.result()
