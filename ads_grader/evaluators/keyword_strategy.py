"""
Keyword Strategy evaluators.

Criteria
--------
keyword_research      (30) — keyword volume and long-tail share (3+ words).
match_type_strategy   (25) — exact / phrase / broad balance.
brand_segmentation    (25) — brand terms isolated in their own campaigns.
keyword_optimization  (20) — share of low-quality and non-converting keywords.

An account with no keywords at all lands in the lowest band of each
criterion rather than failing.
"""

from __future__ import annotations

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey
from ads_grader.utils.numbers import safe_ratio


@register(CriterionKey.KEYWORD_RESEARCH)
def keyword_research(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.KEYWORD_RESEARCH)
    keyword_count = snapshot.structure.keyword_count
    lengths = snapshot.keywords.length_distribution
    long_tail = safe_ratio(lengths.medium + lengths.long, keyword_count)

    a.details.update(
        keyword_count=keyword_count,
        long_tail_rate=round(long_tail, 4),
    )

    if keyword_count >= 500 and long_tail >= 0.7:
        a.score = 90
    elif keyword_count >= 200 and long_tail >= 0.5:
        a.score = 75
        if long_tail < 0.7:
            a.recommend(
                f"Long-tail keywords make up {pct(long_tail)} of the list. Add more "
                "specific 3+ word phrases; they usually convert better at lower cost.",
                0.6,
            )
    elif keyword_count >= 100:
        a.score = 60
        a.recommend(
            f"Keyword coverage is moderate ({keyword_count} keywords, "
            f"{pct(long_tail)} long-tail). Expand research with search term reports "
            "and keyword planning tools.",
            0.7,
        )
    else:
        a.score = 40
        a.recommend(
            f"Keyword coverage is limited ({keyword_count} keywords). Run thorough "
            "keyword research to capture relevant demand.",
            0.8,
        )

    return a.result()


@register(CriterionKey.MATCH_TYPE_STRATEGY)
def match_type_strategy(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.MATCH_TYPE_STRATEGY)
    dist = snapshot.keywords.match_type_distribution
    exact = dist.rate("exact")
    phrase = dist.rate("phrase")
    broad = dist.rate("broad")

    a.details.update(
        exact_rate=round(exact, 4),
        phrase_rate=round(phrase, 4),
        broad_rate=round(broad, 4),
    )

    if exact >= 0.3 and phrase >= 0.2 and broad >= 0.2:
        a.score = 90
    elif exact >= 0.2 and phrase + broad >= 0.3:
        a.score = 75
        if exact < 0.3:
            a.recommend(
                f"Exact match is {pct(exact)} of keywords. Promote proven search "
                "terms to exact match for tighter control over top performers.",
                0.6,
            )
    elif dist.total > 0:
        a.score = 60
        if exact < 0.2:
            a.recommend(
                f"Exact match is only {pct(exact)} of keywords. Add exact-match "
                "versions of your best converting terms.",
                0.7,
            )
        if broad > 0.7:
            a.recommend(
                f"Broad match makes up {pct(broad)} of keywords. Pair broad match "
                "with smart bidding and active negatives, or shift volume to phrase and exact.",
                0.7,
            )
    else:
        a.score = 0

    return a.result()


@register(CriterionKey.BRAND_SEGMENTATION)
def brand_segmentation(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.BRAND_SEGMENTATION)
    kw = snapshot.keywords
    brand_rate = kw.brand_keyword_rate

    a.details.update(
        has_brand_campaigns=kw.has_brand_campaigns,
        brand_keyword_rate=round(brand_rate, 4),
    )

    if kw.has_brand_campaigns and brand_rate <= 0.3:
        a.score = 90
    elif kw.has_brand_campaigns:
        a.score = 75
        a.recommend(
            f"Brand terms are {pct(brand_rate)} of keywords. Keep non-brand "
            "prospecting large enough to grow beyond existing demand.",
            0.5,
        )
    elif brand_rate > 0:
        a.score = 60
        a.recommend(
            "Brand keywords are mixed into generic campaigns. Move them into a "
            "dedicated brand campaign so budgets and performance can be read separately.",
            0.7,
        )
    else:
        a.score = 50
        a.recommend(
            "No brand keywords were found. Bid on your brand terms to protect them "
            "from competitors at low cost.",
            0.6,
        )

    return a.result()


@register(CriterionKey.KEYWORD_OPTIMIZATION)
def keyword_optimization(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.KEYWORD_OPTIMIZATION)
    kw = snapshot.keywords
    low_quality = kw.low_quality_keyword_rate
    non_converting = kw.non_converting_keyword_rate

    a.details.update(
        low_quality_keyword_rate=round(low_quality, 4),
        non_converting_keyword_rate=round(non_converting, 4),
    )

    if low_quality <= 0.1 and non_converting <= 0.2:
        a.score = 90
    elif low_quality <= 0.2 and non_converting <= 0.3:
        a.score = 75
        if low_quality > 0.1:
            a.recommend(
                f"{pct(low_quality)} of keywords have low quality scores. Rework "
                "their ads and landing pages or pause them.",
                0.6,
            )
    else:
        a.score = 50
        if non_converting > 0.3:
            a.recommend(
                f"{pct(non_converting)} of keywords spend without converting. Pause "
                "or lower bids on them and reinvest in converting terms.",
                0.8,
            )
        if low_quality > 0.2:
            a.recommend(
                f"{pct(low_quality)} of keywords have low quality scores. Review "
                "relevance and prune keywords that cannot be improved.",
                0.7,
            )

    return a.result()
