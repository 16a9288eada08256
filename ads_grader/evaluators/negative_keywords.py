"""
Negative Keywords evaluators.

Criteria
--------
search_query_mining       (40) — negatives per campaign, a proxy for how often
                                 search term reports are mined.
negative_lists_hierarchy  (35) — shared lists plus campaign- and ad-group-level
                                 negatives.
balanced_exclusion        (25) — negative match-type mix; exact negatives block
                                 less than phrase negatives.
"""

from __future__ import annotations

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey
from ads_grader.utils.numbers import safe_ratio


@register(CriterionKey.SEARCH_QUERY_MINING)
def search_query_mining(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.SEARCH_QUERY_MINING)
    total = snapshot.negative_keywords.total_count
    per_campaign = safe_ratio(total, snapshot.structure.campaign_count)

    a.details.update(
        negative_keyword_count=total,
        negatives_per_campaign=round(per_campaign, 2),
    )

    if per_campaign >= 30:
        a.score = 90
    elif per_campaign >= 15:
        a.score = 75
        a.recommend(
            f"Campaigns average {per_campaign:.0f} negative keywords. Review search "
            "term reports weekly and keep adding irrelevant queries as negatives.",
            0.6,
        )
    elif per_campaign > 0:
        a.score = 50
        a.recommend(
            f"Only {per_campaign:.1f} negative keywords per campaign. Mine search "
            "term reports to stop spend on irrelevant queries.",
            0.8,
        )
    elif total == 0:
        a.score = 20
        a.recommend(
            "No negative keywords are in use. Add negatives from search term reports "
            "immediately to cut wasted spend.",
            0.9,
        )
    else:
        a.score = 20
        a.recommend(
            f"{total} negative keywords are listed but the snapshot reports no "
            "campaigns to attribute them to. Check the collector's campaign count "
            "before judging search term mining.",
            0.5,
        )

    return a.result()


@register(CriterionKey.NEGATIVE_LISTS_HIERARCHY)
def negative_lists_hierarchy(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.NEGATIVE_LISTS_HIERARCHY)
    neg = snapshot.negative_keywords
    max_per_list = config.best_practices.max_campaigns_per_negative_list
    campaigns_per_list = safe_ratio(neg.campaigns_using_shared_sets, neg.shared_set_count)

    a.details.update(
        shared_set_count=neg.shared_set_count,
        campaign_level_count=neg.campaign_level_count,
        ad_group_level_count=neg.ad_group_level_count,
        campaigns_per_shared_list=round(campaigns_per_list, 2),
    )

    if neg.shared_set_count >= 3 and neg.campaign_level_count > 0 and neg.ad_group_level_count > 0:
        a.score = 90
    elif neg.shared_set_count >= 1 and (neg.campaign_level_count > 0 or neg.ad_group_level_count > 0):
        a.score = 75
        if neg.campaign_level_count == 0 or neg.ad_group_level_count == 0:
            missing = "campaign" if neg.campaign_level_count == 0 else "ad group"
            a.recommend(
                f"No {missing}-level negatives are used. Layer negatives at account "
                "(shared list), campaign and ad group level to route queries precisely.",
                0.5,
            )
    elif neg.total_count > 0:
        a.score = 60
        if neg.shared_set_count == 0:
            a.recommend(
                "Negatives are managed one campaign at a time. Create shared negative "
                "keyword lists for exclusions that apply account-wide.",
                0.7,
            )
    else:
        a.score = 0

    if campaigns_per_list > max_per_list:
        a.recommend(
            f"Shared negative lists are applied to {campaigns_per_list:.0f} campaigns "
            f"each on average (recommended at most {max_per_list}). Split broad lists "
            "by theme so one exclusion cannot block unrelated campaigns.",
            0.4,
        )

    return a.result()


@register(CriterionKey.BALANCED_EXCLUSION)
def balanced_exclusion(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.BALANCED_EXCLUSION)
    neg = snapshot.negative_keywords

    a.details.update(
        has_exact_negatives=neg.has_exact_negatives,
        has_phrase_negatives=neg.has_phrase_negatives,
        exact_negative_rate=round(neg.exact_negative_rate, 4),
    )

    if neg.has_exact_negatives and neg.has_phrase_negatives:
        a.score = 90
        if neg.exact_negative_rate < 0.2:
            a.recommend(
                f"Exact-match negatives are only {pct(neg.exact_negative_rate)} of "
                "negatives. Use exact negatives where a phrase negative could block "
                "valuable variants.",
                0.5,
            )
    elif neg.has_phrase_negatives:
        a.score = 70
        a.recommend(
            "Only phrase-match negatives are used. Add exact-match negatives for "
            "precise exclusions that leave related queries open.",
            0.6,
        )
    elif neg.has_exact_negatives:
        a.score = 60
        a.recommend(
            "Only exact-match negatives are used. Add phrase-match negatives to "
            "block whole families of irrelevant queries.",
            0.7,
        )
    elif neg.total_count > 0:
        a.score = 50
        a.recommend(
            "Negatives rely on broad match only. Mix exact and phrase negatives "
            "to avoid accidentally excluding converting searches.",
            0.7,
        )
    else:
        a.score = 0

    return a.result()
