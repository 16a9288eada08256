"""
Campaign Organization evaluators.

Criteria
--------
logical_structure     (40) — keywords per ad group and ad groups per campaign
                             against best-practice targets; mean of two
                             sub-scores.
naming_conventions    (30) — share of campaign names following the dominant
                             naming pattern, minus 10 for an unsegmented
                             account (one channel type across >5 campaigns).
internal_competition  (30) — share of keywords duplicated across ad groups.
"""

from __future__ import annotations

import re

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey
from ads_grader.utils.numbers import safe_ratio

# Whole words only, checked in order; a campaign counts toward the first
# pattern it matches.
_NAMING_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("location", re.compile(r"\b(north|south|east|west|regional|local|national|global)\b", re.I)),
    ("product", re.compile(r"\b(product|service|category|brand)\b", re.I)),
    ("purpose", re.compile(r"\b(brand|non-brand|generic|competitor|display|search|shopping)\b", re.I)),
)


@register(CriterionKey.LOGICAL_STRUCTURE)
def logical_structure(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.LOGICAL_STRUCTURE)
    structure = snapshot.structure
    bp = config.best_practices

    avg_keywords = structure.average_keywords_per_ad_group
    avg_ad_groups = structure.average_ad_groups_per_campaign
    a.details.update(
        campaign_count=structure.campaign_count,
        ad_group_count=structure.ad_group_count,
        keyword_count=structure.keyword_count,
        average_keywords_per_ad_group=round(avg_keywords, 2),
        average_ad_groups_per_campaign=round(avg_ad_groups, 2),
    )

    # ── Keywords per ad group ─────────────────────────────────────────────
    if avg_keywords > bp.keywords_per_ad_group * 2:
        keyword_score = 50
        a.recommend(
            f"Ad groups hold too many keywords on average ({avg_keywords:.1f}). "
            f"Split them into tighter themes of at most {bp.keywords_per_ad_group} "
            "keywords so ads and landing pages stay relevant.",
            0.8,
        )
    elif avg_keywords > bp.keywords_per_ad_group:
        keyword_score = 75
        a.recommend(
            f"Average keywords per ad group ({avg_keywords:.1f}) is above the "
            f"recommended {bp.keywords_per_ad_group}. Consider splitting the largest ad groups.",
            0.6,
        )
    else:
        keyword_score = 100

    # ── Ad groups per campaign ────────────────────────────────────────────
    if avg_ad_groups < bp.min_ad_groups_per_campaign:
        ad_group_score = 70
        a.recommend(
            f"Campaigns average only {avg_ad_groups:.1f} ad groups. Break campaigns "
            "into themed ad groups for more granular targeting and reporting.",
            0.5,
        )
    elif avg_ad_groups > bp.max_ad_groups_per_campaign:
        ad_group_score = 80
        a.recommend(
            f"Campaigns average {avg_ad_groups:.1f} ad groups, above the recommended "
            f"{bp.max_ad_groups_per_campaign}. Split oversized campaigns so budgets "
            "can be controlled per theme.",
            0.4,
        )
    else:
        ad_group_score = 100

    a.details["keyword_density_score"] = keyword_score
    a.details["ad_group_density_score"] = ad_group_score
    a.score = (keyword_score + ad_group_score) / 2
    return a.result()


@register(CriterionKey.NAMING_CONVENTIONS)
def naming_conventions(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.NAMING_CONVENTIONS)
    campaigns = snapshot.campaigns

    counts = {label: 0 for label, _ in _NAMING_PATTERNS}
    for campaign in campaigns:
        for label, pattern in _NAMING_PATTERNS:
            if pattern.search(campaign.name):
                counts[label] += 1
                break

    consistency = safe_ratio(max(counts.values()), len(campaigns))
    channel_types = sorted({c.channel_type for c in campaigns})
    a.details.update(
        campaigns_checked=len(campaigns),
        pattern_counts=counts,
        naming_consistency=round(consistency, 4),
        channel_types=channel_types,
    )

    if consistency >= 0.8:
        a.score = 90
    elif consistency >= 0.6:
        a.score = 75
        a.recommend(
            f"Only {pct(consistency)} of campaigns follow a consistent naming pattern. "
            "Standardize names (e.g. location, product, purpose) so reports group cleanly.",
            0.6,
        )
    else:
        a.score = 50
        a.recommend(
            f"Campaign naming is inconsistent ({pct(consistency)} follow a common pattern). "
            "Adopt a naming convention that encodes location, product and purpose.",
            0.7,
        )

    if len(channel_types) < 2 and len(campaigns) > 5:
        a.score -= 10
        a.recommend(
            f"All {len(campaigns)} campaigns use a single channel type. Segment by "
            "network or campaign type (search, shopping, display) to control budgets "
            "and bids separately.",
            0.5,
        )

    return a.result()


@register(CriterionKey.INTERNAL_COMPETITION)
def internal_competition(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.INTERNAL_COMPETITION)
    structure = snapshot.structure
    duplicate_rate = structure.duplicate_keyword_rate

    a.details.update(
        duplicate_keyword_count=structure.duplicate_keyword_count,
        duplicate_keyword_rate=round(duplicate_rate, 4),
    )

    if duplicate_rate <= 0.05:
        a.score = 90
    elif duplicate_rate <= 0.10:
        a.score = 75
        a.recommend(
            f"{pct(duplicate_rate)} of keywords are duplicated across ad groups. "
            "Remove duplicates or add cross-negatives so ad groups stop bidding against each other.",
            0.6,
        )
    else:
        a.score = 50
        a.recommend(
            f"{pct(duplicate_rate)} of keywords ({structure.duplicate_keyword_count}) are "
            "duplicated, causing internal auction competition. Consolidate duplicates "
            "and use negative keywords to route queries.",
            0.8,
        )

    return a.result()
