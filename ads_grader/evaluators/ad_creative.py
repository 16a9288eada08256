"""
Ad Creative & Extensions evaluators.

Criteria
--------
ad_copy_relevance  (30) — responsive search ad adoption and asset depth
                          (headlines, descriptions).
ad_testing         (25) — ads per ad group and single-ad ad groups.
ad_extensions      (30) — extension variety and share of impressions shown
                          with extensions.
ad_compliance      (15) — disapproved and policy-limited ads.
"""

from __future__ import annotations

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey
from ads_grader.utils.numbers import safe_ratio


@register(CriterionKey.AD_COPY_RELEVANCE)
def ad_copy_relevance(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.AD_COPY_RELEVANCE)
    ads = snapshot.ads
    headlines = ads.average_headlines_per_rsa
    descriptions = ads.average_descriptions_per_rsa

    a.details.update(
        rsa_rate=round(ads.rsa_rate, 4),
        average_headlines_per_rsa=round(headlines, 2),
        average_descriptions_per_rsa=round(descriptions, 2),
    )

    if ads.rsa_rate >= 0.9 and headlines >= 12 and descriptions >= 4:
        a.score = 95
    elif ads.rsa_rate >= 0.8 and headlines >= 10 and descriptions >= 3:
        a.score = 80
        if headlines < 12:
            a.recommend(
                f"Responsive search ads average {headlines:.1f} headlines. Add more "
                "unique headlines (up to 15) so the system can find better combinations.",
                0.6,
            )
        if descriptions < 4:
            a.recommend(
                f"Responsive search ads average {descriptions:.1f} descriptions. "
                "Use all 4 description slots.",
                0.5,
            )
    elif ads.rsa_rate >= 0.6:
        a.score = 60
        a.recommend(
            f"Responsive search ads are {pct(ads.rsa_rate)} of ads and carry few "
            "assets. Fill them with keyword-relevant headlines and descriptions.",
            0.8,
        )
    else:
        a.score = 40
        a.recommend(
            f"Only {pct(ads.rsa_rate)} of ads are responsive search ads. Create RSAs "
            "in every ad group with headlines that reflect the ad group's keywords.",
            0.9,
        )

    return a.result()


@register(CriterionKey.AD_TESTING)
def ad_testing(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.AD_TESTING)
    ads = snapshot.ads
    target = config.best_practices.ads_per_ad_group
    avg_ads = ads.average_ads_per_ad_group
    single = ads.single_ad_ad_group_rate

    a.details.update(
        average_ads_per_ad_group=round(avg_ads, 2),
        single_ad_ad_group_rate=round(single, 4),
    )

    if avg_ads >= target and single <= 0.05:
        a.score = 90
    elif avg_ads >= 2 and single <= 0.2:
        a.score = 75
        if avg_ads < target:
            a.recommend(
                f"Ad groups average {avg_ads:.1f} ads. Run at least {target} ads per "
                "ad group to keep testing new messages.",
                0.7,
            )
    else:
        a.score = 50
        a.recommend(
            f"{pct(single)} of ad groups run a single ad (average {avg_ads:.1f} ads "
            "per ad group). Add variants so ad copy can be tested continuously.",
            0.8,
        )

    return a.result()


@register(CriterionKey.AD_EXTENSIONS)
def ad_extensions(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.AD_EXTENSIONS)
    ext = snapshot.extensions
    min_types = config.best_practices.min_extension_types
    share = safe_ratio(ext.impressions_with_extensions, snapshot.performance.impressions)

    a.details.update(
        extension_type_count=ext.extension_type_count,
        impressions_with_extensions_rate=round(share, 4),
    )

    if ext.extension_type_count >= min_types and share >= 0.7:
        a.score = 90
    elif ext.extension_type_count >= 3 and share >= 0.5:
        a.score = 75
        if ext.extension_type_count < min_types:
            a.recommend(
                f"{ext.extension_type_count} extension types are in use. Add at least "
                f"{min_types} (sitelinks, callouts, structured snippets, calls) to "
                "enlarge ads and lift CTR.",
                0.7,
            )
    elif ext.extension_type_count >= 1:
        a.score = 50
        a.recommend(
            f"Only {ext.extension_type_count} extension types are used and they show "
            f"on {pct(share)} of impressions. Broaden extension coverage.",
            0.8,
        )
    else:
        a.score = 20
        a.recommend(
            "No ad extensions are used. Add sitelinks, callouts and structured "
            "snippets; they are free and raise click-through rates.",
            0.9,
        )

    return a.result()


@register(CriterionKey.AD_COMPLIANCE)
def ad_compliance(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.AD_COMPLIANCE)
    ads = snapshot.ads
    disapproved = ads.disapproved_rate
    limited = ads.limited_by_policy_rate

    a.details.update(
        disapproved_rate=round(disapproved, 4),
        limited_by_policy_rate=round(limited, 4),
    )

    if disapproved <= 0.01 and limited <= 0.05:
        a.score = 95
    elif disapproved <= 0.05 and limited <= 0.15:
        a.score = 75
        a.recommend(
            f"{pct(disapproved)} of ads are disapproved and {pct(limited)} are limited "
            "by policy. Fix flagged ads so every ad group can serve its best copy.",
            0.6,
        )
    elif disapproved <= 0.10:
        a.score = 55
        a.recommend(
            f"{pct(disapproved)} of ads are disapproved and {pct(limited)} are limited "
            "by policy. Review policy details and rewrite the affected ads.",
            0.7,
        )
    else:
        a.score = 30
        a.recommend(
            f"{pct(disapproved)} of ads are disapproved. Resolve policy violations "
            "immediately; disapproved ads do not serve.",
            0.9,
        )

    return a.result()
