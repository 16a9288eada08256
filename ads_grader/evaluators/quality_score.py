"""
Quality Score evaluators.

Criteria
--------
quality_score_monitoring  (25) — mean of an average-QS sub-score and a
                                 QS-distribution sub-score.
ad_relevance              (25) — ad relevance component (good vs poor).
expected_ctr              (25) — expected CTR component; actual CTR against
                                 the industry benchmark is reported alongside.
landing_page_experience   (25) — landing page component and page speed.

Distribution buckets: low = QS 1–4, medium = QS 5–6, high = QS 7–10, each
as a share of ``structure.keyword_count``.
"""

from __future__ import annotations

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey
from ads_grader.utils.numbers import safe_ratio


@register(CriterionKey.QUALITY_SCORE_MONITORING)
def quality_score_monitoring(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.QUALITY_SCORE_MONITORING)
    qs = snapshot.quality_score
    min_qs = config.best_practices.min_quality_score
    benchmark = config.industry_benchmarks.quality_score
    average = qs.average_quality_score
    keyword_count = snapshot.structure.keyword_count

    low = safe_ratio(qs.keywords_in_range(1, 4), keyword_count)
    medium = safe_ratio(qs.keywords_in_range(5, 6), keyword_count)
    high = safe_ratio(qs.keywords_in_range(7, 10), keyword_count)

    a.details.update(
        average_quality_score=round(average, 2),
        benchmark_quality_score=benchmark,
        ratio_to_benchmark=round(safe_ratio(average, benchmark), 4),
        low_quality_score_rate=round(low, 4),
        medium_quality_score_rate=round(medium, 4),
        high_quality_score_rate=round(high, 4),
    )

    # ── Average quality score ─────────────────────────────────────────────
    if average >= min_qs + 1:
        average_score = 90
    elif average >= min_qs:
        average_score = 80
        a.recommend(
            f"Average quality score is {average:.1f}. Tighten keyword-to-ad relevance "
            f"to push it above {min_qs + 1:g}.",
            0.6,
        )
    elif average >= 5:
        average_score = 60
        a.recommend(
            f"Average quality score is {average:.1f}, below the target of {min_qs:g}. "
            "Improve ad relevance, expected CTR and landing pages.",
            0.8,
        )
    else:
        average_score = 40
        a.recommend(
            f"Average quality score is poor ({average:.1f}). You are paying a premium "
            "per click; restructure ad groups and rewrite ads around their keywords.",
            0.9,
        )

    # ── Distribution ──────────────────────────────────────────────────────
    if high >= 0.7 and low <= 0.1:
        distribution_score = 90
    elif high >= 0.5 and low <= 0.2:
        distribution_score = 75
        a.recommend(
            f"{pct(low)} of keywords have a quality score of 4 or below. Fix or "
            "pause them to lift the account average.",
            0.7,
        )
    elif high >= 0.3:
        distribution_score = 60
        a.recommend(
            f"Only {pct(high)} of keywords reach a quality score of 7+. Focus "
            "optimization on high-spend keywords in the 1-6 range.",
            0.8,
        )
    else:
        distribution_score = 40
        a.recommend(
            f"Just {pct(high)} of keywords have a quality score of 7+. Quality "
            "problems are account-wide; review structure and relevance.",
            0.9,
        )

    a.details["average_score"] = average_score
    a.details["distribution_score"] = distribution_score
    a.score = (average_score + distribution_score) / 2
    return a.result()


@register(CriterionKey.AD_RELEVANCE)
def ad_relevance(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.AD_RELEVANCE)
    qs = snapshot.quality_score
    good = qs.good_ad_relevance_rate
    poor = qs.poor_ad_relevance_rate

    a.details.update(good_ad_relevance_rate=round(good, 4), poor_ad_relevance_rate=round(poor, 4))

    if good >= 0.7 and poor <= 0.1:
        a.score = 90
    elif good >= 0.5 and poor <= 0.2:
        a.score = 75
        a.recommend(
            f"{pct(poor)} of keywords have below-average ad relevance. Include those "
            "keywords in headlines or move them to better-matched ad groups.",
            0.7,
        )
    else:
        a.score = 50
        a.recommend(
            f"Only {pct(good)} of keywords have above-average ad relevance. Build "
            "smaller ad groups with ads written for their keywords.",
            0.8,
        )

    return a.result()


@register(CriterionKey.EXPECTED_CTR)
def expected_ctr(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.EXPECTED_CTR)
    qs = snapshot.quality_score
    good = qs.good_expected_ctr_rate
    poor = qs.poor_expected_ctr_rate
    ctr = snapshot.performance.ctr
    benchmark = config.industry_benchmarks.ctr

    a.details.update(
        good_expected_ctr_rate=round(good, 4),
        poor_expected_ctr_rate=round(poor, 4),
        ctr=round(ctr, 2),
        benchmark_ctr=benchmark,
    )

    if good >= 0.7 and poor <= 0.1:
        a.score = 90
    elif good >= 0.5 and poor <= 0.2:
        a.score = 75
        a.recommend(
            f"{pct(poor)} of keywords have below-average expected CTR. Test stronger "
            "calls to action and offers in their ads.",
            0.7,
        )
    else:
        a.score = 50
        a.recommend(
            f"Only {pct(good)} of keywords have above-average expected CTR "
            f"(account CTR {ctr:.2f}% vs {benchmark:.2f}% benchmark). Rewrite ads "
            "to be more compelling and add extensions.",
            0.8,
        )

    return a.result()


@register(CriterionKey.LANDING_PAGE_EXPERIENCE)
def landing_page_experience(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.LANDING_PAGE_EXPERIENCE)
    qs = snapshot.quality_score
    good = qs.good_landing_page_rate
    poor = qs.poor_landing_page_rate
    speed = qs.landing_page_speed_score

    a.details.update(
        good_landing_page_rate=round(good, 4),
        poor_landing_page_rate=round(poor, 4),
        landing_page_speed_score=speed,
    )

    if good >= 0.7 and poor <= 0.1 and speed >= 80:
        a.score = 90
    elif good >= 0.5 and speed >= 70:
        a.score = 75
        if poor > 0.1:
            a.recommend(
                f"{pct(poor)} of keywords have below-average landing page experience. "
                "Point them at pages that answer the search directly.",
                0.7,
            )
    else:
        a.score = 50
        if good < 0.3:
            a.recommend(
                f"Only {pct(good)} of keywords have above-average landing page "
                "experience. Improve page relevance, content and navigation.",
                0.8,
            )
        if 0 < speed < 70:
            a.recommend(
                f"Landing page speed scores {speed:.0f}/100. Compress images and "
                "trim scripts to load faster, especially on mobile.",
                0.7,
            )

    return a.result()
