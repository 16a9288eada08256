"""
Landing Page Optimization evaluators.

Criteria
--------
message_match      (30) — landing page relevance as rated by the platform.
conversion_design  (30) — page speed and landing page conversion rate
                          against the industry benchmark.
speed_mobile       (25) — mobile friendliness and mobile/desktop
                          conversion-rate parity.
ab_testing         (15) — landing page experiments.
"""

from __future__ import annotations

from ads_grader.config import AppConfig
from ads_grader.evaluators.base import Assessment, pct, register
from ads_grader.models.grading import CriterionResult
from ads_grader.models.snapshot import MetricsSnapshot
from ads_grader.taxonomy.categories import CriterionKey
from ads_grader.utils.numbers import safe_ratio


@register(CriterionKey.MESSAGE_MATCH)
def message_match(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.MESSAGE_MATCH)
    qs = snapshot.quality_score
    good = qs.good_landing_page_rate
    poor = qs.poor_landing_page_rate

    a.details.update(good_landing_page_rate=round(good, 4), poor_landing_page_rate=round(poor, 4))

    if good >= 0.7 and poor <= 0.1:
        a.score = 90
    elif good >= 0.5:
        a.score = 70
        a.recommend(
            f"Improve landing page relevance for the {pct(poor)} of keywords rated "
            "below average. Echo the ad's promise in the page headline.",
            0.7,
        )
    else:
        a.score = 50
        a.recommend(
            f"Only {pct(good)} of keywords have relevant landing pages. Build pages "
            "per theme so the message matches the search and the ad.",
            0.8,
        )

    return a.result()


@register(CriterionKey.CONVERSION_DESIGN)
def conversion_design(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.CONVERSION_DESIGN)
    speed = snapshot.quality_score.landing_page_speed_score
    cvr = snapshot.landing_page.conversion_rate
    benchmark = config.industry_benchmarks.conversion_rate

    a.details.update(
        landing_page_speed_score=speed,
        landing_page_conversion_rate=round(cvr, 2),
        benchmark_conversion_rate=benchmark,
    )

    if speed >= 80 and cvr >= benchmark * 1.2:
        a.score = 90
    elif speed >= 70 and cvr >= benchmark * 0.8:
        a.score = 70
        if speed < 80:
            a.recommend(
                f"Improve landing page speed (currently {speed:.0f}/100). Faster "
                "pages convert better.",
                0.7,
            )
        if cvr < benchmark:
            a.recommend(
                f"Landing page conversion rate ({cvr:.2f}%) is below the industry "
                f"average ({benchmark:.2f}%). Test layouts and calls to action.",
                0.8,
            )
    else:
        a.score = 50
        a.recommend(
            f"Landing pages need significant work: speed {speed:.0f}/100, conversion "
            f"rate {cvr:.2f}% vs {benchmark:.2f}% benchmark. Redesign around a single "
            "clear conversion goal.",
            0.9,
        )

    return a.result()


@register(CriterionKey.SPEED_MOBILE)
def speed_mobile(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.SPEED_MOBILE)
    lp = snapshot.landing_page
    ratio = safe_ratio(lp.mobile_conversion_rate, lp.desktop_conversion_rate)

    a.details.update(
        is_mobile_friendly=lp.is_mobile_friendly,
        mobile_conversion_rate=lp.mobile_conversion_rate,
        desktop_conversion_rate=lp.desktop_conversion_rate,
        mobile_desktop_ratio=round(ratio, 4),
    )

    if lp.is_mobile_friendly and ratio >= 0.9:
        a.score = 90
    elif lp.is_mobile_friendly and ratio >= 0.7:
        a.score = 70
        a.recommend(
            f"Mobile conversion rate is {pct(ratio)} of desktop. Improve mobile UX "
            "to close the gap.",
            0.7,
        )
    elif lp.is_mobile_friendly:
        a.score = 50
        a.recommend(
            f"Mobile converts at only {pct(ratio)} of the desktop rate. Run mobile "
            "usability tests to find and fix friction.",
            0.8,
        )
    else:
        a.score = 30
        a.recommend(
            "Landing pages are not mobile-friendly. Implement responsive design; "
            "most search traffic is mobile.",
            0.9,
        )

    return a.result()


@register(CriterionKey.AB_TESTING)
def ab_testing(snapshot: MetricsSnapshot, config: AppConfig) -> CriterionResult:
    a = Assessment.for_criterion(CriterionKey.AB_TESTING)
    lp = snapshot.landing_page

    a.details.update(has_ab_testing=lp.has_ab_testing, ab_test_count=lp.ab_test_count)

    if lp.has_ab_testing and lp.ab_test_count >= 3:
        a.score = 90
    elif lp.has_ab_testing:
        a.score = 70
        a.recommend(
            f"{lp.ab_test_count} landing page tests are running. Test continuously: "
            "headlines, forms, offers and layouts.",
            0.6,
        )
    else:
        a.score = 40
        a.recommend(
            "Landing pages are not A/B tested. Start with the highest-traffic page "
            "and test one change at a time.",
            0.8,
        )

    return a.result()
