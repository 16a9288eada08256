"""
Criterion evaluators, one module per category.

Importing this package registers every evaluator in ``EVALUATOR_REGISTRY``.

Modules
-------
base                  : register() decorator, Assessment builder, pct().
campaign_organization : structure, naming, internal competition.
conversion_tracking   : coverage, value tracking, enhanced conversions.
keyword_strategy      : research, match types, brand split, optimization.
negative_keywords     : query mining, list hierarchy, negative match types.
bidding_strategy      : goal alignment, smart bidding, adjustments, budget.
ad_creative           : RSA depth, ad testing, extensions, policy compliance.
quality_score         : QS level/distribution and its three components.
audience_strategy     : remarketing, customer match, in-market/affinity.
landing_page          : message match, conversion design, mobile, A/B tests.
competitive_analysis  : auction insights, competitor research, benchmarks.
"""

from ads_grader.evaluators import (  # noqa: F401
    ad_creative,
    audience_strategy,
    bidding_strategy,
    campaign_organization,
    competitive_analysis,
    conversion_tracking,
    keyword_strategy,
    landing_page,
    negative_keywords,
    quality_score,
)
from ads_grader.evaluators.base import EVALUATOR_REGISTRY, Evaluator


def default_registry() -> dict:
    """Return a copy of the built-in criterion → evaluator mapping."""
    return dict(EVALUATOR_REGISTRY)


__all__ = ["EVALUATOR_REGISTRY", "Evaluator", "default_registry"]
