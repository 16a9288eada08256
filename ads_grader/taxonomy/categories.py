"""
Category and criterion catalogue for account grading.

Two enumerations identify everything the grader scores:
  - ``CategoryKey``  — the ten graded areas of an account.
  - ``CriterionKey`` — the individual checks inside each category.

Category keys are the display name lower-cased with every non-alphanumeric
character removed ("Ad Creative & Extensions" → ``"adcreativeextensions"``),
so report consumers can recover the display name with
``category_for_key()``.  The derivation is checked once at import time and
keys are enum members everywhere else; nothing re-derives them from strings
at grading time.

Criterion weights are static and sum to 100 within each category.  Category
weights come from ``CategoryWeights`` in the config and must also sum to 100.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Iterable

from ads_grader.exceptions import ConfigurationError

if TYPE_CHECKING:
    from ads_grader.config import CategoryWeights


class CategoryKey(StrEnum):
    """Stable identifier of a graded category."""

    CAMPAIGN_ORGANIZATION = "campaignorganization"
    CONVERSION_TRACKING = "conversiontracking"
    KEYWORD_STRATEGY = "keywordstrategy"
    NEGATIVE_KEYWORDS = "negativekeywords"
    BIDDING_STRATEGY = "biddingstrategy"
    AD_CREATIVE = "adcreativeextensions"
    QUALITY_SCORE = "qualityscore"
    AUDIENCE_STRATEGY = "audiencestrategy"
    LANDING_PAGE = "landingpageoptimization"
    COMPETITIVE_ANALYSIS = "competitiveanalysis"


class CriterionKey(StrEnum):
    """Stable identifier of a single criterion."""

    # ── Campaign organization ─────────────────────────────────────────────────
    LOGICAL_STRUCTURE = "logical_structure"
    NAMING_CONVENTIONS = "naming_conventions"
    INTERNAL_COMPETITION = "internal_competition"

    # ── Conversion tracking ───────────────────────────────────────────────────
    CONVERSION_COVERAGE = "conversion_coverage"
    TRACKING_ACCURACY = "tracking_accuracy"
    ENHANCED_OFFLINE_TRACKING = "enhanced_offline_tracking"

    # ── Keyword strategy ──────────────────────────────────────────────────────
    KEYWORD_RESEARCH = "keyword_research"
    MATCH_TYPE_STRATEGY = "match_type_strategy"
    BRAND_SEGMENTATION = "brand_segmentation"
    KEYWORD_OPTIMIZATION = "keyword_optimization"

    # ── Negative keywords ─────────────────────────────────────────────────────
    SEARCH_QUERY_MINING = "search_query_mining"
    NEGATIVE_LISTS_HIERARCHY = "negative_lists_hierarchy"
    BALANCED_EXCLUSION = "balanced_exclusion"

    # ── Bidding strategy ──────────────────────────────────────────────────────
    GOAL_ALIGNED_BIDDING = "goal_aligned_bidding"
    AUTOMATED_BIDDING = "automated_bidding"
    BID_ADJUSTMENTS = "bid_adjustments"
    BUDGET_ALIGNMENT = "budget_alignment"

    # ── Ad creative & extensions ──────────────────────────────────────────────
    AD_COPY_RELEVANCE = "ad_copy_relevance"
    AD_TESTING = "ad_testing"
    AD_EXTENSIONS = "ad_extensions"
    AD_COMPLIANCE = "ad_compliance"

    # ── Quality score ─────────────────────────────────────────────────────────
    QUALITY_SCORE_MONITORING = "quality_score_monitoring"
    AD_RELEVANCE = "ad_relevance"
    EXPECTED_CTR = "expected_ctr"
    LANDING_PAGE_EXPERIENCE = "landing_page_experience"

    # ── Audience strategy ─────────────────────────────────────────────────────
    REMARKETING = "remarketing"
    CUSTOMER_MATCH = "customer_match"
    IN_MARKET_AFFINITY = "in_market_affinity"
    AUDIENCE_PERSONALIZATION = "audience_personalization"

    # ── Landing page optimization ─────────────────────────────────────────────
    MESSAGE_MATCH = "message_match"
    CONVERSION_DESIGN = "conversion_design"
    SPEED_MOBILE = "speed_mobile"
    AB_TESTING = "ab_testing"

    # ── Competitive analysis ──────────────────────────────────────────────────
    AUCTION_INSIGHTS = "auction_insights"
    COMPETITOR_RESEARCH = "competitor_research"
    PERFORMANCE_BENCHMARKING = "performance_benchmarking"
    COMPETITIVE_ADAPTATION = "competitive_adaptation"


@dataclass(frozen=True)
class CriterionDefinition:
    """A criterion and its share (0–100) of its category's score."""

    key: CriterionKey
    name: str
    weight: float


@dataclass(frozen=True)
class CategoryDefinition:
    """A category, its share of the overall score, and its criteria in declaration order."""

    key: CategoryKey
    name: str
    weight: float
    criteria: tuple[CriterionDefinition, ...]

    @property
    def criterion_keys(self) -> tuple[CriterionKey, ...]:
        return tuple(c.key for c in self.criteria)


# ── Static catalogue ──────────────────────────────────────────────────────────
# (key, display name, CategoryWeights field, criteria)

_C = CriterionDefinition
_K = CriterionKey

_CATALOGUE: tuple[tuple[CategoryKey, str, str, tuple[CriterionDefinition, ...]], ...] = (
    (CategoryKey.CAMPAIGN_ORGANIZATION, "Campaign Organization", "campaign_organization", (
        _C(_K.LOGICAL_STRUCTURE, "Logical Campaign & Ad Group Structure", 40),
        _C(_K.NAMING_CONVENTIONS, "Clear Naming Conventions & Segmentation", 30),
        _C(_K.INTERNAL_COMPETITION, "No Internal Competition", 30),
    )),
    (CategoryKey.CONVERSION_TRACKING, "Conversion Tracking", "conversion_tracking", (
        _C(_K.CONVERSION_COVERAGE, "Comprehensive Conversion Coverage", 40),
        _C(_K.TRACKING_ACCURACY, "Accurate and Verified Tracking Implementation", 35),
        _C(_K.ENHANCED_OFFLINE_TRACKING, "Enhanced & Offline Conversion Tracking", 25),
    )),
    (CategoryKey.KEYWORD_STRATEGY, "Keyword Strategy", "keyword_strategy", (
        _C(_K.KEYWORD_RESEARCH, "Extensive Keyword Research & Relevance", 30),
        _C(_K.MATCH_TYPE_STRATEGY, "Strategic Match Type Use", 25),
        _C(_K.BRAND_SEGMENTATION, "Brand vs Non-Brand Segmentation", 25),
        _C(_K.KEYWORD_OPTIMIZATION, "Continuous Keyword Optimization", 20),
    )),
    (CategoryKey.NEGATIVE_KEYWORDS, "Negative Keywords", "negative_keywords", (
        _C(_K.SEARCH_QUERY_MINING, "Routine Search Query Mining", 40),
        _C(_K.NEGATIVE_LISTS_HIERARCHY, "Negative Keyword Lists and Hierarchy", 35),
        _C(_K.BALANCED_EXCLUSION, "Balanced Exclusion (Avoid False Negatives)", 25),
    )),
    (CategoryKey.BIDDING_STRATEGY, "Bidding Strategy", "bidding_strategy", (
        _C(_K.GOAL_ALIGNED_BIDDING, "Goal-Aligned Bidding Approach", 35),
        _C(_K.AUTOMATED_BIDDING, "Optimize Automated Bidding with Data", 25),
        _C(_K.BID_ADJUSTMENTS, "Device, Location, and Time Bid Adjustments", 20),
        _C(_K.BUDGET_ALIGNMENT, "Budget Management & Bid Strategy Alignment", 20),
    )),
    (CategoryKey.AD_CREATIVE, "Ad Creative & Extensions", "ad_creative", (
        _C(_K.AD_COPY_RELEVANCE, "Compelling Ad Copy with Relevance", 30),
        _C(_K.AD_TESTING, "Ad Variety and Continuous Testing", 25),
        _C(_K.AD_EXTENSIONS, "Leverage Ad Extensions", 30),
        _C(_K.AD_COMPLIANCE, "Ad Quality and Compliance", 15),
    )),
    (CategoryKey.QUALITY_SCORE, "Quality Score", "quality_score", (
        _C(_K.QUALITY_SCORE_MONITORING, "Monitor Quality Score & Components", 25),
        _C(_K.AD_RELEVANCE, "Improve Ad Relevance", 25),
        _C(_K.EXPECTED_CTR, "Improve Expected CTR", 25),
        _C(_K.LANDING_PAGE_EXPERIENCE, "Improve Landing Page Experience", 25),
    )),
    (CategoryKey.AUDIENCE_STRATEGY, "Audience Strategy", "audience_strategy", (
        _C(_K.REMARKETING, "Remarketing & Retargeting", 35),
        _C(_K.CUSTOMER_MATCH, "Customer Match & Similar Audiences", 25),
        _C(_K.IN_MARKET_AFFINITY, "In-Market, Affinity, and Demographic Targeting", 25),
        _C(_K.AUDIENCE_PERSONALIZATION, "Personalized Ad Experiences by Audience", 15),
    )),
    (CategoryKey.LANDING_PAGE, "Landing Page Optimization", "landing_page", (
        _C(_K.MESSAGE_MATCH, "Relevance and Message Match", 30),
        _C(_K.CONVERSION_DESIGN, "Conversion-Focused Design", 30),
        _C(_K.SPEED_MOBILE, "Page Speed and Mobile Optimization", 25),
        _C(_K.AB_TESTING, "A/B Testing & Iteration", 15),
    )),
    (CategoryKey.COMPETITIVE_ANALYSIS, "Competitive Analysis", "competitive_analysis", (
        _C(_K.AUCTION_INSIGHTS, "Auction Insights Monitoring", 35),
        _C(_K.COMPETITOR_RESEARCH, "Competitor Keyword and Ad Analysis", 25),
        _C(_K.PERFORMANCE_BENCHMARKING, "Benchmarking Performance Metrics", 25),
        _C(_K.COMPETITIVE_ADAPTATION, "Adaptive Strategy to Competitor Moves", 15),
    )),
)

CATEGORY_NAMES: dict[CategoryKey, str] = {key: name for key, name, _, _ in _CATALOGUE}

CRITERION_CATEGORY: dict[CriterionKey, CategoryKey] = {
    crit.key: key for key, _, _, criteria in _CATALOGUE for crit in criteria
}


# ── Key derivation ────────────────────────────────────────────────────────────


def category_key_for(name: str) -> str:
    """Derive a category key from a display name.

    Lower-cases the name and strips every character that is not a letter or
    digit: ``"Ad Creative & Extensions"`` → ``"adcreativeextensions"``.
    """
    return re.sub(r"[^a-z0-9]", "", name.lower())


def category_for_key(key: str) -> str:
    """Return the display name for a category key.

    Raises:
        KeyError: If ``key`` is not a known category key.
    """
    try:
        return CATEGORY_NAMES[CategoryKey(key)]
    except ValueError:
        raise KeyError(f"Unknown category key: {key!r}") from None


def _check_catalogue() -> None:
    """Verify key derivation is stable and collision-free across the catalogue."""
    derived: dict[str, str] = {}
    for key, name, _, _ in _CATALOGUE:
        k = category_key_for(name)
        if k != key.value:
            raise ConfigurationError(
                f"Category '{name}' derives key '{k}' but is declared as '{key.value}'."
            )
        if k in derived:
            raise ConfigurationError(
                f"Categories '{derived[k]}' and '{name}' derive the same key '{k}'."
            )
        derived[k] = name
    missing_categories = set(CategoryKey) - set(CATEGORY_NAMES)
    missing_criteria = set(CriterionKey) - set(CRITERION_CATEGORY)
    if missing_categories or missing_criteria:
        raise ConfigurationError(
            "Catalogue does not declare every key: "
            f"categories={sorted(missing_categories)}, criteria={sorted(missing_criteria)}."
        )


_check_catalogue()


# ── Definitions ───────────────────────────────────────────────────────────────


def build_category_definitions(weights: "CategoryWeights") -> tuple[CategoryDefinition, ...]:
    """Bind configured category weights onto the static catalogue.

    Args:
        weights: ``AppConfig.category_weights``.

    Returns:
        Ten ``CategoryDefinition`` objects in declaration order, already
        checked by ``validate_definitions()``.

    Raises:
        ConfigurationError: If any weight sum is not 100.
    """
    definitions = tuple(
        CategoryDefinition(
            key=key,
            name=name,
            weight=float(getattr(weights, weight_field)),
            criteria=criteria,
        )
        for key, name, weight_field, criteria in _CATALOGUE
    )
    validate_definitions(definitions)
    return definitions


def validate_definitions(definitions: Iterable[CategoryDefinition]) -> None:
    """Fail fast on definitions that would produce a skewed score.

    Checks that criterion weights sum to 100 within every category, category
    weights sum to 100 overall, no weight is negative, and no key repeats.

    Raises:
        ConfigurationError: On the first violation found.
    """
    definitions = tuple(definitions)
    if not definitions:
        raise ConfigurationError("No category definitions supplied.")

    seen_categories: set[CategoryKey] = set()
    seen_criteria: set[CriterionKey] = set()
    for definition in definitions:
        if definition.key in seen_categories:
            raise ConfigurationError(f"Category '{definition.key}' is defined twice.")
        seen_categories.add(definition.key)

        if definition.weight < 0:
            raise ConfigurationError(
                f"Category '{definition.name}' has negative weight {definition.weight:g}."
            )
        if not definition.criteria:
            raise ConfigurationError(f"Category '{definition.name}' declares no criteria.")

        for crit in definition.criteria:
            if crit.key in seen_criteria:
                raise ConfigurationError(f"Criterion '{crit.key}' is declared twice.")
            seen_criteria.add(crit.key)
            if crit.weight < 0:
                raise ConfigurationError(
                    f"Criterion '{crit.name}' has negative weight {crit.weight:g}."
                )

        criterion_total = sum(c.weight for c in definition.criteria)
        if abs(criterion_total - 100.0) > 1e-6:
            raise ConfigurationError(
                f"Criterion weights in '{definition.name}' sum to {criterion_total:g}, expected 100."
            )

    category_total = sum(d.weight for d in definitions)
    if abs(category_total - 100.0) > 1e-6:
        raise ConfigurationError(f"Category weights sum to {category_total:g}, expected 100.")
