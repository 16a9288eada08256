"""
Normalized account-metrics snapshot — the grading engine's only input.

``MetricsSnapshot`` is produced by an external collector and only read here.
It is a frozen model tree; every field has a neutral default (0, 0.0, False,
empty) so a metric the collector could not fetch never fails grading.

Field naming contract (schema version 1)
----------------------------------------
  *_count        non-negative integer counts
  *_rate         fraction in [0, 1]
  *_score        0–100 score computed upstream (e.g. landing-page speed)
  *_conversion_rate / conversion_rate
                 percentage (0–100), matching how the ad platform reports it

Totals that the platform reports as ratios (CTR, conversion rate, CPC, ROAS)
are NOT stored; they are derived from raw totals with zero-safe division so a
snapshot can never carry two disagreeing copies of the same figure.

Unknown fields are rejected (``extra="forbid"``): a collector that renames a
field fails fast with a validation error instead of silently grading against
the neutral default.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ads_grader.utils.numbers import safe_ratio

SNAPSHOT_SCHEMA_VERSION = 1

Count    = Annotated[int, Field(ge=0)]
Amount   = Annotated[float, Field(ge=0.0)]
Rate     = Annotated[float, Field(ge=0.0, le=1.0)]
Score100 = Annotated[float, Field(ge=0.0, le=100.0)]
Percent  = Annotated[float, Field(ge=0.0, le=100.0)]


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ── Account & performance ─────────────────────────────────────────────────────


class AccountInfo(_Section):
    """Identity of the graded account.  Display only; never scored directly."""

    name: str = ""
    customer_id: str = ""
    currency_code: str = ""
    is_ecommerce: bool = False


class PerformanceTotals(_Section):
    """Raw account totals over the lookback window."""

    impressions: Count = 0
    clicks: Count = 0
    cost: Amount = 0.0
    conversions: Amount = 0.0
    conversion_value: Amount = 0.0

    @property
    def ctr(self) -> float:
        """Click-through rate in percent."""
        return safe_ratio(self.clicks, self.impressions) * 100.0

    @property
    def conversion_rate(self) -> float:
        """Conversions per click in percent."""
        return safe_ratio(self.conversions, self.clicks) * 100.0

    @property
    def average_cpc(self) -> float:
        return safe_ratio(self.cost, self.clicks)

    @property
    def roas(self) -> float:
        return safe_ratio(self.conversion_value, self.cost)


# ── Structure ─────────────────────────────────────────────────────────────────


class CampaignSummary(_Section):
    """One campaign, as far as naming and segmentation checks need it."""

    name: str
    channel_type: str = "SEARCH"


class AccountStructure(_Section):
    campaign_count: Count = 0
    ad_group_count: Count = 0
    keyword_count: Count = 0
    duplicate_keyword_count: Count = 0

    @property
    def average_keywords_per_ad_group(self) -> float:
        return safe_ratio(self.keyword_count, self.ad_group_count)

    @property
    def average_ad_groups_per_campaign(self) -> float:
        return safe_ratio(self.ad_group_count, self.campaign_count)

    @property
    def duplicate_keyword_rate(self) -> float:
        return safe_ratio(self.duplicate_keyword_count, self.keyword_count)


# ── Keywords ──────────────────────────────────────────────────────────────────


class KeywordLengthDistribution(_Section):
    """Keyword counts by word length: short (1–2), medium (3), long (4+)."""

    short: Count = 0
    medium: Count = 0
    long: Count = 0

    @property
    def total(self) -> int:
        return self.short + self.medium + self.long


class MatchTypeDistribution(_Section):
    exact: Count = 0
    phrase: Count = 0
    broad: Count = 0

    @property
    def total(self) -> int:
        return self.exact + self.phrase + self.broad

    def rate(self, match_type: str) -> float:
        return safe_ratio(getattr(self, match_type), self.total)


class KeywordMetrics(_Section):
    length_distribution: KeywordLengthDistribution = KeywordLengthDistribution()
    match_type_distribution: MatchTypeDistribution = MatchTypeDistribution()
    brand_keyword_rate: Rate = 0.0
    has_brand_campaigns: bool = False
    low_quality_keyword_rate: Rate = 0.0
    non_converting_keyword_rate: Rate = 0.0


class NegativeKeywordMetrics(_Section):
    campaign_level_count: Count = 0
    ad_group_level_count: Count = 0
    shared_set_count: Count = 0
    campaigns_using_shared_sets: Count = 0
    has_exact_negatives: bool = False
    has_phrase_negatives: bool = False
    exact_negative_rate: Rate = 0.0

    @property
    def total_count(self) -> int:
        return self.campaign_level_count + self.ad_group_level_count


# ── Bidding ───────────────────────────────────────────────────────────────────


class BiddingStrategyCounts(_Section):
    """Number of campaigns using each bid strategy type."""

    target_cpa: Count = 0
    target_roas: Count = 0
    maximize_conversions: Count = 0
    maximize_conversion_value: Count = 0
    manual_cpc: Count = 0
    enhanced_cpc: Count = 0
    target_impression_share: Count = 0
    other: Count = 0

    @property
    def smart_count(self) -> int:
        """Campaigns on conversion-based automated bidding."""
        return (
            self.target_cpa
            + self.target_roas
            + self.maximize_conversions
            + self.maximize_conversion_value
        )


class BiddingMetrics(_Section):
    strategies: BiddingStrategyCounts = BiddingStrategyCounts()
    has_device_bid_adjustments: bool = False
    has_location_bid_adjustments: bool = False
    has_audience_bid_adjustments: bool = False
    has_schedule_bid_adjustments: bool = False
    budget_lost_impression_share: Rate = 0.0


# ── Ads & extensions ──────────────────────────────────────────────────────────


class AdMetrics(_Section):
    rsa_rate: Rate = 0.0
    average_headlines_per_rsa: Amount = 0.0
    average_descriptions_per_rsa: Amount = 0.0
    average_ads_per_ad_group: Amount = 0.0
    single_ad_ad_group_rate: Rate = 0.0
    disapproved_rate: Rate = 0.0
    limited_by_policy_rate: Rate = 0.0


class ExtensionMetrics(_Section):
    extension_type_count: Count = 0
    impressions_with_extensions: Count = 0


# ── Quality score ─────────────────────────────────────────────────────────────


class QualityScoreMetrics(_Section):
    """Quality score and its three component ratings.

    ``keywords_by_quality_score`` maps a quality score (1–10) to the number of
    keywords holding it.  Keywords without a score are simply absent.
    """

    average_quality_score: Annotated[float, Field(ge=0.0, le=10.0)] = 0.0
    keywords_by_quality_score: dict[int, Count] = {}
    good_ad_relevance_rate: Rate = 0.0
    poor_ad_relevance_rate: Rate = 0.0
    good_expected_ctr_rate: Rate = 0.0
    poor_expected_ctr_rate: Rate = 0.0
    good_landing_page_rate: Rate = 0.0
    poor_landing_page_rate: Rate = 0.0
    landing_page_speed_score: Score100 = 0.0

    @field_validator("keywords_by_quality_score")
    @classmethod
    def validate_histogram(cls, v: dict[int, int]) -> dict[int, int]:
        bad = sorted(k for k in v if not 1 <= k <= 10)
        if bad:
            raise ValueError(f"Quality score buckets must be 1-10, got {bad}.")
        return v

    def keywords_in_range(self, low: int, high: int) -> int:
        """Number of keywords whose quality score lies in ``[low, high]``."""
        return sum(n for qs, n in self.keywords_by_quality_score.items() if low <= qs <= high)


# ── Conversions, audiences, landing pages, competition ───────────────────────


class ConversionTrackingMetrics(_Section):
    conversion_action_count: Count = 0
    value_tracking_count: Count = 0
    has_phone_call_tracking: bool = False
    has_imported_conversions: bool = False
    has_enhanced_conversions: bool = False
    has_data_driven_attribution: bool = False


class AudienceMetrics(_Section):
    remarketing_list_count: Count = 0
    active_remarketing_campaigns: Count = 0
    has_customer_match: bool = False
    customer_match_list_count: Count = 0
    has_in_market_audiences: bool = False
    has_affinity_audiences: bool = False
    in_market_audience_count: Count = 0
    affinity_audience_count: Count = 0
    audience_bid_adjustment_rate: Rate = 0.0


class LandingPageMetrics(_Section):
    conversion_rate: Percent = 0.0
    is_mobile_friendly: bool = False
    mobile_conversion_rate: Percent = 0.0
    desktop_conversion_rate: Percent = 0.0
    has_ab_testing: bool = False
    ab_test_count: Count = 0


class CompetitiveMetrics(_Section):
    has_auction_insights_data: bool = False
    impression_share: Rate = 0.0
    top_impression_share: Rate = 0.0
    absolute_top_impression_share: Rate = 0.0
    rank_lost_impression_share: Rate = 0.0
    has_competitor_campaigns: bool = False
    competitor_keyword_count: Count = 0
    has_competitive_ad_copy: bool = False
    competitive_messaging_score: Score100 = 0.0


# ── Snapshot root ─────────────────────────────────────────────────────────────


class MetricsSnapshot(_Section):
    """Everything the grader knows about one account at one point in time.

    Attributes:
        schema_version: Version of the field-naming contract above.  Only
            ``SNAPSHOT_SCHEMA_VERSION`` is accepted.
        campaigns: Per-campaign names and channel types, used by the naming
            and segmentation checks.  Counts elsewhere come from
            ``structure`` so a collector may omit this list.
    """

    schema_version: int = SNAPSHOT_SCHEMA_VERSION
    account: AccountInfo = AccountInfo()
    performance: PerformanceTotals = PerformanceTotals()
    structure: AccountStructure = AccountStructure()
    campaigns: tuple[CampaignSummary, ...] = ()
    keywords: KeywordMetrics = KeywordMetrics()
    negative_keywords: NegativeKeywordMetrics = NegativeKeywordMetrics()
    bidding: BiddingMetrics = BiddingMetrics()
    ads: AdMetrics = AdMetrics()
    extensions: ExtensionMetrics = ExtensionMetrics()
    quality_score: QualityScoreMetrics = QualityScoreMetrics()
    conversion_tracking: ConversionTrackingMetrics = ConversionTrackingMetrics()
    audiences: AudienceMetrics = AudienceMetrics()
    landing_page: LandingPageMetrics = LandingPageMetrics()
    competitive: CompetitiveMetrics = CompetitiveMetrics()

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: int) -> int:
        if v != SNAPSHOT_SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported snapshot schema_version {v}; "
                f"this grader reads version {SNAPSHOT_SCHEMA_VERSION}."
            )
        return v

    def is_empty(self) -> bool:
        """True if no field carries anything beyond its neutral default."""
        return self == MetricsSnapshot()
