"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``ADS_GRADER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The grader, the CLI, and every evaluator receive an explicit ``AppConfig``
instance.  There is no module-level mutable configuration; two graders built
from different configs can run side by side.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ads_grader.exceptions import ConfigurationError

# ── Sub-config models ─────────────────────────────────────────────────────────


class GradeThresholds(BaseModel):
    """Inclusive lower bounds of each letter grade band (score 0–100)."""

    model_config = ConfigDict(frozen=True)

    a: float = 90.0
    b: float = 80.0
    c: float = 70.0
    d: float = 60.0

    @model_validator(mode="after")
    def validate_order(self) -> "GradeThresholds":
        if not 100.0 >= self.a > self.b > self.c > self.d > 0.0:
            raise ValueError(
                "Grade thresholds must be strictly descending within (0, 100]: "
                f"got A={self.a}, B={self.b}, C={self.c}, D={self.d}."
            )
        return self


class BestPractices(BaseModel):
    """Numeric targets the evaluators compare account structure against."""

    model_config = ConfigDict(frozen=True)

    keywords_per_ad_group: int = 20
    ads_per_ad_group: int = 3
    min_extension_types: int = 4
    min_quality_score: float = 7.0
    max_campaigns_per_negative_list: int = 20
    min_ad_groups_per_campaign: int = 2
    max_ad_groups_per_campaign: int = 20

    @field_validator(
        "keywords_per_ad_group",
        "ads_per_ad_group",
        "min_extension_types",
        "max_campaigns_per_negative_list",
        "min_ad_groups_per_campaign",
        "max_ad_groups_per_campaign",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Best-practice targets must be positive, got {v}.")
        return v

    @field_validator("min_quality_score")
    @classmethod
    def validate_quality_score(cls, v: float) -> float:
        if not 1.0 <= v <= 10.0:
            raise ValueError(f"min_quality_score must be in [1, 10], got {v}.")
        return v


class IndustryBenchmarks(BaseModel):
    """Comparison baselines.  ``ctr`` and ``conversion_rate`` are percentages."""

    model_config = ConfigDict(frozen=True)

    ctr: float = 3.17
    conversion_rate: float = 3.75
    cpc: float = 2.69
    quality_score: float = 6.0

    @field_validator("ctr", "conversion_rate", "cpc", "quality_score")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Industry benchmarks must be positive, got {v}.")
        return v


class CategoryWeights(BaseModel):
    """Share (0–100) of the overall score carried by each category.

    Field names are referenced by the category catalogue in
    ``ads_grader.taxonomy.categories``; the ten weights must sum to 100.
    """

    model_config = ConfigDict(frozen=True)

    campaign_organization: float = 10.0
    conversion_tracking: float = 15.0
    keyword_strategy: float = 12.0
    negative_keywords: float = 8.0
    bidding_strategy: float = 12.0
    ad_creative: float = 10.0
    quality_score: float = 10.0
    audience_strategy: float = 8.0
    landing_page: float = 8.0
    competitive_analysis: float = 7.0

    @model_validator(mode="after")
    def validate_weights(self) -> "CategoryWeights":
        weights = self.model_dump()
        negative = sorted(name for name, w in weights.items() if w < 0)
        if negative:
            raise ValueError(f"Category weights must be non-negative: {negative}.")
        total = sum(weights.values())
        if abs(total - 100.0) > 1e-6:
            raise ValueError(f"Category weights must sum to 100, got {total:g}.")
        return self


class GradingConfig(BaseModel):
    """Orchestrator behaviour.

    ``on_evaluator_error``:
      - ``"exclude"`` drops a failing criterion from its category's weighted
        mean and records a warning on the result.
      - ``"abort"`` fails the whole run with ``EvaluatorFaultError``.
    """

    model_config = ConfigDict(frozen=True)

    on_evaluator_error: Literal["exclude", "abort"] = "exclude"
    max_workers: int = 1

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}.")
        return v


class ReportingConfig(BaseModel):
    """Bounded recommendation views handed to report and notification collaborators."""

    model_config = ConfigDict(frozen=True)

    report_top_n: int = 10
    email_top_n: int = 5
    # Default export directory for `grade --save`.
    output_dir: str = "data/outputs"

    @field_validator("report_top_n", "email_top_n")
    @classmethod
    def validate_top_n(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Top-N sizes must be non-negative, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings.  An empty ``log_file`` disables the file handler."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` from TOML + .env, or directly with
    ``AppConfig()`` for the built-in defaults.
    """

    model_config = ConfigDict(frozen=True)

    grade_thresholds: GradeThresholds = GradeThresholds()
    best_practices: BestPractices = BestPractices()
    industry_benchmarks: IndustryBenchmarks = IndustryBenchmarks()
    category_weights: CategoryWeights = CategoryWeights()
    grading: GradingConfig = GradingConfig()
    reporting: ReportingConfig = ReportingConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        ConfigurationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Pass --config or create config/default.toml first."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply ADS_GRADER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    try:
        return _build_app_config(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {config_path}:\n{exc}") from exc


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply ADS_GRADER_* env vars to the raw config dict.

    Supported overrides:
      ADS_GRADER_LOG_LEVEL          → raw["logging"]["level"]
      ADS_GRADER_MAX_WORKERS        → raw["grading"]["max_workers"]
      ADS_GRADER_ON_EVALUATOR_ERROR → raw["grading"]["on_evaluator_error"]
      ADS_GRADER_DEBUG              → raw["debug"]
    """
    if log_level := os.environ.get("ADS_GRADER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if max_workers := os.environ.get("ADS_GRADER_MAX_WORKERS"):
        raw.setdefault("grading", {})["max_workers"] = max_workers

    if on_error := os.environ.get("ADS_GRADER_ON_EVALUATOR_ERROR"):
        raw.setdefault("grading", {})["on_evaluator_error"] = on_error.lower()

    if debug := os.environ.get("ADS_GRADER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        grade_thresholds=GradeThresholds(**raw.get("grade_thresholds", {})),
        best_practices=BestPractices(**raw.get("best_practices", {})),
        industry_benchmarks=IndustryBenchmarks(**raw.get("industry_benchmarks", {})),
        category_weights=CategoryWeights(**raw.get("category_weights", {})),
        grading=GradingConfig(**raw.get("grading", {})),
        reporting=ReportingConfig(**raw.get("reporting", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
