"""
Tests for config.py — AppConfig sub-models and load_config().

Covers:
  - Built-in defaults: weights sum to 100, thresholds descending
  - Category weights that do not sum to 100 are rejected
  - Negative category weights are rejected
  - Grade thresholds out of order are rejected
  - Grading / reporting / logging field validation
  - load_config(): reads TOML, merges local.toml, applies ADS_GRADER_* env vars
  - load_config(): missing file → FileNotFoundError, bad values → ConfigurationError
  - The committed config/default.toml loads cleanly
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from ads_grader.config import (
    AppConfig,
    BestPractices,
    CategoryWeights,
    GradeThresholds,
    GradingConfig,
    LoggingConfig,
    ReportingConfig,
    load_config,
)
from ads_grader.exceptions import ConfigurationError

_ENV_VARS = (
    "ADS_GRADER_LOG_LEVEL",
    "ADS_GRADER_MAX_WORKERS",
    "ADS_GRADER_ON_EVALUATOR_ERROR",
    "ADS_GRADER_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write_toml(path: Path, body: str) -> Path:
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


# ── Sub-models ────────────────────────────────────────────────────────────────


class TestDefaults:
    def test_default_weights_sum_to_100(self) -> None:
        assert sum(CategoryWeights().model_dump().values()) == pytest.approx(100.0)

    def test_default_thresholds(self) -> None:
        t = AppConfig().grade_thresholds
        assert (t.a, t.b, t.c, t.d) == (90.0, 80.0, 70.0, 60.0)

    def test_default_error_policy_is_exclude(self) -> None:
        assert AppConfig().grading.on_evaluator_error == "exclude"
        assert AppConfig().grading.max_workers == 1


class TestCategoryWeights:
    def test_sum_below_100_rejected(self) -> None:
        with pytest.raises(ValidationError, match="sum to 100"):
            CategoryWeights(campaign_organization=5.0)

    def test_sum_above_100_rejected(self) -> None:
        with pytest.raises(ValidationError, match="sum to 100"):
            CategoryWeights(conversion_tracking=25.0)

    def test_rebalanced_weights_accepted(self) -> None:
        weights = CategoryWeights(conversion_tracking=20.0, competitive_analysis=2.0)
        assert weights.conversion_tracking == 20.0

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(ValidationError, match="non-negative"):
            CategoryWeights(campaign_organization=-10.0, conversion_tracking=35.0)


class TestGradeThresholds:
    def test_out_of_order_rejected(self) -> None:
        with pytest.raises(ValidationError, match="descending"):
            GradeThresholds(a=80, b=90)

    def test_equal_bounds_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GradeThresholds(c=80)

    def test_above_100_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GradeThresholds(a=101)


class TestOtherSections:
    def test_best_practice_targets_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            BestPractices(ads_per_ad_group=0)

    def test_min_quality_score_range(self) -> None:
        with pytest.raises(ValidationError):
            BestPractices(min_quality_score=11)

    def test_unknown_error_policy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GradingConfig(on_evaluator_error="ignore")

    def test_max_workers_positive(self) -> None:
        with pytest.raises(ValidationError):
            GradingConfig(max_workers=0)

    def test_negative_top_n_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ReportingConfig(email_top_n=-1)

    def test_log_level_normalised(self) -> None:
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_bad_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")


# ── load_config ───────────────────────────────────────────────────────────────


class TestLoadConfig:
    def test_committed_default_toml_loads(self) -> None:
        cfg = load_config()
        assert isinstance(cfg, AppConfig)
        assert cfg.category_weights == CategoryWeights()

    def test_reads_explicit_file(self, tmp_path: Path) -> None:
        path = _write_toml(
            tmp_path / "grader.toml",
            """
            debug = true

            [grade_thresholds]
            a = 95.0

            [reporting]
            report_top_n = 3
            """,
        )
        cfg = load_config(path)
        assert cfg.debug is True
        assert cfg.grade_thresholds.a == 95.0
        assert cfg.grade_thresholds.b == 80.0
        assert cfg.reporting.report_top_n == 3

    def test_local_toml_overrides(self, tmp_path: Path) -> None:
        path = _write_toml(
            tmp_path / "grader.toml",
            "[grading]\nmax_workers = 2\non_evaluator_error = \"exclude\"\n",
        )
        _write_toml(tmp_path / "local.toml", "[grading]\nmax_workers = 6\n")
        cfg = load_config(path)
        assert cfg.grading.max_workers == 6
        assert cfg.grading.on_evaluator_error == "exclude"

    def test_env_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = _write_toml(tmp_path / "grader.toml", "[logging]\nlevel = \"INFO\"\n")
        monkeypatch.setenv("ADS_GRADER_LOG_LEVEL", "debug")
        monkeypatch.setenv("ADS_GRADER_MAX_WORKERS", "4")
        monkeypatch.setenv("ADS_GRADER_ON_EVALUATOR_ERROR", "ABORT")
        monkeypatch.setenv("ADS_GRADER_DEBUG", "yes")
        cfg = load_config(path)
        assert cfg.logging.level == "DEBUG"
        assert cfg.grading.max_workers == 4
        assert cfg.grading.on_evaluator_error == "abort"
        assert cfg.debug is True

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_invalid_weights_raise_configuration_error(self, tmp_path: Path) -> None:
        path = _write_toml(
            tmp_path / "grader.toml",
            "[category_weights]\nconversion_tracking = 50.0\n",
        )
        with pytest.raises(ConfigurationError, match="sum to 100"):
            load_config(path)
