"""
Ads Account Grader — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (grade a snapshot, print the catalogue, ...).
  5. Report result to stdout.

Install and run::

    pip install -e .
    ads-grader --help
    ads-grader validate-config
    ads-grader list-criteria
    ads-grader grade data/snapshots/acme.json --output data/outputs/acme.json
    ads-grader grade data/snapshots/acme.json --save
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="ads-grader",
    help="Grade an advertising account's health from a metrics snapshot.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from ads_grader.config import load_config
    from ads_grader.exceptions import ConfigurationError

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ConfigurationError as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from ads_grader.utils.logging import configure_logging
    configure_logging(config.logging)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("grade")
def grade(
    snapshot_path: str = typer.Argument(..., help="Path to the metrics snapshot JSON."),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        help="Write the report payload (full result + top-N views) to this JSON file.",
    ),
    csv_path: Optional[str] = typer.Option(
        None,
        "--csv",
        help="Write all prioritized recommendations to this CSV file.",
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        help="Recommendations to print (default: reporting.report_top_n).",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Abort on the first evaluator failure instead of excluding the criterion.",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help=(
            "Write <stem>_report.json and <stem>_recommendations.csv to "
            "reporting.output_dir (explicit --output / --csv paths take precedence)."
        ),
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Grade one account snapshot and print the summary.

    Exits with code 1 if the snapshot is missing or invalid, or grading fails.
    """
    from ads_grader.exceptions import GraderError
    from ads_grader.grader import AccountGrader
    from ads_grader.ingestion.snapshot_loader import load_snapshot
    from ads_grader.reporting.export import (
        RECOMMENDATION_COLUMNS,
        build_report_payload,
        export_to_csv,
        export_to_json,
        flatten_recommendations_for_export,
    )
    from ads_grader.reporting.formatters import (
        format_grade_summary,
        format_recommendations,
        format_warnings,
    )
    from ads_grader.scoring.prioritizer import top_n

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if strict:
        config = config.model_copy(
            update={"grading": config.grading.model_copy(update={"on_evaluator_error": "abort"})}
        )

    if top is not None and top < 0:
        typer.echo("[ERROR] --top must be non-negative.", err=True)
        raise typer.Exit(code=1)

    try:
        snapshot = load_snapshot(Path(snapshot_path))
        result = AccountGrader(config).grade(snapshot)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except GraderError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    n = config.reporting.report_top_n if top is None else top
    typer.echo(format_grade_summary(result, snapshot.account.name))
    typer.echo(format_recommendations(top_n(result.prioritized_recommendations, n)))
    warnings_block = format_warnings(result.warnings)
    if warnings_block:
        typer.echo(warnings_block)

    if save:
        out_dir = Path(config.reporting.output_dir)
        stem = Path(snapshot_path).stem
        output = output or str(out_dir / f"{stem}_report.json")
        csv_path = csv_path or str(out_dir / f"{stem}_recommendations.csv")

    if output:
        written = export_to_json(build_report_payload(result, config.reporting), Path(output))
        typer.echo(f"\n  Report payload written to: {written}")
    if csv_path:
        written = export_to_csv(
            flatten_recommendations_for_export(result),
            Path(csv_path),
            fieldnames=RECOMMENDATION_COLUMNS,
        )
        typer.echo(f"  Recommendations CSV written to: {written}")

    typer.echo("")
    typer.echo(f"[OK] Overall grade {result.overall_grade.letter} ({result.overall_grade.score:.1f}).")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Also checks the category catalogue and evaluator registry against the
    configured weights.  Exits with code 1 if anything fails validation.
    """
    from ads_grader.exceptions import GraderError
    from ads_grader.grader import AccountGrader

    config = _load_config_or_exit(config_path)

    try:
        grader = AccountGrader(config)
    except GraderError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    t = config.grade_thresholds
    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Grade thresholds:  A>={t.a:g}  B>={t.b:g}  C>={t.c:g}  D>={t.d:g}")
    typer.echo(f"  Categories:        {len(grader.definitions)}")
    typer.echo(f"  Criteria:          {len(grader.evaluators)}")
    typer.echo(f"  Evaluator errors:  {config.grading.on_evaluator_error}")
    typer.echo(f"  Worker threads:    {config.grading.max_workers}")
    typer.echo(f"  Report / email N:  {config.reporting.report_top_n} / {config.reporting.email_top_n}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("list-criteria")
def list_criteria(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Print every category and criterion with its key and weight."""
    from ads_grader.exceptions import GraderError
    from ads_grader.taxonomy.categories import build_category_definitions

    config = _load_config_or_exit(config_path)

    try:
        definitions = build_category_definitions(config.category_weights)
    except GraderError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    for definition in definitions:
        typer.echo("")
        typer.echo(f"[{definition.key}] {definition.name}  (weight {definition.weight:g})")
        for crit in definition.criteria:
            typer.echo(f"    {crit.weight:>4g}  {crit.key:<28}  {crit.name}")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
