"""
Export helpers for downstream report and notification collaborators.

All functions that write to disk return the written ``Path``.

``build_report_payload()`` is the hand-off shape for the spreadsheet and
email collaborators: the full result plus the two bounded recommendation
views (``reporting.report_top_n`` and ``reporting.email_top_n``).  It carries
no timestamps, so the same snapshot always exports the same bytes.

CSV exports are flat (one row per recommendation) so they load directly in
a spreadsheet without any pre-processing step.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ads_grader.models.grading import GradingResult
from ads_grader.scoring.prioritizer import top_n

if TYPE_CHECKING:
    from ads_grader.config import ReportingConfig

RECOMMENDATION_COLUMNS = ["rank", "category", "severity", "impact", "text"]


def build_report_payload(result: GradingResult, reporting: "ReportingConfig") -> dict[str, Any]:
    """Assemble the JSON-serialisable hand-off payload.

    Args:
        result:    Finished grading result.
        reporting: ``AppConfig.reporting`` (top-N sizes).

    Returns:
        Dict with ``result`` (full ``GradingResult`` dump),
        ``report_recommendations`` and ``email_recommendations``.
    """
    recs = result.prioritized_recommendations
    return {
        "result": result.model_dump(mode="json"),
        "report_recommendations": [
            r.model_dump(mode="json") for r in top_n(recs, reporting.report_top_n)
        ],
        "email_recommendations": [
            r.model_dump(mode="json") for r in top_n(recs, reporting.email_top_n)
        ],
    }


def flatten_recommendations_for_export(result: GradingResult) -> list[dict]:
    """One flat row per prioritized recommendation, 1-based ``rank``."""
    return [
        {
            "rank":     rank,
            "category": rec.category,
            "severity": rec.severity.value,
            "impact":   rec.impact,
            "text":     rec.text,
        }
        for rank, rec in enumerate(result.prioritized_recommendations, start=1)
    ]


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file (parent dirs created if missing)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records and not fieldnames:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path
