"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept a ``GradingResult`` (or parts of one) and return plain
multi-line strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Excluded criteria
-----------------
A category whose score ignores one or more criteria (evaluator fault or no
result) is flagged with ``*`` in the summary table, and the warning block
lists the reason.
"""

from __future__ import annotations

from typing import Sequence

from ads_grader.models.grading import GradingResult, GradingWarning, Recommendation
from ads_grader.taxonomy.categories import CATEGORY_NAMES


# ── Grade summary ─────────────────────────────────────────────────────────────


def format_grade_summary(result: GradingResult, account_name: str = "") -> str:
    """Format the overall grade and per-category scores as an ASCII table.

    Example::

        === Account Grade ===
          Account: Acme Outdoor
          Overall: 78.4  (C)

          Category                          Weight   Score  Grade
          -------------------------------------------------------
          Campaign Organization               10.0    85.0      B
          Conversion Tracking                 15.0    60.0      D *

    Args:
        result:       Finished grading result.
        account_name: Optional label for the header.

    Returns:
        Multi-line string.
    """
    overall = result.overall_grade
    lines: list[str] = []
    lines.append("")
    lines.append("=== Account Grade ===")
    if account_name:
        lines.append(f"  Account: {account_name}")
    lines.append(f"  Overall: {overall.score:.1f}  ({overall.letter})")
    lines.append("")

    header = f"  {'Category':<32}  {'Weight':>6}  {'Score':>6}  {'Grade':>5}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))

    flagged = False
    for category in result.category_results.values():
        if not category.evaluated:
            score_str, grade_str = "n/a", "-"
        else:
            score_str, grade_str = f"{category.score:.1f}", str(category.letter)
        marker = " *" if category.excluded_criteria else ""
        flagged = flagged or bool(marker)
        lines.append(
            f"  {category.name[:32]:<32}  {category.weight:>6.1f}  "
            f"{score_str:>6}  {grade_str:>5}{marker}"
        )

    if flagged:
        lines.append("")
        lines.append("  * score excludes one or more criteria (see warnings)")

    return "\n".join(lines)


# ── Recommendations ───────────────────────────────────────────────────────────


def format_recommendations(
    recommendations: Sequence[Recommendation],
    title: str = "Top Recommendations",
) -> str:
    """Format prioritized recommendations, one numbered entry each.

    Args:
        recommendations: Already-ordered recommendations (e.g. a ``top_n`` view).
        title:           Section header.

    Returns:
        Multi-line string.
    """
    lines: list[str] = ["", f"=== {title} ==="]
    if not recommendations:
        lines.append("  (no recommendations: every criterion is in its top band)")
        return "\n".join(lines)

    for rank, rec in enumerate(recommendations, start=1):
        lines.append(
            f"  {rank:>2}. [{rec.severity.value:<8}] {rec.category} (impact {rec.impact:.1f})"
        )
        lines.append(f"      {rec.text}")
    return "\n".join(lines)


# ── Warnings ──────────────────────────────────────────────────────────────────


def format_warnings(warnings: Sequence[GradingWarning]) -> str:
    """Format run warnings; returns an empty string when there are none."""
    if not warnings:
        return ""
    lines: list[str] = ["", "=== Warnings ==="]
    for w in warnings:
        where = CATEGORY_NAMES.get(w.category, str(w.category))
        lines.append(f"  [{w.kind}] {where}: {w.message}")
    return "\n".join(lines)
