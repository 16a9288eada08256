"""
Recommendation prioritization: one flat list ordered by impact.

Ordering
--------
Recommendations are sorted by ``impact`` descending with Python's stable
``sorted()``.  Impacts are hand-tuned constants (0.6, 0.7, 0.8 ...) so ties
are common; tied recommendations keep the order they were encountered in
(category declaration order, then criterion order).

Deduplication
-------------
Two recommendations with the same ``(category, text)`` collapse into one.
The survivor keeps the position of the first occurrence and the highest
impact seen.  Identical advice from different categories is kept.

The returned tuples are new objects; nothing aliases a ``CategoryResult``.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ads_grader.models.grading import Recommendation, Severity, severity_for

__all__ = ["prioritize", "top_n", "severity_for", "Severity"]


def prioritize(
    groups: Iterable[tuple[str, Iterable[Recommendation]]],
) -> tuple[Recommendation, ...]:
    """Merge per-category recommendation lists and sort them by impact.

    Args:
        groups: ``(category_name, recommendations)`` pairs in category
                iteration order.  A recommendation whose ``category`` differs
                from its group name is re-tagged with the group name.

    Returns:
        Deduplicated recommendations, impact descending, ties in input order.
    """
    merged: list[Recommendation] = []
    index: dict[tuple[str, str], int] = {}

    for category, recs in groups:
        for rec in recs:
            if rec.category != category:
                rec = rec.model_copy(update={"category": category})
            key = (category, rec.text)
            if key in index:
                pos = index[key]
                if rec.impact > merged[pos].impact:
                    merged[pos] = merged[pos].model_copy(update={"impact": rec.impact})
                continue
            index[key] = len(merged)
            merged.append(rec)

    return tuple(sorted(merged, key=lambda r: -r.impact))


def top_n(recommendations: Sequence[Recommendation], n: int) -> tuple[Recommendation, ...]:
    """Return the first ``n`` recommendations as a new tuple.

    Raises:
        ValueError: If ``n`` is negative.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}.")
    return tuple(recommendations[:n])
