"""
Error taxonomy for the grading engine.

Every error raised deliberately by ``ads_grader`` derives from ``GraderError``
so callers (the CLI in particular) can catch one type and report a single
descriptive line.

  ConfigurationError        — weights, thresholds, or evaluator registry are
                              misconfigured.  Raised before any scoring runs.
  SnapshotPreconditionError — no usable metrics snapshot was supplied.
  EvaluatorFaultError       — an evaluator raised while the run is in
                              ``abort`` mode.
  GradingError              — no category produced a score.

A missing metric is never an error: snapshot fields default to neutral
values and ratios over a zero denominator resolve to 0.
"""

from __future__ import annotations

from typing import Optional


class GraderError(RuntimeError):
    """Base class for all grading failures."""


class ConfigurationError(GraderError):
    """Raised when grading configuration or category definitions are invalid."""


class SnapshotPreconditionError(GraderError):
    """Raised when the metrics snapshot is missing, empty, or malformed."""


class EvaluatorFaultError(GraderError):
    """Raised when a criterion evaluator fails and the run must abort.

    Attributes:
        criterion: Key of the criterion whose evaluator raised.
        category:  Key of the owning category.
    """

    def __init__(self, criterion: str, category: str, cause: Optional[BaseException] = None) -> None:
        self.criterion = criterion
        self.category  = category
        detail = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Evaluator for criterion '{criterion}' in category '{category}' failed{detail}"
        )


class GradingError(GraderError):
    """Raised when a grading run cannot produce an overall grade."""
