"""
Snapshot loading — read a collector's metrics payload from disk.

The collector writes one JSON file per account.  Two shapes are accepted:

Bare snapshot::

    {"schema_version": 1, "account": {...}, "structure": {...}, ...}

Envelope (the collector's own provenance kept alongside the data)::

    {
      "_meta": {"source": "ads_api", "customer_id": "123-456-7890",
                "written_at": "2026-02-24T15:00:00Z"},
      "data":  {"schema_version": 1, "account": {...}, ...}
    }

``_meta`` is logged and otherwise ignored; it never reaches the grader, so
grading stays independent of when or where the snapshot was collected.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ads_grader.exceptions import SnapshotPreconditionError
from ads_grader.models.snapshot import MetricsSnapshot

logger = logging.getLogger(__name__)


def parse_snapshot(payload: Any) -> MetricsSnapshot:
    """Validate a decoded JSON payload into a ``MetricsSnapshot``.

    Args:
        payload: Bare snapshot dict, or an envelope with ``_meta`` and ``data``.

    Returns:
        Validated, frozen ``MetricsSnapshot``.

    Raises:
        SnapshotPreconditionError: If the payload is not an object or fails
            validation (unknown field, out-of-range rate, wrong version).
    """
    if not isinstance(payload, dict):
        raise SnapshotPreconditionError(
            f"Snapshot payload must be a JSON object, got {type(payload).__name__}."
        )

    if "data" in payload and set(payload) <= {"_meta", "data"}:
        meta = payload.get("_meta") or {}
        if meta:
            logger.info(
                "Snapshot envelope: source=%s written_at=%s",
                meta.get("source", "?"), meta.get("written_at", "?"),
            )
        payload = payload["data"]
        if not isinstance(payload, dict):
            raise SnapshotPreconditionError("Snapshot envelope 'data' must be a JSON object.")

    try:
        return MetricsSnapshot.model_validate(payload)
    except ValidationError as exc:
        raise SnapshotPreconditionError(f"Invalid metrics snapshot:\n{exc}") from exc


def load_snapshot(path: Path) -> MetricsSnapshot:
    """Read and validate a snapshot JSON file.

    Args:
        path: Path to the collector's JSON output.

    Returns:
        Validated ``MetricsSnapshot``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        SnapshotPreconditionError: If the file is not UTF-8 JSON or fails
            validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise SnapshotPreconditionError(f"Snapshot file {path} is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SnapshotPreconditionError(f"Snapshot file {path} is not valid JSON: {exc}") from exc

    snapshot = parse_snapshot(payload)
    logger.info("Loaded snapshot %s for account %r", path, snapshot.account.name)
    return snapshot
