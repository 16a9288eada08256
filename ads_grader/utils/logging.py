"""
Logging setup for the Ads Account Grader.

Call ``configure_logging(config)`` once at CLI entry (before any grading work)
to set up the root logger with the configured level and optional file handler.

All internal modules use ``logging.getLogger(__name__)`` — the grading core
never calls ``configure_logging`` or ``basicConfig`` itself, so embedding
applications keep control of their own handlers.

Grading records carry ``extra=log_context(customer_id, category, criterion)``.
Plain lines end with a ``[customer_id=... criterion=...]`` tag; JSON lines
(``json_format = true`` in config/default.toml [logging]) carry the same keys
at the top level::

    {"ts": "2026-02-24T15:00:00Z", "level": "WARNING", "logger": "ads_grader.grader",
     "msg": "...", "customer_id": "123-456-7890", "category": "landingpageoptimization",
     "criterion": "ab_testing"}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ads_grader.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Grading context carried on records via ``extra=log_context(...)``.
CONTEXT_FIELDS = ("customer_id", "category", "criterion")

# Attributes every LogRecord carries; anything else came from ``extra=``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def log_context(customer_id: str = "", category: str = "", criterion: str = "") -> dict[str, str]:
    """Build an ``extra=`` dict naming the account and criterion a record concerns.

    Empty values are dropped so records outside a grading run stay untagged.
    """
    ctx = {"customer_id": customer_id, "category": category, "criterion": criterion}
    return {key: str(val) for key, val in ctx.items() if val}


class _PlainFormatter(logging.Formatter):
    """``LOG_FORMAT`` lines with a trailing ``[customer_id=... criterion=...]`` tag."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        tags = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_FIELDS
            if getattr(record, key, "")
        ]
        return f"{line} [{' '.join(tags)}]" if tags else line


class _JsonFormatter(logging.Formatter):
    """Emit one JSON object per log line.

    Fields: ``ts``, ``level``, ``logger``, ``msg``.
    Extra fields from ``extra=`` kwargs are included at the top level.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        for key, val in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = val
        return json.dumps(payload, default=str)


def configure_logging(config: "LoggingConfig") -> None:
    """Configure the root logger from a ``LoggingConfig`` instance.

    Sets up:
      - StreamHandler (stderr) at the configured level, so stdout stays
        clean for report output.
      - Optional FileHandler if ``config.log_file`` is set.
      - JSON line format if ``config.json_format`` is ``True``.

    Args:
        config: Logging configuration section from ``AppConfig``.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    formatter: logging.Formatter
    if config.json_format:
        formatter = _JsonFormatter()
    else:
        formatter = _PlainFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    handlers.append(console)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)
