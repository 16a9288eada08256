"""
Ingestion layer — reads collector output into a ``MetricsSnapshot``.

Submodules:
  snapshot_loader — JSON snapshot files (bare or ``_meta``/``data`` envelope)
"""
