"""
Tests for ingestion/snapshot_loader.py — parse_snapshot(), load_snapshot().

What we test
------------
1. Bare snapshot payloads and collector envelopes both parse.
2. Envelope metadata is dropped; only ``data`` reaches the model.
3. Non-object payloads, non-object envelope data, unknown fields, and
   out-of-range values raise SnapshotPreconditionError.
4. load_snapshot(): missing file → FileNotFoundError; invalid JSON or
   non-UTF-8 bytes → SnapshotPreconditionError; a valid file round-trips
   to the same model.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ads_grader.exceptions import SnapshotPreconditionError
from ads_grader.ingestion.snapshot_loader import load_snapshot, parse_snapshot
from ads_grader.models.snapshot import MetricsSnapshot


def _write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestParseSnapshot:
    def test_bare_payload(self, healthy_payload) -> None:
        snap = parse_snapshot(healthy_payload)
        assert isinstance(snap, MetricsSnapshot)
        assert snap.account.name == "Acme Outdoor"
        assert len(snap.campaigns) == 10

    def test_envelope_payload(self, healthy_payload) -> None:
        envelope = {
            "_meta": {"source": "ads_api", "written_at": "2026-02-24T15:00:00Z"},
            "data": healthy_payload,
        }
        assert parse_snapshot(envelope) == parse_snapshot(healthy_payload)

    def test_envelope_without_meta(self, healthy_payload) -> None:
        assert parse_snapshot({"data": healthy_payload}).structure.campaign_count == 10

    @pytest.mark.parametrize("payload", [[], "snapshot", 42, None])
    def test_non_object_rejected(self, payload) -> None:
        with pytest.raises(SnapshotPreconditionError, match="JSON object"):
            parse_snapshot(payload)

    def test_envelope_data_must_be_object(self) -> None:
        with pytest.raises(SnapshotPreconditionError, match="'data'"):
            parse_snapshot({"_meta": {}, "data": [1, 2]})

    def test_unknown_field_rejected(self, healthy_payload) -> None:
        healthy_payload["structure"]["keywordCount"] = 10
        with pytest.raises(SnapshotPreconditionError, match="Invalid metrics snapshot"):
            parse_snapshot(healthy_payload)

    def test_out_of_range_rate_rejected(self, healthy_payload) -> None:
        healthy_payload["bidding"]["budget_lost_impression_share"] = 12.0
        with pytest.raises(SnapshotPreconditionError):
            parse_snapshot(healthy_payload)

    def test_empty_object_parses_to_empty_snapshot(self) -> None:
        assert parse_snapshot({}).is_empty()


class TestLoadSnapshot:
    def test_round_trip(self, tmp_path: Path, healthy_payload) -> None:
        path = _write_json(tmp_path / "acme.json", healthy_payload)
        assert load_snapshot(path) == parse_snapshot(healthy_payload)

    def test_accepts_str_path(self, tmp_path: Path, healthy_payload) -> None:
        path = _write_json(tmp_path / "acme.json", healthy_payload)
        assert load_snapshot(str(path)).account.customer_id == "123-456-7890"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_snapshot(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotPreconditionError, match="not valid JSON"):
            load_snapshot(path)

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"account": {"name": "\xff\xfe"}}')
        with pytest.raises(SnapshotPreconditionError, match="not UTF-8") as excinfo:
            load_snapshot(path)
        assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)

    def test_dumped_snapshot_reloads(self, tmp_path: Path, healthy_snapshot) -> None:
        path = tmp_path / "dump.json"
        path.write_text(healthy_snapshot.model_dump_json(), encoding="utf-8")
        assert load_snapshot(path) == healthy_snapshot
