"""Tests for tv_optimizer.reporting.export."""

from __future__ import annotations

import csv
import json
from pathlib import Path

from tv_optimizer.models.channel import OptimizationResult
from tv_optimizer.reporting.export import (
    EXPORT_FIELDNAMES,
    build_results_payload,
    export_to_csv,
    export_to_json,
    flatten_results_for_export,
)
from tv_optimizer.taxonomy.channel_taxonomy import Priority, Recommendation


# ── export_to_csv ─────────────────────────────────────────────────────────────


def test_export_to_csv_basic(tmp_path: Path) -> None:
    """Writes a valid CSV with correct headers and values."""
    records = [
        {"channel": "Star Plus", "santoor_reach": 12.4, "recommendation": "MAINTAIN"},
        {"channel": "Colors", "santoor_reach": 6.5, "recommendation": "INCREASE"},
    ]
    out = tmp_path / "test.csv"
    result = export_to_csv(records, out)

    assert result == out
    with out.open(encoding="utf-8") as f:
        reader = list(csv.DictReader(f))
    assert len(reader) == 2
    assert reader[0]["channel"] == "Star Plus"
    assert reader[1]["recommendation"] == "INCREASE"


def test_export_to_csv_custom_fieldnames(tmp_path: Path) -> None:
    """Custom fieldnames control column order; extra keys are dropped."""
    out = tmp_path / "cols.csv"
    export_to_csv([{"a": 1, "b": 2, "c": 3}], out, fieldnames=["c", "a"])

    with out.open(encoding="utf-8") as f:
        header = f.readline().strip()
    assert header == "c,a"


def test_export_to_csv_empty_with_fieldnames_writes_header(tmp_path: Path) -> None:
    out = export_to_csv([], tmp_path / "empty.csv", fieldnames=["channel", "gap"])
    assert out.read_text(encoding="utf-8").strip() == "channel,gap"


def test_export_to_csv_empty_without_fieldnames(tmp_path: Path) -> None:
    out = export_to_csv([], tmp_path / "empty.csv")
    assert out.read_text(encoding="utf-8") == ""


def test_export_creates_parent_dirs(tmp_path: Path) -> None:
    out = export_to_json({"x": 1}, tmp_path / "nested" / "deeper" / "out.json")
    assert json.loads(out.read_text(encoding="utf-8")) == {"x": 1}


# ── flatten_results_for_export ────────────────────────────────────────────────


class TestFlattenResults:
    def test_row_per_record_with_verdict(self, make_record):
        recs = [
            make_record("Colors Kannada", lifebuoy_reach=11.2, mysore_sandal_reach=12.5,
                        atc_index=112.5, index_vs_competition=108.8),
            make_record("Udaya TV", santoor_reach=0, max_comp_reach=0, channel_share=0),
        ]
        results = {
            "Colors Kannada": OptimizationResult(
                channel="Colors Kannada", recommendation=Recommendation.MAINTAIN,
                priority=Priority.LOW, reason="Leading competition",
            )
        }
        rows = flatten_results_for_export(
            recs, results, market="Karnataka", scr="Bangalore",
            competitors=["lifebuoy", "mysore_sandal"],
        )
        assert len(rows) == 2
        first = rows[0]
        assert list(first) == EXPORT_FIELDNAMES
        assert first["market"] == "Karnataka"
        assert first["competitor_2"] == "mysore_sandal"
        assert first["competitor_2_reach"] == 12.5
        assert first["status"] == "LEADING"
        assert first["recommendation"] == "MAINTAIN"
        assert rows[1]["recommendation"] == ""
        assert rows[1]["status"] == "INACTIVE"

    def test_without_results(self, make_record):
        rows = flatten_results_for_export([make_record("A")])
        assert rows[0]["recommendation"] == ""
        assert rows[0]["atc_index"] == ""

    def test_csv_round_trip_columns(self, make_record, tmp_path):
        rows = flatten_results_for_export([make_record("A")], market="UP", scr="UP Overall")
        out = export_to_csv(rows, tmp_path / "r.csv", fieldnames=EXPORT_FIELDNAMES)
        with out.open(encoding="utf-8") as f:
            assert next(csv.reader(f)) == EXPORT_FIELDNAMES


def test_build_results_payload():
    payload = build_results_payload([{"channel": "A"}], "UP", "UP Overall", 15, 70)
    assert payload["schema_version"] == "v1"
    assert payload["market"] == "UP"
    assert payload["intensity"] == 15
    assert payload["channels"] == [{"channel": "A"}]
    assert "generated_at" in payload
