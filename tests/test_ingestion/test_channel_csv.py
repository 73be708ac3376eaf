"""
Tests for tv_optimizer.ingestion.channel_csv — channel sheet import validation.

Covers:
  - parse_channel_csv(): valid file, missing columns, optional fields,
    messy numerics, duplicate channels, empty channel names, empty file
  - REQUIRED_CSV_COLUMNS set completeness
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tv_optimizer.ingestion.channel_csv import REQUIRED_CSV_COLUMNS, parse_channel_csv
from tv_optimizer.models.channel import ChannelRecord


# ── Helpers ────────────────────────────────────────────────────────────────────

def _write_csv(tmp_path: Path, content: str) -> Path:
    """Write CSV content to a temp file and return the path."""
    p = tmp_path / "channels.csv"
    p.write_text(content, encoding="utf-8")
    return p


HEADER = "channel,genre,santoorReach,maxCompReach,gap,channelShare,indexVsCompetition,godrejReach,atcIndex\n"

VALID_CSV = (
    HEADER
    + "Star Plus,Hindi GEC,12.4,10.1,2.3,8.5,122.8,10.1,\n"
    + "Zee Anmol,Hindi GEC,0,3.4,-3.4,1.8,0,3.4,\n"
)


# ── REQUIRED_CSV_COLUMNS ───────────────────────────────────────────────────────

def test_required_columns_set_has_all_mandatory_fields():
    assert "channel" in REQUIRED_CSV_COLUMNS
    assert "genre" in REQUIRED_CSV_COLUMNS
    assert "santoorReach" in REQUIRED_CSV_COLUMNS
    assert "maxCompReach" in REQUIRED_CSV_COLUMNS
    assert "gap" in REQUIRED_CSV_COLUMNS
    assert "channelShare" in REQUIRED_CSV_COLUMNS
    assert "indexVsCompetition" in REQUIRED_CSV_COLUMNS


# ── parse_channel_csv — happy path ─────────────────────────────────────────────

class TestParseChannelCsvValid:
    def test_returns_channel_records(self, tmp_path):
        records = parse_channel_csv(_write_csv(tmp_path, VALID_CSV))
        assert len(records) == 2
        assert all(isinstance(r, ChannelRecord) for r in records)

    def test_values_parsed(self, tmp_path):
        rec = parse_channel_csv(_write_csv(tmp_path, VALID_CSV))[0]
        assert rec.channel == "Star Plus"
        assert rec.santoor_reach == 12.4
        assert rec.index_vs_competition == 122.8
        assert rec.godrej_reach == 10.1

    def test_blank_optional_is_none(self, tmp_path):
        rec = parse_channel_csv(_write_csv(tmp_path, VALID_CSV))[0]
        assert rec.atc_index is None

    def test_missing_index_vs_baseline_defaults_zero(self, tmp_path):
        rec = parse_channel_csv(_write_csv(tmp_path, VALID_CSV))[0]
        assert rec.index_vs_baseline == 0.0

    def test_messy_numbers(self, tmp_path):
        csv_text = HEADER + "Colors,Hindi GEC,6.5%,,-3.3,n/a,66.3,,\n"
        rec = parse_channel_csv(_write_csv(tmp_path, csv_text))[0]
        assert rec.santoor_reach == 6.5
        assert rec.max_comp_reach == 0.0
        assert rec.channel_share == 0.0

    def test_header_whitespace_and_bom_tolerated(self, tmp_path):
        csv_text = (
            "\ufeffchannel, genre ,santoorReach,maxCompReach,gap,channelShare,indexVsCompetition\n"
            "Colors,Hindi GEC,6.5,9.8,-3.3,5.4,66.3\n"
        )
        rec = parse_channel_csv(_write_csv(tmp_path, csv_text))[0]
        assert rec.genre == "Hindi GEC"

    def test_file_order_preserved(self, tmp_path):
        records = parse_channel_csv(_write_csv(tmp_path, VALID_CSV))
        assert [r.channel for r in records] == ["Star Plus", "Zee Anmol"]


# ── parse_channel_csv — errors ─────────────────────────────────────────────────

class TestParseChannelCsvErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_channel_csv(tmp_path / "missing.csv")

    def test_missing_columns(self, tmp_path):
        path = _write_csv(tmp_path, "channel,genre\nStar Plus,Hindi GEC\n")
        with pytest.raises(ValueError, match="missing required columns"):
            parse_channel_csv(path)

    def test_completely_empty_file(self, tmp_path):
        with pytest.raises(ValueError, match="no header"):
            parse_channel_csv(_write_csv(tmp_path, ""))

    def test_header_only_returns_empty(self, tmp_path):
        assert parse_channel_csv(_write_csv(tmp_path, HEADER)) == []

    def test_duplicate_channel(self, tmp_path):
        csv_text = VALID_CSV + "Star Plus,Hindi GEC,1,1,0,1,100,,\n"
        with pytest.raises(ValueError, match="Duplicate channel 'Star Plus'"):
            parse_channel_csv(_write_csv(tmp_path, csv_text))

    def test_blank_channel_reports_row_number(self, tmp_path):
        csv_text = VALID_CSV + " ,Hindi GEC,1,1,0,1,100,,\n"
        with pytest.raises(ValueError, match="Row 4"):
            parse_channel_csv(_write_csv(tmp_path, csv_text))

    def test_all_errors_collected(self, tmp_path):
        bad_rows = "".join(",Hindi GEC,1,1,0,1,100,,\n" for _ in range(12))
        with pytest.raises(ValueError) as excinfo:
            parse_channel_csv(_write_csv(tmp_path, HEADER + bad_rows))
        message = str(excinfo.value)
        assert message.startswith("12 row(s) failed validation")
        assert "and 2 more" in message
