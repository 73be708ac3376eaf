"""
Tests for tv_optimizer.cli — Typer commands end to end.

Each test writes a throwaway TOML config pointing at the sample dataset
(see conftest.py) so nothing reads or writes the committed data directory.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tv_optimizer.cli import app

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path: Path, sample_dataset_path: Path) -> Path:
    path = tmp_path / "cli.toml"
    path.write_text(
        "[data]\n"
        f"data_file = {json.dumps(str(sample_dataset_path))}\n"
        "[logging]\n"
        "level = \"WARNING\"\n"
        "log_file = \"\"\n",
        encoding="utf-8",
    )
    return path


def _invoke(*args: str):
    return runner.invoke(app, list(args))


# ── validate-config ───────────────────────────────────────────────────────────

def test_validate_config(config_path):
    result = _invoke("validate-config", "--config", str(config_path))
    assert result.exit_code == 0
    assert "[OK] Config valid." in result.output
    assert "Intensity:        15" in result.output


def test_validate_config_full_dump(config_path):
    result = _invoke("validate-config", "--config", str(config_path), "--full")
    assert result.exit_code == 0
    assert '"optimization"' in result.output


def test_validate_config_missing_file(tmp_path):
    result = _invoke("validate-config", "--config", str(tmp_path / "nope.toml"))
    assert result.exit_code == 1
    assert "[ERROR]" in result.output


def test_validate_config_invalid(tmp_path):
    bad = tmp_path / "bad.toml"
    bad.write_text("[optimization]\nthreshold_max = 150\n", encoding="utf-8")
    result = _invoke("validate-config", "--config", str(bad))
    assert result.exit_code == 1
    assert "Config validation failed" in result.output


# ── list-markets ──────────────────────────────────────────────────────────────

def test_list_markets(config_path):
    result = _invoke("list-markets", "--config", str(config_path))
    assert result.exit_code == 0
    assert "[Maharashtra]" in result.output
    assert "mode=ATC" in result.output


def test_list_markets_bad_dataset(config_path, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("[]", encoding="utf-8")
    result = _invoke("list-markets", "--config", str(config_path), "--data-file", str(bad))
    assert result.exit_code == 1
    assert "[ERROR]" in result.output


# ── show-channels ─────────────────────────────────────────────────────────────

def test_show_channels_defaults_to_overall_scr(config_path):
    result = _invoke("show-channels", "--config", str(config_path))
    assert result.exit_code == 0
    assert "Maharashtra / Maharashtra Overall" in result.output
    assert "Star Pravah" in result.output
    # Both-zero channel is hidden by the relevance filter.
    assert "Dead Channel" not in result.output


def test_show_channels_show_all(config_path):
    result = _invoke("show-channels", "--config", str(config_path), "--show-all")
    assert "Dead Channel" in result.output


def test_show_channels_atc_market(config_path):
    result = _invoke("show-channels", "--config", str(config_path), "--market", "Karnataka")
    assert result.exit_code == 0
    assert "Avg ATC index" in result.output
    assert "LIFEBUOY" in result.output


def test_show_channels_unknown_market(config_path):
    result = _invoke("show-channels", "--config", str(config_path), "--market", "Goa")
    assert result.exit_code == 1
    assert "Unknown market 'Goa'" in result.output


def test_show_channels_unknown_scr(config_path):
    result = _invoke("show-channels", "--config", str(config_path), "--scr", "Pune")
    assert result.exit_code == 1
    assert "Unknown SCR 'Pune'" in result.output


def test_show_channels_bad_sort_field(config_path):
    result = _invoke("show-channels", "--config", str(config_path), "--sort-by", "popularity")
    assert result.exit_code == 1
    assert "Unknown sort field" in result.output


# ── optimize ──────────────────────────────────────────────────────────────────

def test_optimize(config_path):
    result = _invoke("optimize", "--config", str(config_path))
    assert result.exit_code == 0
    assert "intensity 15%, threshold 70%" in result.output
    assert "ADD" in result.output  # Sony Marathi is an opportunity
    assert "[OK] Optimization complete." in result.output


def test_optimize_clamps_out_of_range(config_path):
    result = _invoke(
        "optimize", "--config", str(config_path), "--intensity", "99", "--threshold", "10"
    )
    assert result.exit_code == 0
    assert "intensity 30%, threshold 50%" in result.output
    assert "clamped" in result.output


def test_optimize_exports(config_path, tmp_path):
    csv_out = tmp_path / "out" / "results.csv"
    json_out = tmp_path / "out" / "results.json"
    result = _invoke(
        "optimize", "--config", str(config_path),
        "--export-csv", str(csv_out), "--export-json", str(json_out),
    )
    assert result.exit_code == 0

    with csv_out.open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    by_channel = {r["channel"]: r for r in rows}
    assert by_channel["Sony Marathi"]["recommendation"] == "ADD"
    assert by_channel["Star Pravah"]["market"] == "Maharashtra"

    payload = json.loads(json_out.read_text(encoding="utf-8"))
    assert payload["scr"] == "Maharashtra Overall"
    assert payload["threshold"] == 70
    assert len(payload["channels"]) == len(rows)


def test_optimize_relative_exports_land_in_output_dir(tmp_path, sample_dataset_path):
    output_dir = tmp_path / "outputs"
    cfg = tmp_path / "out_dir.toml"
    cfg.write_text(
        "[data]\n"
        f"data_file = {json.dumps(str(sample_dataset_path))}\n"
        f"output_dir = {json.dumps(str(output_dir))}\n"
        "[logging]\n"
        "level = \"WARNING\"\n"
        "log_file = \"\"\n",
        encoding="utf-8",
    )
    result = _invoke(
        "optimize", "--config", str(cfg),
        "--export-csv", "results.csv", "--export-json", "nested/results.json",
    )
    assert result.exit_code == 0
    assert (output_dir / "results.csv").exists()
    assert (output_dir / "nested" / "results.json").exists()


# ── import-channels ───────────────────────────────────────────────────────────

_CSV = (
    "channel,genre,santoorReach,maxCompReach,gap,channelShare,indexVsCompetition\n"
    "Star Plus,Hindi GEC,12.4,10.1,2.3,8.5,122.8\n"
    "Colors,Hindi GEC,2.0,8.5,-6.5,5.4,23.5\n"
)


def test_import_channels_dry_run(config_path, tmp_path):
    sheet = tmp_path / "sheet.csv"
    sheet.write_text(_CSV, encoding="utf-8")
    result = _invoke("import-channels", "--config", str(config_path), "--file", str(sheet), "--dry-run")
    assert result.exit_code == 0
    assert "Validated 2 channel(s)" in result.output
    assert "[DRY RUN]" in result.output


def test_import_channels_optimizes(config_path, tmp_path):
    sheet = tmp_path / "sheet.csv"
    sheet.write_text(_CSV, encoding="utf-8")
    result = _invoke("import-channels", "--config", str(config_path), "--file", str(sheet))
    assert result.exit_code == 0
    assert "INCREASE" in result.output
    assert "[OK] Channels imported." in result.output


def test_import_channels_invalid(config_path, tmp_path):
    sheet = tmp_path / "sheet.csv"
    sheet.write_text("channel,genre\nStar Plus,Hindi GEC\n", encoding="utf-8")
    result = _invoke("import-channels", "--config", str(config_path), "--file", str(sheet))
    assert result.exit_code == 1
    assert "CSV parse failed" in result.output
