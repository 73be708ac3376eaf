"""Tests for tv_optimizer.reporting.formatters."""

from __future__ import annotations

from tv_optimizer.ingestion.dataset import load_dataset
from tv_optimizer.models.channel import OptimizationResult
from tv_optimizer.models.market import OptimizationSummary, ScrSummary
from tv_optimizer.reporting.formatters import (
    competitor_label,
    format_channel_table,
    format_market_list,
    format_optimization_summary,
    format_scr_summary,
)
from tv_optimizer.taxonomy.channel_taxonomy import Priority, Recommendation, ScrStatus


def test_competitor_label():
    assert competitor_label(["lifebuoy", "mysore_sandal"], 1) == "MYSORE SANDAL"
    assert competitor_label([], 0) == "COMP 1"


def test_format_market_list(sample_dataset_path):
    text = format_market_list(load_dataset(sample_dataset_path))
    assert "[Maharashtra]  mode=Reach" in text
    assert "[Karnataka]  mode=ATC" in text
    assert "lifebuoy, mysore_sandal" in text
    assert text.index("Maharashtra") < text.index("Karnataka")


def test_format_scr_summary_reach():
    summary = ScrSummary(
        total=10, relevant=8, active=6, opportunities=2, avg_gap=-1.25, status=ScrStatus.BEHIND
    )
    text = format_scr_summary(summary, "UP", "UP Overall")
    assert "=== UP / UP Overall ===" in text
    assert "8 relevant of 10" in text
    assert "-1.2" in text or "-1.3" in text
    assert "BEHIND" in text
    assert "ATC" not in text


def test_format_scr_summary_atc():
    summary = ScrSummary(
        total=3, relevant=3, active=3, opportunities=0, avg_gap=2.5,
        avg_atc_index=104.2, status=ScrStatus.LEADING,
    )
    assert "Avg ATC index:  104.2" in format_scr_summary(summary, "Karnataka", "Bangalore")


def test_format_optimization_summary():
    summary = OptimizationSummary(increase=3, maintain=7, add=2, decrease=0, high_priority=1)
    text = format_optimization_summary(summary, 15, 70)
    assert "intensity 15%, threshold 70%" in text
    assert "INCREASE   3" in text
    assert "HIGH PRIORITY   1" in text


class TestFormatChannelTable:
    def test_empty(self):
        assert "no channels match" in format_channel_table([])

    def test_rows_and_status(self, make_record):
        recs = [make_record("Star Plus", santoor_reach=12.4, godrej_reach=10.1,
                            lux_reach=8.3, index_vs_competition=123)]
        text = format_channel_table(recs, competitors=["godrej", "lux"])
        assert "GODREJ" in text and "LUX" in text
        assert "Star Plus" in text
        assert "12.4%" in text
        assert "LEADING" in text
        assert "Action" not in text

    def test_atc_column(self, make_record):
        text = format_channel_table([make_record(atc_index=112.5)], show_atc=True)
        assert "ATC" in text
        assert "112.5" in text

    def test_results_columns(self, make_record):
        recs = [make_record("A"), make_record("B")]
        results = {
            "A": OptimizationResult(
                channel="A", recommendation=Recommendation.INCREASE,
                priority=Priority.HIGH, reason="Gap of -6.0 pts, Index 60",
            )
        }
        lines = format_channel_table(recs, results=results).splitlines()
        row_a = next(line for line in lines if line.strip().startswith("A "))
        row_b = next(line for line in lines if line.strip().startswith("B "))
        assert "INCREASE" in row_a and "HIGH" in row_a
        assert "Gap of -6.0 pts" in row_a
        assert row_b.rstrip().endswith("-")

    def test_long_reason_truncated(self, make_record):
        results = {
            "A": OptimizationResult(
                channel="A", recommendation=Recommendation.MAINTAIN,
                priority=Priority.LOW, reason="x" * 80,
            )
        }
        text = format_channel_table([make_record("A")], results=results)
        assert "x" * 80 not in text
        assert "…" in text
