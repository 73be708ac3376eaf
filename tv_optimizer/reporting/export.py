"""
Export helpers for spreadsheet hand-off and manual analysis.

All writers put files on disk and return the written ``Path``.
They accept generic ``list[dict]`` data to stay decoupled from specific
report shapes.

CSV exports are flat (no nested dicts) so they load directly in Excel or
pandas without any pre-processing step.

``flatten_results_for_export()`` is the main adapter: one row per displayed
channel, with the optimizer's verdict alongside the raw metrics.  Channels
the optimizer skipped get empty recommendation cells.
"""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional, Sequence

from tv_optimizer.models.channel import ChannelRecord, OptimizationResult
from tv_optimizer.optimization.status import calculate_status
from tv_optimizer.reporting.table import competitor_reach

EXPORT_FIELDNAMES: list[str] = [
    "market", "scr", "channel", "genre",
    "santoor_reach", "competitor_1", "competitor_1_reach",
    "competitor_2", "competitor_2_reach", "max_comp_reach",
    "gap", "channel_share", "index_vs_competition", "atc_index",
    "status", "recommendation", "priority", "reason",
]


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records and not fieldnames:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed JSON file.

    Args:
        data: Dict or list to serialise.
        path: Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def flatten_results_for_export(
    records:     Sequence[ChannelRecord],
    results:     Optional[Mapping[str, OptimizationResult]] = None,
    market:      str = "",
    scr:         str = "",
    competitors: Sequence[str] = (),
) -> list[dict]:
    """Flatten channel rows + optimizer output into export rows.

    Args:
        records:     Rows in display order.
        results:     Optimizer output, or ``None`` before optimization.
        market:      Market name (report metadata column).
        scr:         SCR name (report metadata column).
        competitors: Market competitor slugs, used to label the competitor columns.

    Returns:
        List of flat row dicts with keys ``EXPORT_FIELDNAMES``.
    """
    comp1 = competitors[0] if len(competitors) > 0 else ""
    comp2 = competitors[1] if len(competitors) > 1 else ""
    results = results or {}

    rows: list[dict] = []
    for rec in records:
        opt = results.get(rec.channel)
        rows.append(
            {
                "market":               market,
                "scr":                  scr,
                "channel":              rec.channel,
                "genre":                rec.genre,
                "santoor_reach":        rec.santoor_reach,
                "competitor_1":         comp1,
                "competitor_1_reach":   competitor_reach(rec, 0),
                "competitor_2":         comp2,
                "competitor_2_reach":   competitor_reach(rec, 1),
                "max_comp_reach":       rec.max_comp_reach,
                "gap":                  rec.gap,
                "channel_share":        rec.channel_share,
                "index_vs_competition": rec.index_vs_competition,
                "atc_index":            "" if rec.atc_index is None else rec.atc_index,
                "status":               calculate_status(rec).value,
                "recommendation":       opt.recommendation.value if opt else "",
                "priority":             opt.priority.value if opt else "",
                "reason":               opt.reason if opt else "",
            }
        )
    return rows


def build_results_payload(
    rows:      list[dict],
    market:    str,
    scr:       str,
    intensity: Optional[float] = None,
    threshold: Optional[float] = None,
) -> dict:
    """Wrap flattened rows with run metadata for JSON export."""
    return {
        "schema_version": "v1",
        "generated_at":   datetime.now(tz=timezone.utc).isoformat(),
        "market":         market,
        "scr":            scr,
        "intensity":      intensity,
        "threshold":      threshold,
        "channels":       rows,
    }
