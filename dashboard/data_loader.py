"""
Dashboard data loader.

Loaders are decorated with ``@st.cache_data`` so Streamlit only re-reads the
dataset when it changes on disk (the file's mtime is part of the cache key).
This avoids re-parsing the JSON on every slider move.

Frame builders turn model lists into ``pandas.DataFrame`` objects with the
display column names used by the channel table, the heatmap and the CSV
download.

``load_market_dataset`` returns ``(None, error_text)`` rather than raising
when the dataset is missing or invalid, so the app can show the message
instead of a traceback.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Sequence

import pandas as pd
import streamlit as st

from tv_optimizer.analysis.timeband import TIMEBAND_DISPLAY, TIMEBAND_LABELS, HeatmapRow
from tv_optimizer.config import AppConfig, load_config, resolve_path
from tv_optimizer.ingestion.dataset import load_dataset
from tv_optimizer.models.channel import ChannelRecord, OptimizationResult
from tv_optimizer.models.market import MarketDataset
from tv_optimizer.optimization.status import calculate_status
from tv_optimizer.reporting.formatters import competitor_label
from tv_optimizer.reporting.table import competitor_reach
from tv_optimizer.utils.logging import configure_logging

logger = logging.getLogger(__name__)


# ── Internal helpers ─────────────────────────────────────────────────────────

def _mtime(path: Path) -> float:
    return os.path.getmtime(path) if path.exists() else 0.0


# ── Loaders ──────────────────────────────────────────────────────────────────


@st.cache_resource
def load_app_config() -> AppConfig:
    """Load ``AppConfig`` and configure logging once per Streamlit server process."""
    config = load_config()
    configure_logging(config.logging)
    return config


@st.cache_data
def _load_dataset_cached(
    path_str: str, mtime: float
) -> tuple[Optional[MarketDataset], Optional[str]]:
    try:
        return load_dataset(Path(path_str)), None
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Dashboard could not load dataset %s: %s", path_str, exc)
        return None, str(exc)


def load_market_dataset(data_file: str) -> tuple[Optional[MarketDataset], Optional[str]]:
    """Load the dataset at ``data_file`` (relative paths resolve to the project root).

    Returns:
        ``(dataset, None)`` on success, ``(None, error_text)`` on failure.
    """
    path = resolve_path(data_file)
    return _load_dataset_cached(str(path), _mtime(path))


# ── Frame builders ───────────────────────────────────────────────────────────


def channel_frame(
    records:     Sequence[ChannelRecord],
    competitors: Sequence[str] = (),
    results:     Optional[Mapping[str, OptimizationResult]] = None,
    show_atc:    bool = False,
) -> pd.DataFrame:
    """Build the channel table frame in display order.

    Columns: Channel, Genre, Santoor, <competitor 1>, <competitor 2>,
    [ATC Index], Gap, Index, Status and, after optimization, Action,
    Priority and Reason.
    """
    comp1 = competitor_label(competitors, 0).title()
    comp2 = competitor_label(competitors, 1).title()

    rows: list[dict] = []
    for rec in records:
        row = {
            "Channel": rec.channel,
            "Genre":   rec.genre,
            "Santoor": rec.santoor_reach,
            comp1:     competitor_reach(rec, 0),
            comp2:     competitor_reach(rec, 1),
        }
        if show_atc:
            row["ATC Index"] = rec.atc_index
        row["Gap"] = rec.gap
        row["Index"] = rec.index_vs_competition
        row["Status"] = calculate_status(rec).value
        if results is not None:
            opt = results.get(rec.channel)
            row["Action"] = opt.recommendation.value if opt else ""
            row["Priority"] = opt.priority.value if opt else ""
            row["Reason"] = opt.reason if opt else ""
        rows.append(row)

    return pd.DataFrame(rows)


def heatmap_frame(rows: Sequence[HeatmapRow]) -> pd.DataFrame:
    """Pivot heatmap rows into a channel × daypart frame of display values."""
    columns = [TIMEBAND_DISPLAY[tb] for tb in TIMEBAND_LABELS]
    data = {
        row.channel: [cell.display_value for cell in row.cells]
        for row in rows
    }
    return pd.DataFrame.from_dict(data, orient="index", columns=columns)


def heatmap_styles(rows: Sequence[HeatmapRow]) -> pd.DataFrame:
    """CSS for each heatmap cell, aligned with ``heatmap_frame``."""
    columns = [TIMEBAND_DISPLAY[tb] for tb in TIMEBAND_LABELS]
    data = {
        row.channel: [
            f"background-color: {cell.color}; opacity: {cell.opacity:.2f}"
            for cell in row.cells
        ]
        for row in rows
    }
    return pd.DataFrame.from_dict(data, orient="index", columns=columns)
