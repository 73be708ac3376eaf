"""
Multi-market dataset loader.

The dataset is a single static JSON file produced upstream (see
``tv_optimizer.models.market`` for the layout).  It is read once and held in
memory; nothing is written back.

Numeric normalization
---------------------
Upstream exports are not always clean: cells can be missing, ``null``, an
empty string, ``"NaN"`` or a numeric string.  Before validation every channel
row goes through ``normalize_channel_row``:

  required numerics (santoorReach, maxCompReach, gap, channelShare,
  indexVsBaseline, indexVsCompetition)  → float, anything unusable → 0.0
  optional numerics (competitor reaches, atcIndex) → float, unusable → None
  timeband rows → same treatment per band

The optimization engine relies on this: it never checks for missing values.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from tv_optimizer.models.channel import ChannelRecord
from tv_optimizer.models.market import MarketDataset

logger = logging.getLogger(__name__)

REQUIRED_NUMERIC_FIELDS: tuple[str, ...] = (
    "santoorReach",
    "maxCompReach",
    "gap",
    "channelShare",
    "indexVsBaseline",
    "indexVsCompetition",
)

OPTIONAL_NUMERIC_FIELDS: tuple[str, ...] = (
    "godrejReach",
    "luxReach",
    "lifebuoyReach",
    "mysore_sandalReach",
    "atcIndex",
)


def to_number(value: Any) -> Optional[float]:
    """Coerce a loosely-typed cell to a finite float, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().rstrip("%")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def normalize_channel_row(raw: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``raw`` with numeric fields defaulted and coerced.

    Non-numeric keys (``channel``, ``genre`` ...) pass through unchanged.
    """
    row = dict(raw)
    for key in REQUIRED_NUMERIC_FIELDS:
        number = to_number(row.get(key))
        row[key] = 0.0 if number is None else number
    for key in OPTIONAL_NUMERIC_FIELDS:
        if key in row:
            row[key] = to_number(row[key])

    bands = row.get("timebands")
    if isinstance(bands, list):
        row["timebands"] = [_normalize_band(b) for b in bands if isinstance(b, dict)]
    elif bands is not None:
        row["timebands"] = []
    return row


def _normalize_band(raw: dict[str, Any]) -> dict[str, Any]:
    band = dict(raw)
    for key in ("santoorReach", "gap"):
        number = to_number(band.get(key))
        band[key] = 0.0 if number is None else number
    if "atcIndex" in band:
        band["atcIndex"] = to_number(band["atcIndex"])
    return band


def parse_dataset(raw: dict[str, Any]) -> MarketDataset:
    """Normalize and validate an already-parsed dataset dict.

    Raises:
        ValueError: If the structure does not match ``MarketDataset``.
    """
    if not isinstance(raw, dict):
        raise ValueError("Dataset root must be a JSON object.")

    markets = raw.get("markets")
    if not isinstance(markets, dict):
        raise ValueError("Dataset is missing a 'markets' object.")

    cleaned_markets: dict[str, Any] = {}
    for name, market in markets.items():
        if not isinstance(market, dict):
            raise ValueError(f"Market '{name}' must be a JSON object.")
        market = dict(market)
        channel_data = market.get("channelData") or {}
        if not isinstance(channel_data, dict):
            raise ValueError(f"Market '{name}' channelData must be a JSON object.")
        market["channelData"] = {
            scr: [normalize_channel_row(r) for r in rows if isinstance(r, dict)]
            for scr, rows in channel_data.items()
        }
        cleaned_markets[name] = market

    metadata = raw.get("metadata") or {"markets": list(cleaned_markets)}

    try:
        return MarketDataset(metadata=metadata, markets=cleaned_markets)
    except ValidationError as exc:
        raise ValueError(f"Dataset failed validation:\n{exc}") from exc


def load_dataset(path: Path) -> MarketDataset:
    """Load the multi-market dataset from a JSON file.

    Args:
        path: Path to the dataset JSON.

    Returns:
        Validated ``MarketDataset``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not valid JSON or fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Dataset is not valid JSON ({path.name}): {exc}") from exc

    dataset = parse_dataset(raw)
    n_rows = sum(
        len(rows)
        for market in dataset.markets.values()
        for rows in market.channel_data.values()
    )
    logger.info(
        "Loaded dataset %s: %d markets, %d channel rows",
        path.name, len(dataset.markets), n_rows,
    )
    return dataset


def get_channels(dataset: MarketDataset, market: str, scr: str) -> list[ChannelRecord]:
    """Return the channel rows for ``(market, scr)``; empty if either is unknown."""
    market_data = dataset.markets.get(market)
    if market_data is None:
        return []
    return list(market_data.channel_data.get(scr, []))


def default_scr(dataset: MarketDataset, market: str) -> Optional[str]:
    """Pick the SCR to show first: ``"{market} Overall"`` if present, else the first."""
    market_data = dataset.markets.get(market)
    if market_data is None or not market_data.scrs:
        return None
    overall = f"{market} Overall"
    return overall if overall in market_data.scrs else market_data.scrs[0]
