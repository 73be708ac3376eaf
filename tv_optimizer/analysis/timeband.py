"""
Daypart (timeband) heatmap for channels that carry a timeband breakdown.

Four bands cover the broadcast day.  Three metrics are supported:

  reach     — Santoor reach, shown as an index where the channel's best
              band = 100 and the others are relative to it.
  atcIndex  — Karnataka ATC index, indexed the same way.
  gap       — Santoor minus best competitor reach, shown raw.

Indexing divides by the channel's best band with a floor of 0.01, so a
channel with no reach in any band yields all-zero indexes instead of a
division error.

Colour scales (raw value, not index, drives the colour)
-------------------------------------------------------
  reach / atcIndex : >=10 emerald-500, >=5 emerald-400, >=2 emerald-300,
                     >=0.5 emerald-200, else emerald-100
  gap              : >=5 green (leading), >=0 yellow (close),
                     >=-5 orange (behind), else red (critical)

Opacity grows with magnitude: 0.2 for exact zero, otherwise
``min(1, 0.3 + |v| / 20 * 0.7)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Sequence

from tv_optimizer.models.channel import ChannelRecord, TimebandRecord

HeatmapMetric = Literal["reach", "gap", "atcIndex"]
VALID_METRICS: frozenset[str] = frozenset({"reach", "gap", "atcIndex"})

TIMEBAND_LABELS: tuple[str, ...] = ("0600-1200", "1200-1800", "1800-2300", "2300-0600")

TIMEBAND_DISPLAY: dict[str, str] = {
    "0600-1200": "Morning",
    "1200-1800": "Afternoon",
    "1800-2300": "Prime Time",
    "2300-0600": "Late Night",
}

MIN_INDEX_DENOMINATOR = 0.01

_POSITIVE_SCALE: tuple[tuple[float, str], ...] = (
    (10.0, "#10b981"),
    (5.0,  "#34d399"),
    (2.0,  "#6ee7b7"),
    (0.5,  "#a7f3d0"),
)
_POSITIVE_FLOOR = "#d1fae5"

_GAP_SCALE: tuple[tuple[float, str], ...] = (
    (5.0,  "#10b981"),
    (0.0,  "#fbbf24"),
    (-5.0, "#f59e0b"),
)
_GAP_FLOOR = "#ef4444"


@dataclass
class HeatmapCell:
    """One (channel, timeband) cell.

    Attributes:
        timeband:      Band label.
        raw_value:     Underlying metric value (0.0 when the band is missing).
        display_value: Index (reach / atcIndex) or raw gap.
        color:         Hex background colour from the raw value.
        opacity:       Cell opacity in [0.2, 1.0].
    """

    timeband:      str
    raw_value:     float
    display_value: float
    color:         str
    opacity:       float


@dataclass
class HeatmapRow:
    channel: str
    cells:   list[HeatmapCell] = field(default_factory=list)


def _validate_metric(metric: str) -> None:
    if metric not in VALID_METRICS:
        raise ValueError(f"Unknown heatmap metric '{metric}'. Must be one of {sorted(VALID_METRICS)}.")


def raw_value(band: TimebandRecord, metric: HeatmapMetric) -> float:
    """Pick the metric value from one timeband row."""
    if metric == "reach":
        return band.santoor_reach
    if metric == "gap":
        return band.gap
    return band.atc_index or 0.0


def heatmap_color(value: float, metric: HeatmapMetric) -> str:
    scale, floor = (_GAP_SCALE, _GAP_FLOOR) if metric == "gap" else (_POSITIVE_SCALE, _POSITIVE_FLOOR)
    for lower_bound, color in scale:
        if value >= lower_bound:
            return color
    return floor


def heatmap_opacity(value: float) -> float:
    if value == 0:
        return 0.2
    return min(1.0, 0.3 + (abs(value) / 20.0) * 0.7)


def timeband_indexes(record: ChannelRecord, metric: HeatmapMetric) -> dict[str, float]:
    """Return ``{timeband: display_value}`` for one channel.

    For ``reach`` and ``atcIndex`` the best band is 100.  For ``gap`` the raw
    values are returned unchanged.
    """
    _validate_metric(metric)
    values = {band.timeband: raw_value(band, metric) for band in record.timebands}
    if metric == "gap":
        return values

    best = max([*values.values(), MIN_INDEX_DENOMINATOR])
    return {tb: (v / best) * 100.0 for tb, v in values.items()}


def build_heatmap(
    records:      Sequence[ChannelRecord],
    metric:       HeatmapMetric = "reach",
    max_channels: int = 20,
) -> list[HeatmapRow]:
    """Build heatmap rows for up to ``max_channels`` channels with timeband data.

    Channels without timebands are skipped before the limit is applied, so
    the first ``max_channels`` channels that *have* data are shown, in input
    order.  Every row has exactly one cell per ``TIMEBAND_LABELS`` entry.

    Raises:
        ValueError: If ``metric`` is not a known heatmap metric.
    """
    _validate_metric(metric)
    with_bands = [rec for rec in records if rec.timebands][: max(0, max_channels)]

    rows: list[HeatmapRow] = []
    for rec in with_bands:
        by_band = {band.timeband: band for band in rec.timebands}
        display = timeband_indexes(rec, metric)
        row = HeatmapRow(channel=rec.channel)
        for tb in TIMEBAND_LABELS:
            band = by_band.get(tb)
            value = raw_value(band, metric) if band is not None else 0.0
            row.cells.append(
                HeatmapCell(
                    timeband=tb,
                    raw_value=value,
                    display_value=display.get(tb, 0.0),
                    color=heatmap_color(value, metric),
                    opacity=heatmap_opacity(value),
                )
            )
        rows.append(row)
    return rows
