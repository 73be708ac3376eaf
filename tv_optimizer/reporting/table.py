"""
Channel table view: the filter → search → sort pipeline behind the channel
table in both the CLI and the dashboard.

Pipeline (``build_channel_view``)
---------------------------------
  1. Relevance filter   — skipped when ``show_all`` is set.
  2. Genre filter       — ``"All"`` keeps every genre.
  3. Search             — case-insensitive substring match on channel name.
  4. Sort               — stable sort on one field; missing numerics sort as 0.

The optimizer runs on the *displayed* rows, so changing a filter changes
which channels compete for the protected percentile.
"""

from __future__ import annotations

from typing import Any, Sequence

from tv_optimizer.config import RelevanceConfig
from tv_optimizer.models.channel import ChannelRecord
from tv_optimizer.optimization.status import filter_relevant_channels

ALL_GENRES = "All"

# Wire name -> attribute name, e.g. "santoorReach" -> "santoor_reach".
_FIELD_BY_WIRE_NAME: dict[str, str] = {
    (info.alias or name): name
    for name, info in ChannelRecord.model_fields.items()
    if name != "timebands"
}

SORTABLE_FIELDS: tuple[str, ...] = tuple(_FIELD_BY_WIRE_NAME)


def resolve_field(name: str) -> str:
    """Map a wire or attribute name to the ChannelRecord attribute name.

    Raises:
        ValueError: If ``name`` is not a sortable ChannelRecord field.
    """
    if name in _FIELD_BY_WIRE_NAME:
        return _FIELD_BY_WIRE_NAME[name]
    if name in _FIELD_BY_WIRE_NAME.values():
        return name
    raise ValueError(f"Unknown sort field '{name}'. Must be one of {sorted(SORTABLE_FIELDS)}.")


def field_value(record: ChannelRecord, name: str) -> Any:
    value = getattr(record, resolve_field(name))
    return 0.0 if value is None else value


def list_genres(records: Sequence[ChannelRecord]) -> list[str]:
    """``["All", ...genres in first-seen order]``."""
    genres: list[str] = [ALL_GENRES]
    for rec in records:
        if rec.genre not in genres:
            genres.append(rec.genre)
    return genres


def competitor_reach(record: ChannelRecord, position: int) -> float:
    """Reach of the first or second competitor column for any market.

    UP and Maharashtra track Godrej and Lux; Karnataka tracks Lifebuoy and
    Mysore Sandal.  Position 0 is the first competitor, anything else the second.
    """
    if position == 0:
        candidates = (record.godrej_reach, record.lifebuoy_reach)
    else:
        candidates = (record.lux_reach, record.mysore_sandal_reach)
    for value in candidates:
        if value is not None:
            return value
    return 0.0


def build_channel_view(
    records:    Sequence[ChannelRecord],
    genre:      str = ALL_GENRES,
    search:     str = "",
    sort_by:    str = "santoorReach",
    descending: bool = True,
    show_all:   bool = False,
    relevance:  RelevanceConfig | None = None,
) -> list[ChannelRecord]:
    """Return the rows the channel table should display, in display order.

    Args:
        records:    Every channel row in the selected SCR.
        genre:      Genre to keep, or ``"All"``.
        search:     Case-insensitive substring of the channel name.
        sort_by:    Wire or attribute field name (see ``SORTABLE_FIELDS``).
        descending: Sort direction.
        show_all:   Skip the relevance filter.
        relevance:  Relevance cut-offs; defaults to ``RelevanceConfig()``.

    Raises:
        ValueError: If ``sort_by`` is not a known field.
    """
    attr = resolve_field(sort_by)
    rel = relevance or RelevanceConfig()

    rows = list(records) if show_all else filter_relevant_channels(
        records,
        min_santoor_reach=rel.min_santoor_reach,
        min_comp_reach=rel.min_comp_reach,
        min_channel_share=rel.min_channel_share,
    )
    if genre and genre != ALL_GENRES:
        rows = [rec for rec in rows if rec.genre == genre]
    if search:
        needle = search.lower()
        rows = [rec for rec in rows if needle in rec.channel.lower()]

    return sorted(rows, key=lambda rec: field_value(rec, attr), reverse=descending)
