"""
Channel status classification.

Status rules (evaluated in order — first match wins)
-----------------------------------------------------
    1. INACTIVE    : santoor_reach == 0 AND max_comp_reach == 0
    2. OPPORTUNITY : santoor_reach == 0 AND max_comp_reach >= 2.0
                     AND channel_share >= 1.0
    3. INACTIVE    : santoor_reach == 0 AND max_comp_reach > 0
                     (competitor present, but too small to chase)
    4. MONOPOLY    : santoor_reach > 0 AND max_comp_reach == 0
    5. index_vs_competition buckets:
           >= 150 DOMINANT, >= 100 LEADING, >= 80 CLOSE, >= 50 BEHIND,
           else CRITICAL

Rule 3 folds a present-but-small competitor into INACTIVE.  That can
under-report competitive presence on minor channels; it is the established
behaviour and is kept.
"""

from __future__ import annotations

from typing import Iterable

from tv_optimizer.models.channel import ChannelRecord
from tv_optimizer.taxonomy.channel_taxonomy import ChannelStatus

# Opportunity test: competitor reach and channel share must both be meaningful.
OPPORTUNITY_MIN_COMP_REACH = 2.0
OPPORTUNITY_MIN_CHANNEL_SHARE = 1.0

# Lower bounds for the index buckets, highest first.
_INDEX_BUCKETS: tuple[tuple[float, ChannelStatus], ...] = (
    (150.0, ChannelStatus.DOMINANT),
    (100.0, ChannelStatus.LEADING),
    (80.0,  ChannelStatus.CLOSE),
    (50.0,  ChannelStatus.BEHIND),
)


def is_opportunity(record: ChannelRecord) -> bool:
    """True when Santoor is absent but a competitor has a real foothold."""
    return (
        record.santoor_reach == 0
        and record.max_comp_reach >= OPPORTUNITY_MIN_COMP_REACH
        and record.channel_share >= OPPORTUNITY_MIN_CHANNEL_SHARE
    )


def calculate_status(record: ChannelRecord) -> ChannelStatus:
    """Classify a channel's competitive position.

    Total over all inputs: every record maps to exactly one status.
    """
    if record.santoor_reach == 0 and record.max_comp_reach == 0:
        return ChannelStatus.INACTIVE

    if is_opportunity(record):
        return ChannelStatus.OPPORTUNITY

    if record.santoor_reach == 0 and record.max_comp_reach > 0:
        return ChannelStatus.INACTIVE

    if record.santoor_reach > 0 and record.max_comp_reach == 0:
        return ChannelStatus.MONOPOLY

    for lower_bound, status in _INDEX_BUCKETS:
        if record.index_vs_competition >= lower_bound:
            return status
    return ChannelStatus.CRITICAL


def filter_relevant_channels(
    records: Iterable[ChannelRecord],
    min_santoor_reach: float = 0.5,
    min_comp_reach: float = 0.5,
    min_channel_share: float = 0.1,
) -> list[ChannelRecord]:
    """Drop channels that are effectively empty for every brand.

    A channel is kept when ANY of Santoor reach, competitor reach or channel
    share exceeds its cut-off.  Input order is preserved.
    """
    return [
        rec for rec in records
        if rec.santoor_reach > min_santoor_reach
        or rec.max_comp_reach > min_comp_reach
        or rec.channel_share > min_channel_share
    ]
