"""
Recommendation engine: turns a list of ChannelRecord rows into one
OptimizationResult per channel.

Parameters
----------
intensity (slider 5–30):
    How aggressively to recommend INCREASE.  Mapped to a 3-tier step
    function, not a continuous curve:

        intensity <= 10  ->  gap_threshold -3, index_threshold 70
        intensity <= 20  ->  gap_threshold -2, index_threshold 80
        otherwise        ->  gap_threshold -1, index_threshold 90

threshold (slider 50–90):
    Percentile of active channels (by Santoor reach) that are "protected"
    from demotion.

Recommendation rules (evaluated in order — first match wins)
-------------------------------------------------------------
    0. skip     : santoor_reach == 0 AND max_comp_reach == 0
    1. ADD      : opportunity (see status.is_opportunity)
                  priority HIGH if comp > 5, MEDIUM if comp > 3, else LOW
    2. INCREASE : santoor_reach > 0 AND gap < gap_threshold
                  AND index < index_threshold
                  priority HIGH if gap < -5, MEDIUM if gap < -2, else LOW
    3. MAINTAIN : protected OR index >= 100                       (LOW)
    4. DECREASE : 0 < santoor_reach < 1.5 AND index > 120          (LOW)
    5. MAINTAIN : santoor_reach > 0, "Stable performance"          (LOW)
    6. no entry

Every channel rule 4 matches (index > 120) is already claimed by rule 3
(index >= 100), so DECREASE is never emitted under the current ordering.

The engine never raises and never validates parameter ranges; callers clamp
intensity and threshold first (see ``OptimizationConfig.clamp_*``).
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from tv_optimizer.models.channel import ChannelRecord, OptimizationResult
from tv_optimizer.optimization.status import is_opportunity
from tv_optimizer.taxonomy.channel_taxonomy import Priority, Recommendation

logger = logging.getLogger(__name__)

DECREASE_MAX_REACH = 1.5
DECREASE_MIN_INDEX = 120.0
LEADING_INDEX = 100.0


def _fixed(value: float, places: int) -> str:
    """Format with exact halves rounded away from zero (1.25 -> "1.3")."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def get_protected_channels(
    records:   Sequence[ChannelRecord],
    threshold: float,
) -> list[str]:
    """Return the names of the top ``threshold`` percent of active channels.

    Only channels with ``santoor_reach > 0`` are ranked.  The count kept is
    ``ceil(threshold / 100 * n_active)``; ties keep input order because
    ``sorted`` is stable.

    Args:
        records:   Channel rows in display order.
        threshold: Percentile in [0, 100].

    Returns:
        Protected channel names, highest reach first.
    """
    active = [rec for rec in records if rec.santoor_reach > 0]
    ranked = sorted(active, key=lambda rec: rec.santoor_reach, reverse=True)
    # Multiply before dividing so 70% of 10 is exactly 7, not 7.000000000000001.
    cutoff = max(0, math.ceil(len(ranked) * threshold / 100))
    return [rec.channel for rec in ranked[:cutoff]]


def intensity_cutoffs(intensity: float) -> tuple[float, float]:
    """Map intensity to ``(gap_threshold, index_threshold)``."""
    if intensity <= 10:
        return -3.0, 70.0
    if intensity <= 20:
        return -2.0, 80.0
    return -1.0, 90.0


def add_priority(max_comp_reach: float) -> Priority:
    if max_comp_reach > 5:
        return Priority.HIGH
    if max_comp_reach > 3:
        return Priority.MEDIUM
    return Priority.LOW


def increase_priority(gap: float) -> Priority:
    if gap < -5:
        return Priority.HIGH
    if gap < -2:
        return Priority.MEDIUM
    return Priority.LOW


def evaluate_channel(
    record:          ChannelRecord,
    is_protected:    bool,
    gap_threshold:   float,
    index_threshold: float,
    threshold:       float,
) -> OptimizationResult | None:
    """Apply the rule table to one channel.

    Returns ``None`` when no rule fires (inactive or unqualified channels).
    """
    if record.santoor_reach == 0 and record.max_comp_reach == 0:
        return None

    if is_opportunity(record):
        return OptimizationResult(
            channel=record.channel,
            recommendation=Recommendation.ADD,
            priority=add_priority(record.max_comp_reach),
            reason=(
                f"Competitor at {_fixed(record.max_comp_reach, 1)}%, "
                f"Share {_fixed(record.channel_share, 1)}%"
            ),
        )

    if (
        record.santoor_reach > 0
        and record.gap < gap_threshold
        and record.index_vs_competition < index_threshold
    ):
        return OptimizationResult(
            channel=record.channel,
            recommendation=Recommendation.INCREASE,
            priority=increase_priority(record.gap),
            reason=(
                f"Gap of {_fixed(record.gap, 1)} pts, "
                f"Index {_fixed(record.index_vs_competition, 0)}"
            ),
        )

    if is_protected or record.index_vs_competition >= LEADING_INDEX:
        return OptimizationResult(
            channel=record.channel,
            recommendation=Recommendation.MAINTAIN,
            priority=Priority.LOW,
            reason=(
                f"Top {threshold:g}% - protected"
                if is_protected else "Leading competition"
            ),
        )

    if (
        0 < record.santoor_reach < DECREASE_MAX_REACH
        and record.index_vs_competition > DECREASE_MIN_INDEX
    ):
        return OptimizationResult(
            channel=record.channel,
            recommendation=Recommendation.DECREASE,
            priority=Priority.LOW,
            reason=f"Low reach ({_fixed(record.santoor_reach, 1)}%), reallocate budget",
        )

    if record.santoor_reach > 0:
        return OptimizationResult(
            channel=record.channel,
            recommendation=Recommendation.MAINTAIN,
            priority=Priority.LOW,
            reason="Stable performance",
        )

    return None


def run_optimization(
    records:   Sequence[ChannelRecord],
    intensity: float,
    threshold: float,
) -> dict[str, OptimizationResult]:
    """Generate a recommendation for every qualifying channel.

    Args:
        records:   Channel rows currently on display.
        intensity: Aggressiveness, nominally in [5, 30].
        threshold: Protected percentile, nominally in [50, 90].

    Returns:
        Dict channel name -> OptimizationResult.  Channels with no Santoor
        and no competitor reach never appear.  If a channel name repeats,
        the last row wins.
    """
    protected = set(get_protected_channels(records, threshold))
    gap_threshold, index_threshold = intensity_cutoffs(intensity)

    results: dict[str, OptimizationResult] = {}
    for rec in records:
        result = evaluate_channel(
            rec,
            is_protected=rec.channel in protected,
            gap_threshold=gap_threshold,
            index_threshold=index_threshold,
            threshold=threshold,
        )
        if result is not None:
            results[rec.channel] = result

    logger.debug(
        "Optimization: %d channels in, %d results (intensity=%s threshold=%s, %d protected)",
        len(records), len(results), intensity, threshold, len(protected),
    )
    return results


# Short public name for run_optimization.
evaluate = run_optimization
