"""
SCR and optimization summaries (the dashboard's metric cards).

``summarize_scr`` works on the relevance-filtered rows regardless of what
the table is currently showing, so the cards stay stable while the user
searches or filters by genre.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from tv_optimizer.models.channel import ChannelRecord, OptimizationResult
from tv_optimizer.models.market import OptimizationSummary, ScrSummary
from tv_optimizer.optimization.status import filter_relevant_channels, is_opportunity
from tv_optimizer.taxonomy.channel_taxonomy import (
    OptimizationType,
    Priority,
    Recommendation,
    ScrStatus,
)


def scr_status(avg_gap: float) -> ScrStatus:
    """Map an average gap to the SCR status badge."""
    if avg_gap >= 2:
        return ScrStatus.LEADING
    if avg_gap >= 0:
        return ScrStatus.CLOSE
    if avg_gap >= -2:
        return ScrStatus.BEHIND
    return ScrStatus.CRITICAL


def summarize_scr(
    records:           Sequence[ChannelRecord],
    optimization_type: OptimizationType = OptimizationType.REACH,
    min_santoor_reach: float = 0.5,
    min_comp_reach:    float = 0.5,
    min_channel_share: float = 0.1,
) -> ScrSummary:
    """Compute headline numbers for one SCR.

    Args:
        records:           Every channel row in the SCR (unfiltered).
        optimization_type: ATC markets also get an average ATC index.
        min_*:             Relevance cut-offs (see ``RelevanceConfig``).

    Returns:
        ScrSummary.
    """
    relevant = filter_relevant_channels(
        records, min_santoor_reach, min_comp_reach, min_channel_share
    )
    active = [rec for rec in relevant if rec.santoor_reach > 0]
    opportunities = [rec for rec in relevant if is_opportunity(rec)]

    avg_gap = sum(rec.gap for rec in active) / len(active) if active else 0.0

    avg_atc: float | None = None
    if optimization_type == OptimizationType.ATC and active:
        avg_atc = sum(rec.atc_index or 0.0 for rec in active) / len(active)

    return ScrSummary(
        total=len(records),
        relevant=len(relevant),
        active=len(active),
        opportunities=len(opportunities),
        avg_gap=avg_gap,
        avg_atc_index=avg_atc,
        status=scr_status(avg_gap),
    )


def summarize_results(
    results: Mapping[str, OptimizationResult] | Iterable[OptimizationResult],
) -> OptimizationSummary:
    """Count recommendations by action, plus HIGH-priority items."""
    values = list(results.values()) if isinstance(results, Mapping) else list(results)
    return OptimizationSummary(
        increase=sum(1 for r in values if r.recommendation == Recommendation.INCREASE),
        maintain=sum(1 for r in values if r.recommendation == Recommendation.MAINTAIN),
        add=sum(1 for r in values if r.recommendation == Recommendation.ADD),
        decrease=sum(1 for r in values if r.recommendation == Recommendation.DECREASE),
        high_priority=sum(1 for r in values if r.priority == Priority.HIGH),
    )
