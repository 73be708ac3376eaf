"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept models / record lists and return plain multi-line
strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Channel table layout
--------------------
Columns follow the dashboard table.  The ATC column only appears for ATC
markets and the ACTION / REASON columns only after an optimization pass::

  Channel               Genre          Santoor  Godrej     Lux     Gap  Index  Status       Action      Reason
  ----------------------------------------------------------------------------------------------------------------
  Star Plus             Hindi GEC        12.4%   10.1%    8.3%   +2.3    123  LEADING      — MAINTAIN  Top 70% - protected
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from tv_optimizer.models.channel import ChannelRecord, OptimizationResult
from tv_optimizer.models.market import MarketDataset, OptimizationSummary, ScrSummary
from tv_optimizer.optimization.status import calculate_status
from tv_optimizer.reporting.styles import recommendation_style
from tv_optimizer.reporting.table import competitor_reach

_REASON_WIDTH = 40


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 1] + "…"


def _signed(value: float) -> str:
    return f"{value:+.1f}"


def competitor_label(competitors: Sequence[str], position: int) -> str:
    """Column header for a competitor slot, e.g. ``"mysore_sandal"`` -> ``"MYSORE SANDAL"``."""
    if position < len(competitors):
        return competitors[position].upper().replace("_", " ")
    return f"COMP {position + 1}"


# ── Markets ──────────────────────────────────────────────────────────────────


def format_market_list(dataset: MarketDataset) -> str:
    """List markets with their SCRs, competitors and optimization mode."""
    lines: list[str] = ["", "=== Markets ==="]
    if not dataset.markets:
        lines.append("  (dataset contains no markets)")
        return "\n".join(lines)

    for name in dataset.market_names:
        market = dataset.markets[name]
        lines.append("")
        lines.append(f"  [{name}]  mode={market.optimization_type.value}")
        lines.append(f"    Competitors: {', '.join(market.competitors) or '-'}")
        for scr in market.scrs:
            n = len(market.channel_data.get(scr, []))
            lines.append(f"    - {scr:<32} {n:>4} channels")
    return "\n".join(lines)


# ── Summaries ────────────────────────────────────────────────────────────────


def format_scr_summary(summary: ScrSummary, market: str, scr: str) -> str:
    """Format the SCR metric cards as a short block."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== {market} / {scr} ===")
    lines.append(f"  Channels:       {summary.relevant} relevant of {summary.total}")
    lines.append(f"  Santoor active: {summary.active}")
    lines.append(f"  Opportunities:  {summary.opportunities}")
    lines.append(f"  Avg gap:        {_signed(summary.avg_gap)}  [{summary.status.value}]")
    if summary.avg_atc_index is not None:
        lines.append(f"  Avg ATC index:  {summary.avg_atc_index:.1f}")
    return "\n".join(lines)


def format_optimization_summary(
    summary:   OptimizationSummary,
    intensity: float,
    threshold: float,
) -> str:
    """Format recommendation counts for one optimization pass."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Optimization Results (intensity {intensity:g}%, threshold {threshold:g}%) ===")
    lines.append(
        f"  INCREASE {summary.increase:>3}   MAINTAIN {summary.maintain:>3}   "
        f"ADD {summary.add:>3}   DECREASE {summary.decrease:>3}   "
        f"HIGH PRIORITY {summary.high_priority:>3}"
    )
    return "\n".join(lines)


# ── Channel table ────────────────────────────────────────────────────────────


def format_channel_table(
    records:     Sequence[ChannelRecord],
    competitors: Sequence[str] = (),
    results:     Optional[Mapping[str, OptimizationResult]] = None,
    show_atc:    bool = False,
) -> str:
    """Format channel rows as an ASCII table.

    Args:
        records:     Rows in display order (see ``build_channel_view``).
        competitors: Market competitor slugs for the two competitor columns.
        results:     Optimizer output; adds ACTION / REASON columns when given.
        show_atc:    Add the ATC index column (ATC markets).

    Returns:
        Multi-line string.
    """
    if not records:
        return "\n  (no channels match the current filters)"

    comp1 = _truncate(competitor_label(competitors, 0), 8)
    comp2 = _truncate(competitor_label(competitors, 1), 8)

    header = (
        f"  {'Channel':<22} {'Genre':<14} {'Santoor':>8} {comp1:>8} {comp2:>8}"
    )
    if show_atc:
        header += f" {'ATC':>6}"
    header += f" {'Gap':>6} {'Index':>6}  {'Status':<11}"
    if results is not None:
        header += f"  {'Action':<11} {'Prio':<6} Reason"

    lines: list[str] = ["", header, "  " + "-" * (len(header) - 2)]

    for rec in records:
        status = calculate_status(rec)
        line = (
            f"  {_truncate(rec.channel, 22):<22} {_truncate(rec.genre, 14):<14} "
            f"{rec.santoor_reach:>7.1f}% "
            f"{competitor_reach(rec, 0):>7.1f}% "
            f"{competitor_reach(rec, 1):>7.1f}%"
        )
        if show_atc:
            atc = f"{rec.atc_index:.1f}" if rec.atc_index is not None else "-"
            line += f" {atc:>6}"
        line += (
            f" {_signed(rec.gap):>6} {rec.index_vs_competition:>6.0f}  "
            f"{status.value:<11}"
        )
        if results is not None:
            opt = results.get(rec.channel)
            if opt is None:
                line += f"  {'':<11} {'':<6} -"
            else:
                icon = recommendation_style(opt.recommendation)["icon"]
                action = f"{icon} {opt.recommendation.value}"
                line += (
                    f"  {action:<11} {opt.priority.value:<6} "
                    f"{_truncate(opt.reason, _REASON_WIDTH)}"
                )
        lines.append(line)

    return "\n".join(lines)
