"""
TV Optimizer — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the dataset and validate the market / SCR selection.
  4. Execute action (view, optimize, import).
  5. Report result to stdout.

Install and run::

    pip install -e .
    tv-optimizer --help
    tv-optimizer validate-config
    tv-optimizer list-markets
    tv-optimizer show-channels --market Maharashtra --genre "Hindi GEC"
    tv-optimizer optimize --market Karnataka --intensity 25 --threshold 60
    tv-optimizer import-channels --file sheet.csv --dry-run
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="tv-optimizer",
    help="TV campaign channel optimizer — multi-market reach analysis CLI.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from tv_optimizer.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from tv_optimizer.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_dataset_or_exit(config, data_file: Optional[str] = None):
    """Load the dataset named by ``--data-file`` or the config."""
    from tv_optimizer.config import resolve_path
    from tv_optimizer.ingestion.dataset import load_dataset

    path = Path(data_file) if data_file else resolve_path(config.data.data_file)
    try:
        return load_dataset(path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _select_or_exit(dataset, market: Optional[str], scr: Optional[str], config):
    """Resolve (market, scr), defaulting to the configured market and its Overall SCR."""
    from tv_optimizer.ingestion.dataset import default_scr

    market = market or config.dashboard.default_market
    if market not in dataset.markets:
        typer.echo(
            f"[ERROR] Unknown market '{market}'. "
            f"Available: {', '.join(dataset.market_names)}",
            err=True,
        )
        raise typer.Exit(code=1)

    market_data = dataset.markets[market]
    scr = scr or default_scr(dataset, market)
    if scr is None or scr not in market_data.scrs:
        typer.echo(
            f"[ERROR] Unknown SCR '{scr}' for {market}. "
            f"Available: {', '.join(market_data.scrs)}",
            err=True,
        )
        raise typer.Exit(code=1)
    return market, scr


def _export_path(config, raw: str) -> Path:
    """Place a relative export path under the configured output directory."""
    from tv_optimizer.config import resolve_path

    path = Path(raw)
    return path if path.is_absolute() else resolve_path(config.data.output_dir) / path


def _build_view_or_exit(records, config, genre, search, sort_by, ascending, show_all):
    from tv_optimizer.reporting.table import build_channel_view

    try:
        return build_channel_view(
            records,
            genre=genre,
            search=search,
            sort_by=sort_by,
            descending=not ascending,
            show_all=show_all,
            relevance=config.relevance,
        )
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


# ── Shared options ────────────────────────────────────────────────────────────

_CONFIG_OPT = typer.Option(None, "--config", help="Path to TOML config file.")
_DATA_OPT = typer.Option(
    None, "--data-file", help="Dataset JSON. Defaults to config.data.data_file."
)
_MARKET_OPT = typer.Option(
    None, "--market", "-m", help="Market (UP, Maharashtra, Karnataka). Defaults to config."
)
_SCR_OPT = typer.Option(
    None, "--scr", "-s", help="SCR name. Defaults to '<market> Overall'."
)
_GENRE_OPT = typer.Option("All", "--genre", help="Only show this genre.")
_SEARCH_OPT = typer.Option("", "--search", help="Case-insensitive channel name filter.")
_SORT_OPT = typer.Option(
    "santoorReach", "--sort-by", help="Sort field, e.g. santoorReach, gap, indexVsCompetition."
)
_ASC_OPT = typer.Option(False, "--asc", help="Sort ascending (default descending).")
_SHOW_ALL_OPT = typer.Option(
    False, "--show-all", help="Include channels with no meaningful reach or share."
)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPT,
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    opt = config.optimization

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Data file:        {config.data.data_file}")
    typer.echo(f"  Output dir:       {config.data.output_dir}")
    typer.echo(f"  Default market:   {config.dashboard.default_market}")
    typer.echo(f"  Intensity:        {opt.default_intensity:g} (range {opt.intensity_min:g}-{opt.intensity_max:g})")
    typer.echo(f"  Threshold:        {opt.default_threshold:g} (range {opt.threshold_min:g}-{opt.threshold_max:g})")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("list-markets")
def list_markets(
    data_file: Optional[str] = _DATA_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """List markets, their SCRs, competitors and optimization mode."""
    from tv_optimizer.reporting.formatters import format_market_list

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    dataset = _load_dataset_or_exit(config, data_file)

    typer.echo(format_market_list(dataset))


@app.command("show-channels")
def show_channels(
    market: Optional[str] = _MARKET_OPT,
    scr: Optional[str] = _SCR_OPT,
    genre: str = _GENRE_OPT,
    search: str = _SEARCH_OPT,
    sort_by: str = _SORT_OPT,
    ascending: bool = _ASC_OPT,
    show_all: bool = _SHOW_ALL_OPT,
    data_file: Optional[str] = _DATA_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Print the SCR summary and channel table with competitive status."""
    from tv_optimizer.analysis.summary import summarize_scr
    from tv_optimizer.ingestion.dataset import get_channels
    from tv_optimizer.reporting.formatters import format_channel_table, format_scr_summary
    from tv_optimizer.taxonomy.channel_taxonomy import OptimizationType

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    dataset = _load_dataset_or_exit(config, data_file)
    market, scr = _select_or_exit(dataset, market, scr, config)

    market_data = dataset.markets[market]
    records = get_channels(dataset, market, scr)
    view = _build_view_or_exit(records, config, genre, search, sort_by, ascending, show_all)

    summary = summarize_scr(
        records,
        market_data.optimization_type,
        min_santoor_reach=config.relevance.min_santoor_reach,
        min_comp_reach=config.relevance.min_comp_reach,
        min_channel_share=config.relevance.min_channel_share,
    )
    typer.echo(format_scr_summary(summary, market, scr))
    typer.echo(
        format_channel_table(
            view,
            competitors=market_data.competitors,
            show_atc=market_data.optimization_type == OptimizationType.ATC,
        )
    )


@app.command("optimize")
def optimize(
    market: Optional[str] = _MARKET_OPT,
    scr: Optional[str] = _SCR_OPT,
    intensity: Optional[float] = typer.Option(
        None,
        "--intensity",
        "-i",
        help="Aggressiveness, clamped to the configured range (default 5-30).",
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Protected percentile, clamped to the configured range (default 50-90).",
    ),
    genre: str = _GENRE_OPT,
    search: str = _SEARCH_OPT,
    sort_by: str = _SORT_OPT,
    ascending: bool = _ASC_OPT,
    show_all: bool = _SHOW_ALL_OPT,
    export_csv: Optional[str] = typer.Option(
        None, "--export-csv", help="CSV path; relative paths land in data.output_dir."
    ),
    export_json: Optional[str] = typer.Option(
        None, "--export-json", help="JSON path; relative paths land in data.output_dir."
    ),
    data_file: Optional[str] = _DATA_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Run the channel optimizer on the displayed channels of one SCR.

    \b
    Intensity tiers:
      <= 10  conservative   (INCREASE when gap < -3 and index < 70)
      <= 20  balanced       (INCREASE when gap < -2 and index < 80)
      >  20  aggressive     (INCREASE when gap < -1 and index < 90)

    The top THRESHOLD percent of active channels by Santoor reach are
    protected and always kept at MAINTAIN unless they qualify for INCREASE.
    """
    from tv_optimizer.analysis.summary import summarize_results
    from tv_optimizer.ingestion.dataset import get_channels
    from tv_optimizer.optimization.engine import run_optimization
    from tv_optimizer.reporting.export import (
        EXPORT_FIELDNAMES,
        build_results_payload,
        export_to_csv,
        export_to_json,
        flatten_results_for_export,
    )
    from tv_optimizer.reporting.formatters import (
        format_channel_table,
        format_optimization_summary,
    )
    from tv_optimizer.taxonomy.channel_taxonomy import OptimizationType

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    dataset = _load_dataset_or_exit(config, data_file)
    market, scr = _select_or_exit(dataset, market, scr, config)

    opt_cfg = config.optimization
    eff_intensity = opt_cfg.clamp_intensity(
        opt_cfg.default_intensity if intensity is None else intensity
    )
    eff_threshold = opt_cfg.clamp_threshold(
        opt_cfg.default_threshold if threshold is None else threshold
    )
    if intensity is not None and eff_intensity != intensity:
        typer.echo(f"  [WARN] intensity {intensity:g} clamped to {eff_intensity:g}", err=True)
    if threshold is not None and eff_threshold != threshold:
        typer.echo(f"  [WARN] threshold {threshold:g} clamped to {eff_threshold:g}", err=True)

    market_data = dataset.markets[market]
    records = get_channels(dataset, market, scr)
    view = _build_view_or_exit(records, config, genre, search, sort_by, ascending, show_all)

    results = run_optimization(view, eff_intensity, eff_threshold)

    typer.echo(f"optimize | market={market} | scr={scr} | channels={len(view)}")
    typer.echo(
        format_optimization_summary(summarize_results(results), eff_intensity, eff_threshold)
    )
    typer.echo(
        format_channel_table(
            view,
            competitors=market_data.competitors,
            results=results,
            show_atc=market_data.optimization_type == OptimizationType.ATC,
        )
    )

    if export_csv or export_json:
        rows = flatten_results_for_export(
            view, results, market=market, scr=scr, competitors=market_data.competitors
        )
        typer.echo("")
        if export_csv:
            path = export_to_csv(
                rows, _export_path(config, export_csv), fieldnames=EXPORT_FIELDNAMES
            )
            typer.echo(f"  CSV written: {path}")
        if export_json:
            payload = build_results_payload(rows, market, scr, eff_intensity, eff_threshold)
            path = export_to_json(payload, _export_path(config, export_json))
            typer.echo(f"  JSON written: {path}")

    typer.echo("")
    typer.echo("[OK] Optimization complete.")


@app.command("import-channels")
def import_channels(
    channels_file: str = typer.Option(
        ...,
        "--file",
        "-f",
        help="Path to a channel metrics CSV (see channel_csv module for columns).",
    ),
    intensity: Optional[float] = typer.Option(None, "--intensity", "-i"),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t"),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Validate the CSV and list channels without optimizing.",
    ),
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Validate a channel metrics CSV and optimize it as a standalone SCR.

    Useful for what-if sheets that are not part of the bundled dataset.
    """
    from tv_optimizer.analysis.summary import summarize_results
    from tv_optimizer.ingestion.channel_csv import parse_channel_csv
    from tv_optimizer.optimization.engine import run_optimization
    from tv_optimizer.reporting.formatters import (
        format_channel_table,
        format_optimization_summary,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    path = Path(channels_file)
    typer.echo(f"Loading channels from: {path}")
    try:
        records = parse_channel_csv(path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] CSV parse failed:\n{exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"  Validated {len(records)} channel(s).")

    if dry_run:
        typer.echo("[DRY RUN] No optimization run.")
        for rec in records:
            typer.echo(f"  {rec.channel} | {rec.genre} | reach={rec.santoor_reach:.1f}%")
        return

    opt_cfg = config.optimization
    eff_intensity = opt_cfg.clamp_intensity(
        opt_cfg.default_intensity if intensity is None else intensity
    )
    eff_threshold = opt_cfg.clamp_threshold(
        opt_cfg.default_threshold if threshold is None else threshold
    )
    results = run_optimization(records, eff_intensity, eff_threshold)

    typer.echo(
        format_optimization_summary(summarize_results(results), eff_intensity, eff_threshold)
    )
    typer.echo(format_channel_table(records, results=results))
    typer.echo("")
    typer.echo("[OK] Channels imported.")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
