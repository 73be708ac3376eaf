"""
TV Optimizer — Streamlit Dashboard
==================================

Interactive channel analysis for the Santoor TV campaign.  Reads the static
multi-market dataset only; nothing is written back.

App structure (2 tabs)
----------------------
  1. Channel Analysis  — Filtered / sorted channel table with competitive
                         status and, after "Optimize", one recommendation
                         per channel.  CSV download of the current view.
  2. Timeband Heatmap  — Daypart breakdown for channels that carry one.

Sidebar
-------
  Market and SCR selection, genre / search / sort filters, and the two
  optimizer sliders (intensity 5-30, threshold 50-90 in steps of 5).
  Changing market or SCR clears the last optimization.  Changing a filter
  or slider re-runs it on the rows now displayed.

Usage
-----
    pip install -e ".[dashboard]"
    streamlit run dashboard/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# ── Ensure project root is importable ────────────────────────────────────────
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

# ── Must be the first Streamlit call ─────────────────────────────────────────
st.set_page_config(
    page_title="Santoor TV Optimizer",
    layout="wide",
    initial_sidebar_state="expanded",
)

import pandas as pd

from dashboard.data_loader import (
    channel_frame,
    heatmap_frame,
    heatmap_styles,
    load_app_config,
    load_market_dataset,
)
from tv_optimizer.analysis.summary import summarize_results, summarize_scr
from tv_optimizer.analysis.timeband import build_heatmap
from tv_optimizer.ingestion.dataset import default_scr, get_channels
from tv_optimizer.optimization.engine import run_optimization
from tv_optimizer.reporting.export import EXPORT_FIELDNAMES, flatten_results_for_export
from tv_optimizer.reporting.styles import recommendation_style, status_style
from tv_optimizer.reporting.table import build_channel_view, list_genres
from tv_optimizer.taxonomy.channel_taxonomy import OptimizationType

_SORT_OPTIONS = {
    "Santoor reach":        "santoorReach",
    "Gap":                  "gap",
    "Index vs competition": "indexVsCompetition",
    "Channel share":        "channelShare",
    "Max competitor reach": "maxCompReach",
    "Channel name":         "channel",
}

config = load_app_config()
opt_cfg = config.optimization

dataset, load_error = load_market_dataset(config.data.data_file)
if dataset is None:
    st.error(f"Could not load dataset: {load_error}")
    st.info("Set `data.data_file` in config/local.toml or TV_OPTIMIZER_DATA_FILE.")
    st.stop()
if not dataset.markets:
    st.warning("The dataset contains no markets.")
    st.stop()


# ── Sidebar ───────────────────────────────────────────────────────────────────

with st.sidebar:
    st.title("Santoor TV Optimizer")
    st.caption("Channel reach analysis across markets")
    st.divider()

    markets = dataset.market_names
    default_market = config.dashboard.default_market
    market = st.selectbox(
        "Market",
        options=markets,
        index=markets.index(default_market) if default_market in markets else 0,
    )
    market_data = dataset.markets[market]

    scrs = market_data.scrs
    if not scrs:
        st.warning(f"No SCRs for {market}.")
        st.stop()
    first_scr = default_scr(dataset, market)
    scr = st.selectbox(
        "SCR",
        options=scrs,
        index=scrs.index(first_scr) if first_scr in scrs else 0,
        key=f"scr_{market}",
    )

    st.divider()
    records = get_channels(dataset, market, scr)

    genre = st.selectbox("Genre", options=list_genres(records), index=0)
    search = st.text_input("Search channel", value="")
    sort_label = st.selectbox("Sort by", options=list(_SORT_OPTIONS), index=0)
    descending = st.checkbox("Descending", value=True)
    show_all = st.checkbox(
        "Show all channels",
        value=False,
        help="Include channels with no meaningful reach or share.",
    )

    st.divider()
    st.subheader("Optimization")
    intensity = st.slider(
        "Intensity",
        min_value=int(opt_cfg.intensity_min),
        max_value=int(opt_cfg.intensity_max),
        value=int(opt_cfg.clamp_intensity(opt_cfg.default_intensity)),
        step=1,
        help="Higher values flag more channels for INCREASE.",
    )
    threshold = st.slider(
        "Protected threshold (%)",
        min_value=int(opt_cfg.threshold_min),
        max_value=int(opt_cfg.threshold_max),
        value=int(opt_cfg.clamp_threshold(opt_cfg.default_threshold)),
        step=int(opt_cfg.threshold_step),
        help="Top share of active channels by Santoor reach that is never cut.",
    )

    col_run, col_clear = st.columns(2)
    if col_run.button("Optimize", type="primary"):
        st.session_state["optimized_for"] = (market, scr)
    if col_clear.button("Clear"):
        st.session_state.pop("optimized_for", None)

    if st.button("Reload data", help="Force re-read of the dataset file."):
        st.cache_data.clear()
        st.rerun()


# ── Derived state ─────────────────────────────────────────────────────────────

view = build_channel_view(
    records,
    genre=genre,
    search=search,
    sort_by=_SORT_OPTIONS[sort_label],
    descending=descending,
    show_all=show_all,
    relevance=config.relevance,
)

results = None
if st.session_state.get("optimized_for") == (market, scr):
    results = run_optimization(
        view, opt_cfg.clamp_intensity(intensity), opt_cfg.clamp_threshold(threshold)
    )
elif "optimized_for" in st.session_state:
    # Market or SCR changed since the last run.
    st.session_state.pop("optimized_for")

is_atc = market_data.optimization_type == OptimizationType.ATC


# ── Header / metric cards ─────────────────────────────────────────────────────

st.header(f"{market} — {scr}")
if market_data.market_share:
    st.caption(
        "Market share: "
        + ", ".join(
            f"{brand.replace('_', ' ').title()} {share:.1f}%"
            for brand, share in market_data.market_share.items()
        )
    )

summary = summarize_scr(
    records,
    market_data.optimization_type,
    min_santoor_reach=config.relevance.min_santoor_reach,
    min_comp_reach=config.relevance.min_comp_reach,
    min_channel_share=config.relevance.min_channel_share,
)

cards = st.columns(5 if is_atc else 4)
cards[0].metric("Channels", summary.relevant, help=f"{summary.total} in SCR")
cards[1].metric("Santoor active", summary.active)
cards[2].metric("Opportunities", summary.opportunities)
cards[3].metric("Avg gap", f"{summary.avg_gap:+.1f}", summary.status.value, delta_color="off")
if is_atc:
    avg_atc = summary.avg_atc_index
    cards[4].metric("Avg ATC index", f"{avg_atc:.1f}" if avg_atc is not None else "N/A")

if results is not None:
    opt_summary = summarize_results(results)
    o1, o2, o3, o4, o5 = st.columns(5)
    o1.metric("Increase", opt_summary.increase)
    o2.metric("Maintain", opt_summary.maintain)
    o3.metric("Add", opt_summary.add)
    o4.metric("Decrease", opt_summary.decrease)
    o5.metric("High priority", opt_summary.high_priority)


# ── Tabs ──────────────────────────────────────────────────────────────────────

tab_channels, tab_heatmap = st.tabs(["Channel Analysis", "Timeband Heatmap"])


def _badge_css(style: dict[str, str]) -> str:
    return f"background-color: {style['bg']}; color: {style['text']}"


# ══════════════════════════════════════════════════════════════════════════════
# Tab 1 — Channel Analysis
# ══════════════════════════════════════════════════════════════════════════════

with tab_channels:
    st.caption(f"Showing {len(view)} of {len(records)} channels")

    if not view:
        st.info("No channels match the current filters.")
    else:
        df = channel_frame(view, market_data.competitors, results, show_atc=is_atc)
        styled = df.style.map(lambda v: _badge_css(status_style(v)), subset=["Status"])
        if results is not None:
            styled = styled.map(
                lambda v: _badge_css(recommendation_style(v)) if v else "",
                subset=["Action"],
            )
        styled = styled.format(
            {"Santoor": "{:.1f}%", "Gap": "{:+.1f}", "Index": "{:.0f}"}, na_rep="-"
        )
        st.dataframe(styled, use_container_width=True, hide_index=True)

        export_rows = flatten_results_for_export(
            view, results, market=market, scr=scr, competitors=market_data.competitors
        )
        csv_bytes = (
            pd.DataFrame(export_rows, columns=EXPORT_FIELDNAMES)
            .to_csv(index=False)
            .encode("utf-8")
        )
        st.download_button(
            "Download CSV",
            data=csv_bytes,
            file_name=f"{market}_{scr}_channels.csv".replace(" ", "_"),
            mime="text/csv",
        )


# ══════════════════════════════════════════════════════════════════════════════
# Tab 2 — Timeband Heatmap
# ══════════════════════════════════════════════════════════════════════════════

with tab_heatmap:
    metric_options = {"Reach index": "reach", "Gap": "gap"}
    if is_atc:
        metric_options["ATC index"] = "atcIndex"
    metric_label = st.radio("Metric", options=list(metric_options), horizontal=True)
    metric = metric_options[metric_label]

    rows = build_heatmap(view, metric=metric, max_channels=config.dashboard.heatmap_max_channels)
    if not rows:
        st.info("No timeband data for the channels shown.")
    else:
        st.caption(
            "Reach and ATC are indexed to each channel's best daypart (= 100). "
            "Gap is shown in raw points."
        )
        hm = heatmap_frame(rows)
        css = heatmap_styles(rows)
        fmt = "{:+.1f}" if metric == "gap" else "{:.0f}"
        st.dataframe(
            hm.style.apply(lambda _: css, axis=None).format(fmt),
            use_container_width=True,
        )
