"""
Shared pytest fixtures for the TV Optimizer test suite.

Provides:
  - ``make_record``: factory for ``ChannelRecord`` with sensible defaults,
    so each test only spells out the fields it cares about.
  - ``sample_dataset_raw`` / ``sample_dataset_path``: a small two-market
    dataset (one Reach market, one ATC market) as a dict and as a JSON file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from tv_optimizer.models.channel import ChannelRecord


# ── Record factory ────────────────────────────────────────────────────────────

def build_record(channel: str = "Star Plus", **overrides: Any) -> ChannelRecord:
    """Build a ``ChannelRecord`` by attribute name with neutral defaults."""
    fields: dict[str, Any] = {
        "channel": channel,
        "genre": "Hindi GEC",
        "santoor_reach": 5.0,
        "max_comp_reach": 5.0,
        "gap": 0.0,
        "channel_share": 3.0,
        "index_vs_baseline": 100.0,
        "index_vs_competition": 90.0,
    }
    fields.update(overrides)
    return ChannelRecord(**fields)


@pytest.fixture
def make_record() -> Callable[..., ChannelRecord]:
    """Return the ``build_record`` factory."""
    return build_record


# ── Sample dataset ────────────────────────────────────────────────────────────

def _row(channel: str, genre: str, santoor: float, comp: float, share: float, index: float, **extra):
    row = {
        "channel": channel,
        "genre": genre,
        "santoorReach": santoor,
        "maxCompReach": comp,
        "gap": round(santoor - comp, 1),
        "channelShare": share,
        "indexVsBaseline": 100,
        "indexVsCompetition": index,
    }
    row.update(extra)
    return row


@pytest.fixture
def sample_dataset_raw() -> dict:
    """Two markets: Maharashtra (Reach) and Karnataka (ATC)."""
    return {
        "metadata": {"markets": ["Maharashtra", "Karnataka"]},
        "markets": {
            "Maharashtra": {
                "scrs": ["Mumbai", "Maharashtra Overall"],
                "competitors": ["godrej", "lux"],
                "optimizationType": "Reach",
                "marketShare": {"santoor": 22.7, "godrej": 19.5},
                "summaries": {},
                "channelData": {
                    "Maharashtra Overall": [
                        _row("Star Pravah", "Marathi GEC", 14.2, 11.0, 10.3, 129.1,
                             godrejReach=11.0, luxReach=9.4),
                        _row("Zee Marathi", "Marathi GEC", 11.5, 12.3, 9.1, 93.5,
                             godrejReach=12.3, luxReach=10.8),
                        _row("Sony Marathi", "Marathi GEC", 0, 2.6, 1.5, 0,
                             godrejReach=2.6, luxReach=1.4),
                        _row("ABP Majha", "Marathi News", 1.0, 0.7, 0.8, 142.9,
                             godrejReach=0.5, luxReach=0.7),
                        _row("Dead Channel", "Regional", 0, 0, 0, 0),
                    ],
                    "Mumbai": [
                        _row("Star Pravah", "Marathi GEC", 11.8, 10.2, 9.0, 115.7),
                    ],
                },
            },
            "Karnataka": {
                "scrs": ["Karnataka Overall"],
                "competitors": ["lifebuoy", "mysore_sandal"],
                "optimizationType": "ATC",
                "channelData": {
                    "Karnataka Overall": [
                        _row("Colors Kannada", "Kannada GEC", 13.6, 12.5, 11.4, 108.8,
                             lifebuoyReach=11.2, mysore_sandalReach=12.5, atcIndex=112.5,
                             timebands=[
                                 {"timeband": "0600-1200", "santoorReach": 2.2, "gap": 0.2, "atcIndex": 104.0},
                                 {"timeband": "1800-2300", "santoorReach": 7.0, "gap": 0.5, "atcIndex": 121.0},
                             ]),
                        _row("Zee Kannada", "Kannada GEC", 10.1, 12.9, 9.8, 78.3,
                             lifebuoyReach=12.9, mysore_sandalReach=9.7, atcIndex=86.0),
                    ],
                },
            },
        },
    }


@pytest.fixture
def sample_dataset_path(tmp_path: Path, sample_dataset_raw: dict) -> Path:
    """``sample_dataset_raw`` written to a JSON file."""
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps(sample_dataset_raw), encoding="utf-8")
    return path
