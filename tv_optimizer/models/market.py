"""
Market and dataset models.

Dataset layout (``data/santoor_multimarket_data.json``)::

    {
      "metadata": {"markets": ["UP", "Maharashtra", "Karnataka"]},
      "markets": {
        "UP": {
          "scrs": ["UP Overall", "UP East", ...],
          "competitors": ["godrej", "lux"],
          "optimizationType": "Reach",
          "marketShare": {"santoor": 18.2, ...},
          "summaries": {"UP Overall": {...}},
          "channelData": {"UP Overall": [ {ChannelRecord}, ... ]}
        },
        ...
      }
    }

``summaries`` are carried through untouched; live summaries are recomputed
by ``tv_optimizer.analysis.summary.summarize_scr``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tv_optimizer.models.channel import ChannelRecord
from tv_optimizer.taxonomy.channel_taxonomy import OptimizationType, ScrStatus


class MarketData(BaseModel):
    """All SCRs and channel rows for one market."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    scrs: list[str] = Field(default_factory=list)
    competitors: list[str] = Field(default_factory=list)
    optimization_type: OptimizationType = Field(
        OptimizationType.REACH, alias="optimizationType"
    )
    market_share: dict[str, float] = Field(default_factory=dict, alias="marketShare")
    summaries: dict[str, dict[str, Any]] = Field(default_factory=dict)
    channel_data: dict[str, list[ChannelRecord]] = Field(
        default_factory=dict, alias="channelData"
    )

    @model_validator(mode="after")
    def validate_unique_channels(self) -> "MarketData":
        for scr, records in self.channel_data.items():
            seen: set[str] = set()
            for rec in records:
                if rec.channel in seen:
                    raise ValueError(
                        f"Duplicate channel '{rec.channel}' in SCR '{scr}'."
                    )
                seen.add(rec.channel)
        return self


class DatasetMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    markets: list[str] = Field(default_factory=list)


class MarketDataset(BaseModel):
    """The complete multi-market dataset, loaded once per process."""

    model_config = ConfigDict(frozen=True)

    metadata: DatasetMetadata = DatasetMetadata()
    markets: dict[str, MarketData] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_metadata_markets(self) -> "MarketDataset":
        unknown = [m for m in self.metadata.markets if m not in self.markets]
        if unknown:
            raise ValueError(
                f"metadata.markets lists markets with no data: {unknown}"
            )
        return self

    @property
    def market_names(self) -> list[str]:
        """Markets in display order (metadata order, then any extras)."""
        ordered = list(self.metadata.markets)
        ordered.extend(m for m in self.markets if m not in ordered)
        return ordered


class ScrSummary(BaseModel):
    """Headline numbers for one SCR (the dashboard's metric cards).

    Attributes:
        total: All channel rows in the SCR.
        relevant: Rows surviving the relevance filter.
        active: Relevant rows with Santoor reach > 0.
        opportunities: Relevant rows meeting the opportunity test.
        avg_gap: Mean gap over active rows (0.0 when none).
        avg_atc_index: Mean ATC index over active rows for ATC markets, else ``None``.
        status: SCR status derived from ``avg_gap``.
    """

    model_config = ConfigDict(frozen=True)

    total: int
    relevant: int
    active: int
    opportunities: int
    avg_gap: float
    avg_atc_index: Optional[float] = None
    status: ScrStatus


class OptimizationSummary(BaseModel):
    """Recommendation counts for one optimization pass."""

    model_config = ConfigDict(frozen=True)

    increase: int = 0
    maintain: int = 0
    add: int = 0
    decrease: int = 0
    high_priority: int = 0

    @property
    def total(self) -> int:
        return self.increase + self.maintain + self.add + self.decrease
