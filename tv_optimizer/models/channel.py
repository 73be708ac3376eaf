"""
Channel-level input and output models.

``ChannelRecord`` is one row of pre-computed campaign metrics for a channel
within an SCR.  ``OptimizationResult`` is the optimizer's verdict for one
channel.

Wire format
-----------
The dataset JSON and the CSV importer use camelCase column names
(``santoorReach``, ``maxCompReach``, ``indexVsCompetition`` ...).  Python code
uses snake_case attributes.  Both spellings are accepted on construction
(``populate_by_name=True``); ``model_dump(by_alias=True)`` restores the wire
names.

Both models are frozen: a record is immutable for the duration of an
optimization pass, and results are rebuilt from scratch on every call.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tv_optimizer.taxonomy.channel_taxonomy import Priority, Recommendation


class TimebandRecord(BaseModel):
    """Metrics for one channel within one daypart band.

    Attributes:
        timeband: Band label, e.g. ``"1800-2300"``.
        santoor_reach: Santoor reach (%) within the band.
        gap: Santoor minus best competitor reach (percentage points).
        atc_index: Karnataka ATC index for the band, or ``None``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timeband: str
    santoor_reach: float = Field(0.0, alias="santoorReach")
    gap: float = 0.0
    atc_index: Optional[float] = Field(None, alias="atcIndex")


class ChannelRecord(BaseModel):
    """Pre-computed campaign metrics for one channel in one SCR.

    Attributes:
        channel: Unique display name; the key for optimization results.
        genre: Category label (e.g. ``"Hindi GEC"``).
        santoor_reach: Santoor reach (%).
        max_comp_reach: Best competitor reach (%).
        gap: ``santoor_reach - max_comp_reach`` in percentage points.
        channel_share: Share of viewing (%).
        index_vs_baseline: Santoor vs brand baseline, x100.
        index_vs_competition: Santoor vs best competitor, x100.
        godrej_reach / lux_reach: Competitor reach, UP and Maharashtra.
        lifebuoy_reach / mysore_sandal_reach: Competitor reach, Karnataka.
        atc_index: Karnataka-only ATC index.
        timebands: Optional per-daypart breakdown.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    channel: str
    genre: str = ""
    santoor_reach: float = Field(0.0, alias="santoorReach")
    max_comp_reach: float = Field(0.0, alias="maxCompReach")
    gap: float = 0.0
    channel_share: float = Field(0.0, alias="channelShare")
    index_vs_baseline: float = Field(0.0, alias="indexVsBaseline")
    index_vs_competition: float = Field(0.0, alias="indexVsCompetition")

    godrej_reach: Optional[float] = Field(None, alias="godrejReach")
    lux_reach: Optional[float] = Field(None, alias="luxReach")
    lifebuoy_reach: Optional[float] = Field(None, alias="lifebuoyReach")
    mysore_sandal_reach: Optional[float] = Field(None, alias="mysore_sandalReach")
    atc_index: Optional[float] = Field(None, alias="atcIndex")

    timebands: list[TimebandRecord] = Field(default_factory=list)

    @field_validator("channel")
    @classmethod
    def validate_channel_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("channel must not be empty.")
        return v.strip()


class OptimizationResult(BaseModel):
    """Recommendation for a single channel.

    Attributes:
        channel: Foreign key back to ``ChannelRecord.channel``.
        recommendation: INCREASE / MAINTAIN / ADD / DECREASE.
        priority: HIGH / MEDIUM / LOW.
        reason: Human-readable justification; never parsed.
    """

    model_config = ConfigDict(frozen=True)

    channel: str
    recommendation: Recommendation
    priority: Priority
    reason: str
