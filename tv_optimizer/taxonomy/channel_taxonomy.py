"""
Channel taxonomy for TV campaign optimization.

Four small vocabularies describe every channel evaluation:
  - ``ChannelStatus``     — competitive position of Santoor on the channel.
  - ``Recommendation``    — budget action proposed by the optimizer.
  - ``Priority``          — urgency of a recommendation.
  - ``OptimizationType``  — which metric a market is optimized on.

``ScrStatus`` is the coarser status used for a whole SCR summary card.

Usage example::

    from tv_optimizer.taxonomy.channel_taxonomy import ChannelStatus, Recommendation

    status = ChannelStatus.OPPORTUNITY
    action = Recommendation.ADD

This module has NO imports from any other ``tv_optimizer`` package.
"""

from enum import StrEnum


class ChannelStatus(StrEnum):
    """Competitive position of Santoor on one channel."""

    INACTIVE = "INACTIVE"
    """Neither Santoor nor a meaningful competitor is present."""

    OPPORTUNITY = "OPPORTUNITY"
    """Santoor absent while a competitor has meaningful reach on a sizeable channel."""

    MONOPOLY = "MONOPOLY"
    """Santoor present, no competitor reach at all."""

    DOMINANT = "DOMINANT"
    """Index vs competition >= 150."""

    LEADING = "LEADING"
    """Index vs competition in [100, 150)."""

    CLOSE = "CLOSE"
    """Index vs competition in [80, 100)."""

    BEHIND = "BEHIND"
    """Index vs competition in [50, 80)."""

    CRITICAL = "CRITICAL"
    """Index vs competition below 50."""


class Recommendation(StrEnum):
    """Budget action for a channel."""

    INCREASE = "INCREASE"
    MAINTAIN = "MAINTAIN"
    ADD = "ADD"
    DECREASE = "DECREASE"


class Priority(StrEnum):
    """Urgency of a recommendation."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class OptimizationType(StrEnum):
    """Metric a market is optimized on.

    Karnataka uses the ATC index instead of raw reach for some comparisons.
    """

    REACH = "Reach"
    ATC = "ATC"


class ScrStatus(StrEnum):
    """Overall SCR status derived from the average gap of active channels."""

    LEADING = "LEADING"
    CLOSE = "CLOSE"
    BEHIND = "BEHIND"
    CRITICAL = "CRITICAL"
