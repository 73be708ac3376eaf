"""
Presentation metadata for statuses and recommendations.

Keyed by enum value; consumed by the dashboard (colours) and the CLI (icons).
Unknown keys fall back to ``NEUTRAL_STYLE``.
"""

from __future__ import annotations

from tv_optimizer.taxonomy.channel_taxonomy import ChannelStatus, Recommendation

NEUTRAL_STYLE: dict[str, str] = {"bg": "#f3f4f6", "text": "#6b7280", "icon": "·"}

STATUS_STYLES: dict[str, dict[str, str]] = {
    ChannelStatus.DOMINANT:    {"bg": "#dcfce7", "text": "#166534", "icon": "🏆"},
    ChannelStatus.LEADING:     {"bg": "#f0fdf4", "text": "#15803d", "icon": "↑"},
    ChannelStatus.CLOSE:       {"bg": "#fefce8", "text": "#a16207", "icon": "~"},
    ChannelStatus.BEHIND:      {"bg": "#ffedd5", "text": "#c2410c", "icon": "↓"},
    ChannelStatus.CRITICAL:    {"bg": "#fee2e2", "text": "#991b1b", "icon": "⚠"},
    ChannelStatus.OPPORTUNITY: {"bg": "#f3e8ff", "text": "#6b21a8", "icon": "+"},
    ChannelStatus.MONOPOLY:    {"bg": "#dbeafe", "text": "#1e40af", "icon": "★"},
    ChannelStatus.INACTIVE:    {"bg": "#f3f4f6", "text": "#9ca3af", "icon": "-"},
}

RECOMMENDATION_STYLES: dict[str, dict[str, str]] = {
    Recommendation.INCREASE: {"bg": "#dcfce7", "text": "#166534", "icon": "↑"},
    Recommendation.MAINTAIN: {"bg": "#dbeafe", "text": "#1e40af", "icon": "—"},
    Recommendation.ADD:      {"bg": "#f3e8ff", "text": "#6b21a8", "icon": "+"},
    Recommendation.DECREASE: {"bg": "#fee2e2", "text": "#991b1b", "icon": "↓"},
}


def status_style(status: str) -> dict[str, str]:
    return STATUS_STYLES.get(status, NEUTRAL_STYLE)


def recommendation_style(recommendation: str) -> dict[str, str]:
    return RECOMMENDATION_STYLES.get(recommendation, NEUTRAL_STYLE)
