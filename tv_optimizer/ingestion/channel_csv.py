"""
CSV import parser for ad-hoc channel metric sheets.

Format — comma delimited, with a header row.
Required columns:
  channel, genre, santoorReach, maxCompReach, gap, channelShare, indexVsCompetition

Optional columns (empty string → default):
  indexVsBaseline, godrejReach, luxReach, lifebuoyReach, mysore_sandalReach, atcIndex

Numeric cells use the same normalization as the dataset loader: blank or
unparseable values become 0.0 (required) or None (optional).  A trailing
``%`` is tolerated.

Channel names must be unique within a file; the optimizer keys its results
by channel name.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from pydantic import ValidationError

from tv_optimizer.ingestion.dataset import normalize_channel_row
from tv_optimizer.models.channel import ChannelRecord

logger = logging.getLogger(__name__)

REQUIRED_CSV_COLUMNS = frozenset({
    "channel", "genre", "santoorReach", "maxCompReach",
    "gap", "channelShare", "indexVsCompetition",
})


def parse_channel_csv(path: Path) -> list[ChannelRecord]:
    """Parse a CSV file of channel metrics into validated :class:`ChannelRecord` objects.

    All rows are validated before any are returned. If **any** row fails,
    a single :class:`ValueError` is raised listing the first 10 failures.

    Args:
        path: Path to the CSV file (must exist).

    Returns:
        List of validated :class:`ChannelRecord` instances in file order.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If required columns are missing or any row fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Channel CSV file not found: {path}")

    with open(path, encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        actual_cols = {c.strip() for c in reader.fieldnames}
        missing = REQUIRED_CSV_COLUMNS - actual_cols
        if missing:
            raise ValueError(
                f"CSV missing required columns: {sorted(missing)}\n"
                f"Found columns: {sorted(actual_cols)}"
            )

        rows = [{(k or "").strip(): v for k, v in row.items()} for row in reader]

    if not rows:
        logger.warning("Channel CSV is empty (header only): %s", path)
        return []

    records: list[ChannelRecord] = []
    errors: list[tuple[int, str]] = []
    seen: set[str] = set()

    for i, row in enumerate(rows):
        line_no = i + 2  # 1-based, skip header row
        try:
            record = ChannelRecord.model_validate(normalize_channel_row(row))
        except (ValueError, ValidationError) as exc:
            errors.append((line_no, str(exc)))
            continue
        if record.channel in seen:
            errors.append((line_no, f"Duplicate channel '{record.channel}'."))
            continue
        seen.add(record.channel)
        records.append(record)

    if errors:
        max_shown = 10
        detail = "\n".join(f"  Row {ln}: {msg}" for ln, msg in errors[:max_shown])
        suffix = f"\n  … and {len(errors) - max_shown} more" if len(errors) > max_shown else ""
        raise ValueError(
            f"{len(errors)} row(s) failed validation in {path.name}:\n{detail}{suffix}"
        )

    logger.info("Parsed %d channels from %s", len(records), path.name)
    return records
