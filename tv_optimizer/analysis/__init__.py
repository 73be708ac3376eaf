"""
tv_optimizer.analysis — read-only aggregates over channel rows.

Modules:
  summary  — SCR headline numbers and optimization result counts.
  timeband — Daypart heatmap indexes and colour scales.
"""
