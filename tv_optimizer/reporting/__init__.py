"""
tv_optimizer.reporting — table views, terminal formatting, and export.

This package presents channel rows and optimization results.  It never
changes them; every function takes the engine's output read-only.

Modules:
  table      — Filter / search / sort pipeline for the channel table.
  formatters — ASCII terminal formatters for Typer CLI commands.
  export     — CSV/JSON flat-file export helpers.
  styles     — Colour / icon lookup tables keyed by status and action.
"""
