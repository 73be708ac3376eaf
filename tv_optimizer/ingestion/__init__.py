"""
Ingestion layer — loads static channel metrics into validated models.

Submodules:
  dataset      — Multi-market JSON dataset loader + numeric normalization
  channel_csv  — CSV import parser for ad-hoc channel metric sheets

Nothing in this package writes data back; the dataset is read-only.
"""
