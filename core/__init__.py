"""Core (UI-agnostic) sales analytics logic.

This package contains:
- record model, validation and the record store
- filter normalization and the filter pipeline
- grouped aggregation and set algebra over record collections
- timing/throughput metrics and the per-session engine
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
