"""Core (UI-agnostic) distribution dashboard logic.

This package contains:
- record model and ingestion helpers (JSON -> pandas)
- filter normalization and the filter predicates
- aggregate view models (time series, category tree, flow graph, heatmap, pareto)
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
