"""
Core package for the anomaly dashboard application.

Submodules provide record loading, normalization, filtering, aggregation,
export encoding, and user interface rendering helpers that are orchestrated
by the top-level `app.py`.
"""
