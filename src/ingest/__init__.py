"""Parameter file ingestion.

This package reads tabular parameter files and merges their values.
It hands per-parameter accumulators to the store layer for packaging.
"""
