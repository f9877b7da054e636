"""Public SDK surface for saftparams.

This module provides a stable import path for model builders.
It re-exports the ingestion entry points and the packaged record types.
"""

from __future__ import annotations

from core.config import SaftParamsConfig
from core.options_file import load_ingest_options
from core.types import AssocParam, IngestOptions, PairParam, ShapeKind, SingleParam, SiteRegistry
from ingest.pipeline import get_params, get_params_from_options
from store.parameter_set import ParameterSet

__all__ = [
    "AssocParam",
    "IngestOptions",
    "PairParam",
    "ParameterSet",
    "SaftParamsConfig",
    "ShapeKind",
    "SingleParam",
    "SiteRegistry",
    "get_params",
    "get_params_from_options",
    "load_ingest_options",
]
