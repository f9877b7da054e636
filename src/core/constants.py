"""Core constants used across saftparams modules.

This module centralizes file-format and configuration constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATABASE_ROOT = Path(__file__).resolve().parents[2] / "database"
DATABASE_ROOT_ENV_VAR = "SAFTPARAMS_DATABASE_ROOT"
LOG_LEVEL_ENV_VAR = "SAFTPARAMS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
PARAMETER_FILE_EXTENSION = ".csv"
DEFAULT_MODEL_NAME = "unnamed"
SHAPE_KEYWORD_LINE_NUMBER = 2
HEADER_LINE_NUMBER = 3
SPECIES_COLUMN = "species"
SITE_COLUMN = "site"
SOURCE_COLUMN = "source"
DEFAULT_METADATA_COLUMNS = frozenset({"source", "species", "dipprnumber", "smiles", "site"})
FIRST_MEMBER_SUFFIX = "1"
SECOND_MEMBER_SUFFIX = "2"
TEXT_DEFAULT = ""
INTEGER_DEFAULT = 0
FLOAT_DEFAULT = 0.0
