"""Runtime configuration model for saftparams.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from core.constants import (
    DATABASE_ROOT_ENV_VAR,
    DEFAULT_DATABASE_ROOT,
    DEFAULT_LOG_LEVEL,
    LOG_LEVEL_ENV_VAR,
)
from core.errors import SaftParamsConfigError


@dataclass(frozen=True)
class SaftParamsConfig:
    """Validated runtime configuration.

    Attributes:
        database_root: Directory holding the built-in parameter database.
        log_level: Minimum stdlib logging level emitted by structured loggers.
    """

    database_root: Path
    log_level: int

    @classmethod
    def from_env(cls) -> "SaftParamsConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SaftParamsConfigError: If environment values are invalid.
        """
        database_root_value = os.getenv(DATABASE_ROOT_ENV_VAR, str(DEFAULT_DATABASE_ROOT))
        log_level_value = os.getenv(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
        return cls(
            database_root=Path(database_root_value).expanduser().resolve(),
            log_level=_parse_log_level(log_level_value),
        )


def _parse_log_level(raw_value: str) -> int:
    """Parse the log level environment value.

    Args:
        raw_value: Raw level name from environment, e.g. ``debug``.

    Returns:
        Numeric stdlib logging level.

    Raises:
        SaftParamsConfigError: If the name is not a known logging level.
    """
    level = logging.getLevelName(raw_value.strip().upper())
    if not isinstance(level, int):
        raise SaftParamsConfigError(
            f"Invalid {LOG_LEVEL_ENV_VAR} value: "
            f"expected a logging level name, got '{raw_value}'. "
            f"Set {LOG_LEVEL_ENV_VAR} to DEBUG, INFO, WARNING or ERROR."
        )
    return level
