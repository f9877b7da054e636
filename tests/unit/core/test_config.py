"""Unit tests for core config parsing."""

from __future__ import annotations

import logging
import os

import pytest

from core.config import SaftParamsConfig
from core.errors import SaftParamsConfigError


def test_from_env_reads_database_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve database root from environment."""
    monkeypatch.setenv("SAFTPARAMS_DATABASE_ROOT", "./.tmp-database")

    config = SaftParamsConfig.from_env()

    assert config.database_root.name == ".tmp-database"


def test_from_env_defaults_to_bundled_database(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fall back to the repository database directory."""
    monkeypatch.delenv("SAFTPARAMS_DATABASE_ROOT", raising=False)

    config = SaftParamsConfig.from_env()

    assert (config.database_root / "SAFT" / "PCSAFT").is_dir()


def test_from_env_parses_lowercase_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should accept log level names in any case."""
    monkeypatch.setenv("SAFTPARAMS_LOG_LEVEL", "debug")

    config = SaftParamsConfig.from_env()

    assert config.log_level == logging.DEBUG


def test_from_env_raises_for_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for unknown log level names."""
    monkeypatch.setenv("SAFTPARAMS_LOG_LEVEL", "chatty")

    with pytest.raises(SaftParamsConfigError):
        SaftParamsConfig.from_env()

    assert os.getenv("SAFTPARAMS_LOG_LEVEL") == "chatty"
