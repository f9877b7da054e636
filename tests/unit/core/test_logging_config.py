"""Unit tests for structured logging configuration."""

from __future__ import annotations

import logging

import pytest

from core.logging_config import configure_logging, get_logger


def test_get_logger_ignores_invalid_log_level_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Creating a logger should not read or validate the environment."""
    monkeypatch.setenv("SAFTPARAMS_LOG_LEVEL", "chatty")

    logger = get_logger("tests.logging")

    assert logger is not None


def test_configure_logging_filters_below_level(capsys) -> None:
    """Events below the configured level should not be emitted."""
    configure_logging(logging.WARNING)
    logger = get_logger("tests.logging")

    logger.info("hidden_event")
    logger.warning("shown_event", path="like.csv")
    output = capsys.readouterr().out
    configure_logging(logging.INFO)

    assert "hidden_event" not in output and '"event": "shown_event"' in output
