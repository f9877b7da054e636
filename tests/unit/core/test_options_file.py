"""Unit tests for YAML ingest options parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.constants import DEFAULT_METADATA_COLUMNS
from core.errors import OptionsFileError
from core.options_file import load_ingest_options
from tests.fixture_paths import fixture_path


def test_load_ingest_options_reads_valid_file() -> None:
    """Loader should build options from a valid YAML file."""
    options = load_ingest_options(str(fixture_path("options_valid.yaml")))

    assert (options.components, options.models, options.asymmetric_pair_params) == (
        ("methane", "ethane"),
        ("SAFT/PCSAFT",),
        frozenset({"k"}),
    )


def test_load_ingest_options_defaults_metadata_columns() -> None:
    """Loader should keep default metadata columns when none are listed."""
    options = load_ingest_options(str(fixture_path("options_valid.yaml")))

    assert options.metadata_columns == DEFAULT_METADATA_COLUMNS


def test_load_ingest_options_rejects_unknown_keys() -> None:
    """Loader should fail for fields outside the options schema."""
    with pytest.raises(OptionsFileError, match="species_list"):
        load_ingest_options(str(fixture_path("options_unknown_key.yaml")))


def test_load_ingest_options_requires_components(tmp_path: Path) -> None:
    """Loader should fail when no component is listed."""
    options_path = tmp_path / "options.yaml"
    options_path.write_text("models:\n  - SAFT/PCSAFT\n", encoding="utf-8")

    with pytest.raises(OptionsFileError):
        load_ingest_options(str(options_path))


def test_load_ingest_options_rejects_non_boolean_flag(tmp_path: Path) -> None:
    """Loader should fail when a flag is not a boolean."""
    options_path = tmp_path / "options.yaml"
    options_path.write_text(
        "components: [water]\nignore_missing_single_params: 'yes'\n",
        encoding="utf-8",
    )

    with pytest.raises(OptionsFileError):
        load_ingest_options(str(options_path))


def test_load_ingest_options_raises_for_missing_file(tmp_path: Path) -> None:
    """Loader should fail when the options file does not exist."""
    with pytest.raises(OptionsFileError):
        load_ingest_options(str(tmp_path / "missing.yaml"))
