"""Unit tests for parameter path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import PathNotFound
from ingest.path_resolver import (
    infer_model_name,
    resolve_database_paths,
    resolve_parameter_paths,
    resolve_user_paths,
)
from tests.fixture_paths import database_root, fixture_path


def test_resolve_database_paths_expands_directory_sorted() -> None:
    """Model directories should expand to their csv files in name order."""
    paths = resolve_database_paths("SAFT/PCSAFT", database_root())

    assert [path.name for path in paths] == [
        "PCSAFT_assoc.csv",
        "PCSAFT_like.csv",
        "PCSAFT_unlike.csv",
    ]


def test_resolve_user_paths_ignores_non_csv_files() -> None:
    """Directory expansion should skip files without the csv extension."""
    paths = resolve_user_paths(str(fixture_path("pcsaft_user")))

    assert [path.name for path in paths] == ["user_like.csv", "user_unlike.csv"]


def test_resolve_user_paths_appends_csv_extension() -> None:
    """A path without extension should resolve to its csv file."""
    paths = resolve_user_paths(str(fixture_path("pcsaft_user/user_like")))

    assert paths == [fixture_path("pcsaft_user/user_like.csv")]


def test_resolve_user_paths_raises_for_missing_path(tmp_path: Path) -> None:
    """Resolver should fail when a path is neither file nor directory."""
    with pytest.raises(PathNotFound):
        resolve_user_paths(str(tmp_path / "does-not-exist"))


def test_resolve_parameter_paths_puts_database_first() -> None:
    """Built-in files should precede user files so users override them."""
    paths = resolve_parameter_paths(
        ["SAFT/PCSAFT"],
        [str(fixture_path("pcsaft_user"))],
        database_root(),
    )

    assert [path.parent.name for path in paths] == ["PCSAFT"] * 3 + ["pcsaft_user"] * 2


def test_infer_model_name_uses_first_existing_path() -> None:
    """Model name should be the base name of the first existing path."""
    name = infer_model_name(["SAFT/missing", "SAFT/PCSAFT"], [], database_root())

    assert name == "PCSAFT"


def test_infer_model_name_falls_back_to_unnamed(tmp_path: Path) -> None:
    """Model name should be 'unnamed' when no path exists."""
    name = infer_model_name([], [str(tmp_path / "missing")], database_root())

    assert name == "unnamed"
