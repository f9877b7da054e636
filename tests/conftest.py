"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Sequence

import pytest

ParameterFileWriter = Callable[[str, str, str, Sequence[str]], Path]


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def write_parameter_file(tmp_path: Path) -> ParameterFileWriter:
    """Return a helper that writes a parameter file under tmp_path."""

    def _write(file_name: str, keyword_line: str, header_line: str, rows: Sequence[str]) -> Path:
        path = tmp_path / file_name
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = ["Test database file", keyword_line, header_line, *rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
