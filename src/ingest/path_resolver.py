"""Parameter file path resolution.

This module expands built-in model references and user paths into
ordered parameter file lists, and infers a model name from them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.constants import DEFAULT_MODEL_NAME, PARAMETER_FILE_EXTENSION
from core.errors import PathNotFound


def resolve_database_paths(model: str, database_root: Path) -> list[Path]:
    """Resolve a built-in model reference to parameter files.

    Args:
        model: Model path relative to the database root, e.g. ``SAFT/PCSAFT``.
        database_root: Root directory of the built-in database.

    Returns:
        Parameter files for the model, sorted by name for directories.

    Raises:
        PathNotFound: If the model resolves to neither a file nor a directory.
    """
    return _expand_path(database_root / model, f"in the database at {database_root}")


def resolve_user_paths(user_path: str) -> list[Path]:
    """Resolve a user-supplied file or directory to parameter files.

    Args:
        user_path: File, file without extension, or directory path.

    Returns:
        Parameter files for the path, sorted by name for directories.

    Raises:
        PathNotFound: If the path resolves to neither a file nor a directory.
    """
    return _expand_path(Path(user_path).expanduser(), "on disk")


def resolve_parameter_paths(
    models: Iterable[str],
    user_paths: Iterable[str],
    database_root: Path,
) -> list[Path]:
    """Concatenate built-in and user parameter files in priority order.

    Built-in files come first so user files always override them.

    Args:
        models: Built-in model references.
        user_paths: User-supplied paths.
        database_root: Root directory of the built-in database.

    Returns:
        Ordered parameter files, lowest priority first.
    """
    paths: list[Path] = []
    for model in models:
        paths.extend(resolve_database_paths(model, database_root))
    for user_path in user_paths:
        paths.extend(resolve_user_paths(user_path))
    return paths


def infer_model_name(
    models: Iterable[str],
    user_paths: Iterable[str],
    database_root: Path,
) -> str:
    """Guess a model name from the first existing model or user path.

    Args:
        models: Built-in model references, checked first.
        user_paths: User-supplied paths, checked second.
        database_root: Root directory of the built-in database.

    Returns:
        Base name of the first existing path, or ``"unnamed"``.
    """
    candidates = [database_root / model for model in models]
    candidates.extend(Path(user_path).expanduser() for user_path in user_paths)
    for candidate in candidates:
        if candidate.exists():
            return candidate.name
    return DEFAULT_MODEL_NAME


def _expand_path(path: Path, location: str) -> list[Path]:
    """Expand one path into its parameter files.

    Args:
        path: Candidate file or directory path.
        location: Human-readable location used in error messages.

    Returns:
        Matching parameter files.

    Raises:
        PathNotFound: If no file or directory exists at the path.
    """
    if path.is_file():
        return [path]
    with_extension = Path(f"{path}{PARAMETER_FILE_EXTENSION}")
    if with_extension.is_file():
        return [with_extension]
    if not path.is_dir():
        raise PathNotFound(
            f"Parameter path {path} does not exist {location}. "
            "Provide an existing parameter file or directory."
        )
    return [
        file_path
        for file_path in sorted(path.iterdir())
        if file_path.is_file() and _is_parameter_file(file_path)
    ]


def _is_parameter_file(file_path: Path) -> bool:
    """Return whether a file extension marks a parameter file."""
    return file_path.suffix.lower() == PARAMETER_FILE_EXTENSION
