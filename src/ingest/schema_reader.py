"""Parameter file schema detection.

This module reads the keyword and header lines of a parameter file.
It classifies the file's shape kind and extracts its parameter columns.
"""

from __future__ import annotations

import re
from itertools import islice
from pathlib import Path
from typing import Iterable

from core.constants import (
    DEFAULT_METADATA_COLUMNS,
    FIRST_MEMBER_SUFFIX,
    HEADER_LINE_NUMBER,
    SECOND_MEMBER_SUFFIX,
    SHAPE_KEYWORD_LINE_NUMBER,
    SITE_COLUMN,
    SOURCE_COLUMN,
    SPECIES_COLUMN,
)
from core.errors import (
    ParameterFileError,
    ParameterSchemaError,
    UnexpectedMetadataColumn,
    UnknownShapeKind,
)
from core.types import FileSchema, ShapeKind

_SHAPE_KEYWORDS: dict[str, ShapeKind] = {
    "like": ShapeKind.SINGLE,
    "single": ShapeKind.SINGLE,
    "unlike": ShapeKind.PAIR,
    "pair": ShapeKind.PAIR,
    "assoc": ShapeKind.ASSOC,
    "group": ShapeKind.GROUP,
}
_TOKEN_PUNCTUATION = "\"'()[]{}:;."
_DIGITS = re.compile(r"\d")


def read_file_schema(
    path: Path,
    metadata_columns: Iterable[str] = DEFAULT_METADATA_COLUMNS,
) -> FileSchema:
    """Read the shape kind and parameter columns of a parameter file.

    Args:
        path: Parameter file path.
        metadata_columns: Column names, compared after normalization and
            digit stripping, that are never parameters.

    Returns:
        Header-level file schema.

    Raises:
        UnknownShapeKind: If line 2 names no shape kind, or several.
        UnexpectedMetadataColumn: If an identifier column does not fit the shape.
        ParameterSchemaError: If the file is too short or repeats a parameter.
        ParameterFileError: If the file cannot be read.
    """
    keyword_line, header_line = _read_leading_lines(path)
    shape_kind = parse_shape_kind(keyword_line, path)
    header = tuple(name.strip() for name in header_line.split(","))
    metadata_tokens = {normalize_column_name(column) for column in metadata_columns}
    parameter_names: list[str] = []
    for name in header:
        if not name:
            continue
        if metadata_token(name) in metadata_tokens:
            _validate_metadata_column(name, shape_kind, path)
            continue
        if name in parameter_names:
            raise ParameterSchemaError(
                f"Parameter column '{name}' appears twice in the header of {path}. "
                "Remove the duplicate column."
            )
        parameter_names.append(name)
    return FileSchema(
        path=path,
        shape_kind=shape_kind,
        parameter_names=tuple(parameter_names),
        header=header,
    )


def parse_shape_kind(keyword_line: str, path: Path) -> ShapeKind:
    """Classify a keyword line into a shape kind.

    Args:
        keyword_line: Raw text of line 2.
        path: File path used in error messages.

    Returns:
        The single shape kind named on the line.

    Raises:
        UnknownShapeKind: If no keyword, or keywords for different kinds, appear.
    """
    tokens = [
        raw.strip(_TOKEN_PUNCTUATION) for raw in keyword_line.lower().replace(",", " ").split()
    ]
    kinds = {_SHAPE_KEYWORDS[token] for token in tokens if token in _SHAPE_KEYWORDS}
    if not kinds:
        raise UnknownShapeKind(
            f"Unable to determine the shape of parameter file {path}. "
            "Put one of like/single, unlike/pair, assoc or group on line 2."
        )
    if len(kinds) > 1:
        named = ", ".join(sorted(kind.value for kind in kinds))
        raise UnknownShapeKind(
            f"Line 2 of parameter file {path} names several shapes ({named}). "
            "Keep exactly one shape keyword on line 2."
        )
    return kinds.pop()


def normalize_column_name(name: str) -> str:
    """Lowercase a column name and drop all whitespace."""
    return "".join(name.lower().split())


def metadata_token(name: str) -> str:
    """Return the normalized column name with member digits removed."""
    return _DIGITS.sub("", normalize_column_name(name))


def _validate_metadata_column(name: str, shape_kind: ShapeKind, path: Path) -> None:
    """Reject identifier-like columns that do not belong to the file's shape.

    Args:
        name: Raw header name classified as metadata.
        shape_kind: Shape kind of the file.
        path: File path used in error messages.

    Raises:
        UnexpectedMetadataColumn: If the column cannot be an identifier here.
    """
    if shape_kind is ShapeKind.GROUP:
        return
    normalized = normalize_column_name(name)
    token = metadata_token(name)
    paired_species = {SPECIES_COLUMN + FIRST_MEMBER_SUFFIX, SPECIES_COLUMN + SECOND_MEMBER_SUFFIX}
    if token == SPECIES_COLUMN:
        allowed = {SPECIES_COLUMN} if shape_kind is ShapeKind.SINGLE else paired_species
    elif token == SITE_COLUMN:
        allowed = (
            {SITE_COLUMN + FIRST_MEMBER_SUFFIX, SITE_COLUMN + SECOND_MEMBER_SUFFIX}
            if shape_kind is ShapeKind.ASSOC
            else set()
        )
    elif token == SOURCE_COLUMN:
        allowed = {SOURCE_COLUMN}
    else:
        return
    if normalized not in allowed:
        raise UnexpectedMetadataColumn(
            f"Column '{name}' in {shape_kind.value} parameter file {path} looks like an "
            f"identifier column but is not one of {sorted(allowed) or 'none'}. "
            "Rename the column so it is either a valid identifier or a parameter."
        )


def _read_leading_lines(path: Path) -> tuple[str, str]:
    """Return the keyword line and header line of a parameter file.

    Raises:
        ParameterSchemaError: If the file has fewer than three lines.
        ParameterFileError: If the file cannot be opened.
    """
    try:
        with path.open(encoding="utf-8-sig") as handle:
            lines = list(islice(handle, HEADER_LINE_NUMBER))
    except OSError as error:
        raise ParameterFileError(
            f"Failed to read parameter file {path}: {error}. Check the path and permissions."
        ) from error
    if len(lines) < HEADER_LINE_NUMBER:
        raise ParameterSchemaError(
            f"Parameter file {path} has {len(lines)} lines, expected at least "
            f"{HEADER_LINE_NUMBER} (title, shape keyword, header)."
        )
    keyword_line = lines[SHAPE_KEYWORD_LINE_NUMBER - 1].rstrip("\r\n")
    header_line = lines[HEADER_LINE_NUMBER - 1].rstrip("\r\n")
    return keyword_line, header_line
