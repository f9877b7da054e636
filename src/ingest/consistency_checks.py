"""Pre-flight consistency checks over a parameter file list.

This module validates header shapes across files before any merge,
and verifies that single parameters cover every requested component.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from core.constants import DEFAULT_METADATA_COLUMNS
from core.errors import IncompatibleParameterShape, MissingSingleParameter
from core.types import ShapeKind
from ingest.row_scanner import scan_file
from ingest.schema_reader import read_file_schema

_COMPATIBLE_SHAPES = frozenset({ShapeKind.SINGLE, ShapeKind.PAIR})


def check_clashing_headers(
    paths: Iterable[Path],
    metadata_columns: Iterable[str] = DEFAULT_METADATA_COLUMNS,
) -> None:
    """Fail when a parameter name is declared under incompatible shapes.

    Single and pair declarations of one name may coexist in any order,
    since a pair matrix embeds single values on its diagonal.

    Args:
        paths: Parameter files of the run.
        metadata_columns: Column names excluded from parameters.

    Raises:
        IncompatibleParameterShape: If a name mixes assoc with another shape.
    """
    metadata_columns = frozenset(metadata_columns)
    declarations: dict[str, dict[ShapeKind, list[Path]]] = {}
    for path in paths:
        schema = read_file_schema(path, metadata_columns)
        if schema.shape_kind is ShapeKind.GROUP:
            continue
        for name in schema.parameter_names:
            shapes = declarations.setdefault(name, {})
            shapes.setdefault(schema.shape_kind, []).append(path)
    for name, shapes in declarations.items():
        if len(shapes) > 1 and not set(shapes) <= _COMPATIBLE_SHAPES:
            described = "; ".join(
                f"{kind.value} in {', '.join(str(path) for path in files)}"
                for kind, files in shapes.items()
            )
            raise IncompatibleParameterShape(
                f"Parameter '{name}' is declared with incompatible shapes: {described}. "
                "Rename the column in one of the files or remove the conflicting file."
            )


def check_single_completeness(
    paths: Iterable[Path],
    components: Sequence[str],
    metadata_columns: Iterable[str] = DEFAULT_METADATA_COLUMNS,
) -> None:
    """Fail when a single parameter has no value for some component.

    Args:
        paths: Parameter files of the run; only single-shaped files are read.
        components: Requested component list.
        metadata_columns: Column names excluded from parameters.

    Raises:
        MissingSingleParameter: If any component lacks a value in every file.
    """
    metadata_columns = frozenset(metadata_columns)
    covered: dict[str, set[str]] = {}
    for path in paths:
        schema = read_file_schema(path, metadata_columns)
        if schema.shape_kind is not ShapeKind.SINGLE:
            continue
        scan = scan_file(schema, components)
        for name in schema.parameter_names:
            found = covered.setdefault(name, set())
            for component, row_values in scan.values.items():
                if row_values[name] is not None:
                    found.add(component)
    for name, found in covered.items():
        missing = [component for component in components if component not in found]
        if missing:
            raise MissingSingleParameter(
                f"Single parameter '{name}' has no value for components {missing}. "
                "Add the values to a parameter file, or pass "
                "ignore_missing_single_params=True to fill defaults."
            )
