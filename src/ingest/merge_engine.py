"""Priority-ordered merge of parameter files into accumulators.

This module walks parameter files in caller order and writes their values
into one accumulator per parameter name, so later files override earlier
ones. Shape and scalar promotions replace accumulators instead of
mutating them, keeping earlier containers untouched.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Sequence

from core.constants import DEFAULT_METADATA_COLUMNS
from core.errors import IncompatibleParameterShape, MalformedContainer
from core.logging_config import get_logger
from core.types import FileScan, ParameterAccumulator, ScalarKind, ShapeKind, SiteRegistry
from ingest.row_scanner import scan_file
from ingest.schema_reader import read_file_schema

_LOGGER = get_logger(__name__)

_NUMERIC_KINDS = frozenset({ScalarKind.INTEGER, ScalarKind.FLOAT})


def merge_parameter_files(
    paths: Iterable[Path],
    components: Sequence[str],
    sites: SiteRegistry,
    metadata_columns: Iterable[str] = DEFAULT_METADATA_COLUMNS,
    verbose: bool = False,
) -> dict[str, ParameterAccumulator]:
    """Merge parameter files into per-parameter accumulators.

    Args:
        paths: Parameter files, lowest priority first.
        components: Requested component list fixing all indices.
        sites: Site registry fixing assoc inner dimensions.
        metadata_columns: Column names excluded from parameters.
        verbose: Log per-file progress.

    Returns:
        Accumulators keyed by parameter name, in first-seen order.

    Raises:
        IncompatibleParameterShape: If a file rebinds a name to another shape
            outside the single/pair embedding.
    """
    metadata_columns = frozenset(metadata_columns)
    component_index = {component: index for index, component in enumerate(components)}
    accumulators: dict[str, ParameterAccumulator] = {}
    for path in paths:
        schema = read_file_schema(path, metadata_columns)
        if schema.shape_kind is ShapeKind.GROUP:
            _LOGGER.warning(
                "group_file_skipped",
                path=str(path),
                reason="group parameters are not supported",
            )
            continue
        scan = scan_file(schema, components, verbose=verbose)
        if not scan.values:
            if verbose:
                _LOGGER.info("file_skipped", path=str(path), reason="no matching components")
            continue
        for name in schema.parameter_names:
            accumulator = accumulators.get(name)
            if accumulator is None:
                accumulator = allocate_accumulator(
                    name,
                    schema.shape_kind,
                    scan.columns[name].scalar_kind,
                    len(components),
                    sites,
                )
            accumulator = reconcile_shape(accumulator, schema.shape_kind, path)
            accumulator = reconcile_scalar_kind(accumulator, scan.columns[name].scalar_kind)
            _write_values(accumulator, scan, component_index, sites)
            accumulators[name] = accumulator
        if verbose:
            _LOGGER.info(
                "file_merged",
                path=str(path),
                shape_kind=schema.shape_kind.value,
                parameters=list(schema.parameter_names),
                entity_count=len(scan.values),
            )
    return accumulators


def allocate_accumulator(
    name: str,
    shape_kind: ShapeKind,
    scalar_kind: ScalarKind,
    component_count: int,
    sites: SiteRegistry,
) -> ParameterAccumulator:
    """Create an accumulator whose cells are all missing.

    Args:
        name: Parameter name.
        shape_kind: Shape of the first file declaring the name.
        scalar_kind: Scalar kind of the declaring column.
        component_count: Number of requested components.
        sites: Site registry sizing assoc inner matrices.

    Returns:
        Missing-filled accumulator of the requested shape.

    Raises:
        MalformedContainer: If the shape kind has no container layout.
    """
    match shape_kind:
        case ShapeKind.SINGLE:
            cells: list[Any] = [None] * component_count
        case ShapeKind.PAIR:
            cells = _missing_matrix(component_count, component_count)
        case ShapeKind.ASSOC:
            counts = sites.site_counts()
            cells = [
                [_missing_matrix(counts[row], counts[column]) for column in range(component_count)]
                for row in range(component_count)
            ]
        case _:
            raise MalformedContainer(
                f"Cannot allocate a container for parameter '{name}' with shape "
                f"{shape_kind.value}. Only single, pair and assoc shapes are supported."
            )
    return ParameterAccumulator(
        name=name,
        shape_kind=shape_kind,
        scalar_kind=scalar_kind,
        cells=cells,
    )


def reconcile_shape(
    accumulator: ParameterAccumulator,
    file_shape: ShapeKind,
    path: Path,
) -> ParameterAccumulator:
    """Return an accumulator able to receive values of ``file_shape``.

    A single accumulator met by a pair file is replaced by its diagonal
    embedding. A pair accumulator accepts single files on its diagonal.

    Raises:
        IncompatibleParameterShape: For any other shape change.
    """
    match (accumulator.shape_kind, file_shape):
        case (current, incoming) if current is incoming:
            return accumulator
        case (ShapeKind.SINGLE, ShapeKind.PAIR):
            return promote_single_to_pair(accumulator)
        case (ShapeKind.PAIR, ShapeKind.SINGLE):
            return accumulator
        case _:
            raise IncompatibleParameterShape(
                f"Parameter '{accumulator.name}' is {accumulator.shape_kind.value}-shaped "
                f"but {path} declares it as {file_shape.value}. "
                "Rename the column in one of the files or remove the conflicting file."
            )


def promote_single_to_pair(accumulator: ParameterAccumulator) -> ParameterAccumulator:
    """Embed a single accumulator on the diagonal of a missing-filled matrix."""
    size = len(accumulator.cells)
    matrix = _missing_matrix(size, size)
    for index, value in enumerate(accumulator.cells):
        matrix[index][index] = value
    return replace(
        accumulator,
        shape_kind=ShapeKind.PAIR,
        cells=matrix,
        sources=set(accumulator.sources),
    )


def reconcile_scalar_kind(
    accumulator: ParameterAccumulator,
    incoming: ScalarKind,
) -> ParameterAccumulator:
    """Return an accumulator whose scalar kind covers ``incoming`` values.

    Integer accumulators widen to float when a float column arrives.
    Text mixed with numbers, or any unsupported column, leaves the
    accumulator unsupported so packaging reports it.
    """
    combined = combine_scalar_kinds(accumulator.scalar_kind, incoming)
    if combined is accumulator.scalar_kind:
        return accumulator
    convert: Callable[[Any], Any] = float if combined is ScalarKind.FLOAT else _identity
    return replace(
        accumulator,
        scalar_kind=combined,
        cells=_map_cells(accumulator.cells, convert),
        sources=set(accumulator.sources),
    )


def combine_scalar_kinds(existing: ScalarKind, incoming: ScalarKind) -> ScalarKind:
    """Return the scalar kind able to hold values of both kinds."""
    if existing is incoming or incoming is ScalarKind.NULL:
        return existing
    if existing is ScalarKind.NULL:
        return incoming
    if {existing, incoming} == _NUMERIC_KINDS:
        return ScalarKind.FLOAT
    return ScalarKind.UNSUPPORTED


def _write_values(
    accumulator: ParameterAccumulator,
    scan: FileScan,
    component_index: Mapping[str, int],
    sites: SiteRegistry,
) -> None:
    """Write a file's non-missing values and citations into an accumulator."""
    cells = accumulator.cells
    for entity, row_values in scan.values.items():
        value = row_values[accumulator.name]
        if value is None:
            continue
        if accumulator.scalar_kind is ScalarKind.FLOAT and isinstance(value, int):
            value = float(value)
        match scan.schema.shape_kind:
            case ShapeKind.SINGLE:
                index = component_index[entity]
                if accumulator.shape_kind is ShapeKind.PAIR:
                    cells[index][index] = value
                else:
                    cells[index] = value
            case ShapeKind.PAIR:
                first, second = entity
                cells[component_index[first]][component_index[second]] = value
            case ShapeKind.ASSOC:
                (first, second), (first_site, second_site) = entity
                row, column = component_index[first], component_index[second]
                site_row = sites.site_index(row, first_site)
                site_column = sites.site_index(column, second_site)
                cells[row][column][site_row][site_column] = value
        citation = scan.citations.get(entity)
        if citation:
            accumulator.sources.add(citation)


def _missing_matrix(rows: int, columns: int) -> list[list[Any]]:
    return [[None] * columns for _ in range(rows)]


def _map_cells(cells: list[Any], convert: Callable[[Any], Any]) -> list[Any]:
    """Copy nested cell lists, converting every present value."""
    return [
        _map_cells(cell, convert) if isinstance(cell, list) else _convert_cell(cell, convert)
        for cell in cells
    ]


def _convert_cell(cell: Any, convert: Callable[[Any], Any]) -> Any:
    return None if cell is None else convert(cell)


def _identity(value: Any) -> Any:
    return value
