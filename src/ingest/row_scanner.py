"""Parameter file row scanning.

This module reads the data rows of one parameter file with pyarrow.
It keys each recognized parameter value by the entity the row describes
and drops rows naming components outside the requested list.
"""

from __future__ import annotations

from typing import Any, Collection, Iterable, Sequence

import pyarrow as pa
from pyarrow import csv as pa_csv

from core.constants import (
    FIRST_MEMBER_SUFFIX,
    HEADER_LINE_NUMBER,
    SECOND_MEMBER_SUFFIX,
    SITE_COLUMN,
    SOURCE_COLUMN,
    SPECIES_COLUMN,
)
from core.errors import ParameterFileError, ParameterSchemaError
from core.logging_config import get_logger
from core.types import ColumnSchema, Entity, FileSchema, FileScan, ScalarKind, ShapeKind
from ingest.schema_reader import normalize_column_name

_LOGGER = get_logger(__name__)


def scan_file(
    schema: FileSchema,
    components: Sequence[str],
    verbose: bool = False,
) -> FileScan:
    """Collect parameter values for requested components from one file.

    Args:
        schema: Header-level schema of the file.
        components: Requested component list; other rows are skipped.
        verbose: Log each matched entity.

    Returns:
        Matched values, column types and citations of the file.

    Raises:
        ParameterSchemaError: If identifier columns are missing, a site label
            is blank, or the file is group-shaped.
        ParameterFileError: If the rows cannot be parsed.
    """
    if schema.shape_kind is ShapeKind.GROUP:
        raise ParameterSchemaError(
            f"Parameter file {schema.path} is group-shaped and cannot be scanned. "
            "Remove it from the requested paths."
        )
    identifier_columns = _identifier_columns(schema)
    source_column = _find_column(schema.header, SOURCE_COLUMN)
    text_columns = list(identifier_columns)
    if source_column is not None:
        text_columns.append(source_column)
    table = read_parameter_table(schema, text_columns)
    columns = {name: column_schema(table, name) for name in schema.parameter_names}
    if verbose:
        _LOGGER.info(
            "file_scan_started",
            path=str(schema.path),
            shape_kind=schema.shape_kind.value,
            parameters=list(schema.parameter_names),
            components=list(components),
        )
    component_set = set(components)
    values: dict[Entity, dict[str, Any]] = {}
    citations: dict[Entity, str] = {}
    for row in table.to_pylist():
        entity = _row_entity(row, schema, identifier_columns, component_set)
        if entity is None:
            continue
        values[entity] = {name: row[name] for name in schema.parameter_names}
        citation = _clean_text(row[source_column]) if source_column is not None else None
        if citation:
            citations[entity] = citation
        else:
            citations.pop(entity, None)
        if verbose:
            _LOGGER.info(
                "entity_found", path=str(schema.path), entity=entity, values=values[entity]
            )
    return FileScan(schema=schema, values=values, columns=columns, citations=citations)


def read_parameter_table(schema: FileSchema, text_columns: Iterable[str]) -> pa.Table:
    """Read the data rows of a parameter file into an arrow table.

    Args:
        schema: Header-level schema naming the columns.
        text_columns: Columns parsed as strings regardless of content.

    Returns:
        Arrow table with one column per header entry.

    Raises:
        ParameterFileError: If the rows do not match the header or cannot be read.
    """
    column_names = _arrow_column_names(schema.header)
    read_options = pa_csv.ReadOptions(skip_rows=HEADER_LINE_NUMBER, column_names=column_names)
    convert_options = pa_csv.ConvertOptions(
        column_types={name: pa.string() for name in text_columns},
        null_values=[""],
        strings_can_be_null=True,
    )
    try:
        with schema.path.open("rb") as handle:
            return pa_csv.read_csv(
                handle,
                read_options=read_options,
                convert_options=convert_options,
            )
    except pa.ArrowInvalid as error:
        if "Empty CSV file" in str(error):
            return _empty_table(column_names)
        raise ParameterFileError(
            f"Failed to parse data rows of parameter file {schema.path}: {error}. "
            "Check that every row has as many fields as the header on line 3, "
            "counting trailing commas."
        ) from error
    except OSError as error:
        raise ParameterFileError(
            f"Failed to read parameter file {schema.path}: {error}. "
            "Check the path and permissions."
        ) from error


def column_schema(table: pa.Table, name: str) -> ColumnSchema:
    """Describe the inferred scalar type of one parameter column."""
    column = table.column(name)
    return ColumnSchema(
        name=name,
        scalar_kind=scalar_kind_for(column.type),
        nullable=column.null_count > 0,
        arrow_type=str(column.type),
    )


def scalar_kind_for(arrow_type: pa.DataType) -> ScalarKind:
    """Map an arrow column type onto a parameter scalar kind."""
    if pa.types.is_integer(arrow_type):
        return ScalarKind.INTEGER
    if pa.types.is_floating(arrow_type):
        return ScalarKind.FLOAT
    if pa.types.is_string(arrow_type) or pa.types.is_large_string(arrow_type):
        return ScalarKind.TEXT
    if pa.types.is_null(arrow_type):
        return ScalarKind.NULL
    return ScalarKind.UNSUPPORTED


def _identifier_columns(schema: FileSchema) -> list[str]:
    """Locate the identifier columns a file's shape requires.

    Returns:
        Header names ordered as species, or species1/species2, then
        site1/site2 for assoc files.

    Raises:
        ParameterSchemaError: If a required column is absent.
    """
    if schema.shape_kind is ShapeKind.SINGLE:
        required = [SPECIES_COLUMN]
    else:
        required = [SPECIES_COLUMN + FIRST_MEMBER_SUFFIX, SPECIES_COLUMN + SECOND_MEMBER_SUFFIX]
    if schema.shape_kind is ShapeKind.ASSOC:
        required += [SITE_COLUMN + FIRST_MEMBER_SUFFIX, SITE_COLUMN + SECOND_MEMBER_SUFFIX]
    found: list[str] = []
    for target in required:
        column = _find_column(schema.header, target)
        if column is None:
            raise ParameterSchemaError(
                f"{schema.shape_kind.value.capitalize()} parameter file {schema.path} "
                f"has no '{target}' column. Add it to the header on line 3."
            )
        found.append(column)
    return found


def _row_entity(
    row: dict[str, Any],
    schema: FileSchema,
    identifier_columns: list[str],
    components: Collection[str],
) -> Entity | None:
    """Build the entity key of a row, or None for unrequested components."""
    species = [_clean_text(row[column]) for column in identifier_columns[:2]]
    if not all(component in components for component in species):
        return None
    if schema.shape_kind is ShapeKind.SINGLE:
        return species[0]
    pair = (species[0], species[1])
    if schema.shape_kind is ShapeKind.PAIR:
        return pair
    sites = [_clean_text(row[column]) for column in identifier_columns[2:]]
    if not all(sites):
        raise ParameterSchemaError(
            f"Association row for {pair} in {schema.path} has a blank site label. "
            "Fill in both site columns."
        )
    return (pair, (sites[0], sites[1]))


def _find_column(header: Sequence[str], target: str) -> str | None:
    """Return the header name that normalizes to ``target``."""
    for name in header:
        if name and normalize_column_name(name) == target:
            return name
    return None


def _arrow_column_names(header: Sequence[str]) -> list[str]:
    """Name blank header cells so arrow gets one name per field."""
    return [name or f"unnamed_{index}" for index, name in enumerate(header)]


def _empty_table(column_names: list[str]) -> pa.Table:
    arrays = [pa.array([], type=pa.null()) for _ in column_names]
    return pa.Table.from_arrays(arrays, names=column_names)


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None
