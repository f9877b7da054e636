"""Shared typed models.

This module defines the shape and scalar enums, the per-file schema and
scan models, the merge accumulator, and the immutable packaged records
exchanged between the ingest and store layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Mapping, Union

import numpy as np

from core.constants import DEFAULT_METADATA_COLUMNS

ComponentPair = tuple[str, str]
SitePair = tuple[str, str]
AssocEntity = tuple[ComponentPair, SitePair]
Entity = Union[str, ComponentPair, AssocEntity]


class ShapeKind(Enum):
    """Dimensionality of a parameter file and its value containers."""

    SINGLE = "single"
    PAIR = "pair"
    ASSOC = "assoc"
    GROUP = "group"


class ScalarKind(Enum):
    """Scalar type of one parameter column or accumulator."""

    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    NULL = "null"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class FileSchema:
    """Header-level description of one parameter file.

    Attributes:
        path: Parameter file path.
        shape_kind: Shape kind declared on the keyword line.
        parameter_names: Recognized parameter columns in header order.
        header: All stripped header names, metadata columns included.
    """

    path: Path
    shape_kind: ShapeKind
    parameter_names: tuple[str, ...]
    header: tuple[str, ...]


@dataclass(frozen=True)
class ColumnSchema:
    """Inferred type of one parameter column.

    Attributes:
        name: Parameter column name.
        scalar_kind: Inferred scalar kind over the whole file.
        nullable: Whether any row leaves the column empty.
        arrow_type: Arrow type name used for diagnostics.
    """

    name: str
    scalar_kind: ScalarKind
    nullable: bool
    arrow_type: str


@dataclass(frozen=True)
class FileScan:
    """Rows of one parameter file matching the requested components.

    Attributes:
        schema: Header-level file schema.
        values: Entity to parameter-name to raw value (None when empty).
        columns: Parameter name to inferred column schema.
        citations: Entity to source citation for rows that carry one.
    """

    schema: FileSchema
    values: Mapping[Entity, Mapping[str, Any]]
    columns: Mapping[str, ColumnSchema]
    citations: Mapping[Entity, str]


@dataclass(frozen=True)
class SiteRegistry:
    """Per-component association site ordering fixed for one run.

    Attributes:
        components: Requested component list.
        sites: Ordered site labels, aligned with ``components``.
    """

    components: tuple[str, ...]
    sites: tuple[tuple[str, ...], ...]

    def sites_for(self, component: str) -> tuple[str, ...]:
        """Return the ordered sites of one component."""
        return self.sites[self.components.index(component)]

    def site_index(self, component_index: int, site: str) -> int:
        """Return the position of ``site`` in a component's site list."""
        return self.sites[component_index].index(site)

    def site_counts(self) -> tuple[int, ...]:
        """Return the number of sites per component."""
        return tuple(len(component_sites) for component_sites in self.sites)


@dataclass
class ParameterAccumulator:
    """Raw values gathered for one parameter name during a merge.

    Cells hold ``None`` until a file supplies a value. Single accumulators
    hold a flat list, pair accumulators a square list of rows, and assoc
    accumulators a square list of rows whose cells are site matrices.

    Attributes:
        name: Parameter name.
        shape_kind: Shape the name is currently bound to.
        scalar_kind: Scalar kind of the values written so far.
        cells: Nested cell lists sized from the component list.
        sources: Citations of every row that contributed a value.
    """

    name: str
    shape_kind: ShapeKind
    scalar_kind: ScalarKind
    cells: list[Any]
    sources: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class IngestOptions:
    """Ingestion request options.

    Attributes:
        components: Ordered unique component names.
        models: Built-in database model paths, relative to the database root.
        user_paths: User-supplied parameter files or directories.
        model_name: Optional label override for packaged records.
        asymmetric_pair_params: Pair parameters exempt from mirroring.
        ignore_missing_single_params: Fill missing single values with defaults.
        verbose: Emit per-file and per-entity progress events.
        metadata_columns: Normalized header names excluded from parameters.
    """

    components: tuple[str, ...]
    models: tuple[str, ...] = ()
    user_paths: tuple[str, ...] = ()
    model_name: str = ""
    asymmetric_pair_params: frozenset[str] = frozenset()
    ignore_missing_single_params: bool = False
    verbose: bool = False
    metadata_columns: frozenset[str] = DEFAULT_METADATA_COLUMNS


@dataclass(frozen=True, eq=False)
class SingleParam:
    """Packaged per-component parameter.

    Attributes:
        name: Parameter name.
        values: Read-only array of shape ``(n_components,)``.
        components: Component list the values are indexed by.
        model_name: Model or source-set label.
        sources: Sorted citations backing the values.
    """

    shape_kind: ClassVar[ShapeKind] = ShapeKind.SINGLE

    name: str
    values: np.ndarray
    components: tuple[str, ...]
    model_name: str
    sources: tuple[str, ...]


@dataclass(frozen=True, eq=False)
class PairParam:
    """Packaged per-component-pair parameter.

    Attributes:
        name: Parameter name.
        values: Read-only array of shape ``(n_components, n_components)``.
        components: Component list the values are indexed by.
        model_name: Model or source-set label.
        sources: Sorted citations backing the values.
    """

    shape_kind: ClassVar[ShapeKind] = ShapeKind.PAIR

    name: str
    values: np.ndarray
    components: tuple[str, ...]
    model_name: str
    sources: tuple[str, ...]


@dataclass(frozen=True, eq=False)
class AssocParam:
    """Packaged per-component-pair, per-site-pair parameter.

    Attributes:
        name: Parameter name.
        values: Read-only object array of shape ``(n_components, n_components)``
            whose cell ``(i, j)`` is a read-only site matrix of shape
            ``(len(sites[i]), len(sites[j]))``.
        components: Component list the outer indices refer to.
        sites: Site labels per component, indexing the inner matrices.
        model_name: Model or source-set label.
        sources: Sorted citations backing the values.
    """

    shape_kind: ClassVar[ShapeKind] = ShapeKind.ASSOC

    name: str
    values: np.ndarray
    components: tuple[str, ...]
    sites: tuple[tuple[str, ...], ...]
    model_name: str
    sources: tuple[str, ...]


ParamRecord = Union[SingleParam, PairParam, AssocParam]
