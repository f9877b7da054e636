"""Packaging of merged accumulators into immutable parameter records.

This module resolves every remaining missing cell, mirrors symmetric pair
matrices, and wraps each parameter into a read-only numpy-backed record.
"""

from __future__ import annotations

from typing import Any, Collection, Mapping, Sequence

import numpy as np

from core.constants import FLOAT_DEFAULT, INTEGER_DEFAULT, TEXT_DEFAULT
from core.errors import (
    ConflictingSymmetricValues,
    MalformedContainer,
    MissingSingleParameter,
    UnsupportedParameterType,
)
from core.types import (
    AssocParam,
    PairParam,
    ParameterAccumulator,
    ParamRecord,
    ScalarKind,
    ShapeKind,
    SingleParam,
    SiteRegistry,
)

_DEFAULTS: dict[ScalarKind, Any] = {
    ScalarKind.TEXT: TEXT_DEFAULT,
    ScalarKind.INTEGER: INTEGER_DEFAULT,
    ScalarKind.FLOAT: FLOAT_DEFAULT,
}
_DTYPES: dict[ScalarKind, Any] = {
    ScalarKind.TEXT: np.str_,
    ScalarKind.INTEGER: np.int64,
    ScalarKind.FLOAT: np.float64,
}


def package_params(
    accumulators: Mapping[str, ParameterAccumulator],
    components: Sequence[str],
    sites: SiteRegistry,
    model_name: str,
    asymmetric_pair_params: Collection[str] = frozenset(),
    ignore_missing_single_params: bool = False,
) -> dict[str, ParamRecord]:
    """Package every accumulator into its final record.

    Args:
        accumulators: Merged accumulators keyed by parameter name.
        components: Requested component list.
        sites: Site registry used for assoc records.
        model_name: Label stored on every record.
        asymmetric_pair_params: Pair parameters that are not mirrored.
        ignore_missing_single_params: Fill missing single values with
            defaults instead of failing.

    Returns:
        Packaged records keyed by parameter name.

    Raises:
        MissingSingleParameter: If a single parameter is incomplete in strict mode.
        ConflictingSymmetricValues: If a mirrored matrix disagrees across the diagonal.
        UnsupportedParameterType: If a parameter is neither numeric nor text.
        MalformedContainer: If an accumulator does not match its shape kind.
    """
    return {
        name: package_param(
            accumulator,
            components,
            sites,
            model_name,
            asymmetric_pair_params,
            ignore_missing_single_params,
        )
        for name, accumulator in accumulators.items()
    }


def package_param(
    accumulator: ParameterAccumulator,
    components: Sequence[str],
    sites: SiteRegistry,
    model_name: str,
    asymmetric_pair_params: Collection[str] = frozenset(),
    ignore_missing_single_params: bool = False,
) -> ParamRecord:
    """Package one accumulator, dispatching on its shape kind."""
    name = accumulator.name
    components = tuple(components)
    size = len(components)
    sources = tuple(sorted(accumulator.sources))
    match accumulator.shape_kind:
        case ShapeKind.SINGLE:
            _expect_shape(name, accumulator.cells, (size,))
            missing = [
                component
                for component, value in zip(components, accumulator.cells)
                if value is None
            ]
            if missing and not ignore_missing_single_params:
                raise MissingSingleParameter(
                    f"Missing values exist in single parameter '{name}' for "
                    f"components {missing}. Add the values, or pass "
                    "ignore_missing_single_params=True to fill defaults."
                )
            values = finalize_array(name, accumulator.scalar_kind, accumulator.cells, (size,))
            return SingleParam(name, values, components, model_name, sources)
        case ShapeKind.PAIR:
            _expect_shape(name, accumulator.cells, (size, size))
            cells = accumulator.cells
            if name not in asymmetric_pair_params:
                cells = mirror_matrix(name, cells, components)
            values = finalize_array(name, accumulator.scalar_kind, cells, (size, size))
            return PairParam(name, values, components, model_name, sources)
        case ShapeKind.ASSOC:
            _expect_shape(name, accumulator.cells, (size, size))
            values = np.empty((size, size), dtype=object)
            for row in range(size):
                for column in range(size):
                    inner_shape = (len(sites.sites[row]), len(sites.sites[column]))
                    values[row, column] = finalize_array(
                        name,
                        accumulator.scalar_kind,
                        accumulator.cells[row][column],
                        inner_shape,
                    )
            values.setflags(write=False)
            return AssocParam(name, values, components, sites.sites, model_name, sources)
        case _:
            raise MalformedContainer(
                f"Format of parameter '{name}' is incorrect: shape "
                f"{accumulator.shape_kind.value} has no record type."
            )


def mirror_matrix(
    name: str,
    cells: list[list[Any]],
    components: Sequence[str],
) -> list[list[Any]]:
    """Return a copy of a square matrix made symmetric across its diagonal.

    A present value on one side fills a missing value on the other.

    Raises:
        ConflictingSymmetricValues: If both sides hold different present values.
        MalformedContainer: If the matrix is not square.
    """
    size = len(cells)
    if any(len(row) != size for row in cells):
        raise MalformedContainer(f"Pair matrix of parameter '{name}' is not square.")
    mirrored = [list(row) for row in cells]
    for row in range(1, size):
        for column in range(row):
            lower = mirrored[row][column]
            upper = mirrored[column][row]
            if lower is not None and upper is not None and lower != upper:
                raise ConflictingSymmetricValues(
                    f"Dissimilar entries exist across the diagonal of parameter '{name}' "
                    f"for ({components[column]}, {components[row]}): {upper!r} vs {lower!r}. "
                    "Make both entries equal, or list the parameter in asymmetric_pair_params."
                )
            if lower is not None:
                mirrored[column][row] = lower
            if upper is not None:
                mirrored[row][column] = upper
    return mirrored


def finalize_array(
    name: str,
    scalar_kind: ScalarKind,
    cells: list[Any],
    shape: tuple[int, ...],
) -> np.ndarray:
    """Fill missing cells with the type default and freeze the result.

    Args:
        name: Parameter name used in error messages.
        scalar_kind: Scalar kind of the accumulator.
        cells: Nested cell lists, ``None`` marking missing values.
        shape: Expected array shape.

    Returns:
        Read-only numpy array of ``shape``.

    Raises:
        UnsupportedParameterType: If the scalar kind has no default.
    """
    _expect_shape(name, cells, shape)
    default = default_value(name, scalar_kind)
    filled = _fill_missing(cells, default)
    array = np.array(filled, dtype=_DTYPES[scalar_kind]).reshape(shape)
    array.setflags(write=False)
    return array


def default_value(name: str, scalar_kind: ScalarKind) -> Any:
    """Return the value used for missing cells of a scalar kind."""
    if scalar_kind not in _DEFAULTS:
        raise UnsupportedParameterType(
            f"Parameter '{name}' has unsupported type {scalar_kind.value}. "
            "Parameter columns must hold only numbers or only text."
        )
    return _DEFAULTS[scalar_kind]


def _fill_missing(cells: list[Any], default: Any) -> list[Any]:
    filled: list[Any] = []
    for cell in cells:
        if isinstance(cell, list):
            filled.append(_fill_missing(cell, default))
        else:
            filled.append(default if cell is None else cell)
    return filled


def _expect_shape(name: str, cells: Any, shape: tuple[int, ...]) -> None:
    """Check the dimensions of nested cell lists.

    Raises:
        MalformedContainer: If a level is not a list of the expected length.
    """
    if not shape:
        return
    if not isinstance(cells, list) or len(cells) != shape[0]:
        raise MalformedContainer(
            f"Format of parameter '{name}' is incorrect: expected a container with "
            f"dimensions {shape}."
        )
    for cell in cells:
        _expect_shape(name, cell, shape[1:])
