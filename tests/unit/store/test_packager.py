"""Unit tests for parameter packaging."""

from __future__ import annotations

import numpy as np
import pytest

from core.errors import (
    ConflictingSymmetricValues,
    MalformedContainer,
    MissingSingleParameter,
    UnsupportedParameterType,
)
from core.types import ParameterAccumulator, ScalarKind, ShapeKind, SiteRegistry
from store.packager import finalize_array, mirror_matrix, package_param

_COMPONENTS = ("water", "methanol")
_SITES = SiteRegistry(components=_COMPONENTS, sites=(("H", "e"), ("H",)))


def _accumulator(
    shape_kind: ShapeKind,
    scalar_kind: ScalarKind,
    cells: list,
    sources: set[str] | None = None,
) -> ParameterAccumulator:
    return ParameterAccumulator(
        name="p",
        shape_kind=shape_kind,
        scalar_kind=scalar_kind,
        cells=cells,
        sources=sources or set(),
    )


def test_package_single_rejects_missing_in_strict_mode() -> None:
    """Strict packaging should fail on missing single values."""
    accumulator = _accumulator(ShapeKind.SINGLE, ScalarKind.FLOAT, [3.0, None])

    with pytest.raises(MissingSingleParameter, match="methanol"):
        package_param(accumulator, _COMPONENTS, _SITES, "test")


def test_package_single_fills_integer_default_when_relaxed() -> None:
    """Relaxed packaging should fill integer gaps with zero."""
    accumulator = _accumulator(ShapeKind.SINGLE, ScalarKind.INTEGER, [None, 2])

    record = package_param(
        accumulator, _COMPONENTS, _SITES, "test", ignore_missing_single_params=True
    )

    assert (record.values.tolist(), record.values.dtype) == ([0, 2], np.dtype(np.int64))


def test_package_sorts_sources() -> None:
    """Record sources should be sorted citations."""
    accumulator = _accumulator(
        ShapeKind.SINGLE, ScalarKind.FLOAT, [3.0, 3.2], {"Smith2001", "Jones2010"}
    )

    record = package_param(accumulator, _COMPONENTS, _SITES, "test")

    assert record.sources == ("Jones2010", "Smith2001")


def test_package_pair_produces_symmetric_matrix() -> None:
    """Mirrored pair values should be symmetric."""
    accumulator = _accumulator(ShapeKind.PAIR, ScalarKind.FLOAT, [[None, 0.1], [None, None]])

    record = package_param(accumulator, _COMPONENTS, _SITES, "test")

    assert np.array_equal(record.values, record.values.T)


def test_package_pair_rejects_conflicting_values() -> None:
    """Different values across the diagonal should be rejected."""
    accumulator = _accumulator(ShapeKind.PAIR, ScalarKind.FLOAT, [[None, 0.1], [0.2, None]])

    with pytest.raises(ConflictingSymmetricValues):
        package_param(accumulator, _COMPONENTS, _SITES, "test")


def test_package_pair_keeps_asymmetric_values() -> None:
    """Exempt pair parameters should keep both sides as given."""
    accumulator = _accumulator(ShapeKind.PAIR, ScalarKind.FLOAT, [[None, 0.1], [0.2, None]])

    record = package_param(
        accumulator, _COMPONENTS, _SITES, "test", asymmetric_pair_params={"p"}
    )

    assert record.values.tolist() == [[0.0, 0.1], [0.2, 0.0]]


def test_package_assoc_sizes_cells_by_sites() -> None:
    """Assoc cells should be sized by the sites of both components."""
    cells = [
        [[[None, None], [None, None]], [[None], [0.03]]],
        [[[None, None]], [[None]]],
    ]
    accumulator = _accumulator(ShapeKind.ASSOC, ScalarKind.FLOAT, cells)

    record = package_param(accumulator, _COMPONENTS, _SITES, "test")

    assert [cell.shape for cell in record.values.ravel()] == [(2, 2), (2, 1), (1, 2), (1, 1)]


def test_package_records_are_read_only() -> None:
    """Packaged arrays should reject in-place writes."""
    accumulator = _accumulator(ShapeKind.SINGLE, ScalarKind.FLOAT, [3.0, 3.2])
    record = package_param(accumulator, _COMPONENTS, _SITES, "test")

    with pytest.raises(ValueError):
        record.values[0] = 1.0


def test_package_rejects_unsupported_scalar_kind() -> None:
    """Mixed text and number columns should be rejected."""
    accumulator = _accumulator(ShapeKind.SINGLE, ScalarKind.UNSUPPORTED, ["a", 1])

    with pytest.raises(UnsupportedParameterType):
        package_param(accumulator, _COMPONENTS, _SITES, "test")


def test_package_rejects_group_accumulator() -> None:
    """Shapes without a record type should be rejected."""
    accumulator = _accumulator(ShapeKind.GROUP, ScalarKind.FLOAT, [])

    with pytest.raises(MalformedContainer):
        package_param(accumulator, _COMPONENTS, _SITES, "test")


def test_finalize_array_rejects_wrong_dimensions() -> None:
    """Cells that do not match the expected shape should be rejected."""
    with pytest.raises(MalformedContainer):
        finalize_array("p", ScalarKind.FLOAT, [1.0, 2.0, 3.0], (2,))


def test_mirror_matrix_does_not_mutate_input() -> None:
    """Mirroring should return a copy of the matrix."""
    cells = [[None, 0.1], [None, None]]

    mirror_matrix("p", cells, _COMPONENTS)

    assert cells == [[None, 0.1], [None, None]]
