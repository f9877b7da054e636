"""Association site discovery.

This module collects the association sites each component exposes
across all assoc-shaped files, fixing the site order for one run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from core.constants import DEFAULT_METADATA_COLUMNS
from core.logging_config import get_logger
from core.types import ShapeKind, SiteRegistry
from ingest.row_scanner import scan_file
from ingest.schema_reader import read_file_schema

_LOGGER = get_logger(__name__)


def discover_sites(
    paths: Iterable[Path],
    components: Sequence[str],
    metadata_columns: Iterable[str] = DEFAULT_METADATA_COLUMNS,
    verbose: bool = False,
) -> SiteRegistry:
    """Build the per-component site registry from assoc-shaped files.

    Sites are sorted per component, so the registry does not depend on
    file order or row order.

    Args:
        paths: Parameter files of the run; non-assoc files are ignored.
        components: Requested component list.
        metadata_columns: Column names excluded from parameters.
        verbose: Log the discovered registry.

    Returns:
        Site registry aligned with ``components``.
    """
    site_sets: dict[str, set[str]] = {component: set() for component in components}
    for path in paths:
        schema = read_file_schema(path, metadata_columns)
        if schema.shape_kind is not ShapeKind.ASSOC:
            continue
        scan = scan_file(schema, components)
        for (first, second), (first_site, second_site) in scan.values:
            site_sets[first].add(first_site)
            site_sets[second].add(second_site)
    registry = SiteRegistry(
        components=tuple(components),
        sites=tuple(tuple(sorted(site_sets[component])) for component in components),
    )
    if verbose:
        _LOGGER.info(
            "sites_discovered",
            sites={component: list(registry.sites_for(component)) for component in components},
        )
    return registry
