"""Ingest orchestration for parameter databases.

This module coordinates path resolution, pre-flight checks, site
discovery, merging and packaging for one batch ingestion run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.config import SaftParamsConfig
from core.errors import SaftParamsConfigError
from core.logging_config import configure_logging, get_logger
from core.types import IngestOptions, SiteRegistry
from ingest.consistency_checks import check_clashing_headers, check_single_completeness
from ingest.merge_engine import merge_parameter_files
from ingest.path_resolver import infer_model_name, resolve_parameter_paths
from ingest.site_discovery import discover_sites
from store.packager import package_params
from store.parameter_set import ParameterSet

_LOGGER = get_logger(__name__)


class ParameterIngestRunner:
    """Single-use runner executing one ingestion over a fixed file list."""

    def __init__(self, options: IngestOptions, config: SaftParamsConfig) -> None:
        _validate_components(options.components)
        configure_logging(config.log_level)
        self._options = options
        self._config = config

    def run(self) -> ParameterSet:
        """Execute the ingestion and return the packaged parameters."""
        paths = self._resolve_paths()
        self._run_checks(paths)
        sites = discover_sites(
            paths,
            self._options.components,
            self._options.metadata_columns,
            verbose=self._options.verbose,
        )
        accumulators = merge_parameter_files(
            paths,
            self._options.components,
            sites,
            self._options.metadata_columns,
            verbose=self._options.verbose,
        )
        model_name = self._model_name()
        records = package_params(
            accumulators,
            self._options.components,
            sites,
            model_name,
            asymmetric_pair_params=self._options.asymmetric_pair_params,
            ignore_missing_single_params=self._options.ignore_missing_single_params,
        )
        _log_ingest_completion(self._options, paths, model_name, sites, len(records))
        return ParameterSet(records, model_name, sites)

    def _resolve_paths(self) -> list[Path]:
        paths = resolve_parameter_paths(
            self._options.models,
            self._options.user_paths,
            self._config.database_root,
        )
        if self._options.verbose:
            _LOGGER.info("paths_resolved", paths=[str(path) for path in paths])
        return paths

    def _run_checks(self, paths: list[Path]) -> None:
        check_clashing_headers(paths, self._options.metadata_columns)
        if not self._options.ignore_missing_single_params:
            check_single_completeness(
                paths,
                self._options.components,
                self._options.metadata_columns,
            )

    def _model_name(self) -> str:
        if self._options.model_name:
            return self._options.model_name
        return infer_model_name(
            self._options.models,
            self._options.user_paths,
            self._config.database_root,
        )


def get_params_from_options(
    options: IngestOptions,
    config: SaftParamsConfig | None = None,
) -> ParameterSet:
    """Run one ingestion described by an options object.

    Args:
        options: Ingestion request options.
        config: Runtime configuration; read from the environment if omitted.

    Returns:
        Packaged parameters keyed by name.

    Raises:
        SaftParamsError: Any taxonomy error; no partial result is returned.
    """
    runner = ParameterIngestRunner(options, config or SaftParamsConfig.from_env())
    return runner.run()


def get_params(
    components: Iterable[str] | str,
    models: Iterable[str] | str = (),
    *,
    user_paths: Iterable[str] | str = (),
    model_name: str = "",
    asymmetric_pair_params: Iterable[str] = (),
    ignore_missing_single_params: bool = False,
    verbose: bool = False,
    config: SaftParamsConfig | None = None,
) -> ParameterSet:
    """Assemble a parameter set for components from database and user files.

    Files from ``models`` are read before files from ``user_paths``, and
    within each list in order, so later files override earlier ones.

    Args:
        components: Ordered unique component names.
        models: Model paths relative to the built-in database root.
        user_paths: User parameter files or directories.
        model_name: Label override; inferred from the first path if empty.
        asymmetric_pair_params: Pair parameters exempt from mirroring.
        ignore_missing_single_params: Fill missing single values with
            defaults instead of failing.
        verbose: Emit progress events.
        config: Runtime configuration; read from the environment if omitted.

    Returns:
        Packaged parameters keyed by name.
    """
    options = IngestOptions(
        components=_as_tuple(components),
        models=_as_tuple(models),
        user_paths=_as_tuple(user_paths),
        model_name=model_name,
        asymmetric_pair_params=frozenset(_as_tuple(asymmetric_pair_params)),
        ignore_missing_single_params=ignore_missing_single_params,
        verbose=verbose,
    )
    return get_params_from_options(options, config)


def _as_tuple(values: Iterable[str] | str) -> tuple[str, ...]:
    """Accept a lone string where a list of strings is expected."""
    if isinstance(values, str):
        return (values,)
    return tuple(values)


def _validate_components(components: tuple[str, ...]) -> None:
    """Reject empty or duplicated component lists.

    Raises:
        SaftParamsConfigError: If the list is empty or repeats a component.
    """
    if not components:
        raise SaftParamsConfigError(
            "No components were requested. Pass at least one component name."
        )
    duplicates = sorted(
        {component for component in components if components.count(component) > 1}
    )
    if duplicates:
        raise SaftParamsConfigError(
            f"Components {duplicates} are requested more than once. "
            "Pass each component exactly once."
        )


def _log_ingest_completion(
    options: IngestOptions,
    paths: list[Path],
    model_name: str,
    sites: SiteRegistry,
    parameter_count: int,
) -> None:
    """Log run completion with contextual metadata."""
    log = _LOGGER.info if options.verbose else _LOGGER.debug
    log(
        "parameters_packaged",
        model_name=model_name,
        components=list(options.components),
        file_count=len(paths),
        parameter_count=parameter_count,
        site_counts=list(sites.site_counts()),
        ignore_missing_single_params=options.ignore_missing_single_params,
    )
