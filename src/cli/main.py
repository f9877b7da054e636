"""saftparams CLI entry points.

This module exposes commands to package parameters and inspect files.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import SaftParamsConfig
from core.errors import SaftParamsError
from core.options_file import load_ingest_options
from core.types import AssocParam, IngestOptions, ParamRecord
from ingest.pipeline import get_params_from_options
from ingest.row_scanner import column_schema, read_parameter_table
from ingest.schema_reader import read_file_schema


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="saftparams",
        description="Assemble SAFT parameter sets from tabular files",
    )
    parser.add_argument(
        "--database-root",
        help="Override SAFTPARAMS_DATABASE_ROOT for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_params_command(subparsers)
    _add_schema_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the saftparams CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.database_root)
        if args.command == "params":
            return _run_params_command(parser, config, args)
        if args.command == "schema":
            return _run_schema_command(args)
    except SaftParamsError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(database_root: str | None) -> SaftParamsConfig:
    """Build runtime config with optional database-root override."""
    config = SaftParamsConfig.from_env()
    if database_root:
        config = replace(config, database_root=Path(database_root).expanduser().resolve())
    return config


def _run_params_command(
    parser: argparse.ArgumentParser,
    config: SaftParamsConfig,
    args: argparse.Namespace,
) -> int:
    """Handle params command.

    Args:
        parser: Parser used to report usage errors.
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    if args.options_file:
        options = load_ingest_options(args.options_file)
    elif args.components:
        options = IngestOptions(
            components=tuple(args.components),
            models=tuple(args.model),
            user_paths=tuple(args.user_path),
            model_name=args.model_name or "",
            asymmetric_pair_params=frozenset(args.asymmetric),
            ignore_missing_single_params=args.ignore_missing_single,
            verbose=args.verbose,
        )
    else:
        parser.error("params requires component names or --options-file")
    parameters = get_params_from_options(options, config)
    print(f"model_name={parameters.model_name}")
    print(f"components={','.join(parameters.components)}")
    for name, record in parameters.items():
        print(
            f"{name}\t{record.shape_kind.value}\t"
            f"{json.dumps(_record_values(record))}\t"
            f"{'; '.join(record.sources) or '-'}"
        )
    return 0


def _run_schema_command(args: argparse.Namespace) -> int:
    """Handle schema command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    schema = read_file_schema(Path(args.path))
    print(f"shape_kind={schema.shape_kind.value}")
    table = read_parameter_table(schema, ())
    for name in schema.parameter_names:
        column = column_schema(table, name)
        print(f"{name}\t{column.scalar_kind.value}\t{'nullable' if column.nullable else '-'}")
    return 0


def _record_values(record: ParamRecord) -> Any:
    """Convert record values into JSON-serializable nested lists."""
    if isinstance(record, AssocParam):
        return [[cell.tolist() for cell in row] for row in record.values]
    return record.values.tolist()


def _add_params_command(subparsers: Any) -> None:
    """Register params subcommand."""
    parser = subparsers.add_parser("params", help="Package parameters for components")
    parser.add_argument("components", nargs="*", help="Component names in index order")
    parser.add_argument(
        "--model",
        action="append",
        default=[],
        help="Database model path relative to the database root (repeatable)",
    )
    parser.add_argument(
        "--user-path",
        action="append",
        default=[],
        help="User parameter file or directory, overriding the database (repeatable)",
    )
    parser.add_argument("--model-name", help="Label override for packaged records")
    parser.add_argument(
        "--asymmetric",
        action="append",
        default=[],
        help="Pair parameter exempt from mirroring (repeatable)",
    )
    parser.add_argument(
        "--ignore-missing-single",
        action="store_true",
        help="Fill missing single parameters with defaults instead of failing",
    )
    parser.add_argument("--verbose", action="store_true", help="Log ingestion progress")
    parser.add_argument("--options-file", help="YAML ingest options file")


def _add_schema_command(subparsers: Any) -> None:
    """Register schema subcommand."""
    parser = subparsers.add_parser("schema", help="Show a parameter file's shape and columns")
    parser.add_argument("path", help="Parameter file path")
