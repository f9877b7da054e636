"""Unit tests for CLI command handling."""

from __future__ import annotations

import json

from cli.main import main
from tests.fixture_paths import database_root, fixture_path


def test_cli_params_prints_packaged_parameters(capsys) -> None:
    """CLI params should print the model name and one line per parameter."""
    args = [
        "--database-root",
        str(database_root()),
        "params",
        "methane",
        "ethane",
        "--model",
        "SAFT/PCSAFT",
    ]

    exit_code = main(args)
    lines = capsys.readouterr().out.strip().splitlines()

    assert (exit_code, lines[0], lines[1]) == (0, "model_name=PCSAFT", "components=methane,ethane")


def test_cli_params_prints_mirrored_values(capsys) -> None:
    """Pair values printed by the CLI should be mirrored."""
    args = [
        "--database-root",
        str(database_root()),
        "params",
        "methane",
        "ethane",
        "--model",
        "SAFT/PCSAFT",
    ]

    main(args)
    lines = capsys.readouterr().out.strip().splitlines()
    k_line = next(line for line in lines if line.startswith("k\t"))

    assert json.loads(k_line.split("\t")[2]) == [[0.0, 0.003], [0.003, 0.0]]


def test_cli_params_reads_options_file(capsys) -> None:
    """CLI params should accept a YAML options file."""
    args = [
        "--database-root",
        str(database_root()),
        "params",
        "--options-file",
        str(fixture_path("options_valid.yaml")),
    ]

    exit_code = main(args)
    output = capsys.readouterr().out

    assert exit_code == 0 and "model_name=PCSAFT" in output


def test_cli_schema_prints_column_kinds(capsys) -> None:
    """CLI schema should print the shape kind and parameter column kinds."""
    path = database_root() / "SAFT" / "PCSAFT" / "PCSAFT_like.csv"

    exit_code = main(["schema", str(path)])
    lines = capsys.readouterr().out.strip().splitlines()

    assert (exit_code, lines[0], lines[1]) == (0, "shape_kind=single", "Mw\tfloat\t-")


def test_cli_reports_errors_with_exit_code(capsys) -> None:
    """CLI should print domain errors and exit with status one."""
    exit_code = main(["schema", str(fixture_path("broken/no_keyword.csv"))])
    output = capsys.readouterr().out

    assert exit_code == 1 and output.startswith("error=")


def test_cli_reports_invalid_log_level(monkeypatch, capsys) -> None:
    """An invalid log level should follow the CLI error contract."""
    monkeypatch.setenv("SAFTPARAMS_LOG_LEVEL", "chatty")
    path = database_root() / "SAFT" / "PCSAFT" / "PCSAFT_like.csv"

    exit_code = main(["schema", str(path)])
    output = capsys.readouterr().out

    assert exit_code == 1 and "SAFTPARAMS_LOG_LEVEL" in output
