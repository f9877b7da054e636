"""Typed ingest-options parsing from YAML files.

This module loads and validates YAML files describing one ingestion run.
It produces the same ``IngestOptions`` object the SDK and CLI build,
so a parameter set can be reproduced from a checked-in file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.constants import DEFAULT_METADATA_COLUMNS
from core.errors import OptionsFileError
from core.types import IngestOptions

_ALLOWED_KEYS = frozenset(
    {
        "components",
        "models",
        "user_paths",
        "model_name",
        "asymmetric_pair_params",
        "ignore_missing_single_params",
        "verbose",
        "metadata_columns",
    }
)


def load_ingest_options(options_path: str) -> IngestOptions:
    """Load and validate ingest options from a YAML file.

    Args:
        options_path: File path to the YAML options file.

    Returns:
        Fully validated ingest options.

    Raises:
        OptionsFileError: If the file is missing, unparseable or invalid.
    """
    payload = _load_yaml_payload(options_path)
    root_mapping = _expect_mapping(payload, "options root")
    _validate_root_keys(root_mapping)
    components = _string_tuple(root_mapping, "components")
    if not components:
        raise OptionsFileError(
            "Options field 'components' must list at least one component."
        )
    metadata_columns = _string_tuple(root_mapping, "metadata_columns")
    return IngestOptions(
        components=components,
        models=_string_tuple(root_mapping, "models"),
        user_paths=_string_tuple(root_mapping, "user_paths"),
        model_name=_optional_string(root_mapping, "model_name"),
        asymmetric_pair_params=frozenset(_string_tuple(root_mapping, "asymmetric_pair_params")),
        ignore_missing_single_params=_optional_bool(root_mapping, "ignore_missing_single_params"),
        verbose=_optional_bool(root_mapping, "verbose"),
        metadata_columns=frozenset(metadata_columns) or DEFAULT_METADATA_COLUMNS,
    )


def _load_yaml_payload(options_path: str) -> object:
    options_file = Path(options_path).expanduser().resolve()
    if not options_file.exists():
        raise OptionsFileError(
            f"Options file does not exist at {options_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(options_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise OptionsFileError(
            f"Failed to read options file at {options_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise OptionsFileError(
            f"Failed to parse YAML options at {options_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise OptionsFileError(
            f"Options file at {options_file} is empty. Define at least 'components'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise OptionsFileError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise OptionsFileError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise OptionsFileError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _string_tuple(mapping: Mapping[str, object], field_name: str) -> tuple[str, ...]:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return ()
    rows = _expect_sequence(raw_value, f"options field '{field_name}'")
    values = []
    for row in rows:
        if not isinstance(row, str) or not row.strip():
            raise OptionsFileError(
                f"Options field '{field_name}' must only contain non-empty strings, "
                f"got {row!r}."
            )
        values.append(row.strip())
    return tuple(values)


def _optional_string(mapping: Mapping[str, object], field_name: str) -> str:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return ""
    if isinstance(raw_value, str):
        return raw_value.strip()
    raise OptionsFileError(f"Options field '{field_name}' must be a string when provided.")


def _optional_bool(mapping: Mapping[str, object], field_name: str) -> bool:
    raw_value = mapping.get(field_name, False)
    if isinstance(raw_value, bool):
        return raw_value
    raise OptionsFileError(f"Options field '{field_name}' must be true or false.")


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    unknown_keys = sorted(set(root_mapping) - _ALLOWED_KEYS)
    if unknown_keys:
        raise OptionsFileError(
            f"Options file contains unknown fields: {', '.join(unknown_keys)}."
        )
