"""saftparams exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Every ingestion failure is fatal and names the offending file or parameter.
"""

from __future__ import annotations


class SaftParamsError(Exception):
    """Base exception for all saftparams failures."""


class SaftParamsConfigError(SaftParamsError):
    """Raised for invalid runtime configuration."""


class OptionsFileError(SaftParamsError):
    """Raised for invalid or unreadable ingest options files."""


class PathNotFound(SaftParamsError):
    """Raised when a model or user path is neither a file nor a directory."""


class ParameterFileError(SaftParamsError):
    """Raised when a parameter file cannot be read or parsed."""


class ParameterSchemaError(SaftParamsError):
    """Raised when a parameter file does not follow the fixed layout."""


class UnknownShapeKind(ParameterSchemaError):
    """Raised when the keyword line does not name exactly one shape kind."""


class UnexpectedMetadataColumn(ParameterSchemaError):
    """Raised when an identifier-like column does not fit the file's shape."""


class IncompatibleParameterShape(SaftParamsError):
    """Raised when one parameter name is declared under conflicting shapes."""


class MissingSingleParameter(SaftParamsError):
    """Raised when a single parameter lacks values for requested components."""


class ConflictingSymmetricValues(SaftParamsError):
    """Raised when mirrored pair values disagree across the diagonal."""


class UnsupportedParameterType(SaftParamsError):
    """Raised when a parameter's scalar type is neither numeric nor text."""


class MalformedContainer(SaftParamsError):
    """Raised when an accumulated container does not match its shape kind."""
