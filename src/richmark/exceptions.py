#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the richmark library.

This module defines specialized exception classes for the error conditions
that can occur while parsing markdown, converting between the markdown AST
and the editor tree, and serializing markdown text.

Exception Hierarchy
-------------------
- RichmarkError (base exception)

  - ValidationError (parameter/option validation)

  - ConversionError (tree traversal failures)
    - UnsupportedNodeError (no rule registered for a node kind)
    - StructuralError (tree shape invariant violated)

  - ParsingError (markdown text could not be tokenized)

  - RenderingError (markdown text could not be produced)

  - DependencyError (missing/incompatible packages)

Conversions are deterministic, so none of these errors are retried
internally; they always propagate to the caller.

"""

from __future__ import annotations

from typing import Any


class RichmarkError(Exception):
    """Base exception class for all richmark-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(RichmarkError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ConversionError(RichmarkError):
    """Base exception for failures while walking one tree to build the other."""


class UnsupportedNodeError(ConversionError):
    """Exception raised when no conversion rule handles a node kind.

    Reaching an unsupported node is fatal: silently dropping the node would
    lose document content.

    Parameters
    ----------
    node_type : str
        Kind tag of the offending node (AST ``type`` or editor ``get_type()``)
    node : Any
        The offending node, kept for diagnostics
    direction : str, default "import"
        Where the node was met: "import", "export", "render" or "deserialize"
    message : str, optional
        Custom error message

    """

    def __init__(self, node_type: str, node: Any = None, direction: str = "import", message: str | None = None):
        """Initialize the error with the offending node."""
        if message is None:
            side = "editor" if direction == "export" else "markdown AST"
            message = f"No {direction} rule found for {side} node of type '{node_type}'"
        super().__init__(message)
        self.node_type = node_type
        self.node = node
        self.direction = direction


class StructuralError(ConversionError):
    """Exception raised when a traversal meets a tree shape it cannot build.

    This indicates a bug in a rule or in the caller's tree, never a problem
    with user-supplied markdown.

    Parameters
    ----------
    message : str
        Description of the violated invariant
    node : Any, optional
        Node involved in the violation

    """

    def __init__(self, message: str, node: Any = None, original_error: Exception | None = None):
        """Initialize the structural error."""
        super().__init__(message, original_error=original_error)
        self.node = node


class ParsingError(RichmarkError):
    """Exception raised when markdown input cannot be parsed.

    Parameters
    ----------
    message : str
        Description of the parsing error
    parsing_stage : str, optional
        Stage of parsing where the error occurred (e.g., "tokenizing", "block", "inline")
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error with stage information."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class RenderingError(RichmarkError):
    """Exception raised when markdown text cannot be produced from an AST.

    Parameters
    ----------
    message : str
        Description of the rendering error
    rendering_stage : str, optional
        Stage of rendering where the error occurred
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error with stage information."""
        super().__init__(message, original_error=original_error)
        self.rendering_stage = rendering_stage


class DependencyError(RichmarkError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_import_error : ImportError, optional
        The ImportError raised while importing a missing package

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{converter_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{converter_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
            if all_packages:
                packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message, original_error=original_import_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches


__all__ = [
    "RichmarkError",
    "ValidationError",
    "ConversionError",
    "UnsupportedNodeError",
    "StructuralError",
    "ParsingError",
    "RenderingError",
    "DependencyError",
]
