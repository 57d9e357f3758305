# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- Output formatters (TOML, JSON)
- Console utilities for error handling
"""

from enum import IntEnum
from typing import Any, Never

from rich.console import Console

# Type alias for formattable data - uses Any to match library signatures
FormattableData = dict[str, Any]

__all__ = [
    "ExitCode",
    "FormattableData",
    "exit_with_error",
    "format_json",
    "format_toml",
    "get_error_console",
]


class ExitCode(IntEnum):
    """Standard exit codes for minisup CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2


def format_toml(data: FormattableData) -> str:
    """Format data as TOML."""
    import tomli_w

    return tomli_w.dumps(data)


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Dictionary to format as JSON.
        indent: Whether to pretty-print with indentation.

    Returns:
        JSON-formatted string representation.
    """
    import orjson

    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use.
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {message}", highlight=False)
    raise SystemExit(code)
