# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes and error-kind mapping
- JSON output formatting
- Console and service construction
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Never

import orjson
from rich.console import Console
from rich.markup import escape

from docvault.exceptions import (
    DocVaultError,
    ErrorKind,
    RepositoryPathViolationError,
)
from docvault.service import VaultService

from ._context import CLIContext

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = [
    "ExitCode",
    "exit_code_for",
    "exit_with_error",
    "format_json",
    "get_error_console",
    "get_service",
    "handle_errors",
]


class ExitCode(IntEnum):
    """Standard exit codes for DocVault CLI commands."""

    SUCCESS = 0
    ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5


_KIND_EXIT_CODES: dict[ErrorKind, ExitCode] = {
    ErrorKind.NOT_INITIALIZED: ExitCode.NOT_FOUND,
    ErrorKind.NOT_FOUND: ExitCode.NOT_FOUND,
    ErrorKind.PATH_NOT_FOUND: ExitCode.NOT_FOUND,
    ErrorKind.REMOTE_NOT_FOUND: ExitCode.NOT_FOUND,
    ErrorKind.INVALID_URL_SCHEME: ExitCode.VALIDATION_ERROR,
    ErrorKind.INVALID_COMMIT_ID: ExitCode.VALIDATION_ERROR,
    ErrorKind.CONFIG: ExitCode.VALIDATION_ERROR,
    ErrorKind.OPEN_FAILURE: ExitCode.IO_ERROR,
    ErrorKind.STAGING_FAILURE: ExitCode.IO_ERROR,
    ErrorKind.COMMIT_FAILURE: ExitCode.IO_ERROR,
    ErrorKind.WRITE_FAILURE: ExitCode.IO_ERROR,
    ErrorKind.TRANSFER_FAILURE: ExitCode.IO_ERROR,
    ErrorKind.KEY_GENERATION_FAILURE: ExitCode.IO_ERROR,
}


def exit_code_for(error: DocVaultError) -> ExitCode:
    """Map an error to the exit code the CLI reports for it.

    Args:
        error: The error raised by an operation.

    Returns:
        NOT_FOUND, VALIDATION_ERROR, IO_ERROR, or ERROR for everything else.
    """
    if isinstance(error, RepositoryPathViolationError):
        return ExitCode.VALIDATION_ERROR
    return _KIND_EXIT_CODES.get(error.kind, ExitCode.ERROR)


def format_json(data: Any, *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Value to format. Datetimes are rendered in RFC 3339 form.
        indent: Whether to pretty-print with indentation.

    Returns:
        JSON-formatted string representation.
    """
    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr.

    Returns:
        Console instance writing to stderr.
    """
    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise SystemExit(code)


def get_service(command: str) -> VaultService:
    """Build a VaultService from the current CLI context.

    Args:
        command: Command name bound to log entries.

    Returns:
        Service using the context's configuration and logger.
    """
    ctx = CLIContext.get_current()
    logger = ctx.logger.bind(command=command) if ctx.logger is not None else None
    return VaultService(ctx.config, logger=logger)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn DocVault errors raised in the block into CLI exits.

    Example:
        with handle_errors():
            service.push()
    """
    try:
        yield
    except DocVaultError as e:
        exit_with_error(str(e), exit_code_for(e))
