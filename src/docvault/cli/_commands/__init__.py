"""DocVault CLI commands."""
# pyright: reportUnusedCallResult=false

from __future__ import annotations

from typing import TYPE_CHECKING

from ._config import app as config_app
from ._context import CLIContext, OutputFormat
from ._repo import commit, history, init, restore
from ._shared import (
    ExitCode,
    exit_code_for,
    exit_with_error,
    format_json,
    get_error_console,
    get_service,
    handle_errors,
)
from ._sync import keygen, push, remote_app, test_connection

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "OutputFormat",
    "config_app",
    "exit_code_for",
    "exit_with_error",
    "format_json",
    "get_error_console",
    "get_service",
    "handle_errors",
    "register_commands",
    "remote_app",
]


def register_commands(app: App) -> None:
    app.command(init, name="init")
    app.command(commit, name="commit")
    app.command(history, name="history")
    app.command(restore, name="restore")
    app.command(remote_app)
    app.command(push, name="push")
    app.command(test_connection, name="test-connection")
    app.command(keygen, name="keygen")
    app.command(config_app)
