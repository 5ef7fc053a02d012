# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, A002
"""Config command app for viewing DocVault configuration."""

from typing import Annotated

import tomli_w
from cyclopts import App, Parameter

from docvault.cli._commands._context import CLIContext, OutputFormat
from docvault.cli._commands._shared import ExitCode, format_json

__all__ = ["app"]

app = App(name="config", help="View DocVault configuration.")


@app.command(name="show")
def _show(
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (toml, json)"),
    ] = OutputFormat.TOML,
    section: Annotated[
        str | None,
        Parameter(name=["--section", "-s"], help="Show only this section"),
    ] = None,
) -> None:
    """Display the effective configuration

    Shows defaults merged with the config file, DOCVAULT_* environment
    variables, and command-line options.
    """
    ctx = CLIContext.get_current()
    if ctx.config_error:
        print(f"Warning: {ctx.config_error}")  # noqa: T201

    data = ctx.config.to_dict()
    if section is not None:
        if section not in data:
            print(f"Error: Section '{section}' not found")  # noqa: T201
            raise SystemExit(ExitCode.ERROR)
        data = {section: data[section]}

    if format == OutputFormat.JSON:
        output = format_json(data)
    else:
        output = tomli_w.dumps(data)

    print(output.rstrip())  # noqa: T201
