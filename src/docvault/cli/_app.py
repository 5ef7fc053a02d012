"""The command-line interface for DocVault."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from docvault.config import safe_load_config
from docvault.utils import create_cli_logger

from ._commands import register_commands
from ._commands._context import CLIContext

APP_HELP = "Version history and SSH sync for a local document directory."


def _build_overrides(*, root: Path | None, verbose: bool) -> dict[str, object] | None:
    cli_overrides: dict[str, object] = {}
    if root is not None:
        cli_overrides["storage"] = {"root": str(root)}
    if verbose:
        cli_overrides["logging"] = {"level": "debug"}
    return cli_overrides or None


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="docvault",
        help=APP_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[
            bool, Parameter(name=["--verbose", "-v"], help="Log at debug level")
        ] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        root: Annotated[
            Path | None,
            Parameter(name="--root", help="Application data directory (storage.root)"),
        ] = None,
    ) -> None:
        """Launch DocVault CLI with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Log at debug level.
            config: Explicit path to config file.
            root: Override the storage root.
        """
        loaded_config, config_error = safe_load_config(
            config_path=config,
            cli_overrides=_build_overrides(root=root, verbose=verbose),
        )

        cli_logger = create_cli_logger(
            log_file=loaded_config.log_path,
            level=loaded_config.logging.level.value,
            log_format=loaded_config.logging.format.value,
            max_bytes=loaded_config.logging.max_bytes,
            backup_count=loaded_config.logging.backup_count,
        )

        ctx = CLIContext(
            config=loaded_config,
            verbose=verbose,
            config_error=config_error,
            logger=cli_logger,
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `docvault` CLI."""
    create_app().meta()


if __name__ == "__main__":
    main()
