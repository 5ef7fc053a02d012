# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# pyright: reportImplicitStringConcatenation=false
# ruff: noqa: D415, FBT002, TC003
"""Sync commands: remote, push, test-connection, keygen."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from docvault.cli._commands._shared import get_service, handle_errors

__all__ = ["keygen", "push", "remote_app", "test_connection"]

remote_app = App(name="remote", help="Manage the sync remote.")


@remote_app.command(name="set")
def _set(
    url: Annotated[str, Parameter(help="SSH URL of the remote repository")],
) -> None:
    """Create or update the sync remote"""
    console = Console()
    service = get_service("remote set")

    with handle_errors():
        info = service.set_remote(url)

    console.print(f"[green]Remote {info.name} set to {info.url}[/green]")


@remote_app.command(name="show")
def _show() -> None:
    """Show the sync remote"""
    console = Console()
    service = get_service("remote show")

    with handle_errors():
        info = service.get_remote()

    if info is None:
        console.print("[dim]No remote configured[/dim]")
        return
    console.print(f"{info.name}\t{info.url}")


def push(
    key: Annotated[
        Path | None,
        Parameter(name=["--key"], help="Private key file (default: SSH agent)"),
    ] = None,
) -> None:
    """Push the primary branch to the sync remote"""
    console = Console()
    service = get_service("push")

    with handle_errors():
        result = service.push(ssh_key_path=key)

    if result.up_to_date:
        console.print(f"[dim]{result.remote} is already up to date[/dim]")
        return
    console.print(f"[green]Pushed {result.sha[:8]} to {result.remote} ({result.ref})[/green]")


def test_connection(
    url: Annotated[str, Parameter(help="SSH URL to probe")],
    *,
    username: Annotated[
        str | None,
        Parameter(name=["--username"], help="SSH user when the URL has none"),
    ] = None,
    email: Annotated[
        str | None,
        Parameter(name=["--email"], help="Committer email"),
    ] = None,
    key: Annotated[
        Path | None,
        Parameter(name=["--key"], help="Private key file (default: SSH agent)"),
    ] = None,
) -> None:
    """Check that a remote accepts the available SSH credential"""
    console = Console()
    service = get_service("test-connection")

    with handle_errors():
        service.test_connection(
            url, username=username, committer_email=email, ssh_key_path=key
        )

    console.print(f"[green]Connection to {url} succeeded[/green]")


def keygen(
    *,
    email: Annotated[
        str,
        Parameter(name=["--email"], help="Comment embedded in the public key"),
    ],
    overwrite: Annotated[
        bool,
        Parameter(name=["--overwrite"], help="Replace an existing key pair"),
    ] = False,
) -> None:
    """Generate an SSH key pair inside the managed directory"""
    console = Console()
    service = get_service("keygen")

    with handle_errors():
        key_pair = service.generate_key_pair(email, overwrite=overwrite)

    console.print(f"[green]Private key: {key_pair.private_key_path}[/green]")
    console.print("Add this public key to your git host:")
    print(key_pair.public_key)  # noqa: T201
