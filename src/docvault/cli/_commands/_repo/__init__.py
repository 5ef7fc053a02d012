# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# pyright: reportImplicitStringConcatenation=false
# ruff: noqa: D415, FBT002, TC003
"""Document history commands: init, commit, history, restore."""

import sys
from pathlib import Path
from typing import Annotated

from cyclopts import Parameter
from rich.console import Console
from rich.markup import escape

from docvault.cli._commands._shared import format_json, get_service, handle_errors

__all__ = ["commit", "history", "init", "restore"]


def init() -> None:
    """Create version history for the managed directory"""
    console = Console()
    service = get_service("init")

    with handle_errors():
        result = service.init_repository()

    if result.created:
        console.print(f"[green]Initialized repository in {result.path}[/green]")
    else:
        console.print(f"[dim]Repository already initialized in {result.path}[/dim]")


def commit(
    message: Annotated[
        str,
        Parameter(
            name=["--message", "-m"],
            help="Commit message",
        ),
    ] = "Manual save",
    path: Annotated[
        Path | None,
        Parameter(
            name=["--path"],
            help="Commit only this file (relative to the managed directory)",
        ),
    ] = None,
) -> None:
    """Snapshot the managed directory

    Stages every added, modified, and deleted file (or only --path) and
    records a commit, even when nothing changed.
    """
    console = Console()
    service = get_service("commit")

    with handle_errors():
        if path is None:
            result = service.commit_all(message)
        else:
            result = service.commit_path(path, message)

    console.print(f"[green]Committed {len(result.files)} file(s)[/green]")
    console.print(f"[dim]SHA: {result.sha}[/dim]")


def history(
    path: Annotated[
        Path,
        Parameter(help="File to show history for (relative to the managed directory)"),
    ],
    *,
    json: Annotated[
        bool,
        Parameter(name=["--json"], help="Output JSON"),
    ] = False,
) -> None:
    """Show the commits that changed a file, newest first"""
    console = Console()
    service = get_service("history")

    with handle_errors():
        entries = service.file_history(path)

    if json:
        print(  # noqa: T201
            format_json([
                {
                    "commit_id": entry.commit_id,
                    "message": entry.message,
                    "author": entry.author,
                    "timestamp": entry.timestamp,
                }
                for entry in entries
            ])
        )
        return

    if not entries:
        console.print(f"[dim]No history for {path}[/dim]")
        return

    for entry in entries:
        subject = entry.message.splitlines()[0] if entry.message else "(no message)"
        console.print(f"[yellow]{entry.commit_id[:8]}[/yellow] {escape(subject)}")
        console.print(
            f"  [dim]{escape(entry.author)} "
            f"{entry.timestamp.strftime('%Y-%m-%d %H:%M:%S %z')}[/dim]"
        )


def restore(
    path: Annotated[
        Path,
        Parameter(help="File to restore (relative to the managed directory)"),
    ],
    commit_id: Annotated[
        str,
        Parameter(help="Full or abbreviated commit SHA"),
    ],
    *,
    force: Annotated[
        bool,
        Parameter(
            name=["--force", "-f"],
            help="Overwrite the working file without confirmation",
        ),
    ] = False,
) -> None:
    """Overwrite a file with its content at a commit

    No commit is created; unsaved edits to the file are lost.
    """
    console = Console()

    if not force:
        console.print(
            f"[yellow]This will overwrite {path} with its content at "
            f"{commit_id}. Use --force to confirm.[/yellow]"
        )
        sys.exit(1)

    service = get_service("restore")
    with handle_errors():
        result = service.restore(path, commit_id)

    console.print(
        f"[green]Restored {path} from {result.commit_id[:8]} "
        f"({result.size} bytes)[/green]"
    )
