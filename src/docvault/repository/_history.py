"""File history reconstruction.

There is no per-file index in a git repository, so the history of a file is
recovered by walking every commit reachable from HEAD and diffing each one
against its first parent (or the empty tree for a root commit).
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, cast

from dulwich.diff_tree import tree_changes
from dulwich.errors import ObjectFormatException
from dulwich.walk import ORDER_TOPO

from docvault.repository._models import HistoryEntry, PathMatch

if TYPE_CHECKING:
    from dulwich.objects import Commit
    from dulwich.repo import Repo
    from structlog.typing import FilteringBoundLogger


def to_datetime(timestamp: int, tz_offset: int) -> datetime:
    """Convert a git timestamp and offset to an aware datetime.

    Args:
        timestamp: Unix timestamp.
        tz_offset: Offset in seconds as dulwich reports it (east of UTC).

    Returns:
        Datetime in the commit's own timezone.
    """
    tz = timezone(timedelta(seconds=tz_offset))
    return datetime.fromtimestamp(timestamp, tz=tz)


def parse_author_name(author: bytes) -> str:
    """Extract the name part of a ``Name <email>`` identity.

    Args:
        author: Identity bytes from a commit.

    Returns:
        The name, or "Unknown" if the identity is empty.
    """
    author_str = author.decode("utf-8", errors="replace")
    if "<" in author_str:
        author_str = author_str.rsplit("<", 1)[0]
    return author_str.strip() or "Unknown"


def changed_paths(repo: Repo, commit: Commit) -> frozenset[str]:
    """Collect every path a commit added, modified, or removed.

    Args:
        repo: The repository holding the commit.
        commit: The commit to diff against its first parent.

    Returns:
        Repository-relative POSIX paths touched by the commit.
    """
    parents = cast("list[bytes]", commit.parents)
    parent_tree: bytes | None = None
    if parents:
        parent_commit = cast("Commit", repo[parents[0]])
        parent_tree = parent_commit.tree

    paths: set[str] = set()
    for change in tree_changes(repo.object_store, parent_tree, commit.tree):
        for side in (change.old, change.new):
            side_path = getattr(side, "path", None)
            if side_path is not None:
                paths.add(side_path.decode("utf-8", errors="replace"))
    return frozenset(paths)


def path_matches(changed: str, query: str, mode: PathMatch) -> bool:
    """Compare a changed path with the queried one.

    Args:
        changed: Repository-relative path from a diff.
        query: Repository-relative path being looked up.
        mode: Matching mode.

    Returns:
        True if the paths are considered the same file.
    """
    if mode is PathMatch.BASENAME:
        return posixpath.basename(changed) == posixpath.basename(query)
    return changed == query


def iter_file_history(
    repo: Repo,
    head: bytes,
    query: str,
    *,
    mode: PathMatch,
    logger: FilteringBoundLogger,
) -> Iterator[HistoryEntry]:
    """Yield commits reachable from ``head`` that touched ``query``.

    Commits come newest first, each before its parent. A commit whose diff
    cannot be computed is logged and skipped so one damaged object does not
    hide the rest of the history.

    Args:
        repo: The repository to walk.
        head: SHA of the commit to start from.
        query: Repository-relative POSIX path to look for.
        mode: Matching mode.
        logger: Logger for skipped commits.

    Yields:
        HistoryEntry for each matching commit.
    """
    walker = repo.get_walker(include=[head], order=ORDER_TOPO)
    for entry in walker:
        commit = cast("Commit", entry.commit)
        try:
            paths = changed_paths(repo, commit)
        except (KeyError, ObjectFormatException, ValueError) as e:
            logger.warning(
                "history_commit_skipped",
                commit_id=commit.id.decode("ascii"),
                error=str(e),
            )
            continue

        if not any(path_matches(p, query, mode) for p in paths):
            continue

        yield HistoryEntry(
            commit_id=commit.id.decode("ascii"),
            message=commit.message.decode("utf-8", errors="replace"),
            author=parse_author_name(commit.author),
            timestamp=to_datetime(commit.commit_time, commit.commit_timezone),
        )
