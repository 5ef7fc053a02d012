# ruff: noqa: TC003  # Path and datetime needed at runtime for dataclass fields
"""DocVault repository models.

This module defines data structures returned by repository operations.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from pathlib import Path


class PathMatch(StrEnum):
    """How a queried path is compared with paths recorded in commits.

    RELATIVE compares full repository-relative paths. BASENAME compares only
    the final path component, so equally named files in different directories
    are indistinguishable.
    """

    RELATIVE = "relative"
    BASENAME = "basename"


@dataclass(frozen=True, slots=True)
class Identity:
    """Author and committer identity written into commits.

    Attributes:
        name: Display name.
        email: Email address.
    """

    name: str
    email: str

    def to_bytes(self) -> bytes:
        """Format as ``Name <email>`` bytes for dulwich."""
        return f"{self.name} <{self.email}>".encode()


@dataclass(frozen=True, slots=True)
class InitResult:
    """Result of initializing a repository.

    Attributes:
        path: The repository root directory.
        created: False if the repository already existed and was left untouched.
    """

    path: Path
    created: bool


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Result of a commit operation.

    Attributes:
        sha: Commit SHA hex string.
        parent_sha: SHA of the parent commit, None for a root commit.
        files: Files staged for this commit (absolute paths).
    """

    sha: str
    parent_sha: str | None
    files: frozenset[Path]


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One commit that touched a queried file.

    Attributes:
        commit_id: Full 40-character commit SHA hex string.
        message: Complete commit message.
        author: Author name from the commit.
        timestamp: Author timestamp as a timezone-aware datetime.
    """

    commit_id: str
    message: str
    author: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class RestoreResult:
    """Result of restoring a file from a commit.

    Attributes:
        path: The working-tree file that was overwritten.
        commit_id: Full SHA of the commit the content came from.
        size: Number of bytes written.
    """

    path: Path
    commit_id: str
    size: int


@dataclass(frozen=True, slots=True)
class RemoteInfo:
    """A configured remote.

    Attributes:
        name: Remote name (always "origin" for remotes DocVault manages).
        url: Remote URL.
    """

    name: str
    url: str
