"""DocVault repository management.

This package manages the git repository that backs a document directory:
creating it, committing snapshots, reconstructing per-file history, restoring
old versions, and configuring the sync remote.

Classes:
    DocumentRepository: Handle for all operations on an initialized directory.

Functions:
    initialize_repository: Create repository metadata (idempotent).
    open_repository: Open the dulwich Repo for a directory.
    is_initialized: Check for repository metadata.

Models:
    CommitResult: Result of commit operations.
    HistoryEntry: One commit in a file's history.
    RestoreResult: Result of restoring a file.
    RemoteInfo: A configured remote.
    InitResult: Result of initialization.
    Identity: Commit author and committer.
    PathMatch: Path comparison mode for history and restore.

Example:
    >>> from docvault.repository import DocumentRepository, initialize_repository
    >>> initialize_repository(root)
    >>> with DocumentRepository(root) as repo:
    ...     repo.commit_all("Save")
"""

from docvault.repository._history import iter_file_history
from docvault.repository._models import (
    CommitResult,
    HistoryEntry,
    Identity,
    InitResult,
    PathMatch,
    RemoteInfo,
    RestoreResult,
)
from docvault.repository._repository import (
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_IDENTITY,
    DEFAULT_REMOTE,
    DocumentRepository,
)
from docvault.repository._store import (
    PRIMARY_BRANCH,
    exclusive,
    initialize_repository,
    is_initialized,
    open_repository,
)

__all__ = [
    "DEFAULT_EXCLUDED_DIRS",
    "DEFAULT_IDENTITY",
    "DEFAULT_REMOTE",
    "PRIMARY_BRANCH",
    "CommitResult",
    "DocumentRepository",
    "HistoryEntry",
    "Identity",
    "InitResult",
    "PathMatch",
    "RemoteInfo",
    "RestoreResult",
    "exclusive",
    "initialize_repository",
    "is_initialized",
    "iter_file_history",
    "open_repository",
]
