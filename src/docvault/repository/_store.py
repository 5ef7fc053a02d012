# ruff: noqa: TC003  # Path needed at runtime for method bodies
"""Repository lifecycle and locking.

This module creates and opens the on-disk git repository that backs a
managed document tree, and hands out the per-repository lock that serialises
every operation against it.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Final

from dulwich.errors import NotGitRepository
from dulwich.repo import Repo

from docvault.exceptions import (
    DirectoryNotFoundError,
    RepositoryBusyError,
    RepositoryNotInitializedError,
    RepositoryOpenError,
)
from docvault.repository._models import InitResult

# Branch that every DocVault repository commits to and pushes.
PRIMARY_BRANCH: Final = "main"

_CONTROL_DIR: Final = ".git"

_registry_lock: Final = threading.Lock()
_repository_locks: dict[Path, threading.RLock] = {}


def is_initialized(path: Path) -> bool:
    """Check whether a directory holds repository metadata.

    Args:
        path: The managed directory.

    Returns:
        True if ``path/.git`` exists.
    """
    return (path / _CONTROL_DIR).exists()


def initialize_repository(path: Path, *, branch: str = PRIMARY_BRANCH) -> InitResult:
    """Create a repository in an existing directory.

    Calling this on an already initialized directory is a no-op.

    Args:
        path: The managed directory. It must already exist.
        branch: Branch name HEAD should point at.

    Returns:
        InitResult with ``created`` False if metadata was already present.

    Raises:
        DirectoryNotFoundError: If the directory does not exist.
        RepositoryOpenError: If the repository cannot be created.
    """
    resolved = path.resolve()
    if not resolved.is_dir():
        msg = f"Directory does not exist: {resolved}"
        raise DirectoryNotFoundError(msg, path=resolved)

    if is_initialized(resolved):
        return InitResult(path=resolved, created=False)

    try:
        repo = Repo.init(str(resolved), default_branch=branch.encode())
    except OSError as e:
        msg = f"Failed to initialize repository: {e}"
        raise RepositoryOpenError(msg, path=resolved, cause=e) from e
    repo.close()
    return InitResult(path=resolved, created=True)


def open_repository(path: Path) -> Repo:
    """Open the repository in a managed directory.

    Args:
        path: The managed directory.

    Returns:
        An open dulwich Repo. Callers are responsible for closing it.

    Raises:
        RepositoryNotInitializedError: If ``path/.git`` is missing.
        RepositoryOpenError: If the metadata is present but unreadable.
    """
    resolved = path.resolve()
    if not is_initialized(resolved):
        msg = f"Repository not initialized: {resolved}/.git not found"
        raise RepositoryNotInitializedError(msg, path=resolved)

    try:
        return Repo(str(resolved))
    except (NotGitRepository, OSError, ValueError) as e:
        msg = f"Failed to open repository: {e}"
        raise RepositoryOpenError(msg, path=resolved, cause=e) from e


def get_repository_lock(root: Path) -> threading.RLock:
    """Get the process-wide lock for a repository root.

    Args:
        root: Resolved repository root.

    Returns:
        The same re-entrant lock for every caller using this root.
    """
    with _registry_lock:
        lock = _repository_locks.get(root)
        if lock is None:
            lock = threading.RLock()
            _repository_locks[root] = lock
        return lock


@contextmanager
def exclusive(root: Path, *, timeout: float | None = None) -> Iterator[None]:
    """Hold the repository lock for the duration of the block.

    Args:
        root: Resolved repository root.
        timeout: Seconds to wait for the lock. None waits indefinitely.

    Raises:
        RepositoryBusyError: If the lock is not acquired within ``timeout``.
    """
    lock = get_repository_lock(root)
    acquired = lock.acquire(timeout=-1 if timeout is None else timeout)
    if not acquired:
        msg = f"Repository is busy: another operation holds {root}"
        raise RepositoryBusyError(msg, path=root)
    try:
        yield
    finally:
        lock.release()
