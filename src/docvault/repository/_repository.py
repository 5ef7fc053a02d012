# ruff: noqa: TC003  # Path needed at runtime for method bodies
"""Document repository management.

This module provides the DocumentRepository class, the handle through which
snapshots are committed, file history is read, old versions are restored,
and the single sync remote is configured.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Final, Self, cast

import structlog
from dulwich import porcelain
from dulwich.errors import CommitError as DulwichCommitError
from dulwich.errors import NotTreeError
from dulwich.object_store import tree_lookup_path
from dulwich.objects import Blob, Commit

from docvault.exceptions import (
    CommitError,
    InvalidCommitIdError,
    PathNotFoundError,
    RepositoryConflictError,
    RepositoryPathViolationError,
    RestoreWriteError,
    StagingError,
)
from docvault.repository._history import iter_file_history
from docvault.repository._models import (
    CommitResult,
    HistoryEntry,
    Identity,
    PathMatch,
    RemoteInfo,
    RestoreResult,
)
from docvault.repository._store import PRIMARY_BRANCH, exclusive, open_repository

if TYPE_CHECKING:
    from types import TracebackType

    from dulwich.repo import Repo
    from structlog.typing import FilteringBoundLogger

DEFAULT_IDENTITY: Final = Identity(name="DocVault", email="docvault@localhost")
DEFAULT_REMOTE: Final = "origin"

# Directories under the root that are never committed (generated SSH keys).
DEFAULT_EXCLUDED_DIRS: Final = (".ssh",)

_CONTROL_DIR: Final = ".git"
_SHA_HEX_LENGTH: Final = 40
_MIN_SHA_ABBREV_LENGTH: Final = 4
_HEX_RE: Final = re.compile(r"^[0-9a-fA-F]+$")


class DocumentRepository:
    """Version history for one managed document directory.

    Every public operation holds the repository's process-wide lock, so at
    most one staging, commit, restore, or remote operation runs at a time for
    a given root.

    The class implements the context manager protocol for proper resource
    cleanup. When used as a context manager, the underlying dulwich Repo is
    automatically closed when exiting the context.

    Attributes:
        root: The resolved path to the managed directory.

    Example:
        with DocumentRepository(Path("~/vault/documents").expanduser()) as repo:
            result = repo.commit_all("Save board")
            history = repo.file_history(repo.root / "board.json")
    """

    def __init__(
        self,
        root: Path,
        *,
        identity: Identity = DEFAULT_IDENTITY,
        path_match: PathMatch = PathMatch.RELATIVE,
        excluded_dirs: tuple[str, ...] = DEFAULT_EXCLUDED_DIRS,
        lock_timeout: float | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Open the repository in ``root``.

        Args:
            root: The managed directory.
            identity: Author and committer identity for every commit.
            path_match: How history and restore match paths.
            excluded_dirs: Top-level directories never staged.
            lock_timeout: Seconds to wait for the repository lock, None to wait
                indefinitely.
            logger: Structured logger. Defaults to a "docvault" logger.

        Raises:
            RepositoryNotInitializedError: If ``root/.git`` is missing.
            RepositoryOpenError: If the repository cannot be read.
        """
        self._repo = open_repository(root)
        self._root = root.resolve()
        self._identity = identity
        self._path_match = path_match
        self._excluded_dirs = excluded_dirs
        self._lock_timeout = lock_timeout
        self._logger: FilteringBoundLogger = logger or cast(
            "FilteringBoundLogger", structlog.get_logger("docvault")
        )

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying git repository."""
        self._repo.close()

    # =========================================================================
    # Locking
    # =========================================================================

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the repository lock, honouring the configured lock timeout.

        Raises:
            RepositoryBusyError: If the lock is not acquired in time.
        """
        with exclusive(self._root, timeout=self._lock_timeout):
            yield

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def root(self) -> Path:
        """The absolute path to the managed directory."""
        return self._root

    @property
    def path_match(self) -> PathMatch:
        """The path matching mode used by history and restore."""
        return self._path_match

    @property
    def head(self) -> str | None:
        """SHA of the HEAD commit, or None before the first commit."""
        return self._get_head_sha()

    @property
    def remote(self) -> RemoteInfo | None:
        """The ``origin`` remote, or None if it has not been configured."""
        return self.get_remote(DEFAULT_REMOTE)

    def get_remote(self, name: str) -> RemoteInfo | None:
        """Look up a remote by name.

        Args:
            name: Remote name.

        Returns:
            RemoteInfo, or None if the remote has no URL configured.
        """
        config = self._repo.get_config()
        try:
            url = config.get((b"remote", name.encode()), b"url")
        except KeyError:
            return None
        return RemoteInfo(name=name, url=url.decode("utf-8"))

    # =========================================================================
    # Staging Methods
    # =========================================================================

    def stage_all(self) -> frozenset[Path]:
        """Stage every added, modified, and removed file under the root.

        Files matched by ``.gitignore`` and the excluded directories are left
        alone. Tracked files missing from disk are removed from the index.

        Returns:
            Frozenset of absolute paths whose index entries changed.

        Raises:
            StagingError: If the index cannot be read or written.
        """
        with self.exclusive():
            try:
                status = porcelain.status(self._repo, untracked_files="all")
            except OSError as e:
                msg = f"Failed to read working tree status: {e}"
                raise StagingError(msg, path=self._root, cause=e) from e

            candidates = {
                rel
                for rel in (
                    *self._decode_paths(status.unstaged),
                    *self._decode_paths(status.untracked),
                )
                if not self._is_excluded(rel)
            }
            present = sorted(rel for rel in candidates if (self._root / rel).exists())
            removed = sorted(candidates.difference(present))

            try:
                if present:
                    _ = porcelain.add(
                        self._repo, paths=[str(self._root / rel) for rel in present]
                    )
                if removed:
                    self._remove_from_index(removed)
            except OSError as e:
                msg = f"Failed to stage changes: {e}"
                raise StagingError(msg, path=self._root, cause=e) from e

            return frozenset(self._root / rel for rel in candidates)

    def stage_path(self, path: Path) -> frozenset[Path]:
        """Stage exactly one path.

        Args:
            path: Absolute path, or path relative to the root.

        Returns:
            Frozenset containing the staged absolute path.

        Raises:
            RepositoryPathViolationError: If the path is outside the root or
                inside an excluded directory.
            StagingError: If the file cannot be staged.
        """
        with self.exclusive():
            rel = self._to_relative_path(path)
            if self._is_excluded(rel):
                msg = f"Path is inside an excluded directory: {path}"
                raise RepositoryPathViolationError(msg, path=path, root=self._root)
            absolute = self._root / rel
            try:
                if absolute.exists():
                    _ = porcelain.add(self._repo, paths=[str(absolute)])
                else:
                    self._remove_from_index([rel])
            except OSError as e:
                msg = f"Failed to stage {rel}: {e}"
                raise StagingError(msg, path=absolute, cause=e) from e
            return frozenset([absolute])

    def _remove_from_index(self, relative_paths: list[str]) -> None:
        """Drop index entries for files deleted from the working tree."""
        index = self._repo.open_index()
        try:
            for rel in relative_paths:
                key = rel.encode("utf-8")
                if key in index:
                    del index[key]
        finally:
            index.write()

    # =========================================================================
    # Commit Methods
    # =========================================================================

    def commit_all(self, message: str) -> CommitResult:
        """Stage every change under the root and commit it.

        Args:
            message: Commit message.

        Returns:
            CommitResult for the new commit.

        Raises:
            StagingError: If staging fails.
            CommitError: If the commit cannot be written.
        """
        with self.exclusive():
            staged = self.stage_all()
            return self._perform_commit(message, staged)

    def commit_path(self, path: Path, message: str) -> CommitResult:
        """Stage one path and commit the index.

        Args:
            path: Absolute path, or path relative to the root.
            message: Commit message.

        Returns:
            CommitResult for the new commit.

        Raises:
            RepositoryPathViolationError: If the path is outside the root.
            StagingError: If staging fails.
            CommitError: If the commit cannot be written.
        """
        with self.exclusive():
            staged = self.stage_path(path)
            return self._perform_commit(message, staged)

    def _perform_commit(self, message: str, staged: frozenset[Path]) -> CommitResult:
        """Write the index as a commit on HEAD and verify its parent.

        A commit is written even if the tree is unchanged, so every explicit
        save appears in the history.

        Raises:
            CommitError: If dulwich fails to write the tree or commit.
            RepositoryConflictError: If HEAD moved while committing.
        """
        head_before = self._get_head_sha()
        identity = self._identity.to_bytes()

        try:
            commit_sha: bytes = porcelain.commit(
                self._repo,
                message=message.encode("utf-8"),
                author=identity,
                committer=identity,
            )
        except (OSError, DulwichCommitError) as e:
            msg = f"Failed to commit: {e}"
            raise CommitError(msg, path=self._root, cause=e) from e

        sha = commit_sha.decode("ascii")
        commit = cast("Commit", self._repo[commit_sha])
        parents = cast("list[bytes]", commit.parents)
        parent_sha = parents[0].decode("ascii") if parents else None

        if parent_sha != head_before:
            msg = (
                f"Concurrent modification detected: expected parent={head_before}, "
                f"got parent={parent_sha}"
            )
            raise RepositoryConflictError(
                msg, path=self._root, details=f"Commit SHA: {sha}"
            )

        self._logger.info(
            "commit_created",
            sha=sha,
            parent=parent_sha,
            files=len(staged),
        )
        return CommitResult(sha=sha, parent_sha=parent_sha, files=staged)

    # =========================================================================
    # History Methods
    # =========================================================================

    def file_history(self, path: Path) -> list[HistoryEntry]:
        """List the commits that changed a file, newest first.

        The result is computed from scratch on every call.

        Args:
            path: Absolute path, or path relative to the root.

        Returns:
            HistoryEntry list in reverse topological order. Empty if HEAD has
            no commits.

        Raises:
            RepositoryPathViolationError: If the path is outside the root.
        """
        with self.exclusive():
            query = self._to_relative_path(path)
            head = self._get_head_sha()
            if head is None:
                return []
            return list(
                iter_file_history(
                    self._repo,
                    head.encode("ascii"),
                    query,
                    mode=self._path_match,
                    logger=self._logger,
                )
            )

    # =========================================================================
    # Restore Methods
    # =========================================================================

    def restore(self, path: Path, commit_id: str) -> RestoreResult:
        """Overwrite a working-tree file with its content at a commit.

        This is destructive: no commit is created, and unsaved edits to the
        file are lost. The blob is decoded as UTF-8, with invalid sequences
        replaced, before being written back.

        Args:
            path: Absolute path, or path relative to the root.
            commit_id: Full or abbreviated (minimum 4 characters) commit SHA.

        Returns:
            RestoreResult describing the written file.

        Raises:
            RepositoryPathViolationError: If the path is outside the root.
            InvalidCommitIdError: If the commit id cannot be resolved.
            PathNotFoundError: If the commit has no entry for the path.
            RestoreWriteError: If the file cannot be written.
        """
        with self.exclusive():
            rel = self._to_relative_path(path)
            target = self._root / rel
            commit = self._resolve_commit(commit_id)
            full_id = commit.id.decode("ascii")

            blob = self._find_blob(commit.tree, rel)
            if blob is None:
                msg = f"File not found in commit {full_id[:8]}: {rel}"
                raise PathNotFoundError(msg, path=target, commit_id=full_id)

            data = blob.data.decode("utf-8", errors="replace").encode("utf-8")
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                _ = target.write_bytes(data)
            except OSError as e:
                msg = f"Failed to write file: {e}"
                raise RestoreWriteError(msg, path=target, cause=e) from e

            self._logger.info(
                "version_restored", path=rel, commit_id=full_id, size=len(data)
            )
            return RestoreResult(path=target, commit_id=full_id, size=len(data))

    def read_file_at(self, path: Path, commit_id: str) -> bytes:
        """Get the raw content of a file at a commit without writing it.

        Args:
            path: Absolute path, or path relative to the root.
            commit_id: Full or abbreviated commit SHA.

        Returns:
            The blob content.

        Raises:
            InvalidCommitIdError: If the commit id cannot be resolved.
            PathNotFoundError: If the commit has no entry for the path.
        """
        with self.exclusive():
            rel = self._to_relative_path(path)
            commit = self._resolve_commit(commit_id)
            blob = self._find_blob(commit.tree, rel)
            if blob is None:
                full_id = commit.id.decode("ascii")
                msg = f"File not found in commit {full_id[:8]}: {rel}"
                raise PathNotFoundError(msg, path=self._root / rel, commit_id=full_id)
            return blob.data

    def _find_blob(self, tree_sha: bytes, relative_path: str) -> Blob | None:
        """Look up the blob for a path in a tree, honouring the match mode."""
        candidates = [relative_path]
        if self._path_match is PathMatch.BASENAME:
            name = relative_path.rsplit("/", 1)[-1]
            candidates = [name, *self._paths_with_basename(tree_sha, name)]

        for candidate in candidates:
            try:
                _, blob_sha = tree_lookup_path(
                    self._repo.__getitem__, tree_sha, candidate.encode("utf-8")
                )
            except (KeyError, NotTreeError):
                continue
            obj = self._repo[blob_sha]
            if isinstance(obj, Blob):
                return obj
        return None

    def _paths_with_basename(self, tree_sha: bytes, name: str) -> list[str]:
        """List every path in a tree whose final component is ``name``."""
        matches: list[str] = []
        for entry in self._repo.object_store.iter_tree_contents(tree_sha):
            entry_path = entry.path.decode("utf-8", errors="replace")
            if entry_path.rsplit("/", 1)[-1] == name:
                matches.append(entry_path)
        return sorted(matches)

    def _resolve_commit(self, commit_id: str) -> Commit:
        """Resolve a full or abbreviated SHA to a commit object.

        Raises:
            InvalidCommitIdError: If the id is malformed, too short, ambiguous,
                unknown, or names something other than a commit.
        """
        sha = commit_id.strip().lower()
        if not _HEX_RE.match(sha) or len(sha) > _SHA_HEX_LENGTH:
            msg = f"Invalid commit ID: {commit_id!r}"
            raise InvalidCommitIdError(msg, commit_id=commit_id)
        if len(sha) < _MIN_SHA_ABBREV_LENGTH:
            msg = (
                f"Commit ID too short (minimum {_MIN_SHA_ABBREV_LENGTH} "
                f"characters): {commit_id!r}"
            )
            raise InvalidCommitIdError(msg, commit_id=commit_id)

        if len(sha) == _SHA_HEX_LENGTH:
            matches = [sha.encode("ascii")]
        else:
            matches = [
                obj_sha
                for obj_sha in self._repo.object_store
                if obj_sha.decode("ascii").startswith(sha)
                and isinstance(self._repo[obj_sha], Commit)
            ]
            if len(matches) > 1:
                msg = f"Ambiguous commit ID: {commit_id!r} matches {len(matches)} commits"
                raise InvalidCommitIdError(msg, commit_id=commit_id)

        try:
            obj = self._repo[matches[0]] if matches else None
        except KeyError as e:
            msg = f"Commit not found: {commit_id!r}"
            raise InvalidCommitIdError(msg, commit_id=commit_id, cause=e) from e
        if not isinstance(obj, Commit):
            msg = f"Commit not found: {commit_id!r}"
            raise InvalidCommitIdError(msg, commit_id=commit_id)
        return obj

    # =========================================================================
    # Remote Methods
    # =========================================================================

    def set_remote(self, url: str, name: str = DEFAULT_REMOTE) -> RemoteInfo:
        """Create or update a remote.

        Only the named remote is touched; other remotes in the config are
        preserved. The URL is stored as given and validated at push time.

        Args:
            url: Remote URL.
            name: Remote name.

        Returns:
            RemoteInfo for the updated remote.
        """
        with self.exclusive():
            config = self._repo.get_config()
            section = (b"remote", name.encode())
            config.set(section, b"url", url.encode("utf-8"))
            config.set(
                section,
                b"fetch",
                f"+refs/heads/*:refs/remotes/{name}/*".encode(),
            )
            config.write_to_path()
            self._logger.info("remote_set", name=name, url=url)
            return RemoteInfo(name=name, url=url)

    def branch_sha(self, branch: str = PRIMARY_BRANCH) -> str | None:
        """Get the commit a local branch points at.

        Args:
            branch: Branch name without the refs/heads/ prefix.

        Returns:
            The SHA hex string, or None if the branch has no commits.
        """
        try:
            return self._repo.refs[f"refs/heads/{branch}".encode()].decode("ascii")
        except KeyError:
            return None

    def record_remote_ref(
        self, branch: str, sha: str, remote: str = DEFAULT_REMOTE
    ) -> None:
        """Point ``refs/remotes/<remote>/<branch>`` at a pushed commit."""
        with self.exclusive():
            ref = f"refs/remotes/{remote}/{branch}".encode()
            self._repo.refs[ref] = sha.encode("ascii")

    @property
    def dulwich_repo(self) -> Repo:
        """The underlying dulwich Repo, for transports that need pack data."""
        return self._repo

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _get_head_sha(self) -> str | None:
        try:
            return self._repo.head().decode("ascii")
        except KeyError:
            # Unborn HEAD: no commits yet
            return None

    def _to_relative_path(self, path: Path) -> str:
        """Convert a path to a repository-relative POSIX string.

        Raises:
            RepositoryPathViolationError: If the path is outside the root or
                inside the .git directory.
        """
        candidate = path if path.is_absolute() else self._root / path
        resolved = candidate.resolve()
        if not resolved.is_relative_to(self._root) or resolved == self._root:
            msg = f"Path is outside repository scope: {path}"
            raise RepositoryPathViolationError(msg, path=path, root=self._root)
        relative = resolved.relative_to(self._root)
        if relative.parts[0] == _CONTROL_DIR:
            msg = f"Path is inside repository metadata: {path}"
            raise RepositoryPathViolationError(msg, path=path, root=self._root)
        return relative.as_posix()

    def _is_excluded(self, relative_path: str) -> bool:
        first = relative_path.split("/", 1)[0]
        return first in self._excluded_dirs

    def _decode_paths(self, files: list[bytes] | list[str]) -> list[str]:
        return [f.decode("utf-8") if isinstance(f, bytes) else f for f in files]
