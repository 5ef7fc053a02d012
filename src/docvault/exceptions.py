"""DocVault exceptions.

Every exception carries an ``ErrorKind`` so callers can branch on the kind of
failure, plus structured context (paths, commit ids, URLs) instead of only a
pre-formatted message.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from pathlib import Path


class ErrorKind(StrEnum):
    """Stable identifiers for each failure category."""

    NOT_INITIALIZED = "not_initialized"
    NOT_FOUND = "not_found"
    OPEN_FAILURE = "open_failure"
    BUSY = "busy"
    STAGING_FAILURE = "staging_failure"
    COMMIT_FAILURE = "commit_failure"
    INVALID_COMMIT_ID = "invalid_commit_id"
    PATH_NOT_FOUND = "path_not_found"
    WRITE_FAILURE = "write_failure"
    REMOTE_NOT_FOUND = "remote_not_found"
    INVALID_URL_SCHEME = "invalid_url_scheme"
    AUTH_FAILURE = "auth_failure"
    TRANSFER_FAILURE = "transfer_failure"
    KEY_GENERATION_FAILURE = "key_generation_failure"
    CONFIG = "config"


class DocVaultError(Exception):
    """Base exception for DocVault errors.

    Attributes:
        kind: The failure category, shared by every instance of a subclass.
        cause: The underlying exception, if any.
    """

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        """Initialize with error message and optional cause.

        Args:
            message: Human-readable error message.
            cause: The underlying exception, if any.
        """
        super().__init__(message)
        self.cause: BaseException | None = cause


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(DocVaultError):
    """Base exception for configuration errors."""

    kind = ErrorKind.CONFIG


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: object,
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: object = value
        self.expected: str = expected
        self.source: str | None = source


# =============================================================================
# Repository Exceptions
# =============================================================================


class RepositoryError(DocVaultError):
    """Base exception for repository errors.

    Attributes:
        path: The repository root or file the error relates to.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and path context.

        Args:
            message: Human-readable error message.
            path: The repository root or file the error relates to.
            cause: The underlying exception, if any.
        """
        super().__init__(message, cause=cause)
        self.path: Path | None = path


class DirectoryNotFoundError(RepositoryError):
    """Raised when the managed directory does not exist."""

    kind = ErrorKind.NOT_FOUND


class RepositoryNotInitializedError(RepositoryError):
    """Raised when the managed directory has no .git metadata."""

    kind = ErrorKind.NOT_INITIALIZED


class RepositoryOpenError(RepositoryError):
    """Raised when repository metadata exists but cannot be read."""

    kind = ErrorKind.OPEN_FAILURE


class RepositoryBusyError(RepositoryError):
    """Raised when the repository lock cannot be acquired in time."""

    kind = ErrorKind.BUSY


class StagingError(RepositoryError):
    """Raised when files cannot be added to the index."""

    kind = ErrorKind.STAGING_FAILURE


class RepositoryPathViolationError(StagingError):
    """Raised when attempting to operate on files outside the repository.

    Attributes:
        path: The path that violated the constraint.
        root: The repository root directory.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        root: Path | None = None,
    ) -> None:
        """Initialize with error message and path violation context.

        Args:
            message: Human-readable error message.
            path: The path that violated the constraint.
            root: The repository root directory.
        """
        super().__init__(message, path=path)
        self.root: Path | None = root


class CommitError(RepositoryError):
    """Raised when the tree or commit object cannot be written."""

    kind = ErrorKind.COMMIT_FAILURE


class RepositoryConflictError(CommitError):
    """Raised when a commit's parent is not the HEAD captured before committing.

    Attributes:
        details: Additional details about the conflict.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        details: str | None = None,
    ) -> None:
        """Initialize with error message and conflict context.

        Args:
            message: Human-readable error message.
            path: The repository root where the conflict occurred.
            details: Additional details about the conflict.
        """
        super().__init__(message, path=path)
        self.details: str | None = details


class InvalidCommitIdError(RepositoryError):
    """Raised when a commit id is malformed, ambiguous, or unknown.

    Attributes:
        commit_id: The commit id as supplied by the caller.
    """

    kind = ErrorKind.INVALID_COMMIT_ID

    def __init__(
        self,
        message: str,
        *,
        commit_id: str,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and commit context."""
        super().__init__(message, cause=cause)
        self.commit_id: str = commit_id


class PathNotFoundError(RepositoryError):
    """Raised when a path has no entry in a commit's tree.

    Attributes:
        commit_id: The commit that was searched.
    """

    kind = ErrorKind.PATH_NOT_FOUND

    def __init__(self, message: str, *, path: Path, commit_id: str) -> None:
        """Initialize with error message, path and commit context."""
        super().__init__(message, path=path)
        self.commit_id: str = commit_id


class RestoreWriteError(RepositoryError):
    """Raised when a restored version cannot be written to disk."""

    kind = ErrorKind.WRITE_FAILURE


# =============================================================================
# Sync Exceptions
# =============================================================================


class SyncError(DocVaultError):
    """Base exception for remote and transport errors.

    Attributes:
        url: The remote URL involved, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and remote context.

        Args:
            message: Human-readable error message.
            url: The remote URL involved, if known.
            cause: The underlying exception, if any.
        """
        super().__init__(message, cause=cause)
        self.url: str | None = url


class RemoteNotFoundError(SyncError):
    """Raised when no remote is configured for a push."""

    kind = ErrorKind.REMOTE_NOT_FOUND


class InvalidUrlSchemeError(SyncError):
    """Raised when a remote URL is not usable with key-based SSH transport."""

    kind = ErrorKind.INVALID_URL_SCHEME


class AuthenticationError(SyncError):
    """Raised when no credential can be produced or the remote rejects it.

    Attributes:
        reasons: Why each credential provider declined, in resolution order.
    """

    kind = ErrorKind.AUTH_FAILURE

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        reasons: tuple[str, ...] = (),
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and credential context."""
        super().__init__(message, url=url, cause=cause)
        self.reasons: tuple[str, ...] = reasons


class TransferError(SyncError):
    """Raised when the transport fails for reasons other than authentication."""

    kind = ErrorKind.TRANSFER_FAILURE


class KeyGenerationError(DocVaultError):
    """Raised when an SSH key pair cannot be generated or read back.

    Attributes:
        key_path: The private key path that was being generated.
    """

    kind = ErrorKind.KEY_GENERATION_FAILURE

    def __init__(
        self,
        message: str,
        *,
        key_path: Path | None = None,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize with error message and key context."""
        super().__init__(message, cause=cause)
        self.key_path: Path | None = key_path
