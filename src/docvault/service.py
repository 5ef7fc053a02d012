"""Service facade for the document vault.

VaultService resolves the managed directory from configuration, wires the
repository and sync layers together, and binds a structured logger. It is
the entry point used by the CLI and by embedding applications.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from docvault.config import Config
from docvault.exceptions import DirectoryNotFoundError
from docvault.repository import (
    DocumentRepository,
    Identity,
    initialize_repository,
)
from docvault.sync import (
    CredentialResolver,
    SshSettings,
    generate_key_pair,
    probe_connection,
    push,
)
from docvault.utils import create_logger, log_level_from_string

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from docvault.repository import (
        CommitResult,
        HistoryEntry,
        InitResult,
        RemoteInfo,
        RestoreResult,
    )
    from docvault.sync import KeyPair, PushResult


class VaultService:
    """Version control and sync operations for one managed directory.

    Every operation opens the repository, runs, and closes it again, so a
    service instance holds no repository state between calls.

    Example:
        service = VaultService(Config.load())
        service.init_repository()
        service.commit_all("Save board")
        for entry in service.file_history("board.json"):
            print(entry.commit_id, entry.message)
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        logger: FilteringBoundLogger | None = None,
        resolver: CredentialResolver | None = None,
    ) -> None:
        self._config: Config = config if config is not None else Config.from_dict({})
        self._logger: FilteringBoundLogger = logger or create_logger(
            self._config.log_path,
            log_level=log_level_from_string(
                self._config.logging.level.value, respect_env=True
            ),
            log_format=self._config.logging.format.value,
            max_bytes=self._config.logging.max_bytes,
            backup_count=self._config.logging.backup_count,
        )
        self._resolver: CredentialResolver = resolver or CredentialResolver()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def root(self) -> Path:
        """The managed directory."""
        return self._config.repository_path

    # =========================================================================
    # Repository Operations
    # =========================================================================

    def init_repository(self) -> InitResult:
        """Create repository metadata in the managed directory (idempotent).

        Raises:
            DirectoryNotFoundError: If the managed directory does not exist.
            RepositoryOpenError: If the repository cannot be created.
        """
        result = initialize_repository(self.root, branch=self._config.sync.branch)
        self._logger.info(
            "repository_initialized", path=str(result.path), created=result.created
        )
        return result

    def commit_all(self, message: str) -> CommitResult:
        """Stage every change in the managed directory and commit it."""
        with self._open() as repo:
            return repo.commit_all(message)

    def commit_path(self, path: str | Path, message: str) -> CommitResult:
        """Stage one file and commit it."""
        with self._open() as repo:
            return repo.commit_path(Path(path), message)

    def file_history(self, path: str | Path) -> list[HistoryEntry]:
        """List the commits that changed a file, newest first."""
        with self._open() as repo:
            return repo.file_history(Path(path))

    def restore(self, path: str | Path, commit_id: str) -> RestoreResult:
        """Overwrite a file with its content at a commit."""
        with self._open() as repo:
            return repo.restore(Path(path), commit_id)

    def set_remote(self, url: str) -> RemoteInfo:
        """Create or update the sync remote."""
        with self._open() as repo:
            return repo.set_remote(url, name=self._config.sync.remote_name)

    def get_remote(self) -> RemoteInfo | None:
        """Return the sync remote, or None if it is not configured."""
        with self._open() as repo:
            return repo.get_remote(self._config.sync.remote_name)

    # =========================================================================
    # Sync Operations
    # =========================================================================

    def push(self, ssh_key_path: str | Path | None = None) -> PushResult:
        """Push the primary branch to the sync remote.

        Args:
            ssh_key_path: Private key file. The SSH agent is used when omitted.
        """
        with self._open() as repo:
            return push(
                repo,
                logger=self._logger,
                key_path=Path(ssh_key_path) if ssh_key_path is not None else None,
                settings=self._ssh_settings(),
                resolver=self._resolver,
            )

    def test_connection(
        self,
        url: str,
        username: str | None = None,
        committer_email: str | None = None,
        ssh_key_path: str | Path | None = None,
    ) -> bool:
        """Check that a remote is reachable with the available credential.

        Returns:
            True on success. Every failure raises a typed error.
        """
        logger = self._logger.bind(committer_email=committer_email)
        return probe_connection(
            url,
            logger=logger,
            username=username,
            key_path=Path(ssh_key_path) if ssh_key_path is not None else None,
            settings=self._ssh_settings(),
            resolver=self._resolver,
        )

    def generate_key_pair(
        self, committer_email: str, *, overwrite: bool = False
    ) -> KeyPair:
        """Generate an SSH key pair inside the managed directory.

        Raises:
            DirectoryNotFoundError: If the managed directory does not exist.
            KeyGenerationError: If generation fails or a key already exists.
        """
        root = self.root
        if not root.is_dir():
            msg = f"Directory does not exist: {root}"
            raise DirectoryNotFoundError(msg, path=root)

        key_pair = generate_key_pair(
            root,
            committer_email,
            key_directory=self._config.sync.key_directory,
            key_type=self._config.sync.key_type,
            overwrite=overwrite,
        )
        self._logger.info(
            "key_pair_generated",
            path=str(key_pair.private_key_path),
            key_type=self._config.sync.key_type,
        )
        return key_pair

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _open(self) -> DocumentRepository:
        identity = self._config.identity
        return DocumentRepository(
            self.root,
            identity=Identity(name=identity.name, email=identity.email),
            path_match=self._config.history.path_match,
            excluded_dirs=(self._config.sync.key_directory,),
            lock_timeout=self._config.repository.effective_timeout,
            logger=self._logger,
        )

    def _ssh_settings(self) -> SshSettings:
        sync = self._config.sync
        return SshSettings(
            remote_name=sync.remote_name,
            branch=sync.branch,
            default_username=sync.default_username,
            ssh_command=sync.ssh_command,
            strict_host_key_checking=sync.strict_host_key_checking,
        )
