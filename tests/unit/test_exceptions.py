"""Unit tests for the DocVault error taxonomy."""

from pathlib import Path

import pytest

from docvault.exceptions import (
    AuthenticationError,
    CommitError,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    DirectoryNotFoundError,
    DocVaultError,
    ErrorKind,
    InvalidCommitIdError,
    InvalidUrlSchemeError,
    KeyGenerationError,
    PathNotFoundError,
    RemoteNotFoundError,
    RepositoryBusyError,
    RepositoryConflictError,
    RepositoryError,
    RepositoryNotInitializedError,
    RepositoryOpenError,
    RepositoryPathViolationError,
    RestoreWriteError,
    StagingError,
    SyncError,
    TransferError,
)


class TestErrorKinds:
    @pytest.mark.parametrize(
        ("error_cls", "kind"),
        [
            (RepositoryNotInitializedError, ErrorKind.NOT_INITIALIZED),
            (DirectoryNotFoundError, ErrorKind.NOT_FOUND),
            (RepositoryOpenError, ErrorKind.OPEN_FAILURE),
            (RepositoryBusyError, ErrorKind.BUSY),
            (StagingError, ErrorKind.STAGING_FAILURE),
            (CommitError, ErrorKind.COMMIT_FAILURE),
            (RestoreWriteError, ErrorKind.WRITE_FAILURE),
            (RemoteNotFoundError, ErrorKind.REMOTE_NOT_FOUND),
            (InvalidUrlSchemeError, ErrorKind.INVALID_URL_SCHEME),
            (AuthenticationError, ErrorKind.AUTH_FAILURE),
            (TransferError, ErrorKind.TRANSFER_FAILURE),
        ],
    )
    def test_kind_is_shared_by_subclass(
        self, error_cls: type[DocVaultError], kind: ErrorKind
    ) -> None:
        error = error_cls("boom")
        assert error.kind is kind
        assert str(error) == "boom"

    def test_invalid_commit_id_kind(self) -> None:
        error = InvalidCommitIdError("bad", commit_id="zz")
        assert error.kind is ErrorKind.INVALID_COMMIT_ID
        assert error.commit_id == "zz"

    def test_path_not_found_kind(self) -> None:
        error = PathNotFoundError("missing", path=Path("a.json"), commit_id="abcd")
        assert error.kind is ErrorKind.PATH_NOT_FOUND
        assert error.path == Path("a.json")
        assert error.commit_id == "abcd"

    def test_key_generation_kind(self) -> None:
        error = KeyGenerationError("failed", key_path=Path("id_ed25519"))
        assert error.kind is ErrorKind.KEY_GENERATION_FAILURE
        assert error.key_path == Path("id_ed25519")

    def test_config_errors_share_kind(self) -> None:
        load = ConfigLoadError("bad toml", path=Path("c.toml"), line=3, column=1)
        invalid = ConfigValidationError(
            "bad value", key="sync.key_type", value="dsa", expected="literal_error"
        )
        assert load.kind is ErrorKind.CONFIG
        assert invalid.kind is ErrorKind.CONFIG
        assert load.line == 3
        assert invalid.key == "sync.key_type"


class TestErrorHierarchy:
    def test_all_errors_are_docvault_errors(self) -> None:
        for error_cls in (ConfigError, RepositoryError, SyncError, KeyGenerationError):
            assert issubclass(error_cls, DocVaultError)

    def test_path_violation_is_staging_error(self) -> None:
        error = RepositoryPathViolationError(
            "outside", path=Path("/etc/passwd"), root=Path("/vault")
        )
        assert isinstance(error, StagingError)
        assert error.kind is ErrorKind.STAGING_FAILURE
        assert error.root == Path("/vault")

    def test_conflict_is_commit_error(self) -> None:
        error = RepositoryConflictError("moved", details="Commit SHA: abc")
        assert isinstance(error, CommitError)
        assert error.details == "Commit SHA: abc"

    def test_cause_is_preserved(self) -> None:
        cause = OSError("disk full")
        error = RestoreWriteError("write failed", path=Path("x"), cause=cause)
        assert error.cause is cause

    def test_sync_errors_carry_url(self) -> None:
        error = TransferError("failed", url="git@example.com:docs.git")
        assert error.url == "git@example.com:docs.git"

    def test_authentication_error_reasons(self) -> None:
        error = AuthenticationError(
            "no credential", reasons=("key_file: no key", "agent: not set")
        )
        assert error.reasons == ("key_file: no key", "agent: not set")
