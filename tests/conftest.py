"""Shared test fixtures for DocVault tests."""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from rich.console import Console

from docvault.cli import CLIContext
from docvault.config import Config
from docvault.repository import DocumentRepository, initialize_repository
from docvault.service import VaultService


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Keep the developer's config, environment and SSH agent out of tests."""
    for key in list(os.environ):
        if key.startswith("DOCVAULT_"):
            monkeypatch.delenv(key)
    monkeypatch.delenv("SSH_AUTH_SOCK", raising=False)
    monkeypatch.setattr(
        "docvault.config._models.get_user_config_path",
        lambda: tmp_path / "user-config" / "config.toml",
    )
    yield
    CLIContext.reset()


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Application data directory (storage.root)."""
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def documents_dir(vault_root: Path) -> Path:
    """Managed directory, not yet initialized."""
    documents = vault_root / "documents"
    documents.mkdir()
    return documents


@pytest.fixture
def repo_dir(documents_dir: Path) -> Path:
    """Managed directory with repository metadata."""
    _ = initialize_repository(documents_dir)
    return documents_dir.resolve()


@pytest.fixture
def repository(repo_dir: Path) -> Iterator[DocumentRepository]:
    with DocumentRepository(repo_dir, lock_timeout=5.0) as repo:
        yield repo


@pytest.fixture
def config(vault_root: Path) -> Config:
    return Config.from_dict({"storage": {"root": str(vault_root)}})


@pytest.fixture
def service(config: Config, documents_dir: Path) -> VaultService:
    return VaultService(config)
