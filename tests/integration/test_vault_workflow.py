"""End-to-end workflows through VaultService against real repositories."""

import shutil
from pathlib import Path

import pytest

from docvault.config import Config
from docvault.exceptions import InvalidCommitIdError, KeyGenerationError
from docvault.service import VaultService

from tests.integration.conftest import requires_git, run_git

requires_ssh_keygen = pytest.mark.skipif(
    shutil.which("ssh-keygen") is None, reason="ssh-keygen not available"
)


@pytest.fixture
def initialized(service: VaultService) -> VaultService:
    _ = service.init_repository()
    return service


class TestEditRestoreCycle:
    def test_board_versions(self, initialized: VaultService) -> None:
        board = initialized.root / "board.json"
        _ = board.write_text('{"cards": []}')
        v1 = initialized.commit_all("Create board")
        _ = board.write_text('{"cards": ["todo"]}')
        v2 = initialized.commit_all("Add card")

        history = initialized.file_history("board.json")
        assert [entry.commit_id for entry in history] == [v2.sha, v1.sha]

        restored = initialized.restore("board.json", v1.sha[:7])

        assert restored.size == len('{"cards": []}')
        assert board.read_text() == '{"cards": []}'
        # restore does not commit
        assert len(initialized.file_history("board.json")) == 2

    def test_deleted_file_can_be_restored(self, initialized: VaultService) -> None:
        notes = initialized.root / "notes.md"
        _ = notes.write_text("# Notes")
        first = initialized.commit_all("Add notes")
        notes.unlink()
        _ = initialized.commit_all("Remove notes")

        _ = initialized.restore("notes.md", first.sha)

        assert notes.read_text() == "# Notes"
        assert len(initialized.file_history("notes.md")) == 2

    def test_nested_directories(self, initialized: VaultService) -> None:
        nested = initialized.root / "boards" / "2026"
        nested.mkdir(parents=True)
        _ = (nested / "q3.json").write_text("{}")
        commit = initialized.commit_all("Nested board")

        (entry,) = initialized.file_history("boards/2026/q3.json")

        assert entry.commit_id == commit.sha

    def test_commit_without_changes(self, initialized: VaultService) -> None:
        _ = (initialized.root / "board.json").write_text("{}")
        first = initialized.commit_all("First")

        second = initialized.commit_all("Again")

        assert second.sha != first.sha
        assert second.parent_sha == first.sha
        assert len(initialized.file_history("board.json")) == 1

    def test_unknown_abbreviation(self, initialized: VaultService) -> None:
        _ = (initialized.root / "board.json").write_text("{}")
        commit = initialized.commit_all("Save")
        prefix = "0000" if not commit.sha.startswith("0000") else "ffff"

        with pytest.raises(InvalidCommitIdError):
            _ = initialized.restore("board.json", prefix)


@requires_git
class TestGitCompatibility:
    def test_git_reads_history(self, initialized: VaultService) -> None:
        _ = (initialized.root / "board.json").write_text("{}")
        first = initialized.commit_all("First")
        _ = (initialized.root / "board.json").write_text('{"a": 1}')
        second = initialized.commit_all("Second")

        log = run_git(initialized.root, "log", "--format=%H").split()

        assert log == [second.sha, first.sha]

    def test_repository_passes_fsck(self, initialized: VaultService) -> None:
        _ = (initialized.root / "board.json").write_text("{}")
        _ = initialized.commit_all("First")
        _ = initialized.set_remote("git@github.com:team/docs.git")

        _ = run_git(initialized.root, "fsck", "--strict")

        url = run_git(initialized.root, "config", "--get", "remote.origin.url")
        assert url.strip() == "git@github.com:team/docs.git"

    def test_working_tree_clean_after_commit(self, initialized: VaultService) -> None:
        _ = (initialized.root / "board.json").write_text("{}")
        _ = (initialized.root / "notes.md").write_text("# Notes")
        _ = initialized.commit_all("Save")

        assert run_git(initialized.root, "status", "--porcelain") == ""


@requires_ssh_keygen
class TestKeyGeneration:
    def test_generates_real_key(self, initialized: VaultService) -> None:
        key_pair = initialized.generate_key_pair("alice@example.com")

        assert key_pair.public_key.startswith("ssh-ed25519 ")
        assert key_pair.public_key.endswith("alice@example.com")
        assert key_pair.private_key_path.is_file()

    def test_key_is_not_committed(self, initialized: VaultService) -> None:
        _ = initialized.generate_key_pair("alice@example.com")
        _ = (initialized.root / "board.json").write_text("{}")

        result = initialized.commit_all("Save")

        assert all(".ssh" not in path.parts for path in result.files)

    def test_refuses_existing_key(self, initialized: VaultService) -> None:
        _ = initialized.generate_key_pair("alice@example.com")

        with pytest.raises(KeyGenerationError):
            _ = initialized.generate_key_pair("alice@example.com")


class TestConfiguredService:
    def test_environment_configures_service(
        self, vault_root: Path, documents_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DOCVAULT_STORAGE__ROOT", str(vault_root))
        monkeypatch.setenv("DOCVAULT_IDENTITY__NAME", "Env Author")
        service = VaultService(Config.load())
        _ = service.init_repository()
        _ = (documents_dir / "board.json").write_text("{}")
        _ = service.commit_all("Save")

        (entry,) = service.file_history("board.json")

        assert entry.author == "Env Author"
