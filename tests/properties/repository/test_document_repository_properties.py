"""Property-based tests for DocumentRepository invariants.

- Restore round trip: restoring a commit reproduces the committed bytes
- History ordering: entries are newest first and only touch the file
- Scope: paths that escape the managed directory are always rejected
- Remote upsert: repeated set_remote leaves exactly one remote section
- Stateful testing: edit/commit/restore sequences keep history consistent
"""

import tempfile
from pathlib import Path

import pytest
from hypothesis import assume, given, settings, strategies as st
from hypothesis.stateful import (
    RuleBasedStateMachine,
    initialize,
    invariant,
    precondition,
    rule,
)

from docvault.exceptions import RepositoryPathViolationError
from docvault.repository import DocumentRepository, initialize_repository

# =============================================================================
# Strategies
# =============================================================================

# Lowercase only to avoid case-insensitive filesystems folding names together
_SAFE_FILENAME_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789-_"

safe_filename = st.text(
    alphabet=_SAFE_FILENAME_ALPHABET, min_size=1, max_size=30
).map(lambda name: f"{name}.json")

_SAFE_CONTENT_ALPHABET = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    " \n\t.,!?-_:;()[]{}'\""
)
safe_content = st.text(alphabet=_SAFE_CONTENT_ALPHABET, min_size=0, max_size=200)

version_contents = st.lists(safe_content, min_size=1, max_size=5)

traversal_patterns = st.sampled_from(
    ["../", "../../", "a/../../", "./../", "sub/../../../"]
)

ssh_urls = st.builds(
    "git@{}.example.com:team/{}.git".format,
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8),
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8),
)


# =============================================================================
# Fixture Helpers
# =============================================================================


def create_repository() -> tuple[DocumentRepository, tempfile.TemporaryDirectory[str]]:
    """Create a fresh repository in a temporary directory.

    Returns:
        Tuple of (DocumentRepository, TemporaryDirectory). The
        TemporaryDirectory must be kept alive for cleanup.
    """
    tmpdir = tempfile.TemporaryDirectory()
    root = Path(tmpdir.name) / "documents"
    root.mkdir()
    _ = initialize_repository(root)
    return DocumentRepository(root, lock_timeout=5.0), tmpdir


# =============================================================================
# Restore Properties
# =============================================================================


class TestRestoreProperties:
    @given(filename=safe_filename, versions=version_contents)
    @settings(max_examples=30, deadline=None)
    def test_restore_reproduces_every_version(
        self, filename: str, versions: list[str]
    ) -> None:
        """Property: restoring any commit yields the bytes committed there."""
        repo, tmpdir = create_repository()
        try:
            path = repo.root / filename
            shas: list[str] = []
            for content in versions:
                _ = path.write_bytes(content.encode())
                shas.append(repo.commit_all("save").sha)

            for sha, content in zip(shas, versions, strict=True):
                result = repo.restore(Path(filename), sha)
                assert path.read_bytes() == content.encode()
                assert result.size == len(content.encode())
        finally:
            repo.close()
            tmpdir.cleanup()

    @given(filename=safe_filename, content=safe_content, length=st.integers(4, 40))
    @settings(max_examples=30, deadline=None)
    def test_any_unique_prefix_resolves(
        self, filename: str, content: str, length: int
    ) -> None:
        """Property: a prefix of at least four characters resolves the commit."""
        repo, tmpdir = create_repository()
        try:
            _ = (repo.root / filename).write_text(content)
            sha = repo.commit_all("save").sha

            assert repo.restore(Path(filename), sha[:length]).commit_id == sha
        finally:
            repo.close()
            tmpdir.cleanup()


# =============================================================================
# History Properties
# =============================================================================


class TestHistoryProperties:
    @given(
        filename=safe_filename,
        other=safe_filename,
        edits=st.lists(st.booleans(), min_size=1, max_size=6),
    )
    @settings(max_examples=30, deadline=None)
    def test_history_lists_only_changing_commits(
        self, filename: str, other: str, edits: list[bool]
    ) -> None:
        """Property: history holds exactly the commits that changed the file."""
        assume(filename != other)
        repo, tmpdir = create_repository()
        try:
            expected: list[str] = []
            for index, touch_target in enumerate(edits):
                name = filename if touch_target else other
                _ = (repo.root / name).write_text(f"version {index}")
                sha = repo.commit_all(f"edit {index}").sha
                if touch_target:
                    expected.append(sha)

            history = repo.file_history(Path(filename))

            assert [entry.commit_id for entry in history] == expected[::-1]
            timestamps = [entry.timestamp for entry in history]
            assert timestamps == sorted(timestamps, reverse=True)
        finally:
            repo.close()
            tmpdir.cleanup()


# =============================================================================
# Scope Properties
# =============================================================================


class TestScopeProperties:
    @given(attack=traversal_patterns, suffix=safe_filename)
    @settings(max_examples=30, deadline=None)
    def test_traversal_always_rejected(self, attack: str, suffix: str) -> None:
        """Property: paths that climb out of the root are never staged."""
        repo, tmpdir = create_repository()
        try:
            with pytest.raises(RepositoryPathViolationError):
                _ = repo.stage_path(Path(attack + suffix))
        finally:
            repo.close()
            tmpdir.cleanup()

    @given(suffix=safe_filename)
    @settings(max_examples=30, deadline=None)
    def test_metadata_always_rejected(self, suffix: str) -> None:
        """Property: paths inside .git are never staged."""
        repo, tmpdir = create_repository()
        try:
            with pytest.raises(RepositoryPathViolationError):
                _ = repo.stage_path(Path(".git") / suffix)
        finally:
            repo.close()
            tmpdir.cleanup()


# =============================================================================
# Remote Properties
# =============================================================================


class TestRemoteProperties:
    @given(urls=st.lists(ssh_urls, min_size=1, max_size=5))
    @settings(max_examples=30, deadline=None)
    def test_last_url_wins(self, urls: list[str]) -> None:
        """Property: after any sequence of set_remote, one origin holds the last URL."""
        repo, tmpdir = create_repository()
        try:
            for url in urls:
                _ = repo.set_remote(url)

            remote = repo.get_remote("origin")
            assert remote is not None
            assert remote.url == urls[-1]
            config_text = (repo.root / ".git" / "config").read_text()
            assert config_text.count('[remote "origin"]') == 1
        finally:
            repo.close()
            tmpdir.cleanup()


# =============================================================================
# Stateful Machine Test
# =============================================================================


class DocumentRepositoryStateMachine(RuleBasedStateMachine):
    """Edit, commit and restore sequences keep history consistent."""

    def __init__(self) -> None:
        super().__init__()
        self._repo: DocumentRepository | None = None
        self._tmpdir: tempfile.TemporaryDirectory[str] | None = None
        # commit sha -> file name -> content at that commit
        self._snapshots: dict[str, dict[str, str]] = {}
        self._working: dict[str, str] = {}

    @initialize()
    def init_repo(self) -> None:
        self._repo, self._tmpdir = create_repository()
        self._snapshots = {}
        self._working = {}

    def teardown(self) -> None:
        if self._repo is not None:
            self._repo.close()
        if self._tmpdir is not None:
            self._tmpdir.cleanup()

    @rule(
        filename=st.sampled_from(["board.json", "notes.json", "tasks.json"]),
        content=safe_content,
    )
    def write_file(self, filename: str, content: str) -> None:
        assert self._repo is not None
        _ = (self._repo.root / filename).write_text(content)
        self._working[filename] = content

    @rule()
    def commit(self) -> None:
        assert self._repo is not None
        result = self._repo.commit_all("save")
        self._snapshots[result.sha] = dict(self._working)

    @rule(data=st.data())
    @precondition(lambda self: any(self._snapshots.values()))
    def restore(self, data: st.DataObject) -> None:
        assert self._repo is not None
        candidates = sorted(sha for sha, files in self._snapshots.items() if files)
        sha = data.draw(st.sampled_from(candidates))
        files = self._snapshots[sha]
        filename = data.draw(st.sampled_from(sorted(files)))

        _ = self._repo.restore(Path(filename), sha)

        self._working[filename] = files[filename]
        assert (self._repo.root / filename).read_text() == files[filename]

    @invariant()
    def history_commits_are_known(self) -> None:
        if self._repo is None:
            return
        for filename in self._working:
            for entry in self._repo.file_history(Path(filename)):
                assert entry.commit_id in self._snapshots

    @invariant()
    def head_matches_last_commit(self) -> None:
        if self._repo is None or not self._snapshots:
            return
        head = self._repo.head
        assert head in self._snapshots


TestDocumentRepositoryStateMachine = DocumentRepositoryStateMachine.TestCase
TestDocumentRepositoryStateMachine.settings = settings(
    max_examples=20,
    stateful_step_count=10,
    deadline=None,
)
