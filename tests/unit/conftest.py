from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import orjson
import pytest

from docvault.utils import create_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "test.log"


@pytest.fixture
def file_logger(log_file: Path) -> "FilteringBoundLogger":
    """JSON logger writing to ``log_file`` at debug level."""
    return create_logger(log_file, log_level=10)


@pytest.fixture
def read_log_events(log_file: Path) -> Callable[[], list[dict[str, object]]]:
    """Return a function that parses every JSON line written to ``log_file``."""

    def _read() -> list[dict[str, object]]:
        if not log_file.exists():
            return []
        return [
            orjson.loads(line)
            for line in log_file.read_text().splitlines()
            if line.strip()
        ]

    return _read
