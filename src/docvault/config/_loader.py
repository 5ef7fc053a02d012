# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""TOML configuration file loading and merging.

DocVault configuration is a single level of tables (``[sync]``,
``[logging]`` and so on) whose values are scalars, so merging works table by
table and environment variables name exactly one table and one key.
"""

from __future__ import annotations

import os
import tomllib
from typing import TYPE_CHECKING, Any

from docvault.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

ENV_PREFIX = "DOCVAULT_"

# Variables under the prefix that control loading rather than config values
_RESERVED_ENV_KEYS = frozenset({"STRICT_CONFIG", "DEBUG", "LOG_LEVEL"})


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file: {e}"
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def merge_sections(
    base: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
    override: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Merge ``override`` over ``base`` one table at a time.

    Keys of a table present in both are taken from ``override``; keys only
    in ``base`` are kept. A non-table value on either side replaces the other
    outright. Neither input is modified.
    """
    result = {name: _copy_section(value) for name, value in base.items()}
    for name, value in override.items():
        current = result.get(name)
        if isinstance(current, dict) and isinstance(value, dict):
            result[name] = {**current, **value}
        else:
            result[name] = _copy_section(value)
    return result


def _copy_section(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    return dict(value) if isinstance(value, dict) else value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> dict[str, dict[str, str]]:
    """Collect ``{prefix}{SECTION}__{KEY}`` environment variables.

    ``DOCVAULT_SYNC__KEY_TYPE=rsa`` becomes ``{"sync": {"key_type": "rsa"}}``.
    Values stay strings; model validation converts them to the field types.
    Variables without a ``__`` separator are ignored, as are the reserved
    ``DOCVAULT_DEBUG``, ``DOCVAULT_LOG_LEVEL`` and ``DOCVAULT_STRICT_CONFIG``.

    Args:
        prefix: Environment variable prefix.
        environ: Environment to read. Defaults to ``os.environ``.

    Returns:
        Config values grouped by section.
    """
    result: dict[str, dict[str, str]] = {}
    source = os.environ if environ is None else environ

    for name, value in source.items():
        if not name.startswith(prefix):
            continue

        config_key = name[len(prefix) :]
        if config_key in _RESERVED_ENV_KEYS:
            continue

        section, sep, key = config_key.partition("__")
        if not (section and sep and key):
            continue

        result.setdefault(section.lower(), {})[key.lower()] = value

    return result
