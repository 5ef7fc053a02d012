# pyright: reportExplicitAny=false, reportAny=false
"""Configuration models.

Each TOML section maps to a frozen Pydantic model. The Config container holds
the validated sections together with the sources that produced them.
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, ClassVar, Literal, Self

import platformdirs
import tomli_w
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from docvault.config._defaults import DEFAULT_CONFIG
from docvault.config._loader import merge_sections, parse_env_vars, read_toml_file
from docvault.exceptions import ConfigValidationError
from docvault.repository import PathMatch

APP_NAME = "docvault"


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class ConfigSourceName(StrEnum):
    """Configuration source names in precedence order.

    Values are ordered from highest precedence (CLI) to lowest (DEFAULT).
    """

    CLI = "cli"
    ENV = "env"
    FILE = "file"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """Represents a configuration source.

    Attributes:
        name: The source type identifier.
        path: Path to the config file, or None for non-file sources.
        exists: Whether the source exists (file exists, or values are present).
        values: Configuration values from this source.
    """

    name: ConfigSourceName
    path: Path | None
    exists: bool
    values: dict[str, Any]


_SECTION_CONFIG = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty means ``<storage.root>/logs/docvault.log``).
        max_bytes: Rotate the log file past this size (0 disables rotation).
        backup_count: Rotated log files kept when rotation is enabled.
    """

    model_config: ClassVar[ConfigDict] = _SECTION_CONFIG

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""
    max_bytes: int = Field(default=0, ge=0)
    backup_count: int = Field(default=0, ge=0)


class StorageConfig(BaseModel):
    """Where managed documents live.

    Attributes:
        root: Application data directory (empty means the platform default).
        directory: Managed directory name under the root.
    """

    model_config: ClassVar[ConfigDict] = _SECTION_CONFIG

    root: str = ""
    directory: str = Field(default="documents", min_length=1)

    def resolved_root(self) -> Path:
        if self.root:
            return Path(self.root).expanduser()
        return platformdirs.user_data_path(APP_NAME)


class IdentityConfig(BaseModel):
    """Fixed author and committer identity."""

    model_config: ClassVar[ConfigDict] = _SECTION_CONFIG

    name: str = Field(default="DocVault", min_length=1)
    email: str = Field(default="docvault@localhost", min_length=1)


class HistoryConfig(BaseModel):
    """History and restore path matching."""

    model_config: ClassVar[ConfigDict] = _SECTION_CONFIG

    path_match: PathMatch = PathMatch.RELATIVE


class SyncConfig(BaseModel):
    """SSH sync settings.

    Attributes:
        remote_name: Remote pushed to.
        branch: Branch pushed.
        default_username: SSH user when neither URL nor caller supplies one.
        key_directory: Directory under the managed root for generated keys.
        key_type: ssh-keygen key type.
        ssh_command: Base ssh command.
        strict_host_key_checking: ssh StrictHostKeyChecking policy.
    """

    model_config: ClassVar[ConfigDict] = _SECTION_CONFIG

    remote_name: str = Field(default="origin", min_length=1)
    branch: str = Field(default="main", min_length=1)
    default_username: str = Field(default="git", min_length=1)
    key_directory: str = Field(default=".ssh", min_length=1)
    key_type: Literal["ed25519", "ecdsa", "rsa"] = "ed25519"
    ssh_command: str = Field(default="ssh", min_length=1)
    strict_host_key_checking: Literal["yes", "no", "accept-new"] = "accept-new"


class RepositoryConfig(BaseModel):
    """Repository lock settings.

    Attributes:
        lock_timeout: Seconds to wait for the repository lock. Zero or less
            waits indefinitely.
    """

    model_config: ClassVar[ConfigDict] = _SECTION_CONFIG

    lock_timeout: float = 30.0

    @property
    def effective_timeout(self) -> float | None:
        return self.lock_timeout if self.lock_timeout > 0 else None


class Config(BaseModel):
    """Configuration container with typed access.

    Use factory methods to create instances rather than the constructor.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)

    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, source: str | None = None) -> Self:
        """Create configuration from a dictionary.

        Args:
            data: Dictionary of configuration values, merged over defaults.
            source: Name of the source, for error messages.

        Returns:
            Configuration object from the dictionary.

        Raises:
            ConfigValidationError: If validation fails.
        """
        merged = merge_sections(DEFAULT_CONFIG, data)
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            first = e.errors()[0]
            key = ".".join(str(part) for part in first["loc"])
            msg = f"Invalid configuration value for {key}: {first['msg']}"
            raise ConfigValidationError(
                msg,
                key=key,
                value=first.get("input"),
                expected=first["type"],
                source=source,
            ) from e

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        config = cls.from_dict(data, source=str(path))
        config._sources = (
            ConfigSource(
                name=ConfigSourceName.FILE, path=path, exists=True, values=data
            ),
        )
        return config

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Merges in precedence order: defaults, then the explicit file (or the
        user file when no explicit file is given), then environment
        variables, then CLI overrides.

        Args:
            config_path: Explicit config file. It must exist.
            include_env: Include ``DOCVAULT_*`` environment variables.
            cli_overrides: Values from command-line options.

        Returns:
            Merged configuration object.

        Raises:
            FileNotFoundError: If ``config_path`` does not exist.
            ConfigLoadError: If a config file cannot be parsed.
            ConfigValidationError: If the merged config fails validation.
        """
        sources: list[ConfigSource] = [
            ConfigSource(
                name=ConfigSourceName.DEFAULT,
                path=None,
                exists=True,
                values=merge_sections({}, DEFAULT_CONFIG),
            )
        ]

        if config_path is not None:
            sources.append(
                ConfigSource(
                    name=ConfigSourceName.FILE,
                    path=config_path,
                    exists=True,
                    values=read_toml_file(config_path),
                )
            )
        else:
            user_path = get_user_config_path()
            exists = user_path.is_file()
            sources.append(
                ConfigSource(
                    name=ConfigSourceName.USER,
                    path=user_path,
                    exists=exists,
                    values=read_toml_file(user_path) if exists else {},
                )
            )

        if include_env:
            env_values = parse_env_vars()
            sources.append(
                ConfigSource(
                    name=ConfigSourceName.ENV,
                    path=None,
                    exists=bool(env_values),
                    values=env_values,
                )
            )

        if cli_overrides:
            sources.append(
                ConfigSource(
                    name=ConfigSourceName.CLI,
                    path=None,
                    exists=True,
                    values=cli_overrides,
                )
            )

        merged: dict[str, Any] = {}
        for source in sources:
            if source.values:
                merged = merge_sections(merged, source.values)

        config = cls.from_dict(merged)
        # Highest precedence first
        config._sources = tuple(reversed(sources))
        return config

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration."""
        return list(self._sources)

    @property
    def repository_path(self) -> Path:
        """The managed directory: ``<storage.root>/<storage.directory>``."""
        return self.storage.resolved_root() / self.storage.directory

    @property
    def log_path(self) -> Path:
        """The log file: ``logging.file`` or ``<storage.root>/logs/docvault.log``."""
        if self.logging.file:
            return Path(self.logging.file).expanduser()
        return self.storage.resolved_root() / "logs" / f"{APP_NAME}.log"

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Examples:
            >>> config.get("sync.branch")
            'main'
            >>> config.get("nonexistent", "fallback")
            'fallback'
        """
        current: Any = self.to_dict()
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    def to_toml(self) -> str:
        """Render the effective configuration as TOML."""
        return tomli_w.dumps(self.to_dict())


def get_user_config_path() -> Path:
    r"""Get platform-specific user config file path.

    - Linux: ``~/.config/docvault/config.toml``
    - macOS: ``~/Library/Application Support/docvault/config.toml``
    - Windows: ``%APPDATA%\docvault\config.toml``

    Returns:
        Path to the user config file, whether or not it exists.
    """
    return platformdirs.user_config_path(APP_NAME) / "config.toml"
