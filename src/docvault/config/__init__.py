"""DocVault configuration.

Configuration is read from TOML files and ``DOCVAULT_*`` environment
variables, merged over built-in defaults, and validated into frozen Pydantic
models.

Example:
    >>> from docvault.config import Config
    >>> config = Config.load()
    >>> config.repository_path
"""

from docvault.config._defaults import DEFAULT_CONFIG
from docvault.config._load import STRICT_CONFIG_ENV, safe_load_config
from docvault.config._loader import (
    ENV_PREFIX,
    merge_sections,
    parse_env_vars,
    read_toml_file,
)
from docvault.config._models import (
    APP_NAME,
    Config,
    ConfigSource,
    ConfigSourceName,
    HistoryConfig,
    IdentityConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    RepositoryConfig,
    StorageConfig,
    SyncConfig,
    get_user_config_path,
)

__all__ = [
    "APP_NAME",
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "STRICT_CONFIG_ENV",
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "HistoryConfig",
    "IdentityConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "RepositoryConfig",
    "StorageConfig",
    "SyncConfig",
    "get_user_config_path",
    "merge_sections",
    "parse_env_vars",
    "read_toml_file",
    "safe_load_config",
]
