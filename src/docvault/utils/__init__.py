"""Utility functions for DocVault."""

from ._logging import (
    DEBUG_ENV,
    LOG_LEVEL_ENV,
    LogFormatType,
    create_cli_logger,
    create_logger,
    log_level_from_string,
)

__all__ = [
    "DEBUG_ENV",
    "LOG_LEVEL_ENV",
    "LogFormatType",
    "create_cli_logger",
    "create_logger",
    "log_level_from_string",
]
