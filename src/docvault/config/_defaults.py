"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.

An empty ``storage.root`` means the platform user data directory.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
        "max_bytes": 0,
        "backup_count": 0,
    },
    "storage": {
        "root": "",
        "directory": "documents",
    },
    "identity": {
        "name": "DocVault",
        "email": "docvault@localhost",
    },
    "history": {
        "path_match": "relative",
    },
    "sync": {
        "remote_name": "origin",
        "branch": "main",
        "default_username": "git",
        "key_directory": ".ssh",
        "key_type": "ed25519",
        "ssh_command": "ssh",
        "strict_host_key_checking": "accept-new",
    },
    "repository": {
        "lock_timeout": 30.0,
    },
}
