"""DocVault: version history and SSH sync for local document directories."""

from docvault.exceptions import DocVaultError, ErrorKind
from docvault.service import VaultService

__all__ = ["DocVaultError", "ErrorKind", "VaultService"]
