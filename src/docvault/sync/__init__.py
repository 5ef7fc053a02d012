"""DocVault remote synchronisation.

This package pushes the primary branch to an SSH remote, probes remotes for
reachability, resolves SSH credentials, and generates key pairs.

Functions:
    push: Send the primary branch to the configured remote.
    probe_connection: Check that a remote accepts the credential.
    generate_key_pair: Create a key pair with ssh-keygen.
    parse_ssh_url: Validate and split an SSH remote URL.

Classes:
    CredentialResolver: Ordered credential providers.
    KeyFileProvider: Explicit private key file.
    AgentProvider: Running SSH agent.
"""

from docvault.sync._credentials import (
    AgentProvider,
    AuthMode,
    CredentialProvider,
    CredentialRequest,
    CredentialResolver,
    CredentialSource,
    KeyFileProvider,
    Skip,
    SshCredential,
)
from docvault.sync._keys import (
    DEFAULT_KEY_DIRECTORY,
    DEFAULT_KEY_TYPE,
    generate_key_pair,
    key_path_for,
)
from docvault.sync._models import KeyPair, PushResult, SshSettings
from docvault.sync._sync import probe_connection, push
from docvault.sync._transport import (
    build_ssh_command,
    open_client,
    translate_transport_error,
)
from docvault.sync._urls import SshTarget, is_ssh_url, parse_ssh_url

__all__ = [
    "DEFAULT_KEY_DIRECTORY",
    "DEFAULT_KEY_TYPE",
    "AgentProvider",
    "AuthMode",
    "CredentialProvider",
    "CredentialRequest",
    "CredentialResolver",
    "CredentialSource",
    "KeyFileProvider",
    "KeyPair",
    "PushResult",
    "Skip",
    "SshCredential",
    "SshSettings",
    "SshTarget",
    "build_ssh_command",
    "generate_key_pair",
    "is_ssh_url",
    "key_path_for",
    "open_client",
    "parse_ssh_url",
    "probe_connection",
    "push",
    "translate_transport_error",
]
