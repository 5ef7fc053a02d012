# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""SSH credential resolution.

Credentials are produced by an ordered list of providers. Each provider either
returns a credential or declines with a reason; the first credential wins and
the collected reasons are reported when every provider declines.
"""

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Protocol, runtime_checkable

from docvault.exceptions import AuthenticationError


class AuthMode(StrEnum):
    """Authentication modes a transport may ask for."""

    SSH_KEY = "ssh_key"
    PASSWORD = "password"  # noqa: S105
    TOKEN = "token"  # noqa: S105


class CredentialSource(StrEnum):
    """Where a credential came from."""

    KEY_FILE = "key_file"
    AGENT = "agent"


@dataclass(frozen=True, slots=True)
class SshCredential:
    """Key-based SSH credential.

    Attributes:
        username: User to authenticate as.
        source: Provider that produced the credential.
        private_key: Private key file, None for agent credentials.
        public_key: Public key file next to the private key, if present.
    """

    username: str
    source: CredentialSource
    private_key: Path | None = None
    public_key: Path | None = None


@dataclass(frozen=True, slots=True)
class Skip:
    """A provider declining to produce a credential.

    Attributes:
        reason: Human-readable explanation.
    """

    reason: str


@dataclass(frozen=True, slots=True)
class CredentialRequest:
    """What a transport needs a credential for.

    Attributes:
        url: Remote URL being contacted.
        username: Effective username (URL user, caller user, or default).
        key_path: Explicit private key path, if one was supplied.
        mode: Requested authentication mode.
    """

    url: str
    username: str
    key_path: Path | None = None
    mode: AuthMode = AuthMode.SSH_KEY


@runtime_checkable
class CredentialProvider(Protocol):
    """Protocol for credential providers."""

    @property
    def name(self) -> str: ...

    def provide(self, request: CredentialRequest) -> SshCredential | Skip: ...


class KeyFileProvider:
    """Provide the explicitly supplied private key file."""

    name = "key_file"

    def provide(self, request: CredentialRequest) -> SshCredential | Skip:
        if request.key_path is None:
            return Skip("no key file supplied")

        private_key = request.key_path.expanduser()
        if not private_key.is_file():
            return Skip(f"key file not found: {private_key}")

        public_key = private_key.with_name(f"{private_key.name}.pub")
        return SshCredential(
            username=request.username,
            source=CredentialSource.KEY_FILE,
            private_key=private_key,
            public_key=public_key if public_key.is_file() else None,
        )


class AgentProvider:
    """Provide whatever keys a running SSH agent holds.

    The agent is located through ``SSH_AUTH_SOCK``; the socket must exist.
    """

    name = "agent"

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ: Mapping[str, str] = os.environ if environ is None else environ

    def provide(self, request: CredentialRequest) -> SshCredential | Skip:
        socket_path = self._environ.get("SSH_AUTH_SOCK", "")
        if not socket_path:
            return Skip("SSH_AUTH_SOCK is not set")
        if not Path(socket_path).exists():
            return Skip(f"agent socket not found: {socket_path}")
        return SshCredential(username=request.username, source=CredentialSource.AGENT)


class CredentialResolver:
    """Resolve a credential by asking providers in order.

    Example:
        resolver = CredentialResolver()
        credential = resolver.resolve(
            CredentialRequest(url=url, username="git", key_path=key)
        )
    """

    def __init__(self, providers: Sequence[CredentialProvider] | None = None) -> None:
        self._providers: tuple[CredentialProvider, ...] = tuple(
            providers if providers is not None else (KeyFileProvider(), AgentProvider())
        )

    @property
    def providers(self) -> tuple[CredentialProvider, ...]:
        return self._providers

    def resolve(self, request: CredentialRequest) -> SshCredential:
        """Return the first credential any provider produces.

        Args:
            request: What the credential is needed for.

        Returns:
            The resolved SshCredential.

        Raises:
            AuthenticationError: If the mode is not key-based SSH, or if every
                provider declined.
        """
        if request.mode is not AuthMode.SSH_KEY:
            msg = (
                f"Unsupported authentication mode {request.mode.value!r}: "
                f"only SSH key authentication is available"
            )
            raise AuthenticationError(msg, url=request.url)

        reasons: list[str] = []
        for provider in self._providers:
            outcome = provider.provide(request)
            if isinstance(outcome, SshCredential):
                return outcome
            reasons.append(f"{provider.name}: {outcome.reason}")

        msg = "No SSH credential available (" + "; ".join(reasons) + ")"
        raise AuthenticationError(msg, url=request.url, reasons=tuple(reasons))
