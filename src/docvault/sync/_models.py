# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""DocVault sync models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Final

DEFAULT_SSH_COMMAND: Final = "ssh"
DEFAULT_HOST_KEY_POLICY: Final = "accept-new"
DEFAULT_USERNAME: Final = "git"


@dataclass(frozen=True, slots=True)
class SshSettings:
    """Transport settings shared by push and connection probes.

    Attributes:
        remote_name: Remote pushed to.
        branch: Local and remote branch name pushed.
        default_username: User when neither the URL nor the caller names one.
        ssh_command: Base ssh command line.
        strict_host_key_checking: Value for ssh's StrictHostKeyChecking option.
    """

    remote_name: str = "origin"
    branch: str = "main"
    default_username: str = DEFAULT_USERNAME
    ssh_command: str = DEFAULT_SSH_COMMAND
    strict_host_key_checking: str = DEFAULT_HOST_KEY_POLICY


@dataclass(frozen=True, slots=True)
class PushResult:
    """Result of a successful push.

    Attributes:
        remote: Remote name.
        url: Remote URL.
        ref: Full ref name updated on the remote.
        sha: Commit the remote ref now points at.
        previous_sha: Commit the remote ref pointed at before, None if new.
    """

    remote: str
    url: str
    ref: str
    sha: str
    previous_sha: str | None

    @property
    def up_to_date(self) -> bool:
        """True if the remote already had this commit."""
        return self.previous_sha == self.sha


@dataclass(frozen=True, slots=True)
class KeyPair:
    """A generated SSH key pair.

    Attributes:
        public_key: Public key text, suitable for a hosting service's key form.
        private_key_path: Location of the private key file.
    """

    public_key: str
    private_key_path: Path

    @property
    def public_key_path(self) -> Path:
        return self.private_key_path.with_name(f"{self.private_key_path.name}.pub")
