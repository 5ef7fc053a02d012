"""SSH transport construction and error translation."""

import re
import shlex
from typing import Final

from dulwich.client import SSHGitClient, SubprocessSSHVendor

from docvault.exceptions import AuthenticationError, SyncError, TransferError
from docvault.sync._credentials import SshCredential
from docvault.sync._models import SshSettings
from docvault.sync._urls import SshTarget

_AUTH_FAILURE_RE: Final = re.compile(
    r"permission denied|publickey|authentication failed|too many authentication",
    re.IGNORECASE,
)


def build_ssh_command(settings: SshSettings, credential: SshCredential) -> str:
    """Build the ssh command line used by the transport.

    BatchMode keeps ssh from prompting, so a missing or rejected credential
    fails immediately instead of waiting on a terminal.

    Args:
        settings: Transport settings.
        credential: The resolved credential.

    Returns:
        Shell-quoted ssh command line.
    """
    args = [
        *shlex.split(settings.ssh_command),
        "-o",
        "BatchMode=yes",
        "-o",
        f"StrictHostKeyChecking={settings.strict_host_key_checking}",
    ]
    if credential.private_key is not None:
        args.extend(["-o", "IdentitiesOnly=yes"])
    return shlex.join(args)


def open_client(
    target: SshTarget, credential: SshCredential, settings: SshSettings
) -> SSHGitClient:
    """Create a dulwich SSH client for a target.

    Args:
        target: Parsed remote URL.
        credential: The resolved credential.
        settings: Transport settings.

    Returns:
        A client that runs the system ssh binary.
    """
    key_filename = (
        str(credential.private_key) if credential.private_key is not None else None
    )
    return SSHGitClient(
        target.host,
        port=target.port,
        username=credential.username,
        vendor=SubprocessSSHVendor(),
        key_filename=key_filename,
        ssh_command=build_ssh_command(settings, credential),
    )


def translate_transport_error(error: BaseException, url: str) -> SyncError:
    """Map a transport exception to a DocVault error.

    The original message is kept. Authentication rejections reported by ssh
    become AuthenticationError; everything else is a TransferError.

    Args:
        error: Exception raised by the transport.
        url: The remote URL.

    Returns:
        The error to raise.
    """
    detail = str(error) or type(error).__name__
    stderr_lines = getattr(error, "stderr_lines", None)
    if stderr_lines:
        decoded = b"\n".join(stderr_lines).decode("utf-8", errors="replace").strip()
        if decoded and decoded not in detail:
            detail = f"{detail}\n{decoded}"

    if _AUTH_FAILURE_RE.search(detail):
        return AuthenticationError(
            f"Authentication rejected by {url}: {detail}", url=url, cause=error
        )
    return TransferError(f"Transfer failed for {url}: {detail}", url=url, cause=error)
