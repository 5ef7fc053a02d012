"""Push and connection probing.

Both operations validate the remote URL and resolve a credential before the
transport is opened, so configuration mistakes never reach the network.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dulwich.errors import GitProtocolError

from docvault.exceptions import (
    AuthenticationError,
    RemoteNotFoundError,
    TransferError,
)
from docvault.sync._credentials import CredentialRequest, CredentialResolver
from docvault.sync._models import PushResult, SshSettings
from docvault.sync._transport import open_client, translate_transport_error
from docvault.sync._urls import parse_ssh_url

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from docvault.repository import DocumentRepository
    from docvault.sync._credentials import SshCredential
    from docvault.sync._urls import SshTarget


def push(
    repository: DocumentRepository,
    *,
    logger: FilteringBoundLogger,
    key_path: Path | None = None,
    settings: SshSettings | None = None,
    resolver: CredentialResolver | None = None,
) -> PushResult:
    """Push the primary branch to the configured remote.

    The local ``refs/heads/<branch>`` is sent to the same ref on the remote
    and, on success, recorded as ``refs/remotes/<remote>/<branch>``.

    Args:
        repository: The repository to push from.
        logger: Structured logger.
        key_path: Private key to authenticate with. Falls back to the agent
            when omitted.
        settings: Transport settings. Defaults to ``SshSettings()``.
        resolver: Credential resolver. Defaults to key file then agent.

    Returns:
        PushResult describing the updated remote ref.

    Raises:
        RemoteNotFoundError: If the remote is not configured.
        InvalidUrlSchemeError: If the remote URL is not an SSH URL.
        AuthenticationError: If no credential is available or it is rejected.
        TransferError: If there is nothing to push or the transfer fails.
    """
    settings = settings or SshSettings()
    resolver = resolver or CredentialResolver()

    with repository.exclusive():
        remote = repository.get_remote(settings.remote_name)
        if remote is None:
            msg = f"Remote {settings.remote_name!r} is not configured"
            raise RemoteNotFoundError(msg)

        target = parse_ssh_url(remote.url)
        credential = _resolve_credential(
            resolver, target, key_path=key_path, username=None, settings=settings
        )

        local_sha = repository.branch_sha(settings.branch)
        if local_sha is None:
            msg = f"Nothing to push: branch {settings.branch!r} has no commits"
            raise TransferError(msg, url=remote.url)

        ref = f"refs/heads/{settings.branch}"
        ref_bytes = ref.encode()
        previous: dict[bytes, bytes | None] = {}

        def update_refs(refs: dict[bytes, bytes]) -> dict[bytes, bytes]:
            previous[ref_bytes] = refs.get(ref_bytes)
            updated = dict(refs)
            updated[ref_bytes] = local_sha.encode("ascii")
            return updated

        client = open_client(target, credential, settings)
        try:
            result = client.send_pack(
                target.path,
                update_refs,
                generate_pack_data=repository.dulwich_repo.generate_pack_data,
            )
        except (GitProtocolError, OSError) as e:
            raise translate_transport_error(e, remote.url) from e

        ref_status = getattr(result, "ref_status", None) or {}
        rejection = ref_status.get(ref_bytes)
        if rejection:
            detail = (
                rejection.decode("utf-8", errors="replace")
                if isinstance(rejection, bytes)
                else str(rejection)
            )
            msg = f"Remote rejected {ref}: {detail}"
            raise TransferError(msg, url=remote.url)

        repository.record_remote_ref(
            settings.branch, local_sha, remote=settings.remote_name
        )

    previous_sha = previous.get(ref_bytes)
    push_result = PushResult(
        remote=settings.remote_name,
        url=remote.url,
        ref=ref,
        sha=local_sha,
        previous_sha=previous_sha.decode("ascii") if previous_sha else None,
    )
    logger.info(
        "push_completed",
        remote=push_result.remote,
        ref=ref,
        sha=local_sha,
        previous=push_result.previous_sha,
        credential=credential.source.value,
    )
    return push_result


def probe_connection(
    url: str,
    *,
    logger: FilteringBoundLogger,
    username: str | None = None,
    key_path: Path | None = None,
    settings: SshSettings | None = None,
    resolver: CredentialResolver | None = None,
) -> bool:
    """Check that a remote is reachable and accepts the credential.

    Performs the ref advertisement half of a fetch. No objects are
    transferred and the local repository is not touched.

    Args:
        url: Remote URL to probe.
        logger: Structured logger.
        username: User to authenticate as when the URL does not name one.
        key_path: Private key to authenticate with.
        settings: Transport settings.
        resolver: Credential resolver.

    Returns:
        True when the remote listed its refs.

    Raises:
        InvalidUrlSchemeError: If the URL is not an SSH URL.
        AuthenticationError: If the key file is missing, no credential is
            available, or the remote rejects the credential.
        TransferError: If the connection fails for any other reason.
    """
    settings = settings or SshSettings()
    resolver = resolver or CredentialResolver()

    target = parse_ssh_url(url)
    credential = _resolve_credential(
        resolver, target, key_path=key_path, username=username, settings=settings
    )

    client = open_client(target, credential, settings)
    try:
        _ = client.get_refs(target.path)
    except (GitProtocolError, OSError) as e:
        error = translate_transport_error(e, url)
        logger.warning(
            "connection_probe_failed",
            url=url,
            kind=error.kind.value,
            error=str(error),
        )
        raise error from e

    logger.info("connection_probe_succeeded", url=url, host=target.host)
    return True


def _resolve_credential(
    resolver: CredentialResolver,
    target: SshTarget,
    *,
    key_path: Path | None,
    username: str | None,
    settings: SshSettings,
) -> SshCredential:
    if key_path is not None and not key_path.expanduser().is_file():
        msg = f"SSH key file not found: {key_path}"
        raise AuthenticationError(msg, url=target.url)

    effective_user = target.username or username or settings.default_username
    return resolver.resolve(
        CredentialRequest(url=target.url, username=effective_user, key_path=key_path)
    )
