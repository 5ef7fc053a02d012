"""Remote URL parsing.

Only SSH remotes are supported. A URL is classified here, before any network
activity, so that an unusable scheme fails fast with a typed error.
"""

import re
from dataclasses import dataclass
from typing import Final
from urllib.parse import urlsplit

from dulwich.client import parse_rsync_url

from docvault.exceptions import InvalidUrlSchemeError

SSH_SCHEMES: Final = frozenset({"ssh", "git+ssh", "ssh+git"})

# [user@]host:path, where host is not a single letter (Windows drive)
_SCP_LIKE_RE: Final = re.compile(r"^(?:[^@/:]+@)?[^@/:]{2,}:(?!//).+$")


@dataclass(frozen=True, slots=True)
class SshTarget:
    """A parsed SSH remote.

    Attributes:
        url: The URL as supplied.
        host: Remote host name.
        path: Repository path on the host.
        username: User embedded in the URL, if any.
        port: Explicit port, if any.
    """

    url: str
    host: str
    path: str
    username: str | None = None
    port: int | None = None


def parse_ssh_url(url: str) -> SshTarget:
    """Parse an SSH remote URL.

    Accepts ``ssh://[user@]host[:port]/path``, ``git+ssh://...`` and the
    scp-like ``[user@]host:path`` form.

    Args:
        url: Remote URL.

    Returns:
        SshTarget with the URL components.

    Raises:
        InvalidUrlSchemeError: If the URL is not an SSH URL.

    Example:
        >>> parse_ssh_url("git@example.com:team/docs.git").host
        'example.com'
    """
    candidate = url.strip()
    if "://" in candidate:
        return _parse_scheme_url(url, candidate)

    if not _SCP_LIKE_RE.match(candidate):
        msg = f"Unsupported remote URL (only SSH URLs are supported): {url}"
        raise InvalidUrlSchemeError(msg, url=url)

    try:
        username, host, path = parse_rsync_url(candidate)
    except ValueError as e:
        msg = f"Invalid SSH URL: {url}"
        raise InvalidUrlSchemeError(msg, url=url, cause=e) from e
    return SshTarget(url=url, host=host, path=path, username=username)


def is_ssh_url(url: str) -> bool:
    """Check whether a URL would be accepted by ``parse_ssh_url``."""
    try:
        _ = parse_ssh_url(url)
    except InvalidUrlSchemeError:
        return False
    return True


def _parse_scheme_url(url: str, candidate: str) -> SshTarget:
    parsed = urlsplit(candidate)
    scheme = parsed.scheme.lower()
    if scheme not in SSH_SCHEMES:
        msg = (
            f"Unsupported URL scheme {scheme!r}: only SSH URLs are supported "
            f"(ssh://, git+ssh:// or user@host:path)"
        )
        raise InvalidUrlSchemeError(msg, url=url)

    try:
        port = parsed.port
    except ValueError as e:
        msg = f"Invalid port in SSH URL: {url}"
        raise InvalidUrlSchemeError(msg, url=url, cause=e) from e

    if not parsed.hostname:
        msg = f"SSH URL has no host: {url}"
        raise InvalidUrlSchemeError(msg, url=url)
    if not parsed.path or parsed.path == "/":
        msg = f"SSH URL has no repository path: {url}"
        raise InvalidUrlSchemeError(msg, url=url)

    return SshTarget(
        url=url,
        host=parsed.hostname,
        path=parsed.path,
        username=parsed.username,
        port=port,
    )
