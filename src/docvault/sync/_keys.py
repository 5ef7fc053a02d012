# ruff: noqa: TC003  # Path needed at runtime for method bodies
"""SSH key pair generation via the system ssh-keygen."""

import shutil
import subprocess
from pathlib import Path
from typing import Final

from docvault.exceptions import KeyGenerationError
from docvault.sync._models import KeyPair

DEFAULT_KEY_DIRECTORY: Final = ".ssh"
DEFAULT_KEY_TYPE: Final = "ed25519"
KEYGEN_BINARY: Final = "ssh-keygen"

_KEY_FILE_NAMES: Final = {"ed25519": "id_ed25519", "rsa": "id_rsa", "ecdsa": "id_ecdsa"}


def key_path_for(root: Path, *, key_directory: str, key_type: str) -> Path:
    """Get the private key location for a repository root.

    Args:
        root: The managed directory.
        key_directory: Directory under the root that holds keys.
        key_type: ssh-keygen key type.

    Returns:
        Path to the private key file.
    """
    file_name = _KEY_FILE_NAMES.get(key_type, f"id_{key_type}")
    return root / key_directory / file_name


def generate_key_pair(
    root: Path,
    committer_email: str,
    *,
    key_directory: str = DEFAULT_KEY_DIRECTORY,
    key_type: str = DEFAULT_KEY_TYPE,
    overwrite: bool = False,
) -> KeyPair:
    """Generate an unencrypted SSH key pair under the repository root.

    Args:
        root: The managed directory.
        committer_email: Comment embedded in the public key.
        key_directory: Directory under the root that holds keys.
        key_type: ssh-keygen key type.
        overwrite: Replace an existing key pair instead of failing.

    Returns:
        KeyPair with the public key text and private key path.

    Raises:
        KeyGenerationError: If a key already exists and ``overwrite`` is False,
            if ssh-keygen is missing or fails, or if the public key cannot be
            read back.
    """
    private_key = key_path_for(root, key_directory=key_directory, key_type=key_type)
    public_key = private_key.with_name(f"{private_key.name}.pub")

    if private_key.exists() and not overwrite:
        msg = f"SSH key already exists: {private_key}"
        raise KeyGenerationError(msg, key_path=private_key)

    executable = shutil.which(KEYGEN_BINARY)
    if executable is None:
        msg = f"{KEYGEN_BINARY} not found on PATH"
        raise KeyGenerationError(msg, key_path=private_key)

    try:
        private_key.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        # ssh-keygen prompts before overwriting, so clear the old pair first
        private_key.unlink(missing_ok=True)
        public_key.unlink(missing_ok=True)
    except OSError as e:
        msg = f"Failed to prepare key directory: {e}"
        raise KeyGenerationError(msg, key_path=private_key, cause=e) from e

    cmd = [
        executable,
        "-t",
        key_type,
        "-C",
        committer_email,
        "-N",
        "",
        "-f",
        str(private_key),
        "-q",
    ]
    try:
        result = subprocess.run(  # noqa: S603
            cmd,
            capture_output=True,
            text=True,
            check=False,
            stdin=subprocess.DEVNULL,
        )
    except OSError as e:
        msg = f"Failed to run {KEYGEN_BINARY}: {e}"
        raise KeyGenerationError(msg, key_path=private_key, cause=e) from e

    if result.returncode != 0:
        stderr = result.stderr.strip()[:200]
        msg = f"{KEYGEN_BINARY} failed: rc={result.returncode} stderr={stderr}"
        raise KeyGenerationError(msg, key_path=private_key)

    try:
        public_text = public_key.read_text(encoding="utf-8").strip()
    except OSError as e:
        msg = f"Failed to read public key: {e}"
        raise KeyGenerationError(msg, key_path=private_key, cause=e) from e

    return KeyPair(public_key=public_text, private_key_path=private_key)
