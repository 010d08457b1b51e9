"""Storage utilities for persisting account secrets."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from platformdirs import user_data_dir

from totp_auth.secret import decode_secret


APP_NAME = "totp-auth"
APP_AUTHOR = "totp-auth"
HOME_ENV = "TOTP_AUTH_HOME"

logger = logging.getLogger(__name__)


class SecretProvider(Protocol):
    """Anything that can look up, create and list account secrets."""

    def lookup(self, account: str) -> Optional[str]:
        """Return the secret for ``account``, or None if it is unknown."""
        ...

    def create(self, account: str, secret: str) -> None:
        """Store ``secret`` for ``account``, rejecting undecodable secrets."""
        ...

    def list_accounts(self) -> List[str]:
        """Return the names of all known accounts."""
        ...


def get_storage_dir() -> Path:
    """
    Get the directory holding account files.

    ``$TOTP_AUTH_HOME`` takes precedence over the cross-platform
    user data directory.

    Returns:
        Path to the storage directory.
    """
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path(user_data_dir(APP_NAME, APP_AUTHOR))


def validate_account_name(name: str) -> str:
    """
    Check that an account name can be used as a file name.

    Returns:
        The name, stripped of surrounding whitespace.

    Raises:
        ValueError: If the name is empty, starts with a dot or contains a path separator.
    """
    name = name.strip()
    if not name:
        raise ValueError("Account name must not be empty")
    if name.startswith(".") or "/" in name or "\\" in name or os.sep in name:
        raise ValueError(f"Invalid account name: {name!r}")
    return name


class FileSecretStore:
    """
    Secret provider keeping one JSON file per account.

    Each file holds ``{"name": ..., "secret": ...}`` with the secret as
    originally entered.
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """
        Args:
            directory: Storage directory (default: :func:`get_storage_dir`).
        """
        self._directory = Path(directory) if directory is not None else None

    @property
    def directory(self) -> Path:
        if self._directory is not None:
            return self._directory
        return get_storage_dir()

    def account_path(self, account: str) -> Path:
        """Get the file path for an account by name."""
        return self.directory / f"{validate_account_name(account)}.json"

    def lookup(self, account: str) -> Optional[str]:
        """
        Return the stored secret for ``account``, or None if there is none.

        Raises:
            ValueError: If the account file is malformed.
        """
        path = self.account_path(account)
        if not path.exists():
            logger.debug("No account file at %s", path)
            return None

        data = self._read(path)
        try:
            return data["secret"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid account file {path}: missing secret") from e

    def create(self, account: str, secret: str) -> None:
        """
        Save ``secret`` for ``account``, replacing any existing entry.

        The secret is decoded first so that an undecodable one is never stored.

        Raises:
            DecodeError: If the secret is neither hex nor Base32.
        """
        decode_secret(secret)

        name = validate_account_name(account)
        path = self.account_path(name)
        path.parent.mkdir(parents=True, exist_ok=True)

        data: Dict[str, Any] = {"name": name, "secret": secret}

        # Write atomically using a temporary file
        temp_path = path.with_suffix(".tmp")
        temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        temp_path.replace(path)
        logger.debug("Saved account %r to %s", name, path)

    def list_accounts(self) -> List[str]:
        """
        List all stored account names.

        Returns:
            Sorted account names (without .json extension).
        """
        directory = self.directory
        if not directory.exists():
            return []
        return sorted(path.stem for path in directory.glob("*.json"))

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        try:
            content = path.read_text(encoding="utf-8")
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid account file format: {e}") from e
