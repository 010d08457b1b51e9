"""Named accounts backed by a secret provider."""

import logging
from typing import List, Optional

from totp_auth.secret import decode_secret
from totp_auth.storage import FileSecretStore, SecretProvider
from totp_auth.totp import DEFAULT_DIGITS, Timestamp, generate_code


logger = logging.getLogger(__name__)


class AccountNotFoundError(LookupError):
    """Raised when a secret provider has no entry for an account."""


class Account:
    """
    An account name paired with its shared secret.

    The secret text is kept as entered and decoded on demand.
    """

    def __init__(self, name: str, secret: str):
        self.name = name
        self.secret = secret

    def __repr__(self) -> str:
        return f"Account(name={self.name!r})"

    @classmethod
    def lookup(cls, name: str, provider: Optional[SecretProvider] = None) -> "Account":
        """
        Load an existing account from a secret provider.

        Args:
            name: Account name.
            provider: Secret provider (default: a :class:`FileSecretStore`).

        Returns:
            The account.

        Raises:
            AccountNotFoundError: If the provider has no secret for ``name``.
        """
        provider = provider if provider is not None else FileSecretStore()
        secret = provider.lookup(name)
        if secret is None:
            raise AccountNotFoundError(f"Account '{name}' not found")
        return cls(name, secret)

    @classmethod
    def create(
        cls, name: str, secret: str, provider: Optional[SecretProvider] = None
    ) -> "Account":
        """
        Store ``secret`` under ``name``.

        The provider validates the secret before storing it.

        Raises:
            DecodeError: If the secret cannot be decoded; nothing is stored.
        """
        name = name.strip()
        provider = provider if provider is not None else FileSecretStore()
        provider.create(name, secret)
        logger.info("Created account %r", name)
        return cls(name, secret)

    @staticmethod
    def names(provider: Optional[SecretProvider] = None) -> List[str]:
        """Return the sorted names of all known accounts."""
        provider = provider if provider is not None else FileSecretStore()
        return sorted(provider.list_accounts())

    @property
    def key(self) -> bytes:
        """The decoded shared key."""
        return decode_secret(self.secret)

    def code(
        self, timestamp: Optional[Timestamp] = None, digits: int = DEFAULT_DIGITS
    ) -> str:
        """
        Generate the TOTP code for this account.

        Args:
            timestamp: Seconds since the epoch (default: current time).
            digits: Number of digits in the code (default: 6).

        Returns:
            TOTP code as a string.
        """
        return generate_code(self.key, timestamp=timestamp, digits=digits)
