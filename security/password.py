"""
security/password.py
--------------------
Credential hashing and verification with bcrypt.

Only the derived hash is ever kept. The plaintext lives in the arguments of
``set``/``matches`` and nowhere else: it is not stored on the object, not
logged and not serialized.
"""

from typing import Optional

import bcrypt

from utils.logger import get_logger

logger = get_logger(__name__)

# Roughly a quarter of a second per hash on commodity hardware.
BCRYPT_COST = 12

# bcrypt reads at most this many bytes of input.
MAX_PLAINTEXT_BYTES = 72

_dummy_hash: Optional[bytes] = None


class CredentialError(RuntimeError):
    """Hashing or comparison failed for a reason other than a wrong password."""


def burn_comparison(plaintext: str) -> None:
    """
    Spend the time of one real comparison without checking anything.

    Used when there is no stored hash to compare against, so that the caller
    takes as long as it would for an existing account.
    """
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = bcrypt.hashpw(b"unused", bcrypt.gensalt(rounds=BCRYPT_COST))
    bcrypt.checkpw(plaintext.encode()[:MAX_PLAINTEXT_BYTES], _dummy_hash)


class Password:
    """Holds the bcrypt hash of a user's password."""

    __slots__ = ("hash",)

    def __init__(self, hash: Optional[bytes] = None):
        self.hash = bytes(hash) if hash is not None else None

    def set(self, plaintext: str) -> None:
        """
        Derive and store a salted hash of ``plaintext``.

        Raises:
            CredentialError: If ``plaintext`` is longer than 72 bytes or the
                hash could not be generated.
        """
        raw = plaintext.encode()
        if len(raw) > MAX_PLAINTEXT_BYTES:
            raise CredentialError(f"password exceeds {MAX_PLAINTEXT_BYTES} bytes")
        try:
            self.hash = bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_COST))
        except (ValueError, OSError) as e:
            logger.error(f"Password hashing failed: {type(e).__name__}")
            raise CredentialError("password hashing failed") from e

    def matches(self, plaintext: str) -> bool:
        """
        Check ``plaintext`` against the stored hash.

        A plaintext longer than 72 bytes can never have been stored, so it is
        a mismatch rather than an error.

        Returns:
            True on a match, False on a mismatch.

        Raises:
            CredentialError: If no hash is set or the stored hash is malformed.
        """
        if self.hash is None:
            raise CredentialError("no password hash set")
        raw = plaintext.encode()
        if len(raw) > MAX_PLAINTEXT_BYTES:
            return False
        try:
            return bcrypt.checkpw(raw, self.hash)
        except ValueError as e:
            logger.error("Password comparison failed: stored hash is malformed")
            raise CredentialError("password comparison failed") from e

    def __repr__(self) -> str:
        return "Password(hash=<set>)" if self.hash is not None else "Password(hash=None)"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Password):
            return NotImplemented
        return self.hash == other.hash
