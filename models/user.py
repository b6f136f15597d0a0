"""
models/user.py
--------------
Domain model for user accounts.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from security.password import Password
from utils.validator import EMAIL_RX, Validator, matches

MAX_NAME_BYTES = 500
MIN_PASSWORD_BYTES = 8
MAX_PASSWORD_BYTES = 72  # bcrypt input limit

SORT_SAFELIST = ("id", "name", "email", "created_at", "-id", "-name", "-email", "-created_at")


@dataclass
class User:
    """
    Represents a user account.

    Attributes:
        id: Database primary key (None for new records).
        name: Display name.
        email: Login address, unique across all users.
        password: Hash holder; never serialized.
        activated: Whether the account has been activated.
        version: Concurrency token, starts at 1 and grows by 1 per update.
        created_at: Timestamp when the record was created.
    """
    name: str
    email: str
    password: Password = field(default_factory=Password, repr=False)
    activated: bool = False
    id: Optional[int] = None
    version: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "name": self.name,
            "email": self.email,
            "activated": self.activated,
        }


def validate_email(v: Validator, email: str) -> None:
    v.check(email != "", "email", "must be provided")
    v.check(matches(email, EMAIL_RX), "email", "must be a valid email address")


def validate_password_plaintext(v: Validator, password: str) -> None:
    size = len(password.encode())
    v.check(password != "", "password", "must be provided")
    v.check(size >= MIN_PASSWORD_BYTES, "password", "must be at least 8 bytes long")
    v.check(size <= MAX_PASSWORD_BYTES, "password", "must not be more than 72 bytes long")


def validate_user(v: Validator, user: User, password: Optional[str] = None) -> None:
    """
    Validate a user before it is written.

    Pass the plaintext `password` when it is about to be hashed; otherwise the
    user must already carry a hash.

    Raises:
        AssertionError: If there is neither a plaintext password nor a hash.
    """
    v.check(user.name != "", "name", "must be provided")
    v.check(len(user.name.encode()) <= MAX_NAME_BYTES, "name", "must not be more than 500 bytes long")

    validate_email(v, user.email)

    if password is not None:
        validate_password_plaintext(v, password)
    elif user.password.hash is None:
        raise AssertionError("missing password hash for user")
