"""
services/user_service.py
------------------------
Account registration and login checks.
"""

from typing import Optional

from db.errors import DuplicateKeyError, NotFoundError
from models.user import User, validate_email, validate_password_plaintext, validate_user
from repositories.facade import Models
from security.password import CredentialError, burn_comparison
from services.notifications import Notifier, UserWelcome
from utils.logger import get_logger
from utils.validator import ValidationFailed, Validator

logger = get_logger(__name__)


class UserService:
    """
    Workflow for a new account:
        1. Validate the plaintext password and the user fields.
        2. Hash the password.
        3. Persist via the repository.
        4. Hand the welcome payload to the notifier.
    """

    def __init__(self, models: Models, notifier: Optional[Notifier] = None):
        self.models = models
        self.notifier = notifier

    def register(self, name: str, email: str, password: str) -> User:
        """
        Create an account.

        Returns:
            The stored User.

        Raises:
            ValidationFailed: If any field is invalid or the email is taken.
            CredentialError: If the password could not be hashed.
        """
        v = Validator()
        user = User(name=name, email=email)
        validate_user(v, user, password)
        v.ensure_valid()

        user.password.set(password)

        try:
            self.models.users.insert(user)
        except DuplicateKeyError as e:
            if e.field != "email":
                raise
            v.add_error("email", "a user with this email address already exists")
            raise ValidationFailed(v.errors) from e

        self._welcome(user)
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Returns:
            The matching User, or None. An unknown email, a wrong password and
            an unreadable stored hash all give None.
        """
        v = Validator()
        validate_email(v, email)
        validate_password_plaintext(v, password)
        if not v.valid:
            return None

        try:
            user = self.models.users.get_by_email(email)
        except NotFoundError:
            burn_comparison(password)
            return None

        try:
            if user.password.matches(password):
                return user
        except CredentialError as e:
            logger.error(f"Credential check failed for user #{user.id}: {e}")
        return None

    def activate(self, user_id: int) -> User:
        """
        Mark an account as activated.

        Raises:
            NotFoundError: If the user does not exist.
            EditConflictError: If the user changed between the read and the write.
        """
        user = self.models.users.get_by_id(user_id)
        user.activated = True
        v = Validator()
        validate_user(v, user)
        v.ensure_valid()
        return self.models.users.update(user)

    def _welcome(self, user: User) -> None:
        if self.notifier is None:
            return
        payload = UserWelcome(user_id=user.id, name=user.name, email=user.email)
        try:
            self.notifier.send(user.email, payload)
        except Exception as e:
            # The account is already stored; delivery failure does not undo it.
            logger.error(f"Failed to send {payload.template} to user #{user.id}: {e}")
