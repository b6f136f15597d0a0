"""
services/notifications.py
-------------------------
Interface to the notification collaborator.

Rendering and delivery live outside this package. Each payload type is bound
to exactly one template, so a template never receives untyped data.
"""

from dataclasses import dataclass
from typing import ClassVar, Protocol, Union


@dataclass(frozen=True)
class UserWelcome:
    """Sent once a new account has been stored."""
    template: ClassVar[str] = "user_welcome.tmpl"

    user_id: int
    name: str
    email: str


Notification = Union[UserWelcome]


class Notifier(Protocol):
    def send(self, recipient: str, notification: Notification) -> None:
        """Render ``notification.template`` with the payload and deliver it."""
        ...
