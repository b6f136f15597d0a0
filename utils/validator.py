"""
utils/validator.py
------------------
Field-level validation engine.

A ``Validator`` collects failures for one input and never raises while the
checks run. Callers run every check, then inspect ``valid``/``errors`` or
call ``ensure_valid()`` to turn the collected failures into one exception.
"""

import re
from typing import Hashable, Iterable

# HTML5 "valid e-mail address" shape.
EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9]"
    r"(?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*\Z"
)


class ValidationFailed(ValueError):
    """One or more fields failed validation. ``errors`` maps field to message."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"validation failed for: {fields}")


class Validator:
    """Accumulates the first error message recorded for each field."""

    def __init__(self):
        self.errors: dict[str, str] = {}

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str) -> None:
        """Record ``message`` unless ``field`` already has an error."""
        self.errors.setdefault(field, message)

    def check(self, ok: bool, field: str, message: str) -> None:
        if not ok:
            self.add_error(field, message)

    def ensure_valid(self) -> None:
        """
        Raises:
            ValidationFailed: If any check failed, with every recorded error.
        """
        if self.errors:
            raise ValidationFailed(self.errors)


def permitted_value(value, *permitted) -> bool:
    return value in permitted


def matches(value: str, rx: re.Pattern) -> bool:
    return rx.match(value) is not None


def unique(values: Iterable[Hashable]) -> bool:
    values = list(values)
    return len(set(values)) == len(values)
