"""
db/errors.py
------------
Error kinds surfaced by the persistence layer.

The named kinds are siblings under ``RepositoryError`` so that catching one
never catches another. ``StoreError`` is the opaque "infrastructure failure"
kind: its original driver exception is chained as ``__cause__``.
"""

from typing import Optional


class RepositoryError(RuntimeError):
    """Base class for every error raised by the persistence layer."""


class NotFoundError(RepositoryError):
    """No row matches the requested identifier or key."""

    def __init__(self, resource: str, key: object):
        super().__init__(f"{resource} not found: {key}")
        self.resource = resource
        self.key = key


class EditConflictError(RepositoryError):
    """The record's version moved since it was read."""

    def __init__(self, resource: str, record_id: Optional[int], version: Optional[int]):
        super().__init__(
            f"unable to update {resource} #{record_id}: version {version} is stale"
        )
        self.resource = resource
        self.record_id = record_id
        self.version = version


class DuplicateKeyError(RepositoryError):
    """A uniqueness constraint was violated."""

    def __init__(self, constraint: Optional[str], field: Optional[str] = None):
        target = field or constraint or "unknown constraint"
        super().__init__(f"duplicate key value violates {target}")
        self.constraint = constraint
        self.field = field


class QueryTimeoutError(RepositoryError):
    """The store round-trip exceeded its time bound."""


class StoreError(RepositoryError):
    """Unrecognized store failure."""
