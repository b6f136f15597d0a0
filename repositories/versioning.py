"""
repositories/versioning.py
--------------------------
Optimistic concurrency for versioned tables.

A record read from the store is CLEAN at version v. The only transition is a
conditional update: if the stored version is still v, every column is
written and the stored version becomes v + 1. The in-memory record only
moves to v + 1 after the surrounding transaction commits, so a failed commit
leaves it at v. If the stored version has moved, nothing is written and the
record is STALE. STALE is reported to the caller, never stored.
"""

from enum import Enum
from typing import Any, Optional, Protocol, Sequence

from psycopg2 import sql

from db.errors import EditConflictError
from utils.logger import get_logger

logger = get_logger(__name__)


class Versioned(Protocol):
    id: int
    version: int


class RecordState(Enum):
    CLEAN = "clean"
    STALE = "stale"


class VersionGuard:
    """Builds and runs the conditional update for one table."""

    def __init__(self, resource: str, table: str, columns: Sequence[str]):
        """
        Args:
            resource: Singular name used in errors and logs (e.g. "movie").
            table: Table name.
            columns: Columns written by an update, in the order their values
                are passed to ``update``.
        """
        self.resource = resource
        self.columns = tuple(columns)
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(c)) for c in self.columns
        )
        self.query = sql.SQL(
            "UPDATE {table} SET {assignments}, version = version + 1 "
            "WHERE id = %s AND version = %s "
            "RETURNING version;"
        ).format(table=sql.Identifier(table), assignments=assignments)

    def transition(
        self, cur, record: Versioned, values: Sequence[Any]
    ) -> tuple[RecordState, Optional[int]]:
        """
        Attempt the write on an open cursor.

        Returns:
            ``(CLEAN, new_version)`` when the row was written, or
            ``(STALE, None)`` when the stored version had moved. The record
            itself is never modified; the caller applies the new version once
            the transaction has committed.
        """
        if len(values) != len(self.columns):
            raise ValueError(f"expected {len(self.columns)} values, got {len(values)}")
        cur.execute(self.query, (*values, record.id, record.version))
        row = cur.fetchone()
        if row is None:
            return RecordState.STALE, None
        return RecordState.CLEAN, row["version"]

    def update(self, cur, record: Versioned, values: Sequence[Any]) -> int:
        """
        Returns:
            The version the row will have once the transaction commits.

        Raises:
            EditConflictError: The stored version no longer matches the record.
        """
        state, new_version = self.transition(cur, record, values)
        if state is RecordState.STALE:
            logger.warning(
                f"Edit conflict on {self.resource} #{record.id} at version {record.version}"
            )
            raise EditConflictError(self.resource, record.id, record.version)
        return new_version
