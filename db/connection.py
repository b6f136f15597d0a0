"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so one Database can be shared by any
number of concurrent callers.

A ``Database`` is constructed explicitly by the bootstrap and passed down to
the repositories; there is no module-level pool.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import errors, extras, pool

from db.errors import DuplicateKeyError, QueryTimeoutError, StoreError
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_QUERY_TIMEOUT = 3.0


class Database:
    """
    Store handle shared by every repository.

    Every repository call runs inside exactly one ``transaction()``, which
    bounds the round-trip with ``statement_timeout`` and translates driver
    errors into the persistence error kinds. Nothing is retried here.
    """

    def __init__(
        self,
        dsn: str,
        min_conn: int = 1,
        max_conn: int = 25,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
        connection_pool: Optional[pool.AbstractConnectionPool] = None,
    ):
        """
        Args:
            dsn: libpq connection string or URL.
            min_conn: Minimum number of connections to keep open.
            max_conn: Maximum number of connections allowed.
            query_timeout: Bound for a single store round-trip, in seconds.
            connection_pool: An already-built pool (tests substitute one here).

        Raises:
            StoreError: If the database is unreachable.
        """
        if query_timeout <= 0:
            raise ValueError("query_timeout must be positive")
        self.query_timeout = query_timeout
        if connection_pool is not None:
            self._pool = connection_pool
            return
        try:
            self._pool = pool.ThreadedConnectionPool(
                min_conn,
                max_conn,
                dsn,
                connect_timeout=max(1, int(query_timeout)),
            )
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise StoreError("database unreachable") from e
        logger.info("Database connection pool initialized successfully.")

    @property
    def query_timeout_ms(self) -> int:
        return int(self.query_timeout * 1000)

    @contextmanager
    def transaction(self) -> Iterator[extras.RealDictCursor]:
        """
        Run one bounded round-trip.

        Yields a dict-row cursor inside an open transaction. Commits when the
        block exits cleanly and rolls back on any error.

        Raises:
            QueryTimeoutError: The statement exceeded ``query_timeout``.
            DuplicateKeyError: A unique constraint was violated.
            StoreError: Any other driver failure.
        """
        try:
            conn = self._pool.getconn()
        except psycopg2.Error as e:
            logger.error(f"Failed to acquire a database connection: {e}")
            raise StoreError("could not acquire a database connection") from e

        try:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute("SET LOCAL statement_timeout = %s;", (self.query_timeout_ms,))
                yield cur
            conn.commit()
        except errors.QueryCanceled as e:
            self._safe_rollback(conn)
            logger.warning(f"Query exceeded {self.query_timeout}s and was cancelled.")
            raise QueryTimeoutError(
                f"store round-trip exceeded {self.query_timeout}s"
            ) from e
        except errors.UniqueViolation as e:
            self._safe_rollback(conn)
            raise DuplicateKeyError(e.diag.constraint_name) from e
        except psycopg2.Error as e:
            self._safe_rollback(conn)
            logger.error(f"Database error: {e}")
            raise StoreError("database operation failed") from e
        except Exception:
            self._safe_rollback(conn)
            raise
        finally:
            self._pool.putconn(conn, close=bool(conn.closed))

    @staticmethod
    def _safe_rollback(conn) -> None:
        # A dropped connection cannot be rolled back; the pool discards it.
        if conn.closed:
            return
        conn.rollback()

    def close(self) -> None:
        """Close all connections in the pool."""
        self._pool.closeall()
        logger.info("Database connection pool closed.")
