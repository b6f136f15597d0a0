"""
repositories/user_repo.py
--------------------------
Data access layer for user accounts.
"""

from typing import Optional

from psycopg2 import sql

from db.connection import Database
from db.errors import DuplicateKeyError, NotFoundError
from models.filters import Filters, Metadata, calculate_metadata
from models.user import User
from repositories.versioning import VersionGuard
from security.password import Password
from utils.logger import get_logger

logger = get_logger(__name__)

EMAIL_CONSTRAINT = "users_email_key"

_COLUMNS = "id, created_at, name, email, password_hash, activated, version"


class UserRepository:
    """Repository for CRUD operations on the users table."""

    def __init__(self, db: Database):
        self._db = db
        self._guard = VersionGuard(
            "user", "users", ("name", "email", "password_hash", "activated")
        )

    def insert(self, user: User) -> User:
        """
        Insert a new user.

        Returns:
            The same User with `id`, `created_at` and `version` populated.

        Raises:
            DuplicateKeyError: If another user already has this email.
        """
        query = """
            INSERT INTO users (name, email, password_hash, activated)
            VALUES (%s, %s, %s, %s)
            RETURNING id, created_at, version;
        """
        try:
            with self._db.transaction() as cur:
                cur.execute(query, self._values(user))
                row = cur.fetchone()
        except DuplicateKeyError as e:
            if e.constraint == EMAIL_CONSTRAINT:
                logger.warning("Rejected user write: email already in use")
                raise DuplicateKeyError(e.constraint, field="email") from e
            raise
        user.id = row["id"]
        user.created_at = row["created_at"]
        user.version = row["version"]
        logger.info(f"Inserted user #{user.id}")
        return user

    def get_by_id(self, user_id: int) -> User:
        """
        Raises:
            NotFoundError: If no user has this ID.
        """
        if user_id < 1:
            raise NotFoundError("user", user_id)
        return self._fetch_one("id", user_id)

    def get_by_email(self, email: str) -> User:
        """
        Raises:
            NotFoundError: If no user has this email.
        """
        return self._fetch_one("email", email)

    def get_all(
        self,
        filters: Filters,
        name: str = "",
        activated: Optional[bool] = None,
    ) -> tuple[list[User], Metadata]:
        """
        Fetch one page of users.

        Args:
            filters: A validated Filters instance.
            name: Case-insensitive substring of the name; empty matches all.
            activated: Only users with this activation state; None matches all.
        """
        query = sql.SQL("""
            SELECT count(*) OVER() AS total_records, {columns}
            FROM users
            WHERE (%s = '' OR strpos(lower(name), lower(%s)) > 0)
              AND (%s::boolean IS NULL OR activated = %s::boolean)
            ORDER BY {column} {direction}, id ASC
            LIMIT %s OFFSET %s;
        """).format(
            columns=sql.SQL(_COLUMNS),
            column=sql.Identifier(filters.sort_column()),
            direction=sql.SQL(filters.sort_direction()),
        )
        params = (name, name, activated, activated, filters.limit(), filters.offset())
        with self._db.transaction() as cur:
            cur.execute(query, params)
            rows = cur.fetchall()

        total = rows[0]["total_records"] if rows else 0
        users = [self._row_to_user(r) for r in rows]
        return users, calculate_metadata(total, filters.page, filters.page_size)

    def update(self, user: User) -> User:
        """
        Write every field of `user` if its version is still current.

        Raises:
            EditConflictError: If the user changed (or was deleted) since it was read.
            DuplicateKeyError: If the new email belongs to another user.
        """
        try:
            with self._db.transaction() as cur:
                new_version = self._guard.update(cur, user, self._values(user))
        except DuplicateKeyError as e:
            if e.constraint == EMAIL_CONSTRAINT:
                logger.warning("Rejected user write: email already in use")
                raise DuplicateKeyError(e.constraint, field="email") from e
            raise
        user.version = new_version
        logger.info(f"Updated user #{user.id} to version {user.version}")
        return user

    def delete(self, user_id: int) -> None:
        """
        Raises:
            NotFoundError: If no user has this ID.
        """
        if user_id < 1:
            raise NotFoundError("user", user_id)

        with self._db.transaction() as cur:
            cur.execute("DELETE FROM users WHERE id = %s;", (user_id,))
            deleted = cur.rowcount > 0
        if not deleted:
            raise NotFoundError("user", user_id)
        logger.info(f"Deleted user #{user_id}")

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_one(self, column: str, value) -> User:
        query = sql.SQL("SELECT {columns} FROM users WHERE {column} = %s;").format(
            columns=sql.SQL(_COLUMNS),
            column=sql.Identifier(column),
        )
        with self._db.transaction() as cur:
            cur.execute(query, (value,))
            row = cur.fetchone()
        if row is None:
            logger.debug(f"User not found by {column}")
            raise NotFoundError("user", value)
        return self._row_to_user(row)

    @staticmethod
    def _values(user: User) -> tuple:
        return (user.name, user.email, user.password.hash, user.activated)

    @staticmethod
    def _row_to_user(row: dict) -> User:
        """Convert a database row to a User domain object."""
        return User(
            id=row["id"],
            created_at=row["created_at"],
            name=row["name"],
            email=row["email"],
            password=Password(row["password_hash"]),
            activated=row["activated"],
            version=row["version"],
        )
