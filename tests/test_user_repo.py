"""
Unit tests for UserRepository against a mocked cursor.
"""

import pytest
from psycopg2 import sql

from db.errors import DuplicateKeyError, EditConflictError, NotFoundError
from models.filters import Filters, Metadata
from models.user import SORT_SAFELIST, User
from security.password import Password

from tests.conftest import CREATED_AT, flatten

HASH = b"$2b$12$abcdefghijklmnopqrstuu5Q7V1mYV8mNf3x0pQ0i7V2t3H0QyGkS"


def _row(**overrides) -> dict:
    row = dict(
        id=1,
        created_at=CREATED_AT,
        name="Alice",
        email="alice@example.com",
        password_hash=memoryview(HASH),
        activated=False,
        version=1,
    )
    row.update(overrides)
    return row


def _user(**overrides) -> User:
    defaults = dict(name="Alice", email="alice@example.com", password=Password(HASH))
    defaults.update(overrides)
    return User(**defaults)


class TestInsert:
    def test_populates_store_assigned_fields(self, models, fake_db):
        fake_db.cursor.fetchone.return_value = {"id": 5, "created_at": CREATED_AT, "version": 1}
        user = _user()
        models.users.insert(user)
        assert (user.id, user.created_at, user.version) == (5, CREATED_AT, 1)
        params = fake_db.cursor.execute.call_args.args[1]
        assert params == ("Alice", "alice@example.com", HASH, False)

    def test_duplicate_email(self, models, fake_db):
        fake_db.cursor.execute.side_effect = DuplicateKeyError("users_email_key")
        user = _user()
        with pytest.raises(DuplicateKeyError) as exc:
            models.users.insert(user)
        assert exc.value.field == "email"
        assert exc.value.constraint == "users_email_key"
        assert user.id is None

    def test_other_unique_constraint_passes_through(self, models, fake_db):
        original = DuplicateKeyError("users_pkey")
        fake_db.cursor.execute.side_effect = original
        with pytest.raises(DuplicateKeyError) as exc:
            models.users.insert(_user())
        assert exc.value is original


class TestLookups:
    def test_get_by_email(self, models, fake_db):
        fake_db.cursor.fetchone.return_value = _row(activated=True, version=2)
        user = models.users.get_by_email("alice@example.com")
        assert user.id == 1
        assert user.activated is True
        assert user.version == 2
        assert user.password.hash == HASH
        query, params = fake_db.cursor.execute.call_args.args
        assert sql.Identifier("email") in list(flatten(query))
        assert params == ("alice@example.com",)

    def test_get_by_email_missing(self, models, fake_db):
        fake_db.cursor.fetchone.return_value = None
        with pytest.raises(NotFoundError):
            models.users.get_by_email("nobody@example.com")

    def test_get_by_id(self, models, fake_db):
        fake_db.cursor.fetchone.return_value = _row(id=3)
        assert models.users.get_by_id(3).id == 3

    def test_get_by_id_missing(self, models, fake_db):
        fake_db.cursor.fetchone.return_value = None
        with pytest.raises(NotFoundError):
            models.users.get_by_id(3)

    def test_get_by_id_non_positive(self, models, fake_db):
        with pytest.raises(NotFoundError):
            models.users.get_by_id(0)
        assert fake_db.transactions == 0


class TestGetAll:
    def test_page_and_predicates(self, models, fake_db):
        fake_db.cursor.fetchall.return_value = [dict(_row(), total_records=1)]
        filters = Filters(page=1, page_size=10, sort="-name", sort_safelist=SORT_SAFELIST)
        users, meta = models.users.get_all(filters, name="ali", activated=False)
        assert [u.email for u in users] == ["alice@example.com"]
        assert meta == Metadata(current_page=1, page_size=10, first_page=1, last_page=1, total_records=1)
        query, params = fake_db.cursor.execute.call_args.args
        parts = list(flatten(query))
        assert sql.Identifier("name") in parts
        assert sql.SQL("DESC") in parts
        assert params == ("ali", "ali", False, False, 10, 0)


class TestUpdate:
    def test_success_advances_version(self, models, fake_db):
        fake_db.cursor.fetchone.return_value = {"version": 2}
        user = _user(id=1, version=1, activated=True)
        models.users.update(user)
        assert user.version == 2
        params = fake_db.cursor.execute.call_args.args[1]
        assert params == ("Alice", "alice@example.com", HASH, True, 1, 1)

    def test_stale_version_is_an_edit_conflict(self, models, fake_db):
        fake_db.cursor.fetchone.return_value = None
        user = _user(id=1, version=1)
        with pytest.raises(EditConflictError):
            models.users.update(user)
        assert user.version == 1

    def test_email_collision(self, models, fake_db):
        fake_db.cursor.execute.side_effect = DuplicateKeyError("users_email_key")
        with pytest.raises(DuplicateKeyError) as exc:
            models.users.update(_user(id=1, version=1, email="bob@example.com"))
        assert exc.value.field == "email"


class TestDelete:
    def test_deletes_row(self, models, fake_db):
        fake_db.cursor.rowcount = 1
        models.users.delete(1)

    def test_missing_row_is_not_found(self, models, fake_db):
        fake_db.cursor.rowcount = 0
        with pytest.raises(NotFoundError):
            models.users.delete(1)
