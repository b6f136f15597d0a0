"""Shared fixtures: an in-process stand-in for the Database handle."""

from contextlib import contextmanager
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from psycopg2 import sql

from repositories.facade import new_models
from security import password as password_module

CREATED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeDatabase:
    """Yields one MagicMock cursor per transaction; counts transactions."""

    def __init__(self):
        self.cursor = MagicMock()
        self.transactions = 0

    @contextmanager
    def transaction(self):
        self.transactions += 1
        yield self.cursor


def flatten(composable):
    """Yield the leaf parts of a psycopg2.sql composition."""
    if isinstance(composable, sql.Composed):
        for part in composable.seq:
            yield from flatten(part)
    else:
        yield composable


def sql_text(composable) -> str:
    """Concatenate the literal SQL fragments, ignoring identifiers."""
    return "".join(p.string for p in flatten(composable) if isinstance(p, sql.SQL))


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def models(fake_db):
    return new_models(fake_db)


@pytest.fixture
def fast_hashing(monkeypatch):
    """Lower the bcrypt cost so tests that hash many times stay quick."""
    monkeypatch.setattr(password_module, "BCRYPT_COST", 4)
