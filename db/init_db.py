"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import Database
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Movies table: catalog records, versioned for optimistic concurrency
CREATE TABLE IF NOT EXISTS movies (
    id              BIGSERIAL PRIMARY KEY,
    created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    title           TEXT NOT NULL,
    year            INTEGER NOT NULL,
    runtime         INTEGER NOT NULL,
    genres          TEXT[] NOT NULL,
    version         INTEGER NOT NULL DEFAULT 1,
    CONSTRAINT movies_runtime_check CHECK (runtime > 0),
    CONSTRAINT movies_year_check CHECK (year BETWEEN 1888 AND date_part('year', now()) + 1),
    CONSTRAINT genres_length_check CHECK (array_length(genres, 1) BETWEEN 1 AND 5)
);

-- Users table: accounts; the email is unique across all users
CREATE TABLE IF NOT EXISTS users (
    id              BIGSERIAL PRIMARY KEY,
    created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    name            TEXT NOT NULL,
    email           TEXT NOT NULL,
    password_hash   BYTEA NOT NULL,
    activated       BOOLEAN NOT NULL DEFAULT FALSE,
    version         INTEGER NOT NULL DEFAULT 1,
    CONSTRAINT users_email_key UNIQUE (email)
);

-- Indexes for the list predicates
CREATE INDEX IF NOT EXISTS movies_title_idx ON movies (lower(title));
CREATE INDEX IF NOT EXISTS movies_genres_idx ON movies USING GIN (genres);
"""

DROP_SQL = """
DROP TABLE IF EXISTS users;
DROP TABLE IF EXISTS movies;
"""


def create_tables(db: Database) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    with db.transaction() as cur:
        cur.execute(SCHEMA_SQL)
    logger.info("Database schema initialized successfully.")


def drop_tables(db: Database) -> None:
    """Drop every table created by ``create_tables``."""
    with db.transaction() as cur:
        cur.execute(DROP_SQL)
    logger.info("Database schema dropped.")


if __name__ == "__main__":
    import config

    database = Database(config.DATABASE_URL, config.DB_MIN_CONNS, config.DB_MAX_CONNS)
    try:
        create_tables(database)
    finally:
        database.close()
    print("Database schema created successfully.")
