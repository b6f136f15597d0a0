"""
main.py
-------
Entry point for the Greenlight data layer.

Responsibilities:
    - Configure logging.
    - Open the database connection pool and create the schema.
    - Build the shared Models facade handed to the transport layer.
"""

import config
from db.connection import Database
from db.init_db import create_tables
from repositories.facade import Models, new_models
from utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def open_database() -> Database:
    return Database(
        config.DATABASE_URL,
        min_conn=config.DB_MIN_CONNS,
        max_conn=config.DB_MAX_CONNS,
        query_timeout=config.DB_QUERY_TIMEOUT_SECONDS,
    )


def bootstrap(db: Database) -> Models:
    """Prepare the schema and build the facade around an open database."""
    create_tables(db)
    models = new_models(db)
    logger.info("Models ready.")
    return models


def main() -> None:
    configure_logging(config.LOG_LEVEL)
    db = open_database()
    try:
        bootstrap(db)
        logger.info("Data layer initialized; no transport is attached in this process.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
