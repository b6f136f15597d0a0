"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.

Only the bootstrap (main.py) reads this module; everything below it
receives its settings as constructor arguments.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "greenlight")
DB_USER: str = os.getenv("DB_USER", "greenlight")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# ── Connection pool ───────────────────────────────────────
DB_MIN_CONNS: int = int(os.getenv("DB_MIN_CONNS", "1"))
DB_MAX_CONNS: int = int(os.getenv("DB_MAX_CONNS", "25"))

# ── Query limits ──────────────────────────────────────────
DB_QUERY_TIMEOUT_SECONDS: float = float(os.getenv("DB_QUERY_TIMEOUT_SECONDS", "3"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
