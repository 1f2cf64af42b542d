"""SQLite connection + schema initialisation."""
from __future__ import annotations
import os
import sqlite3

from loguru import logger

from trackboard.core import config

_MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "migrations")


def get_connection() -> sqlite3.Connection:
    # config is read on every call so tests can point DATABASE_PATH elsewhere
    conn = sqlite3.connect(config.DATABASE_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db() -> None:
    """Run all migration SQL files, in name order, against the database."""
    directory = os.path.dirname(config.DATABASE_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)

    migrations = sorted(f for f in os.listdir(_MIGRATIONS_DIR) if f.endswith(".sql"))
    conn = get_connection()
    try:
        for name in migrations:
            with open(os.path.join(_MIGRATIONS_DIR, name), "r", encoding="utf-8") as f:
                conn.executescript(f.read())
        conn.commit()
    finally:
        conn.close()
    logger.info(f"Database ready at {config.DATABASE_PATH} ({len(migrations)} migration file(s))")
