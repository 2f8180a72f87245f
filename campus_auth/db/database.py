"""Database connection helpers, transaction scopes and initialization."""

import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from typing import Iterator

from campus_auth.core.config import settings

logger = logging.getLogger(__name__)

# Extract the file path from the DATABASE_URL (strip "sqlite:///")
DB_PATH = settings.DATABASE_URL.replace("sqlite:///", "")

db_dir = os.path.dirname(DB_PATH) if os.path.dirname(DB_PATH) else "."
os.makedirs(db_dir, exist_ok=True)
logger.info("Database directory ensured at %s", db_dir)


def get_connection(path: str = DB_PATH) -> sqlite3.Connection:
    """Create and return a new SQLite connection with row factory."""
    logger.trace("Opening database connection to %s", path)
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db():
    """Context manager that yields a database connection and auto-commits/rolls back."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
        logger.trace("Database transaction committed")
    except Exception:
        logger.error("Database transaction rolled back", exc_info=True)
        conn.rollback()
        raise
    finally:
        conn.close()
        logger.trace("Database connection closed")


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """
    Run a group of statements atomically inside a SAVEPOINT.

    Nests inside whatever transaction the connection already has open; when
    there is none, releasing the savepoint commits.
    """
    name = f"sp_{uuid.uuid4().hex}"
    conn.execute(f"SAVEPOINT {name}")
    logger.trace("Savepoint %s acquired", name)
    try:
        yield conn
    except Exception:
        conn.execute(f"ROLLBACK TO SAVEPOINT {name}")
        conn.execute(f"RELEASE SAVEPOINT {name}")
        logger.warning("Savepoint %s rolled back", name)
        raise
    conn.execute(f"RELEASE SAVEPOINT {name}")
    logger.trace("Savepoint %s released", name)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    logger.info("Initializing database schema")
    from campus_auth.db import schema
    schema.create_tables()
