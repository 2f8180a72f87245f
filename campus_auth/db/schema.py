"""
SQL DDL statements for all application tables.
Tables are created in dependency order so foreign keys resolve correctly.
"""
import sqlite3

from campus_auth.db.database import get_connection

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    email             TEXT    NOT NULL UNIQUE,
    hashed_password   TEXT    NOT NULL,
    first_name        TEXT,
    last_name         TEXT,
    user_type         TEXT    NOT NULL
                              CHECK(user_type IN ('student', 'teacher', 'admin')),
    student_id        TEXT,
    student_class     TEXT,
    is_active         INTEGER NOT NULL DEFAULT 1,
    created_at        TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at        TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_USER_ROLES_TABLE = """
CREATE TABLE IF NOT EXISTS user_roles (
    user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    role        TEXT    NOT NULL
                        CHECK(role IN ('ROLE_STUDENT', 'ROLE_TEACHER', 'ROLE_ADMIN')),
    PRIMARY KEY (user_id, role)
);
"""

# user_id is UNIQUE: at most one live refresh token per user
CREATE_REFRESH_TOKENS_TABLE = """
CREATE TABLE IF NOT EXISTS refresh_tokens (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     INTEGER NOT NULL UNIQUE REFERENCES users(id) ON DELETE CASCADE,
    token       TEXT    NOT NULL UNIQUE,
    expiry_date TEXT    NOT NULL,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

ALL_TABLES = [
    CREATE_USERS_TABLE,
    CREATE_USER_ROLES_TABLE,
    CREATE_REFRESH_TOKENS_TABLE,
]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Create every table on *conn* (IF NOT EXISTS, safe on every restart)."""
    cursor = conn.cursor()
    for ddl in ALL_TABLES:
        cursor.execute(ddl)
    conn.commit()


def create_tables() -> None:
    """Create all tables in the configured database."""
    conn = get_connection()
    try:
        apply_schema(conn)
    finally:
        conn.close()
