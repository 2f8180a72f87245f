"""
Repository layer for User persistence.
All SQL for the `users` and `user_roles` tables lives here.
"""
import sqlite3
from typing import Iterable, Optional
import logging

from campus_auth.models.user import Role, User, UserType
from campus_auth.core.logging_config import log_db_timing
from campus_auth.db.database import transaction

logger = logging.getLogger(__name__)


class UserRepository:
    """Data access layer for user records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Store the database connection for query execution."""
        logger.trace("Initializing UserRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _hydrate(self, row) -> User:
        roles = self._conn.execute(
            "SELECT role FROM user_roles WHERE user_id = ?", (row["id"],)
        ).fetchall()
        return User.from_row(row, roles=[r["role"] for r in roles])

    @log_db_timing
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Return a user by id or None if missing."""
        logger.trace("Fetching user by id=%s", user_id)
        row = self._conn.execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        return self._hydrate(row) if row else None

    @log_db_timing
    def get_by_email(self, email: str) -> Optional[User]:
        """Return a user by email or None if missing."""
        logger.trace("Fetching user by email")
        row = self._conn.execute(
            "SELECT * FROM users WHERE email = ?", (email,)
        ).fetchone()
        return self._hydrate(row) if row else None

    @log_db_timing
    def exists_by_email(self, email: str) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM users WHERE email = ?", (email,)
        ).fetchone()
        return row is not None

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        email: str,
        hashed_password: str,
        user_type: UserType,
        roles: Iterable[Role],
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        student_id: Optional[str] = None,
        student_class: Optional[str] = None,
    ) -> User:
        """Insert a user row plus its role rows atomically and return the user."""
        logger.info("Creating user record type=%s", user_type.value)
        with transaction(self._conn):
            cursor = self._conn.execute(
                """
                INSERT INTO users (
                    email, hashed_password, first_name, last_name,
                    user_type, student_id, student_class
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    email,
                    hashed_password,
                    first_name,
                    last_name,
                    user_type.value,
                    student_id,
                    student_class,
                ),
            )
            user_id = cursor.lastrowid
            self._conn.executemany(
                "INSERT INTO user_roles (user_id, role) VALUES (?, ?)",
                [(user_id, role.value) for role in roles],
            )
        return self.get_by_id(user_id)  # type: ignore[return-value]
