"""
Repository layer for RefreshToken persistence.
All SQL for the `refresh_tokens` table lives here.
"""
import sqlite3
from datetime import datetime
from typing import Optional
import logging

from campus_auth.models.token import RefreshToken
from campus_auth.core.logging_config import log_db_timing

logger = logging.getLogger(__name__)


def _to_db(moment: datetime) -> str:
    # fixed width so string order in SQL matches datetime order
    return moment.isoformat(timespec="microseconds")


class TokenRepository:
    """Data access layer for refresh token records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Store the database connection for query execution."""
        logger.trace("Initializing TokenRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_token(self, token: str) -> Optional[RefreshToken]:
        """Return the refresh token row for the given token string."""
        logger.trace("Fetching refresh token record")
        row = self._conn.execute(
            "SELECT * FROM refresh_tokens WHERE token = ?", (token,)
        ).fetchone()
        return RefreshToken.from_row(row) if row else None

    @log_db_timing
    def get_by_user_id(self, user_id: int) -> Optional[RefreshToken]:
        row = self._conn.execute(
            "SELECT * FROM refresh_tokens WHERE user_id = ?", (user_id,)
        ).fetchone()
        return RefreshToken.from_row(row) if row else None

    @log_db_timing
    def count_for_user(self, user_id: int) -> int:
        return self._conn.execute(
            "SELECT COUNT(*) FROM refresh_tokens WHERE user_id = ?", (user_id,)
        ).fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(self, user_id: int, token: str, expiry_date: datetime) -> RefreshToken:
        """Insert a refresh token row and return it."""
        logger.info("Creating refresh token for user id=%s", user_id)
        cursor = self._conn.execute(
            """
            INSERT INTO refresh_tokens (user_id, token, expiry_date)
            VALUES (?, ?, ?)
            """,
            (user_id, token, _to_db(expiry_date)),
        )
        row = self._conn.execute(
            "SELECT * FROM refresh_tokens WHERE id = ?", (cursor.lastrowid,)
        ).fetchone()
        return RefreshToken.from_row(row)

    @log_db_timing
    def delete(self, token_id: int) -> bool:
        """Delete a single token row and return True if it existed."""
        cursor = self._conn.execute(
            "DELETE FROM refresh_tokens WHERE id = ?", (token_id,)
        )
        logger.info("Refresh token delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0

    @log_db_timing
    def delete_by_user_id(self, user_id: int) -> int:
        """Delete the refresh token of a user and return the count removed."""
        logger.info("Deleting refresh tokens for user id=%s", user_id)
        cursor = self._conn.execute(
            "DELETE FROM refresh_tokens WHERE user_id = ?", (user_id,)
        )
        return cursor.rowcount

    @log_db_timing
    def delete_expired(self, now: datetime) -> int:
        """Delete refresh tokens that expired before *now*."""
        logger.info("Deleting expired refresh tokens")
        cursor = self._conn.execute(
            "DELETE FROM refresh_tokens WHERE expiry_date < ?", (_to_db(now),)
        )
        logger.info("Expired refresh tokens deleted=%s", cursor.rowcount)
        return cursor.rowcount
