"""
Refresh token lifecycle: issue (with rotation), lookup, expiry check, removal.

A user owns at most one refresh token. Creating a new one deletes the old row
and inserts the replacement inside a single savepoint, so readers never see
two rows for the same user. Two concurrent creates for the same user are not
serialized; the loser fails on the UNIQUE(user_id) constraint.
"""
import sqlite3
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from campus_auth.core.config import settings
from campus_auth.core.exceptions import RefreshTokenExpiredError
from campus_auth.db.database import transaction
from campus_auth.models.token import RefreshToken
from campus_auth.repositories.token_repository import TokenRepository

logger = logging.getLogger(__name__)


class RefreshTokenService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing RefreshTokenService")
        self._conn = conn
        self._repo = TokenRepository(conn)

    def create(self, user_id: int) -> RefreshToken:
        """Issue a fresh refresh token for *user_id*, replacing any prior one."""
        expiry_date = datetime.now(tz=timezone.utc) + timedelta(
            days=settings.REFRESH_TOKEN_EXPIRE_DAYS
        )
        with transaction(self._conn):
            replaced = self._repo.delete_by_user_id(user_id)
            token = self._repo.create(user_id, str(uuid.uuid4()), expiry_date)
        logger.info(
            "Refresh token issued for user id=%s replaced=%s", user_id, replaced
        )
        return token

    def find_by_token(self, token: str) -> Optional[RefreshToken]:
        return self._repo.get_by_token(token)

    def verify_expiration(self, token: RefreshToken) -> RefreshToken:
        """
        Return *token* unchanged if it is still valid.

        An expired token is deleted inside its own savepoint before
        RefreshTokenExpiredError is raised. When no outer transaction is open
        the release commits only that delete, so the request-level rollback
        cannot resurrect the row.
        """
        if token.is_expired():
            logger.warning("Refresh token expired for user id=%s", token.user_id)
            with transaction(self._conn):
                self._repo.delete(token.id)
            raise RefreshTokenExpiredError()
        return token

    def delete_by_user_id(self, user_id: int) -> int:
        return self._repo.delete_by_user_id(user_id)

    def purge_expired(self) -> int:
        """Remove every expired refresh token; returns the number removed."""
        return self._repo.delete_expired(datetime.now(tz=timezone.utc))
