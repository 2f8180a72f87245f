"""
Authentication service: orchestrates signin, token refresh, and signout logic.
"""
import sqlite3
from typing import Optional
import logging

from campus_auth.core.exceptions import (
    InvalidCredentialsError,
    RefreshTokenNotFoundError,
)
from campus_auth.core.security import (
    create_access_token,
    create_access_token_for_email,
    dummy_verify,
    verify_password,
)
from campus_auth.models.user import AuthenticatedPrincipal
from campus_auth.repositories.user_repository import UserRepository
from campus_auth.schemas.auth import JwtResponse, TokenRefreshResponse
from campus_auth.services.refresh_token_service import RefreshTokenService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing AuthService")
        self._user_repo = UserRepository(conn)
        self._refresh_tokens = RefreshTokenService(conn)

    # ------------------------------------------------------------------
    # Signin
    # ------------------------------------------------------------------

    def signin(self, email: str, password: str) -> JwtResponse:
        """
        Validate credentials and issue an access token plus a refresh token.
        Any prior refresh token of the user is replaced.
        """
        logger.info("Authenticating user")
        user = self._user_repo.get_by_email(email)
        if user is None:
            dummy_verify()
            logger.warning("Signin attempt for unknown email")
            raise InvalidCredentialsError()

        if not verify_password(password, user.hashed_password):
            logger.warning("Invalid password for user id=%s", user.id)
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning("Inactive user attempted signin id=%s", user.id)
            raise InvalidCredentialsError()

        principal = AuthenticatedPrincipal.from_user(user)
        access_token = create_access_token(principal)
        refresh_token = self._refresh_tokens.create(user.id)
        logger.info("Signin successful for user id=%s", user.id)

        return JwtResponse(
            access_token=access_token,
            refresh_token=refresh_token.token,
            id=user.id,
            email=user.email,
            username=user.email,
            roles=user.role_names,
        )

    # ------------------------------------------------------------------
    # Token refresh
    # ------------------------------------------------------------------

    def refresh(self, refresh_token_str: str) -> TokenRefreshResponse:
        """
        Exchange a stored, unexpired refresh token for a new token pair.

        The presented token is rotated: its row is replaced, so presenting the
        same value again fails with RefreshTokenNotFoundError.
        """
        stored = self._refresh_tokens.find_by_token(refresh_token_str)
        if stored is None:
            logger.warning("Refresh token not found")
            raise RefreshTokenNotFoundError()

        stored = self._refresh_tokens.verify_expiration(stored)

        user = self._user_repo.get_by_id(stored.user_id)
        if user is None:
            logger.warning("Refresh token owner id=%s missing", stored.user_id)
            raise RefreshTokenNotFoundError()

        access_token = create_access_token_for_email(user.email)
        rotated = self._refresh_tokens.create(user.id)
        logger.info("Refresh token rotated for user id=%s", user.id)
        return TokenRefreshResponse(
            access_token=access_token,
            refresh_token=rotated.token,
        )

    # ------------------------------------------------------------------
    # Signout
    # ------------------------------------------------------------------

    def signout(self, principal: Optional[object]) -> int:
        """
        Drop the refresh token of *principal* when it is an authenticated user.

        Anything else (no principal, a foreign object) is a no-op. Returns the
        number of refresh tokens deleted; callers treat every outcome as success.
        """
        if not isinstance(principal, AuthenticatedPrincipal):
            logger.info("Signout without authenticated principal, nothing to revoke")
            return 0
        deleted = self._refresh_tokens.delete_by_user_id(principal.id)
        logger.info("Signout user id=%s refresh tokens deleted=%s", principal.id, deleted)
        return deleted
