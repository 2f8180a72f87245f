"""
Security utilities: password hashing and access-token issuing/verification.
"""
from datetime import datetime, timedelta, timezone
from typing import Any
import logging

from jose import jwt
from jose.exceptions import JOSEError
from passlib.context import CryptContext

from campus_auth.core.config import settings
from campus_auth.core.exceptions import SigningConfigurationError
from campus_auth.models.user import AuthenticatedPrincipal

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Return the bcrypt hash of *plain_password*."""
    logger.trace("Hashing user password")
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if *plain_password* matches *hashed_password*."""
    logger.trace("Verifying password hash")
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    """Spend the time of one hash check so unknown emails are not observable."""
    pwd_context.dummy_verify()


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------

def _sign(payload: dict[str, Any]) -> str:
    if not settings.SECRET_KEY:
        logger.error("SECRET_KEY is empty, cannot sign access tokens")
        raise SigningConfigurationError("Signing key is not configured")
    try:
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    except JOSEError as exc:
        logger.error("Access token signing failed algorithm=%s", settings.ALGORITHM)
        raise SigningConfigurationError(
            f"Cannot sign tokens with algorithm {settings.ALGORITHM!r}"
        ) from exc


def create_access_token_for_email(email: str) -> str:
    """
    Create a short-lived access token whose subject is *email*.

    Used on refresh, where only the owning user's email is known.
    """
    now = datetime.now(tz=timezone.utc)
    payload: dict[str, Any] = {
        "sub": email,
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    token = _sign(payload)
    logger.info("Issued access token for subject=%s", email)
    return token


def create_access_token(principal: AuthenticatedPrincipal) -> str:
    """Create an access token for an authenticated principal."""
    logger.trace("Creating access token for user id=%s", principal.id)
    return create_access_token_for_email(principal.email)


def decode_token(token: str) -> dict:
    """
    Decode and verify an access token.

    Raises:
        jose.JWTError: if the token is invalid or expired.
    """
    logger.trace("Decoding JWT token")
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
