"""
FastAPI dependency injection helpers for authentication and authorisation.
"""
from typing import Generator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
import logging

from campus_auth.core.security import ACCESS_TOKEN_TYPE, decode_token
from campus_auth.db.database import get_db
from campus_auth.models.user import AuthenticatedPrincipal
from campus_auth.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# DB dependency
# ---------------------------------------------------------------------------

def db_dependency() -> Generator:
    """Yield a database connection for the duration of a request."""
    logger.trace("Creating database dependency connection")
    with get_db() as conn:
        yield conn


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    conn=Depends(db_dependency),
) -> Optional[AuthenticatedPrincipal]:
    """
    Resolve the caller from a Bearer access token, or return None.

    A missing, malformed, expired or orphaned token all yield None; callers
    that need an identity use get_current_principal instead.
    """
    if credentials is None:
        return None
    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        logger.warning("Ignoring undecodable bearer token")
        return None
    email = payload.get("sub")
    if payload.get("type") != ACCESS_TOKEN_TYPE or not email:
        logger.warning("Bearer token is not an access token")
        return None

    user = UserRepository(conn).get_by_email(email)
    if user is None or not user.is_active:
        logger.warning("Bearer token subject has no active user")
        return None
    logger.info("Authenticated user id=%s", user.id)
    return AuthenticatedPrincipal.from_user(user)


def get_current_principal(
    principal: Optional[AuthenticatedPrincipal] = Depends(get_optional_principal),
) -> AuthenticatedPrincipal:
    """Require an authenticated caller; raises HTTP 401 otherwise."""
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal

