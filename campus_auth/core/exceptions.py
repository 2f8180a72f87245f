"""
Domain errors raised by the authentication services.

Each error carries the HTTP status it is surfaced with; the mapping to a JSON
response lives in ``campus_auth.main``.
"""
from typing import Optional

from fastapi import status


class AuthError(Exception):
    """Base class for every error the auth flow surfaces to a caller."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    headers: Optional[dict[str, str]] = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateUserError(AuthError):
    """Signup attempted with an email that is already registered."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, email: str) -> None:
        super().__init__(f"User already exists with email: {email}")
        self.email = email


class InvalidCredentialsError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self) -> None:
        super().__init__("Bad credentials")


class RefreshTokenNotFoundError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self) -> None:
        super().__init__("Refresh token is not in database!")


class RefreshTokenExpiredError(AuthError):
    """The token existed but was past its expiry; its row is already gone."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self) -> None:
        super().__init__(
            "Refresh token was expired. Please make a new signin request"
        )


class SigningConfigurationError(AuthError):
    """Key material or algorithm is unusable; fatal for every request."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
