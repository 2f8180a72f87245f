"""
Authentication endpoints:
  POST /auth/signup/student   – Register a student account
  POST /auth/signup/teacher   – Register a teacher account
  POST /auth/signin           – Email + password, returns access + refresh tokens
  POST /auth/refreshtoken     – Rotate a refresh token into a new token pair
  POST /auth/signout          – Drop the caller's refresh token (always succeeds)
  GET  /auth/me               – Return the currently authenticated user's profile
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
import logging

from campus_auth.core.dependencies import (
    db_dependency,
    get_current_principal,
    get_optional_principal,
)
from campus_auth.models.user import AuthenticatedPrincipal
from campus_auth.schemas.auth import (
    ApiResponse,
    JwtResponse,
    LoginRequest,
    SignupStudentRequest,
    SignupTeacherRequest,
    TokenRefreshRequest,
    TokenRefreshResponse,
)
from campus_auth.schemas.user import UserResponse
from campus_auth.services.auth_service import AuthService
from campus_auth.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/signup/student",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a student account",
)
def signup_student(body: SignupStudentRequest, conn=Depends(db_dependency)):
    """
    Create a student with role `ROLE_STUDENT`. No tokens are issued;
    the student signs in separately.
    """
    UserService(conn).create_student(body)
    return ApiResponse(message="Student registered successfully", status=True)


@router.post(
    "/signup/teacher",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a teacher account",
)
def signup_teacher(body: SignupTeacherRequest, conn=Depends(db_dependency)):
    """Create a teacher with role `ROLE_TEACHER`."""
    UserService(conn).create_teacher(body)
    return ApiResponse(message="Teacher registered successfully", status=True)


@router.post(
    "/signin",
    response_model=JwtResponse,
    summary="Sign in with email and password",
)
def signin(body: LoginRequest, conn=Depends(db_dependency)):
    """
    Returns a short-lived **access token** and a long-lived **refresh token**.
    Signing in again replaces the previous refresh token.
    """
    logger.info("Signin requested")
    return AuthService(conn).signin(body.email, body.password)


@router.post(
    "/refreshtoken",
    response_model=TokenRefreshResponse,
    summary="Exchange a refresh token for a new token pair",
)
def refresh_token(body: TokenRefreshRequest, conn=Depends(db_dependency)):
    """
    The presented refresh token is consumed: the response carries its
    replacement, and the old value stops working.
    """
    logger.info("Refreshing access token")
    return AuthService(conn).refresh(body.refresh_token)


@router.post(
    "/signout",
    response_model=ApiResponse,
    summary="Sign out the current user",
)
def signout(
    conn=Depends(db_dependency),
    principal: Optional[AuthenticatedPrincipal] = Depends(get_optional_principal),
):
    """
    Deletes the caller's refresh token when a valid Bearer access token is
    sent. Succeeds with or without one.
    """
    logger.info("Signout requested")
    AuthService(conn).signout(principal)
    return ApiResponse(message="User logged out successfully", status=True)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current authenticated user's profile",
)
def get_me(
    conn=Depends(db_dependency),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
):
    """Return the profile of the currently authenticated user."""
    logger.info("Returning profile for user id=%s", principal.id)
    return UserResponse.from_user(UserService(conn).get_user(principal.id))
