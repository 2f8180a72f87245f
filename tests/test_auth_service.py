"""Unit tests for services/auth_service.py and services/user_service.py.

Covers:
- signup uniqueness and default roles per user type
- signin token issuing and refresh-token rotation on repeat signin
- refresh round-trip, not-found and expiry paths
- signout with and without an authenticated principal
"""

from datetime import datetime, timedelta, timezone

import pytest

from campus_auth.core.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
)
from campus_auth.core.security import decode_token
from campus_auth.models.user import AuthenticatedPrincipal, UserType
from campus_auth.repositories.token_repository import TokenRepository
from campus_auth.repositories.user_repository import UserRepository
from campus_auth.schemas.auth import SignupStudentRequest, SignupTeacherRequest
from campus_auth.services.auth_service import AuthService
from campus_auth.services.user_service import UserService


@pytest.fixture
def users(conn):
    return UserService(conn)


@pytest.fixture
def auth(conn):
    return AuthService(conn)


@pytest.fixture
def student(users):
    return users.create_student(
        SignupStudentRequest(
            email="a@x.com",
            password="p1",
            first_name="Ada",
            student_id="STU001",
            student_class="Class A",
        )
    )


def _token_count(conn, user_id):
    return TokenRepository(conn).count_for_user(user_id)


# ---------------------------------------------------------------------------
# Signup
# ---------------------------------------------------------------------------


def test_signup_student_stores_hashed_password_and_student_role(conn, student):
    assert student.user_type == UserType.STUDENT
    assert student.role_names == ["ROLE_STUDENT"]
    assert student.student_id == "STU001"
    assert student.hashed_password != "p1"
    assert UserRepository(conn).count() == 1


def test_signup_teacher_gets_teacher_role(users):
    teacher = users.create_teacher(
        SignupTeacherRequest(email="t@x.com", password="p1", first_name="Tess")
    )

    assert teacher.user_type == UserType.TEACHER
    assert teacher.role_names == ["ROLE_TEACHER"]
    assert teacher.student_id is None


def test_signup_with_existing_email_fails_without_second_record(conn, users, student):
    with pytest.raises(DuplicateUserError):
        users.create_teacher(SignupTeacherRequest(email="a@x.com", password="other"))

    assert UserRepository(conn).count() == 1


def test_signup_issues_no_refresh_token(conn, student):
    assert _token_count(conn, student.id) == 0


# ---------------------------------------------------------------------------
# Signin
# ---------------------------------------------------------------------------


def test_signin_returns_token_pair_and_roles(conn, auth, student):
    result = auth.signin("a@x.com", "p1")

    assert result.access_token
    assert result.refresh_token
    assert result.id == student.id
    assert result.email == result.username == "a@x.com"
    assert "ROLE_STUDENT" in result.roles
    assert decode_token(result.access_token)["sub"] == "a@x.com"
    assert _token_count(conn, student.id) == 1


def test_repeated_signin_keeps_one_refresh_token(conn, auth, student):
    first = auth.signin("a@x.com", "p1")
    second = auth.signin("a@x.com", "p1")

    assert _token_count(conn, student.id) == 1
    assert first.refresh_token != second.refresh_token
    with pytest.raises(RefreshTokenNotFoundError):
        auth.refresh(first.refresh_token)


def test_signin_with_wrong_password_creates_nothing(conn, auth, student):
    with pytest.raises(InvalidCredentialsError) as exc_info:
        auth.signin("a@x.com", "wrong")

    assert exc_info.value.status_code == 401
    assert _token_count(conn, student.id) == 0


def test_signin_with_unknown_email_fails(auth):
    with pytest.raises(InvalidCredentialsError):
        auth.signin("nobody@x.com", "p1")


def test_signin_of_inactive_user_fails(conn, auth, student):
    conn.execute("UPDATE users SET is_active = 0 WHERE id = ?", (student.id,))

    with pytest.raises(InvalidCredentialsError):
        auth.signin("a@x.com", "p1")
    assert _token_count(conn, student.id) == 0


# ---------------------------------------------------------------------------
# Refresh
# ---------------------------------------------------------------------------


def test_refresh_rotates_token_and_invalidates_previous_value(conn, auth, student):
    issued = auth.signin("a@x.com", "p1")

    refreshed = auth.refresh(issued.refresh_token)

    assert refreshed.token_type == "Bearer"
    assert refreshed.refresh_token != issued.refresh_token
    assert decode_token(refreshed.access_token)["sub"] == "a@x.com"
    assert _token_count(conn, student.id) == 1
    with pytest.raises(RefreshTokenNotFoundError):
        auth.refresh(issued.refresh_token)

    again = auth.refresh(refreshed.refresh_token)
    assert again.refresh_token not in (issued.refresh_token, refreshed.refresh_token)


def test_refresh_with_never_issued_token_is_not_found(auth):
    with pytest.raises(RefreshTokenNotFoundError) as exc_info:
        auth.refresh("invalid-refresh-token")

    assert exc_info.value.status_code == 403


def test_expired_refresh_token_is_deleted_on_first_probe(conn, auth, student):
    issued = auth.signin("a@x.com", "p1")
    past = datetime.now(tz=timezone.utc) - timedelta(minutes=1)
    conn.execute(
        "UPDATE refresh_tokens SET expiry_date = ? WHERE token = ?",
        (past.isoformat(timespec="microseconds"), issued.refresh_token),
    )

    with pytest.raises(RefreshTokenExpiredError):
        auth.refresh(issued.refresh_token)
    assert _token_count(conn, student.id) == 0

    with pytest.raises(RefreshTokenNotFoundError):
        auth.refresh(issued.refresh_token)


# ---------------------------------------------------------------------------
# Signout
# ---------------------------------------------------------------------------


def test_signout_deletes_refresh_token_of_principal(conn, auth, student):
    issued = auth.signin("a@x.com", "p1")
    principal = AuthenticatedPrincipal.from_user(student)

    assert auth.signout(principal) == 1
    assert auth.signout(principal) == 0
    with pytest.raises(RefreshTokenNotFoundError):
        auth.refresh(issued.refresh_token)


@pytest.mark.parametrize("principal", [None, object(), {"id": 1}])
def test_signout_without_authenticated_principal_is_a_noop(conn, auth, student, principal):
    auth.signin("a@x.com", "p1")

    assert auth.signout(principal) == 0
    assert _token_count(conn, student.id) == 1
