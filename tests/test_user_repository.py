"""Unit tests for repositories/user_repository.py -- user + role persistence."""

import sqlite3
from types import SimpleNamespace

import pytest

from campus_auth.models.user import Role, UserType
from campus_auth.repositories.user_repository import UserRepository


def test_create_persists_user_with_roles(conn):
    user = UserRepository(conn).create(
        email="t@x.com",
        hashed_password="h",
        user_type=UserType.TEACHER,
        roles=[Role.TEACHER, Role.ADMIN],
    )

    assert user.roles == frozenset({Role.TEACHER, Role.ADMIN})
    assert user.role_names == ["ROLE_ADMIN", "ROLE_TEACHER"]


def test_failed_role_insert_leaves_no_user_row(conn):
    repo = UserRepository(conn)
    bogus_role = SimpleNamespace(value="ROLE_BOGUS")

    with pytest.raises(sqlite3.IntegrityError):
        repo.create(
            email="s@x.com",
            hashed_password="h",
            user_type=UserType.STUDENT,
            roles=[Role.STUDENT, bogus_role],
        )

    assert repo.count() == 0
    assert conn.execute("SELECT COUNT(*) FROM user_roles").fetchone()[0] == 0
