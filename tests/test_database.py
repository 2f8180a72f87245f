"""Unit tests for db/database.py transaction scopes and db/schema.py constraints."""

import sqlite3

import pytest

from campus_auth.db.database import transaction


def _insert_user(conn, email):
    conn.execute(
        "INSERT INTO users (email, hashed_password, user_type) VALUES (?, 'h', 'student')",
        (email,),
    )


def _count_users(conn):
    return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]


def test_transaction_commits_on_success(conn):
    with transaction(conn):
        _insert_user(conn, "a@x.com")

    assert not conn.in_transaction
    assert _count_users(conn) == 1


def test_transaction_rolls_back_every_statement_on_error(conn):
    with pytest.raises(RuntimeError):
        with transaction(conn):
            _insert_user(conn, "a@x.com")
            _insert_user(conn, "b@x.com")
            raise RuntimeError("boom")

    assert _count_users(conn) == 0


def test_nested_transaction_rollback_keeps_outer_work(conn):
    with transaction(conn):
        _insert_user(conn, "outer@x.com")
        with pytest.raises(RuntimeError):
            with transaction(conn):
                _insert_user(conn, "inner@x.com")
                raise RuntimeError("boom")

    emails = [r["email"] for r in conn.execute("SELECT email FROM users")]
    assert emails == ["outer@x.com"]


def test_schema_allows_one_refresh_token_per_user(conn):
    _insert_user(conn, "a@x.com")
    conn.execute(
        "INSERT INTO refresh_tokens (user_id, token, expiry_date) VALUES (1, 't1', '2099-01-01')"
    )

    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO refresh_tokens (user_id, token, expiry_date) VALUES (1, 't2', '2099-01-01')"
        )


def test_schema_rejects_duplicate_email(conn):
    _insert_user(conn, "a@x.com")

    with pytest.raises(sqlite3.IntegrityError):
        _insert_user(conn, "a@x.com")
