"""
tests/conftest.py -- shared fixtures.

DATABASE_URL and LOG_FILE_PATH must point into a temp dir before any
campus_auth import: settings are read once, and the database module derives
its file path at import time.
"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="campus_auth_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["LOG_FILE_PATH"] = os.path.join(_TMP_DIR, "test.log")
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"

import pytest
from fastapi.testclient import TestClient

from campus_auth.main import app
from campus_auth.db.database import get_connection, init_db
from campus_auth.db.schema import apply_schema


@pytest.fixture
def conn():
    """Private in-memory database with the full schema applied."""
    c = get_connection(":memory:")
    apply_schema(c)
    yield c
    c.close()


@pytest.fixture
def client():
    """TestClient over the real app, backed by an emptied file database."""
    init_db()
    c = get_connection()
    for table in ("refresh_tokens", "user_roles", "users"):
        c.execute(f"DELETE FROM {table}")
    c.commit()
    c.close()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_conn():
    """Connection to the same file database the app uses, for assertions."""
    c = get_connection()
    yield c
    c.close()
