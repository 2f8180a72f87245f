"""Tests for db/seeder.py -- development admin seeding."""

from campus_auth.core.config import settings
from campus_auth.db.seeder import seed_admin


def test_seed_admin_is_idempotent_and_can_sign_in(client, db_conn):
    seed_admin()
    seed_admin()

    assert db_conn.execute(
        "SELECT COUNT(*) FROM users WHERE email = ?", (settings.ADMIN_EMAIL,)
    ).fetchone()[0] == 1

    resp = client.post(
        "/auth/signin",
        json={"email": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD},
    )
    assert resp.status_code == 200
    assert resp.json()["roles"] == ["ROLE_ADMIN"]
