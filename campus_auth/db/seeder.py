"""
Database seeder – creates an admin account on startup when SEED_ADMIN is set.

⚠️  FOR DEVELOPMENT ONLY.
    Credentials come from ADMIN_EMAIL / ADMIN_PASSWORD in the environment.
"""
import logging

from campus_auth.core.config import settings
from campus_auth.core.security import hash_password
from campus_auth.db.database import get_connection
from campus_auth.models.user import DEFAULT_ROLES, UserType
from campus_auth.repositories.user_repository import UserRepository
from campus_auth.schemas.auth import normalize_email

logger = logging.getLogger(__name__)


def seed_admin() -> None:
    """
    Insert the admin user if it does not already exist.
    Safe to call on every startup – it is a no-op when the user is present.
    """
    email = normalize_email(settings.ADMIN_EMAIL)
    conn = get_connection()
    try:
        repo = UserRepository(conn)
        if repo.exists_by_email(email):
            logger.info("Seeder: admin '%s' already exists – skipping.", email)
            return

        repo.create(
            email=email,
            hashed_password=hash_password(settings.ADMIN_PASSWORD),
            user_type=UserType.ADMIN,
            roles=DEFAULT_ROLES[UserType.ADMIN],
            first_name="Default",
            last_name="Admin",
        )
        conn.commit()
        logger.info("Seeder: created admin user '%s'.", email)
    finally:
        conn.close()
