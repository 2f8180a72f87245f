"""
User registration service.

Business rules enforced here:
- Email addresses are unique across students, teachers and admins.
- Each account gets the default role of its type; roles never change here.
- Signup never issues tokens, the new user signs in separately.
"""
import sqlite3
import logging

from fastapi import HTTPException, status

from campus_auth.core.exceptions import DuplicateUserError
from campus_auth.core.security import hash_password
from campus_auth.models.user import DEFAULT_ROLES, User, UserType
from campus_auth.repositories.user_repository import UserRepository
from campus_auth.schemas.auth import SignupStudentRequest, SignupTeacherRequest

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing UserService")
        self._repo = UserRepository(conn)

    def create_student(self, data: SignupStudentRequest) -> User:
        logger.info("Registering student")
        return self._register(
            data,
            UserType.STUDENT,
            student_id=data.student_id,
            student_class=data.student_class,
        )

    def create_teacher(self, data: SignupTeacherRequest) -> User:
        logger.info("Registering teacher")
        return self._register(data, UserType.TEACHER)

    def _register(self, data, user_type: UserType, **subtype_fields) -> User:
        if self._repo.exists_by_email(data.email):
            logger.warning("Duplicate email registration attempt type=%s", user_type.value)
            raise DuplicateUserError(data.email)

        try:
            user = self._repo.create(
                email=data.email,
                hashed_password=hash_password(data.password),
                user_type=user_type,
                roles=DEFAULT_ROLES[user_type],
                first_name=data.first_name,
                last_name=data.last_name,
                **subtype_fields,
            )
        except sqlite3.IntegrityError as exc:
            # lost a race against a concurrent signup for the same email
            raise DuplicateUserError(data.email) from exc
        logger.info("User registered id=%s type=%s", user.id, user_type.value)
        return user

    def get_user(self, user_id: int) -> User:
        """Return a user or raise 404."""
        user = self._repo.get_by_id(user_id)
        if user is None:
            logger.warning("User id=%s not found", user_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"User with id={user_id} not found",
            )
        return user
