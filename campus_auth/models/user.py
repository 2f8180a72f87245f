"""
Domain model (plain Python dataclass) representing a User row from the DB.

Students, teachers and admins share one record shape; ``user_type`` tells
them apart and only students carry ``student_id`` / ``student_class``.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class UserType(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class Role(str, Enum):
    STUDENT = "ROLE_STUDENT"
    TEACHER = "ROLE_TEACHER"
    ADMIN = "ROLE_ADMIN"


DEFAULT_ROLES: dict[UserType, frozenset[Role]] = {
    UserType.STUDENT: frozenset({Role.STUDENT}),
    UserType.TEACHER: frozenset({Role.TEACHER}),
    UserType.ADMIN: frozenset({Role.ADMIN}),
}


@dataclass
class User:
    id: int
    email: str
    hashed_password: str
    user_type: UserType
    is_active: bool
    created_at: datetime
    updated_at: datetime
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    student_id: Optional[str] = None
    student_class: Optional[str] = None
    roles: frozenset[Role] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        logger.trace("Initialized User model id=%s", self.id)

    @property
    def role_names(self) -> list[str]:
        """Role values in a stable order, as exposed in API responses."""
        return sorted(role.value for role in self.roles)

    @classmethod
    def from_row(cls, row, roles=()) -> "User":
        """Build a User from a sqlite3.Row object and its role values."""
        logger.trace("Hydrating User from database row")
        return cls(
            id=row["id"],
            email=row["email"],
            hashed_password=row["hashed_password"],
            user_type=UserType(row["user_type"]),
            first_name=row["first_name"],
            last_name=row["last_name"],
            student_id=row["student_id"],
            student_class=row["student_class"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            roles=frozenset(Role(r) for r in roles),
        )


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """Identity of the caller, resolved from a verified access token."""

    id: int
    email: str
    roles: frozenset[Role] = frozenset()

    @classmethod
    def from_user(cls, user: User) -> "AuthenticatedPrincipal":
        return cls(id=user.id, email=user.email, roles=user.roles)
