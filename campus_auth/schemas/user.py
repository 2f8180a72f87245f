"""
Pydantic schemas for User responses.
"""
from datetime import datetime
from typing import Optional

from campus_auth.models.user import User, UserType
from campus_auth.schemas.auth import CamelModel


class UserResponse(CamelModel):
    id: int
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    user_type: UserType
    student_id: Optional[str] = None
    student_class: Optional[str] = None
    roles: list[str]
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            user_type=user.user_type,
            student_id=user.student_id,
            student_class=user.student_class,
            roles=user.role_names,
            created_at=user.created_at,
        )
