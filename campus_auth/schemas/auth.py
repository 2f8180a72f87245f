"""
Pydantic schemas for the /auth request and response bodies.
JSON field names are camelCase; Python attributes stay snake_case.
"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


def normalize_email(value: str) -> str:
    """Canonical form used to store and look up emails (trimmed, lowercase)."""
    return value.strip().lower()


class CamelModel(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class SignupRequest(CamelModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("email")
    @classmethod
    def canonical_email(cls, v: str) -> str:
        return normalize_email(v)


class SignupStudentRequest(SignupRequest):
    student_id: Optional[str] = Field(None, max_length=50)
    student_class: Optional[str] = Field(None, max_length=50)


class SignupTeacherRequest(SignupRequest):
    pass


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def canonical_email(cls, v: str) -> str:
        return normalize_email(v)


class TokenRefreshRequest(CamelModel):
    """Request body for the /auth/refreshtoken endpoint."""
    refresh_token: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class ApiResponse(CamelModel):
    message: str
    status: bool


class JwtResponse(CamelModel):
    """Response schema returned after a successful signin."""
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    id: int
    email: str
    username: str
    roles: list[str]


class TokenRefreshResponse(CamelModel):
    """Response schema returned after a successful token refresh."""
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
