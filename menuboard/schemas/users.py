"""
User and Account Schemas for Menuboard
======================================

This module defines Pydantic models for tenant accounts: sign-up, profile
updates, password reset and login.

Endpoint Coverage:
------------------
- POST /users: Sign up (UserCreate -> UserOut)
- GET /users: Paginated listing (admin)
- GET/PUT/DELETE /users/{id}: Profile management (UserUpdate -> UserOut)
- POST /users/forgot-password: Request a reset link (ForgotPasswordRequest)
- POST /users/restore-password: Set a new password (RestorePasswordRequest)
- POST /auth/login: Exchange credentials for a token (LoginRequest -> TokenOut)

Password Rules:
---------------
Passwords are trimmed, then must be PASSWORD_MIN_LENGTH..PASSWORD_MAX_LENGTH
characters (8-16 by default). The hash is never part of any response model.

Subdomain Rules:
----------------
Subdomains are the tenant's public handle: 3-63 characters of lowercase
letters, digits and single hyphens between them (``don-pepe``, ``cafe24``).
Input is lowercased before the check.
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    StringConstraints,
    field_validator,
)
from pydantic_core import PydanticCustomError

from ..auth import normalize_password
from ..errors import ApiError
from ..pagination import PaginatedResult

SUBDOMAIN_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"


def _check_password(value: str) -> str:
    try:
        return normalize_password(value)
    except ApiError as e:
        raise PydanticCustomError("password_length", e.message)


Password = Annotated[str, AfterValidator(_check_password)]

Subdomain = Annotated[
    str,
    # Lowercase before the pattern check
    BeforeValidator(lambda value: value.strip().lower() if isinstance(value, str) else value),
    StringConstraints(
        min_length=3,
        max_length=63,
        pattern=SUBDOMAIN_PATTERN,
    ),
]

NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]

NormalizedEmail = Annotated[EmailStr, AfterValidator(lambda value: value.strip().lower())]


class UserOut(BaseModel):
    """Public view of a user. Never includes the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    last_name: str
    email: str
    cel: str
    role_id: int
    subdomain: str
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserCreate(BaseModel):
    """
    Request model for signing up.

    Example:
        {
            "name": "Pepe",
            "last_name": "Argento",
            "email": "pepe@example.com",
            "cel": "+54 11 5555 0000",
            "password": "s3cretpass",
            "subdomain": "don-pepe"
        }
    """
    name: NonEmpty
    last_name: NonEmpty
    email: NormalizedEmail
    cel: NonEmpty
    password: Password
    subdomain: Subdomain


class UserUpdate(BaseModel):
    """All fields optional; unknown fields are rejected."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[NonEmpty] = None
    last_name: Optional[NonEmpty] = None
    email: Optional[NormalizedEmail] = None
    cel: Optional[NonEmpty] = None
    role_id: Optional[int] = Field(default=None, ge=1)
    password: Optional[Password] = None


PaginatedUsers = PaginatedResult[UserOut]


class ForgotPasswordRequest(BaseModel):
    email: NormalizedEmail
    reset_url: Optional[HttpUrl] = None


class RestorePasswordRequest(BaseModel):
    token: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    password: Password
    confirmation_password: Password

    @field_validator("confirmation_password")
    @classmethod
    def passwords_match(cls, value: str, info) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("Passwords do not match")
        return value


class LoginRequest(BaseModel):
    email: NormalizedEmail
    password: Password


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut
