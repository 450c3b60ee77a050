"""Request/response schemas for auth and account administration endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from tasktrack.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)

# Shape check only: one "@", something on both sides, a dot in the domain.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

RoleName = Literal["user", "admin"]


class RegisterRequest(BaseModel):
    """New account credentials. Role is always 'user' at registration."""

    model_config = ConfigDict(extra="forbid")

    email: str = Field(
        ..., max_length=EMAIL_MAX_LEN, pattern=EMAIL_PATTERN, description="Email address"
    )
    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class RegisterResponse(BaseModel):
    message: str = "User registered"
    id: int


class LoginRequest(BaseModel):
    """Credentials for login. identifier is either the email or the username."""

    identifier: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN, description="Email or username")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class AccountOut(BaseModel):
    """Account as returned to callers (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    role: str
    frozen: bool = False
    is_protected: bool = False
    created_at: datetime | None = None


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    account: AccountOut


class Principal(BaseModel):
    """Authenticated identity making a request: account id, live role and frozen state."""

    model_config = ConfigDict(frozen=True)

    account_id: int
    role: str
    frozen: bool = False


class AccountsListResponse(BaseModel):
    """Response for GET /admin/users (admin only)."""

    users: list[AccountOut]


class RoleUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    role: RoleName


class AccountStateResponse(BaseModel):
    """Outcome of a role change or freeze toggle."""

    message: str
    user: AccountOut


class MessageResponse(BaseModel):
    message: str
