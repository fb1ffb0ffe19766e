"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """
    Registration body. Fields are optional at the schema level so that missing
    values are reported by the route as a plain 400.
    """

    email: str | None = Field(default=None, max_length=255, description="Email address")
    password: str | None = Field(default=None, max_length=128, description="Password")
    role: Any = Field(
        default=None,
        description="Requested role; anything other than 'admin' becomes 'user'",
    )


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = Field(default=None, max_length=255, description="Email address")
    password: str | None = Field(default=None, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    token: str = Field(..., description="JWT access token (send as Authorization: Bearer <token>)")


class UserOut(BaseModel):
    """Public view of a stored user (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str
    created_at: datetime


class RegisterResponse(BaseModel):
    """Response for POST /auth/register."""

    user: UserOut


class CurrentUser(BaseModel):
    """Authenticated caller (id, email, role) decoded from the bearer token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str
