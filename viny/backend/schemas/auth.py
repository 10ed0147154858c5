"""
Auth Schemas.

Request and response bodies for registration, login and session management.
The refresh token never appears in a response body; it travels in the
``refreshToken`` cookie.
"""

from datetime import datetime

from pydantic import EmailStr, Field, HttpUrl

from viny.backend.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    name: str | None = Field(default=None, min_length=1, max_length=100)
    password: str = Field(
        ...,
        min_length=8,
        description="At least 8 characters",
    )


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(CamelModel):
    """Body fallback for clients that cannot send the refresh cookie."""

    refresh_token: str | None = Field(default=None, min_length=1)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class UpdateProfileRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    avatar: HttpUrl | None = None


class UserResponse(CamelModel):
    """Public view of a user. Never includes the password or refresh token."""

    id: int
    email: str
    name: str | None
    avatar: str | None = None
    email_verified: bool = False
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None


class AuthResponse(CamelModel):
    user: UserResponse
    access_token: str


class AccessTokenResponse(CamelModel):
    access_token: str


class ProfileResponse(CamelModel):
    user: UserResponse
