"""Request/response schemas for signup, login, tokens and profiles."""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from store_ratings.core.permissions import Role
from store_ratings.core.security import password_policy_errors
from store_ratings.schemas.common import CamelModel

NAME_MIN_LEN = 2
NAME_MAX_LEN = 60
ADDRESS_MAX_LEN = 400


def _check_name(v: str) -> str:
    v = v.strip()
    if len(v) < NAME_MIN_LEN:
        raise ValueError(f"Name must be at least {NAME_MIN_LEN} characters")
    return v


def _check_password(v: str) -> str:
    errors = password_policy_errors(v)
    if errors:
        raise ValueError("; ".join(errors))
    return v


class SignupRequest(CamelModel):
    """Registration payload; the role is decided by the endpoint, not the caller."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN, description="Full name")
    email: EmailStr
    address: str = Field(default="", max_length=ADDRESS_MAX_LEN)
    password: str = Field(..., description="8-16 chars, one uppercase, one special character")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=1, description="Password")


class RefreshRequest(CamelModel):
    """Refresh token in the body, for clients that cannot send the cookie."""

    refresh_token: str | None = None


class PasswordChangeRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return _check_password(v)


class ProfileUpdate(CamelModel):
    """Editable profile fields; absent fields are left unchanged."""

    name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    address: str | None = Field(default=None, max_length=ADDRESS_MAX_LEN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return v if v is None else _check_name(v)


class UserOut(CamelModel):
    """Public view of a user; never includes the password hash or refresh token."""

    id: str
    name: str
    email: str
    address: str
    role: Role
    created_at: datetime


class CurrentUser(CamelModel):
    """Authenticated user (id, name, email, role) for dependency injection."""

    id: str
    name: str
    email: str
    role: Role


class UserPayload(CamelModel):
    """A single user wrapped as {user}."""

    user: UserOut


class AuthResponse(CamelModel):
    """User plus both credentials, returned by login and by owner/admin registration."""

    user: UserOut
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="Opaque refresh token")


class TokenResponse(CamelModel):
    """New credentials issued from a refresh token."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="Rotated opaque refresh token")
    token_type: str = Field(default="bearer", description="Token type")
