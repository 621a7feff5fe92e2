"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field, field_validator

from prowler_dashboard.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from prowler_dashboard.models.user import UserRole
from prowler_dashboard.schemas.common import ApiModel, normalize_email, require_text


class LoginRequest(ApiModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN, description="Username")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RegisterRequest(ApiModel):
    """Self-service registration; always creates a regular user."""

    username: str = Field(..., max_length=USERNAME_MAX_LEN)
    email: str = Field(..., max_length=255)
    first_name: str = Field(..., max_length=255)
    last_name: str = Field(..., max_length=255)
    password: str = Field(..., max_length=PASSWORD_MAX_LEN)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = require_text(v, "Username is required")
        if len(v) < USERNAME_MIN_LEN:
            raise ValueError(f"Username must be at least {USERNAME_MIN_LEN} characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, v: str) -> str:
        return require_text(v, "First name is required")

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, v: str) -> str:
        return require_text(v, "Last name is required")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        if len(v) < PASSWORD_MIN_LEN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LEN} characters")
        return v


class CurrentUser(BaseModel):
    """Authenticated user resolved from the session, for dependency injection."""

    id: str
    username: str
    role: UserRole
    is_local: bool = True
    session_id: str | None = None

    class Config:
        from_attributes = True


class SessionUser(ApiModel):
    """User summary returned after login or registration."""

    id: str
    username: str
    email: str | None = None


class AuthResponse(ApiModel):
    message: str
    user: SessionUser


class MessageResponse(ApiModel):
    message: str
