"""Schemas for user records and admin user management."""

from datetime import datetime

from pydantic import Field, field_validator

from prowler_dashboard.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, USERNAME_MIN_LEN
from prowler_dashboard.models.user import UserRole
from prowler_dashboard.schemas.auth import RegisterRequest
from prowler_dashboard.schemas.common import ApiModel, normalize_email, require_text


class UserOut(ApiModel):
    """User as returned to clients. There is no password field on purpose."""

    id: str
    email: str
    username: str
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    role: UserRole
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreate(RegisterRequest):
    """Admin-initiated creation; unlike registration the role may be chosen."""

    role: UserRole = UserRole.USER


class UserUpdate(ApiModel):
    """Partial update; only fields that are present are changed."""

    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    password: str | None = Field(default=None, max_length=PASSWORD_MAX_LEN)
    role: UserRole | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = require_text(v, "Username is required")
        if len(v) < USERNAME_MIN_LEN:
            raise ValueError(f"Username must be at least {USERNAME_MIN_LEN} characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return None if v is None else normalize_email(v)

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, v: str | None) -> str | None:
        return None if v is None else require_text(v, "First name is required")

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, v: str | None) -> str | None:
        return None if v is None else require_text(v, "Last name is required")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        if v is not None and len(v) < PASSWORD_MIN_LEN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LEN} characters")
        return v
