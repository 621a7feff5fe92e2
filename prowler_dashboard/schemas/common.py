"""Shared schema base and field validators."""

from pydantic import BaseModel, ConfigDict, EmailStr, HttpUrl, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

_EMAIL_ADAPTER = TypeAdapter(EmailStr)
_HTTP_URL_ADAPTER = TypeAdapter(HttpUrl)


class ApiModel(BaseModel):
    """Base for request/response bodies: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def normalize_email(value: str) -> str:
    """Trim, lower-case and validate an email address."""
    if not isinstance(value, str):
        raise ValueError("Must be a valid email")
    cleaned = value.strip().lower()
    if not cleaned:
        raise ValueError("Email is required")
    try:
        _EMAIL_ADAPTER.validate_python(cleaned)
    except ValidationError:
        raise ValueError("Must be a valid email") from None
    return cleaned


def require_text(value: str, message: str) -> str:
    """Trim and require a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(message)
    return value.strip()


def normalize_absolute_url(value: str) -> str:
    """Validate an absolute http(s) URL; returned without a trailing slash."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError("URL is required")
    cleaned = value.strip()
    try:
        _HTTP_URL_ADAPTER.validate_python(cleaned)
    except ValidationError:
        raise ValueError("Must be a valid absolute http(s) URL") from None
    return cleaned.rstrip("/")
