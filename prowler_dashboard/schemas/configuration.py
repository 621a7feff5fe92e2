"""Schemas for Prowler configuration, connection testing and sync."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from prowler_dashboard.schemas.common import ApiModel, normalize_absolute_url, normalize_email

ConnectionStatus = Literal["connected", "disconnected", "error"]


class ConfigurationInput(ApiModel):
    """Body for saving a configuration or testing a connection."""

    prowler_url: str = Field(..., max_length=2048, description="Base URL of the Prowler API")
    prowler_email: str = Field(..., max_length=255)
    prowler_password: str = Field(..., min_length=1, max_length=1024)

    @field_validator("prowler_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return normalize_absolute_url(v)

    @field_validator("prowler_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class ConfigurationOut(ApiModel):
    """Configuration as returned to clients (the password hash is never exposed)."""

    id: str
    user_id: str
    prowler_url: str
    prowler_email: str
    is_active: bool
    connection_status: ConnectionStatus
    last_sync_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ConnectionTestResult(ApiModel):
    """Outcome of a connectivity probe; failures are data, not exceptions."""

    success: bool
    error: str | None = None


class SyncRequest(ApiModel):
    """Optional body for sync: the Prowler password is re-entered because only its hash is stored."""

    prowler_password: str | None = Field(default=None, max_length=1024)


class SyncResponse(ApiModel):
    message: str
    synced: int = Field(..., ge=0)
