"""Schemas for cached assets, asset filters and stats."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from prowler_dashboard.schemas.common import ApiModel

AssetStatus = Literal["compliant", "non-compliant", "warning", "unknown"]
AssetSeverity = Literal["critical", "high", "medium", "low"]


class AssetFilters(BaseModel):
    """Optional, independently applicable filters. Empty or missing means no constraint."""

    resource_type: str | None = None
    status: str | None = None
    severity: str | None = None
    search: str | None = None


class AssetOut(ApiModel):
    id: str
    configuration_id: str
    resource_id: str
    resource_name: str
    resource_type: str
    region: str | None = None
    status: AssetStatus
    severity: AssetSeverity | None = None
    raw_data: dict[str, Any] | list[Any] | None = None
    last_checked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AssetStats(ApiModel):
    total_resources: int = Field(..., ge=0)
    critical_issues: int = Field(..., ge=0)
    compliant_resources: int = Field(..., ge=0)
    last_scan: datetime | None = None


class ProwlerResource(BaseModel):
    """One resource returned by Prowler after field aliasing and normalization."""

    id: str
    name: str
    type: str
    region: str | None = None
    status: AssetStatus = "unknown"
    severity: AssetSeverity | None = "low"
    last_checked: datetime
    raw_data: dict[str, Any] | None = None


class ProwlerFetchResult(BaseModel):
    """Outcome of a resource fetch; failures are reported in error, never raised."""

    success: bool
    resources: list[ProwlerResource] = Field(default_factory=list)
    error: str | None = None
