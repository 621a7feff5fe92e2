"""Pydantic request/response schemas."""

from prowler_dashboard.schemas.assets import (
    AssetFilters,
    AssetOut,
    AssetSeverity,
    AssetStats,
    AssetStatus,
    ProwlerFetchResult,
    ProwlerResource,
)
from prowler_dashboard.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    SessionUser,
)
from prowler_dashboard.schemas.configuration import (
    ConfigurationInput,
    ConfigurationOut,
    ConnectionTestResult,
    SyncRequest,
    SyncResponse,
)
from prowler_dashboard.schemas.health import HealthResponse
from prowler_dashboard.schemas.users import UserCreate, UserOut, UserUpdate

__all__ = [
    "AssetFilters",
    "AssetOut",
    "AssetSeverity",
    "AssetStats",
    "AssetStatus",
    "AuthResponse",
    "ConfigurationInput",
    "ConfigurationOut",
    "ConnectionTestResult",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ProwlerFetchResult",
    "ProwlerResource",
    "RegisterRequest",
    "SessionUser",
    "SyncRequest",
    "SyncResponse",
    "UserCreate",
    "UserOut",
    "UserUpdate",
]
