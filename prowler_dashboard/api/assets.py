"""Asset listing, stats and sync routes for the caller's active configuration."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from prowler_dashboard.api.auth import get_current_user
from prowler_dashboard.api.deps import get_prowler_client
from prowler_dashboard.core.database import get_db
from prowler_dashboard.models import ProwlerConfiguration
from prowler_dashboard.schemas.assets import AssetFilters, AssetOut, AssetStats
from prowler_dashboard.schemas.auth import CurrentUser
from prowler_dashboard.schemas.configuration import SyncRequest, SyncResponse
from prowler_dashboard.services.assets import asset_stats, query_assets
from prowler_dashboard.services.configuration import get_active_configuration
from prowler_dashboard.services.prowler_client import ProwlerClient
from prowler_dashboard.services.sync import (
    SyncFailedError,
    SyncRequiresReconfigurationError,
    sync_configuration,
)

router = APIRouter()

NO_CONFIGURATION_DETAIL = "No Prowler configuration found"


def _require_configuration(db: Session, user_id: str) -> ProwlerConfiguration:
    config = get_active_configuration(db, user_id)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NO_CONFIGURATION_DETAIL,
        )
    return config


@router.get("", response_model=list[AssetOut])
def list_assets(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    resource_type: Annotated[str | None, Query(alias="resourceType")] = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    severity: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query()] = None,
) -> list[AssetOut]:
    """
    Cached assets for the caller's active configuration, most recently updated first.

    resourceType, status and severity are exact matches; search is a
    case-insensitive substring of the resource name or id.
    """
    config = _require_configuration(db, current_user.id)
    filters = AssetFilters(
        resource_type=resource_type,
        status=status_filter,
        severity=severity,
        search=search,
    )
    return [AssetOut.model_validate(a) for a in query_assets(db, config.id, filters)]


@router.get("/stats", response_model=AssetStats)
def get_asset_stats(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> AssetStats:
    """Totals, critical count, compliant count and last scan time."""
    config = _require_configuration(db, current_user.id)
    return asset_stats(db, config.id)


@router.post("/sync", response_model=SyncResponse)
async def sync_assets(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[ProwlerClient, Depends(get_prowler_client)],
    response: Response,
    body: Annotated[SyncRequest | None, Body()] = None,
) -> SyncResponse | JSONResponse:
    """
    Replace the cached assets with a fresh listing from Prowler.

    Only a hash of the Prowler password is stored, so the request must carry
    `prowlerPassword`; without it (or with a wrong one) the response is 400 with
    `requiresReconfiguration: true`.
    """
    config = _require_configuration(db, current_user.id)
    password = body.prowler_password if body is not None else None
    try:
        count = await sync_configuration(db, config, password, client)
    except SyncRequiresReconfigurationError as e:
        reconfigure = JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": e.message, "requiresReconfiguration": True},
        )
        # Carry over a session cookie refreshed by get_current_user.
        for cookie in response.headers.getlist("set-cookie"):
            reconfigure.headers.append("set-cookie", cookie)
        return reconfigure
    except SyncFailedError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    return SyncResponse(message="Sync completed", synced=count)
