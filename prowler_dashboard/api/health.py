"""Health check endpoint with database connectivity check."""

import time
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from prowler_dashboard.api.deps import get_app_settings
from prowler_dashboard.core.config import Settings
from prowler_dashboard.core.database import check_db_connected, get_db
from prowler_dashboard.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    """
    Liveness probe: status, uptime and database connectivity.
    Used by load balancers and container health checks.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(UTC),
        uptime=max(0.0, time.monotonic() - request.app.state.started_at),
        environment=settings.APP_ENV,
        database=db_status,
    )
