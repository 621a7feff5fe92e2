"""Prowler configuration and connection-test routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from prowler_dashboard.api.auth import get_current_user
from prowler_dashboard.api.deps import get_prowler_client
from prowler_dashboard.core.database import get_db
from prowler_dashboard.schemas.auth import CurrentUser
from prowler_dashboard.schemas.configuration import (
    ConfigurationInput,
    ConfigurationOut,
    ConnectionTestResult,
)
from prowler_dashboard.services.configuration import (
    get_active_configuration,
    save_configuration,
    update_status,
)
from prowler_dashboard.services.prowler_client import ProwlerClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/configuration", response_model=ConfigurationOut | None)
def get_configuration(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ConfigurationOut | None:
    """The caller's active configuration, or null when none has been saved."""
    config = get_active_configuration(db, current_user.id)
    if config is None:
        return None
    return ConfigurationOut.model_validate(config)


@router.post("/configuration", response_model=ConfigurationOut)
def post_configuration(
    body: ConfigurationInput,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ConfigurationOut:
    """Save a new active configuration; earlier ones for the caller are deactivated."""
    config = save_configuration(
        db,
        current_user.id,
        body.prowler_url,
        body.prowler_email,
        body.prowler_password,
    )
    return ConfigurationOut.model_validate(config)


@router.post(
    "/test-connection",
    response_model=ConnectionTestResult,
    response_model_exclude_none=True,
)
async def test_connection(
    body: ConfigurationInput,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[ProwlerClient, Depends(get_prowler_client)],
) -> ConnectionTestResult:
    """
    Log in to Prowler and call its health endpoint with the supplied credentials.

    Always 200; check `success`. When the URL and email match the caller's
    active configuration, its connection status is updated with the outcome.
    """
    result = await client.test_connection(body.prowler_url, body.prowler_email, body.prowler_password)
    config = await run_in_threadpool(get_active_configuration, db, current_user.id)
    if (
        config is not None
        and config.prowler_url == body.prowler_url
        and config.prowler_email == body.prowler_email
    ):
        # A connection test syncs nothing, so last_sync_at keeps its value.
        await run_in_threadpool(
            update_status,
            db,
            config.id,
            "connected" if result.success else "error",
            stamp_sync=False,
        )
    return result
