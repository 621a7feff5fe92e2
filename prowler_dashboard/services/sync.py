"""Sync a configuration's cached assets from Prowler."""

import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from prowler_dashboard.core.security import verify_password
from prowler_dashboard.models import ProwlerConfiguration
from prowler_dashboard.models.base import utcnow
from prowler_dashboard.services.assets import replace_assets
from prowler_dashboard.services.configuration import update_status
from prowler_dashboard.services.prowler_client import ProwlerClient

logger = logging.getLogger(__name__)


class SyncRequiresReconfigurationError(Exception):
    """
    Only a one-way hash of the Prowler password is stored, so a sync needs the
    user to supply the plain password again (or reconfigure).
    """

    def __init__(
        self,
        message: str = "Please reconfigure your Prowler connection to sync data",
    ) -> None:
        self.message = message
        super().__init__(message)


class SyncFailedError(Exception):
    """Prowler could not be reached or rejected the request."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


async def sync_configuration(
    db: Session,
    config: ProwlerConfiguration,
    password: str | None,
    client: ProwlerClient,
) -> int:
    """
    Fetch resources with the re-entered password and replace the cached asset set.

    Raises SyncRequiresReconfigurationError when no password is given or it does not
    match the stored hash, and SyncFailedError when Prowler fails (status becomes error).
    Returns the number of assets stored.
    """
    if not password:
        raise SyncRequiresReconfigurationError()
    # bcrypt and the bulk replace are blocking; keep them off the event loop.
    if not await run_in_threadpool(verify_password, password, config.prowler_password_hash):
        raise SyncRequiresReconfigurationError(
            "Prowler password does not match the saved configuration; reconfigure to sync"
        )

    result = await client.fetch_resources(config.prowler_url, config.prowler_email, password)
    if not result.success:
        await run_in_threadpool(update_status, db, config.id, "error", stamp_sync=False)
        raise SyncFailedError(result.error or "Failed to fetch resources")

    count = await run_in_threadpool(replace_assets, db, config.id, result.resources)
    await run_in_threadpool(update_status, db, config.id, "connected", utcnow())
    logger.info("Synced %s assets for configuration id=%s", count, config.id)
    return count
