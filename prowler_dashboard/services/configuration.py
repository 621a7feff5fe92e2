"""Prowler configuration: one active profile per user, hashed credentials, connection status."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from prowler_dashboard.core.security import hash_password
from prowler_dashboard.models import ProwlerConfiguration, User
from prowler_dashboard.models.base import utcnow
from prowler_dashboard.models.configuration import CONNECTION_STATUSES

logger = logging.getLogger(__name__)


def get_active_configuration(db: Session, user_id: str) -> ProwlerConfiguration | None:
    """The user's single active configuration, or None."""
    return (
        db.query(ProwlerConfiguration)
        .filter(
            ProwlerConfiguration.user_id == user_id,
            ProwlerConfiguration.is_active.is_(True),
        )
        .first()
    )


def save_configuration(
    db: Session,
    user_id: str,
    url: str,
    email: str,
    password: str,
) -> ProwlerConfiguration:
    """
    Store a new active configuration and deactivate every earlier one for the user.

    Runs as one transaction. The owning user row is locked first (FOR UPDATE on
    engines that support it) so concurrent saves for the same user serialize;
    the partial unique index on (user_id) WHERE is_active backs this up.
    Inputs are expected to be validated by ConfigurationInput.
    """
    password_hash = hash_password(password)
    now = utcnow()
    try:
        db.query(User).filter(User.id == user_id).with_for_update().first()
        deactivated = (
            db.query(ProwlerConfiguration)
            .filter(
                ProwlerConfiguration.user_id == user_id,
                ProwlerConfiguration.is_active.is_(True),
            )
            .update(
                {"is_active": False, "updated_at": now},
                synchronize_session=False,
            )
        )
        config = ProwlerConfiguration(
            user_id=user_id,
            prowler_url=url,
            prowler_email=email,
            prowler_password_hash=password_hash,
            is_active=True,
            connection_status="disconnected",
        )
        db.add(config)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(config)
    logger.info(
        "Saved Prowler configuration id=%s for user id=%s (deactivated=%s)",
        config.id,
        user_id,
        deactivated,
    )
    return config


def update_status(
    db: Session,
    config_id: str,
    status: str,
    last_sync_at: datetime | None = None,
    *,
    stamp_sync: bool = True,
) -> None:
    """
    Set connection status and sync timestamp (defaults to now).

    With stamp_sync=False the stored sync timestamp is left as it is; used when
    nothing was synced (connection tests, failed syncs).
    """
    if status not in CONNECTION_STATUSES:
        raise ValueError(f"status must be one of {list(CONNECTION_STATUSES)}, got {status!r}")
    now = utcnow()
    values = {"connection_status": status, "updated_at": now}
    if stamp_sync:
        values["last_sync_at"] = last_sync_at or now
    db.query(ProwlerConfiguration).filter(ProwlerConfiguration.id == config_id).update(
        values,
        synchronize_session=False,
    )
    db.commit()
