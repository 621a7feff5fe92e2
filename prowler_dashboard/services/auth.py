"""Credential verification, registration and server-side session lifecycle."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from prowler_dashboard.core.security import (
    SESSION_REFRESH_AFTER,
    SESSION_TTL,
    new_session_id,
    session_expiry,
    verify_password,
)
from prowler_dashboard.models import User, UserRole, UserSession
from prowler_dashboard.schemas.auth import CurrentUser, RegisterRequest
from prowler_dashboard.services.session_cleanup import purge_expired_sessions
from prowler_dashboard.services.users import create_user, get_user_by_username

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    """Unknown username, account without a password, or wrong password."""

    def __init__(self, message: str = "Invalid username or password.") -> None:
        self.message = message
        super().__init__(message)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def verify_credentials(db: Session, username: str, password: str) -> CurrentUser:
    """
    Check username/password against the stored bcrypt hash.

    Returns the user's id, username and role with is_local=True.
    Raises InvalidCredentialsError without saying which part was wrong.
    """
    user = get_user_by_username(db, username)
    if user is None or not user.password_hash:
        logger.info("Login failed: unknown user or no password (username=%s)", username)
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: wrong password (username=%s)", username)
        raise InvalidCredentialsError()
    return CurrentUser(id=user.id, username=user.username, role=user.role, is_local=True)


def register(db: Session, profile: RegisterRequest) -> User:
    """
    Create a regular user from a validated registration body.
    Raises DuplicateUsernameError or DuplicateEmailError.
    """
    user = create_user(
        db,
        username=profile.username,
        email=profile.email,
        password=profile.password,
        first_name=profile.first_name,
        last_name=profile.last_name,
        role=UserRole.USER,
    )
    logger.info("Registered user id=%s username=%s", user.id, user.username)
    return user


def create_session(db: Session, user_id: str, is_local: bool = True) -> UserSession:
    """Persist a new session for the user; expired rows are purged first."""
    purge_expired_sessions(db)
    row = UserSession(
        sid=new_session_id(),
        user_id=user_id,
        data={"is_local": is_local},
        expires_at=session_expiry(),
    )
    db.add(row)
    db.commit()
    return row


def resolve_session(db: Session, sid: str) -> tuple[UserSession, User, bool] | None:
    """
    Return (session, user, refreshed) for a live session, or None when the session is unknown,
    expired, or points at a user that no longer exists.

    A session last refreshed more than SESSION_REFRESH_AFTER ago gets a fresh
    seven-day expiry.
    """
    now = datetime.now(UTC)
    result = (
        db.query(UserSession, User)
        .join(User, User.id == UserSession.user_id)
        .filter(UserSession.sid == sid, UserSession.expires_at > now)
        .first()
    )
    if result is None:
        return None
    row, user = result
    last_refreshed = _as_utc(row.expires_at) - SESSION_TTL
    refreshed = now - last_refreshed >= SESSION_REFRESH_AFTER
    if refreshed:
        row.expires_at = session_expiry(now)
        db.commit()
    return row, user, refreshed


def destroy_session(db: Session, sid: str | None) -> None:
    """Delete the session row if it exists. Safe to call repeatedly."""
    if not sid:
        return
    db.query(UserSession).filter(UserSession.sid == sid).delete(synchronize_session=False)
    db.commit()
