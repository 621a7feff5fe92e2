"""User records: lookups, creation, updates and deletion with uniqueness enforcement."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from prowler_dashboard.core.security import hash_password
from prowler_dashboard.models.user import User, UserRole

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base for user management failures that map to a client error."""

    default_message = "User operation failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateUserError(UserServiceError):
    """Username or email is already taken."""


class DuplicateUsernameError(DuplicateUserError):
    default_message = "Username already exists"


class DuplicateEmailError(DuplicateUserError):
    default_message = "Email already exists"


class UserNotFoundError(UserServiceError):
    default_message = "User not found"


class SelfDeletionError(UserServiceError):
    default_message = "Cannot delete your own account"


def get_user(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def list_users(db: Session) -> list[User]:
    """All users, newest first."""
    return db.query(User).order_by(User.created_at.desc(), User.username).all()


def _ensure_unique(
    db: Session,
    username: str | None,
    email: str | None,
    exclude_id: str | None = None,
) -> None:
    """Pre-insert duplicate check. The unique indexes remain the final authority."""
    if username is not None:
        existing = get_user_by_username(db, username)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateUsernameError()
    if email is not None:
        existing = get_user_by_email(db, email)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateEmailError()


def _duplicate_from_integrity_error(
    db: Session,
    username: str | None,
    email: str | None,
    exclude_id: str | None = None,
) -> DuplicateUserError:
    """Work out which unique column lost a concurrent insert/update race."""
    try:
        _ensure_unique(db, username, email, exclude_id)
    except DuplicateUserError as e:
        return e
    return DuplicateUserError("Username or email already exists")


def create_user(
    db: Session,
    *,
    username: str,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
    role: UserRole = UserRole.USER,
) -> User:
    """
    Insert a user with a bcrypt password hash.

    Raises DuplicateUsernameError / DuplicateEmailError when either value is taken,
    whether detected by the pre-check or by the database unique constraint.
    """
    _ensure_unique(db, username, email)
    user = User(
        username=username,
        email=email,
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _duplicate_from_integrity_error(db, username, email) from None
    db.refresh(user)
    logger.info("Created user id=%s username=%s role=%s", user.id, user.username, user.role.value)
    return user


def update_user(db: Session, user_id: str, changes: dict[str, Any]) -> User:
    """
    Apply a partial update. A plain-text "password" entry is hashed before storage.

    Raises UserNotFoundError, DuplicateUsernameError or DuplicateEmailError.
    """
    user = get_user(db, user_id)
    if user is None:
        raise UserNotFoundError()

    changes = {k: v for k, v in changes.items() if v is not None}
    new_username = changes.get("username")
    new_email = changes.get("email")
    _ensure_unique(
        db,
        new_username if new_username != user.username else None,
        new_email if new_email != user.email else None,
        exclude_id=user.id,
    )

    password = changes.pop("password", None)
    if password:
        user.password_hash = hash_password(password)
    for field in ("username", "email", "first_name", "last_name", "role"):
        if field in changes:
            setattr(user, field, changes[field])
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _duplicate_from_integrity_error(db, new_username, new_email, exclude_id=user_id) from None
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str, acting_user_id: str) -> None:
    """
    Delete a user (configurations, assets and sessions cascade).
    Raises UserNotFoundError, or SelfDeletionError when an admin targets their own account.
    """
    user = get_user(db, user_id)
    if user is None:
        raise UserNotFoundError()
    if user.id == acting_user_id:
        raise SelfDeletionError()
    db.delete(user)
    db.commit()
    logger.info("Deleted user id=%s by user id=%s", user_id, acting_user_id)
