"""Session login/registration routes and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from prowler_dashboard.api.deps import get_app_settings
from prowler_dashboard.core.config import Settings
from prowler_dashboard.core.database import get_db
from prowler_dashboard.core.security import (
    SESSION_TTL,
    decode_session_cookie,
    encode_session_cookie,
)
from prowler_dashboard.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    SessionUser,
)
from prowler_dashboard.schemas.users import UserOut
from prowler_dashboard.services.auth import (
    InvalidCredentialsError,
    create_session,
    destroy_session,
    register,
    resolve_session,
    verify_credentials,
)
from prowler_dashboard.services.users import DuplicateUserError, get_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookie(response: Response, settings: Settings, sid: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=encode_session_cookie(sid, settings.SESSION_SECRET.get_secret_value()),
        max_age=int(SESSION_TTL.total_seconds()),
        httponly=True,
        # Secure only in prod so non-TLS deployments can still log in.
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


def _clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def _session_id_from_request(request: Request, settings: Settings) -> str | None:
    """Session id from a correctly signed cookie, or None."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    try:
        return decode_session_cookie(token, settings.SESSION_SECRET.get_secret_value())
    except jwt.PyJWTError:
        return None


def get_current_user(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CurrentUser:
    """Dependency: require a valid, unexpired session for a known user. Raises 401 otherwise."""
    sid = _session_id_from_request(request, settings)
    if sid is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    resolved = resolve_session(db, sid)
    if resolved is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    session_row, user, refreshed = resolved
    if refreshed:
        _set_session_cookie(response, settings, session_row.sid)
    return CurrentUser(
        id=user.id,
        username=user.username,
        role=user.role,
        is_local=bool((session_row.data or {}).get("is_local", True)),
        session_id=session_row.sid,
    )


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require an authenticated user whose role can manage users. Raises 403 otherwise."""
    if not current_user.role.can_manage_users:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.post("/login/local", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """
    Authenticate with username and password and start a session.
    The session id is returned in an HTTP-only cookie.
    """
    try:
        user = verify_credentials(db, body.username, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
    session_row = create_session(db, user.id, is_local=user.is_local)
    _set_session_cookie(response, settings, session_row.sid)
    return AuthResponse(
        message="Login successful",
        user=SessionUser(id=user.id, username=user.username),
    )


@router.post("/register", response_model=AuthResponse)
def register_user(
    body: RegisterRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """Create a regular user and log them in immediately."""
    try:
        user = register(db, body)
    except DuplicateUserError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        ) from e
    session_row = create_session(db, user.id, is_local=True)
    _set_session_cookie(response, settings, session_row.sid)
    return AuthResponse(
        message="Registration successful",
        user=SessionUser(id=user.id, username=user.username, email=user.email),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> MessageResponse:
    """End the current session if there is one. Always succeeds."""
    destroy_session(db, _session_id_from_request(request, settings))
    _clear_session_cookie(response, settings)
    return MessageResponse(message="Logout successful")


@router.get("/auth/user", response_model=UserOut)
def get_authenticated_user(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    """Current user profile (no password hash)."""
    user = get_user(db, current_user.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserOut.model_validate(user)
