"""Password hashing and signed session cookies."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Registration/profile input limits.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

SESSION_TTL = timedelta(days=7)
# Sessions older than this (measured from the last refresh) get a new expiry on use.
SESSION_REFRESH_AFTER = timedelta(days=1)
SESSION_TOKEN_ALGORITHM = "HS256"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash; a missing hash never matches."""
    if not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def new_session_id() -> str:
    """Opaque, unguessable session identifier."""
    return secrets.token_urlsafe(32)


def session_expiry(now: datetime | None = None) -> datetime:
    return (now or datetime.now(UTC)) + SESSION_TTL


def encode_session_cookie(sid: str, secret: str) -> str:
    """Sign the session id so tampered cookies are rejected before any store lookup."""
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sid": sid,
        "iat": now,
        "exp": now + SESSION_TTL,
    }
    return jwt.encode(payload, secret, algorithm=SESSION_TOKEN_ALGORITHM)


def decode_session_cookie(token: str, secret: str) -> str:
    """
    Return the session id carried by a signed cookie.
    Raises jwt.PyJWTError on a bad signature, expiry, or missing sid.
    """
    payload = jwt.decode(token, secret, algorithms=[SESSION_TOKEN_ALGORITHM])
    sid = payload.get("sid")
    if not sid or not isinstance(sid, str):
        raise jwt.InvalidTokenError("Session cookie carries no session id")
    return sid
