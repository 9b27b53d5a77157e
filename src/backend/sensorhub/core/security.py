"""Password hashing, JWT tokens and device credentials."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from sensorhub.core.config import settings

ALGORITHM = "HS256"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _encode_token(
    subject: str,
    token_type: str,
    lifetime: timedelta,
    claims: dict[str, Any] | None = None,
) -> str:
    payload: dict[str, Any] = dict(claims or {})
    payload.update(
        sub=subject,
        type=token_type,
        exp=datetime.now(timezone.utc) + lifetime,
    )
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Issue a short-lived bearer token for API calls."""
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return _encode_token(subject, "access", lifetime, additional_claims)


def create_refresh_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Issue a long-lived token that can only be exchanged for new tokens."""
    lifetime = expires_delta or timedelta(days=settings.refresh_token_expire_days)
    return _encode_token(subject, "refresh", lifetime)


def verify_token(token: str, token_type: str = "access") -> dict[str, Any] | None:
    """Decode a token, returning its claims or None if it is invalid,
    expired, or of a different type."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != token_type or "exp" not in payload:
        return None

    return payload


def generate_device_api_key() -> str:
    """Generate the opaque credential handed to a newly registered device."""
    return secrets.token_urlsafe(32)
