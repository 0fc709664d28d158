"""
Security Module
===============

JWT utilities for:
- Access token generation and validation (issued by the identity service,
  verified here)
- Anti-forgery tokens bound to the authenticated user
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import secrets
import uuid

from jose import JWTError, jwt

from app.config import settings

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_ANTIFORGERY = "antiforgery"


def _encode(
    data: dict[str, Any],
    token_type: str,
    expires_delta: timedelta,
) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "type": token_type,
    })
    return jwt.encode(
        to_encode,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def create_access_token(
    data: dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode (``sub`` should be the user id)
        expires_delta: Custom expiration time (optional)

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(data, TOKEN_TYPE_ACCESS, expires_delta)


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
        return payload
    except JWTError:
        return None


def create_antiforgery_token(user_id: uuid.UUID) -> str:
    """Create an anti-forgery token bound to ``user_id``."""
    return _encode(
        # nonce keeps two tokens issued in the same second distinct
        {"sub": str(user_id), "nonce": secrets.token_urlsafe(16)},
        TOKEN_TYPE_ANTIFORGERY,
        timedelta(minutes=settings.ANTIFORGERY_TOKEN_EXPIRE_MINUTES),
    )


def decode_antiforgery_token(token: str) -> Optional[dict[str, Any]]:
    """Decode an anti-forgery token; None if invalid, expired or of another type."""
    payload = decode_token(token)
    if payload is None or payload.get("type") != TOKEN_TYPE_ANTIFORGERY:
        return None
    return payload
