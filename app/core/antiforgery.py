"""
Anti-Forgery Validation
=======================

Double-submit cookie check for state-changing endpoints.

The client fetches a token from ``GET /api/antiforgery/token`` (which also
sets the cookie) and echoes it in the ``X-XSRF-TOKEN`` header. A request
passes only when header and cookie match, the token is a valid
anti-forgery JWT, and it was issued to the current user.
"""

import logging
import secrets

from fastapi import Request

from app.config import settings
from app.core.errors import ErrorCodes, ValidationError
from app.core.security import decode_antiforgery_token
from app.dependencies import CurrentUser

logger = logging.getLogger(__name__)


def _reject(message: str) -> ValidationError:
    return ValidationError(message=message, code=ErrorCodes.ANTIFORGERY_INVALID)


async def validate_antiforgery_token(
    request: Request,
    current_user: CurrentUser,
) -> None:
    """FastAPI dependency enforcing a valid anti-forgery token."""
    header_token = request.headers.get(settings.ANTIFORGERY_HEADER_NAME)
    cookie_token = request.cookies.get(settings.ANTIFORGERY_COOKIE_NAME)

    if not header_token or not cookie_token:
        raise _reject("Anti-forgery token is missing")

    if not secrets.compare_digest(header_token, cookie_token):
        raise _reject("Anti-forgery token mismatch")

    payload = decode_antiforgery_token(header_token)
    if payload is None:
        raise _reject("Anti-forgery token is invalid or expired")

    if payload.get("sub") != str(current_user.user_id):
        logger.warning(
            "Anti-forgery token issued to %s presented by %s",
            payload.get("sub"),
            current_user.user_id,
        )
        raise _reject("Anti-forgery token was issued to a different user")
