"""
Common Dependencies
===================

Resolution of the authenticated principal, shared across routers.
"""

import logging
from typing import Annotated, Optional
import uuid

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.config import settings
from app.core.errors import AuthenticationError, ErrorCodes
from app.core.security import TOKEN_TYPE_ACCESS, decode_token
from app.db.session import get_db
from app.models.user import User, UserType
from app.services.cache import CacheKeys, CacheManager

logger = logging.getLogger(__name__)

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]

# Security scheme for JWT authentication
security = HTTPBearer(auto_error=False)

# Development test user ID (consistent UUID for testing)
DEV_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
DEV_USER_EMAIL = "dev@test.local"


# =============================================================================
# User Auth Cache Helpers
# =============================================================================

def _serialize_user_for_cache(user: User) -> dict:
    """Serialize a User to a JSON-safe dict."""
    return {
        "user_id": str(user.user_id),
        "email": user.email,
        "full_name": user.full_name,
        "phone_number": user.phone_number,
        "user_type": user.user_type.value if user.user_type else UserType.BASIC_USER.value,
        "organization_id": user.organization_id,
    }


def _build_user_from_cache(data: dict) -> User:
    """
    Reconstruct a *transient* (session-free) User from a cached dict.

    Consumers of ``CurrentUser`` only read attributes, so the object does
    not need to be attached to a session.
    """
    return User(
        user_id=uuid.UUID(data["user_id"]),
        email=data["email"],
        full_name=data.get("full_name"),
        phone_number=data.get("phone_number"),
        user_type=UserType(data.get("user_type", UserType.BASIC_USER.value)),
        organization_id=data.get("organization_id"),
    )


async def _get_cached_user(user_id: uuid.UUID) -> Optional[User]:
    """Return the cached User, or ``None`` on miss or malformed entry."""
    data = await CacheManager.get(CacheKeys.user_auth(str(user_id)))
    if not data:
        return None
    try:
        return _build_user_from_cache(data)
    except (KeyError, ValueError):
        logger.warning("Discarding malformed auth cache entry for %s", user_id)
        return None


# =============================================================================
# User resolution
# =============================================================================

async def get_or_create_dev_user(db: AsyncSession) -> User:
    """
    Get or create a development test user (site administrator).
    Only used when DEV_AUTH_DISABLED is True.
    """
    result = await db.execute(
        select(User).where(User.user_id == DEV_USER_ID)
    )
    user = result.scalar_one_or_none()

    if user is None:
        user = User(
            user_id=DEV_USER_ID,
            email=DEV_USER_EMAIL,
            full_name="Development User",
            user_type=UserType.SITE_ADMIN,
        )
        db.add(user)
        await db.flush()

    return user


async def _resolve_user_from_token(
    credentials: HTTPAuthorizationCredentials,
    db: AsyncSession,
) -> Optional[User]:
    """
    Decode the JWT, then return the User from Redis cache or DB.
    """
    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != TOKEN_TYPE_ACCESS:
        return None

    user_id_str = payload.get("sub")
    if user_id_str is None:
        return None

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        return None

    # Fast path: Redis cache hit
    cached = await _get_cached_user(user_id)
    if cached is not None:
        return cached

    result = await db.execute(select(User).where(User.user_id == user_id))
    user = result.scalar_one_or_none()
    if user is not None:
        await CacheManager.set(
            CacheKeys.user_auth(str(user_id)),
            _serialize_user_for_cache(user),
            ttl=CacheManager.TTL_SHORT,
        )
    return user


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DBSession,
) -> User:
    """
    Get current authenticated user.

    Raises 401 if not authenticated or token is invalid.
    In development with DEV_AUTH_DISABLED=True, returns the dev user.
    """
    if settings.auth_disabled:
        user = await get_or_create_dev_user(db)
    else:
        if credentials is None:
            raise AuthenticationError(
                code=ErrorCodes.AUTH_NOT_AUTHENTICATED,
                message="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )

        user = await _resolve_user_from_token(credentials, db)

        if user is None:
            raise AuthenticationError(
                code=ErrorCodes.AUTH_INVALID_TOKEN,
                message="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )

    # Picked up by the New Relic middleware
    request.state.user_id = user.user_id
    return user


# Type alias for authenticated user dependency
CurrentUser = Annotated[User, Depends(get_current_user)]
