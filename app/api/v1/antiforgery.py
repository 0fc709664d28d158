"""
Anti-Forgery Token Endpoint
===========================

Issues the double-submit token required by state-changing task endpoints.
"""

from fastapi import APIRouter, Response

from app.config import settings
from app.core.security import create_antiforgery_token
from app.dependencies import CurrentUser

router = APIRouter()


@router.get("/token")
async def get_antiforgery_token(
    response: Response,
    current_user: CurrentUser,
) -> dict:
    """
    Issue an anti-forgery token for the authenticated user.

    The token is set as a cookie and returned in the body; clients must
    echo it back in the header named by ``headerName``.
    """
    token = create_antiforgery_token(current_user.user_id)

    response.set_cookie(
        key=settings.ANTIFORGERY_COOKIE_NAME,
        value=token,
        max_age=settings.ANTIFORGERY_TOKEN_EXPIRE_MINUTES * 60,
        secure=settings.is_production,
        samesite="strict",
    )

    return {
        "success": True,
        "data": {
            "token": token,
            "headerName": settings.ANTIFORGERY_HEADER_NAME,
        },
    }
