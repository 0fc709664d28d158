"""
Anti-Forgery Tests
==================

Tests for the double-submit anti-forgery token:
- Token issuance endpoint (cookie + body)
- Token encoding (type and user binding)
- Enforcement on state-changing task endpoints
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from app.config import settings
from app.core.security import (
    TOKEN_TYPE_ANTIFORGERY,
    _encode,
    create_access_token,
    create_antiforgery_token,
    decode_antiforgery_token,
)
from app.services.task_handlers import SUCCESS, TaskChangeResult

from conftest import OTHER_USER_ID, USER_ID

CHANGE_STATUS = {"taskId": 3, "status": "Accepted"}


class TestTokenEncoding:
    """Tests for anti-forgery JWT helpers."""

    def test_token_is_bound_to_user(self):
        payload = decode_antiforgery_token(create_antiforgery_token(USER_ID))

        assert payload is not None
        assert payload["sub"] == str(USER_ID)
        assert payload["type"] == TOKEN_TYPE_ANTIFORGERY

    def test_tokens_are_unique(self):
        assert create_antiforgery_token(USER_ID) != create_antiforgery_token(USER_ID)

    def test_access_token_is_not_an_antiforgery_token(self):
        token = create_access_token({"sub": str(USER_ID)})

        assert decode_antiforgery_token(token) is None

    def test_expired_token_is_rejected(self):
        token = _encode({"sub": str(USER_ID)}, TOKEN_TYPE_ANTIFORGERY, timedelta(minutes=-1))

        assert decode_antiforgery_token(token) is None

    def test_garbage_is_rejected(self):
        assert decode_antiforgery_token("not-a-jwt") is None


class TestTokenEndpoint:
    """Tests for GET /api/antiforgery/token."""

    @pytest.mark.asyncio
    async def test_issues_token_in_body_and_cookie(self, secured_client: AsyncClient):
        response = await secured_client.get("/api/antiforgery/token")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["headerName"] == settings.ANTIFORGERY_HEADER_NAME
        assert response.cookies.get(settings.ANTIFORGERY_COOKIE_NAME) == data["token"]
        assert decode_antiforgery_token(data["token"])["sub"] == str(USER_ID)


class TestEnforcement:
    """Anti-forgery validation on a state-changing endpoint."""

    @pytest.mark.asyncio
    async def test_rejects_request_without_token(self, secured_client: AsyncClient, mediator):
        response = await secured_client.post("/api/task/changestatus", json=CHANGE_STATUS)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ANTIFORGERY_INVALID"
        mediator.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_header_without_cookie(self, secured_client: AsyncClient, mediator):
        token = create_antiforgery_token(USER_ID)

        response = await secured_client.post(
            "/api/task/changestatus",
            json=CHANGE_STATUS,
            headers={settings.ANTIFORGERY_HEADER_NAME: token},
        )

        assert response.status_code == 400
        mediator.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_mismatched_header_and_cookie(self, secured_client: AsyncClient, mediator):
        secured_client.cookies.set(settings.ANTIFORGERY_COOKIE_NAME, create_antiforgery_token(USER_ID))

        response = await secured_client.post(
            "/api/task/changestatus",
            json=CHANGE_STATUS,
            headers={settings.ANTIFORGERY_HEADER_NAME: create_antiforgery_token(USER_ID)},
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Anti-forgery token mismatch"
        mediator.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_token_issued_to_another_user(self, secured_client: AsyncClient, mediator):
        token = create_antiforgery_token(OTHER_USER_ID)
        secured_client.cookies.set(settings.ANTIFORGERY_COOKIE_NAME, token)

        response = await secured_client.post(
            "/api/task/changestatus",
            json=CHANGE_STATUS,
            headers={settings.ANTIFORGERY_HEADER_NAME: token},
        )

        assert response.status_code == 400
        mediator.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_accepts_matching_token(self, secured_client: AsyncClient, mediator):
        mediator.send.return_value = TaskChangeResult(status=SUCCESS)
        token = create_antiforgery_token(USER_ID)
        secured_client.cookies.set(settings.ANTIFORGERY_COOKIE_NAME, token)

        response = await secured_client.post(
            "/api/task/changestatus",
            json=CHANGE_STATUS,
            headers={settings.ANTIFORGERY_HEADER_NAME: token},
        )

        assert response.status_code == 200
        assert response.json()["Status"] == SUCCESS
        mediator.send.assert_awaited_once()
