"""
Configuration Tests
===================

Tests for Settings parsing and validation.
"""

import pytest
from pydantic import ValidationError

from app.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_rejects_short_jwt_secret(self):
        with pytest.raises(ValidationError):
            Settings(JWT_SECRET="too-short")

    def test_database_url_uses_asyncpg_driver(self):
        settings = Settings(DATABASE_URL="postgresql://u:p@db:5432/tasks")

        assert settings.database_url_async == "postgresql+asyncpg://u:p@db:5432/tasks"

    def test_allowed_origins_are_split_and_trimmed(self):
        settings = Settings(ALLOWED_ORIGINS="https://a.org, https://b.org")

        assert settings.allowed_origins_list == ["https://a.org", "https://b.org"]

    def test_auth_cannot_be_disabled_outside_development(self):
        settings = Settings(ENVIRONMENT="production", DEV_AUTH_DISABLED=True)

        assert settings.is_production
        assert not settings.auth_disabled

    def test_auth_can_be_disabled_in_development(self):
        settings = Settings(ENVIRONMENT="development", DEV_AUTH_DISABLED=True)

        assert settings.auth_disabled
