"""
Data Access Tests
=================

Tests for AllReadyDataAccess against a mocked async session.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import TaskSignup, TaskStatus
from app.services.data_access import AllReadyDataAccess

from conftest import USER_ID, make_task, make_user


def _session_returning(value) -> AsyncMock:
    db = AsyncMock(spec=AsyncSession)
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    db.execute.return_value = result
    return db


class TestReads:
    """Tests for lookups."""

    @pytest.mark.asyncio
    async def test_get_task_returns_row(self):
        task = make_task(task_id=3)
        db = _session_returning(task)

        assert await AllReadyDataAccess(db).get_task(3) is task
        db.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_activity_returns_none_when_missing(self):
        db = _session_returning(None)

        assert await AllReadyDataAccess(db).get_activity(9) is None

    @pytest.mark.asyncio
    async def test_get_user_returns_row(self):
        user = make_user()
        db = _session_returning(user)

        assert await AllReadyDataAccess(db).get_user(USER_ID) is user


class TestWrites:
    """Tests for persistence operations."""

    @pytest.mark.asyncio
    async def test_add_task_adds_and_flushes(self):
        db = AsyncMock(spec=AsyncSession)
        task = make_task()

        assert await AllReadyDataAccess(db).add_task(task) is task
        db.add.assert_called_once_with(task)
        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_task_flushes(self):
        db = AsyncMock(spec=AsyncSession)

        await AllReadyDataAccess(db).update_task(make_task())

        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_task_executes_delete(self):
        db = AsyncMock(spec=AsyncSession)

        await AllReadyDataAccess(db).delete_task(3)

        db.execute.assert_awaited_once()
        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_add_task_signup_adds_and_flushes(self):
        db = AsyncMock(spec=AsyncSession)
        signup = TaskSignup(task_id=1, user_id=USER_ID, status=TaskStatus.ASSIGNED)

        await AllReadyDataAccess(db).add_task_signup(signup)

        db.add.assert_called_once_with(signup)
        db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_task_signup_deletes_and_flushes(self):
        db = AsyncMock(spec=AsyncSession)
        signup = TaskSignup(task_id=1, user_id=USER_ID, status=TaskStatus.ASSIGNED)

        await AllReadyDataAccess(db).delete_task_signup(signup)

        db.delete.assert_awaited_once_with(signup)
        db.flush.assert_awaited_once()
