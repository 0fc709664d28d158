"""
Shared Test Fixtures
====================

The API client runs the FastAPI app in-process over ``httpx.ASGITransport``.
Authentication, the data access gateway, the mediator and the permission
service are replaced through ``app.dependency_overrides`` so endpoint tests
never touch PostgreSQL or Redis.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.antiforgery import validate_antiforgery_token
from app.db.session import get_db
from app.dependencies import get_current_user
from app.main import app
from app.models import Activity, Task, User, UserType
from app.services.data_access import AllReadyDataAccess, get_data_access
from app.services.mediator import Mediator
from app.services.task_handlers import get_mediator
from app.services.task_permissions import TaskEditPermissions, get_task_permissions

# A fixed user UUID used across tests
USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
OTHER_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")


# ---------------------------------------------------------------------------
# Model builders
# ---------------------------------------------------------------------------

def make_user(
    user_id: uuid.UUID = USER_ID,
    user_type: UserType = UserType.BASIC_USER,
    organization_id: int | None = None,
) -> User:
    return User(
        user_id=user_id,
        email=f"{user_id.hex[:8]}@example.org",
        full_name="Test Volunteer",
        phone_number="+1 555 0100",
        user_type=user_type,
        organization_id=organization_id,
    )


def make_activity(
    activity_id: int = 1,
    managing_organization_id: int | None = None,
    organizer_id: uuid.UUID | None = None,
) -> Activity:
    return Activity(
        activity_id=activity_id,
        name="Food Drive",
        campaign_name="Winter Relief",
        managing_organization_id=managing_organization_id,
        organizer_id=organizer_id,
    )


def make_task(
    task_id: int = 1,
    activity: Activity | None = None,
    name: str = "Sort donations",
    is_closed: bool = False,
) -> Task:
    activity = activity if activity is not None else make_activity()
    return Task(
        task_id=task_id,
        activity=activity,
        activity_id=activity.activity_id,
        name=name,
        number_of_volunteers_required=3,
        is_closed=is_closed,
    )


# ---------------------------------------------------------------------------
# Dependency doubles
# ---------------------------------------------------------------------------

@pytest.fixture
def current_user() -> User:
    return make_user()


@pytest.fixture
def data_access() -> AsyncMock:
    mock = AsyncMock(spec=AllReadyDataAccess)
    mock.get_activity.return_value = None
    mock.get_task.return_value = None
    mock.get_user.return_value = None
    return mock


@pytest.fixture
def mediator() -> AsyncMock:
    mock = AsyncMock(spec=Mediator)
    mock.send.return_value = None
    return mock


@pytest.fixture
def permissions() -> MagicMock:
    mock = MagicMock(spec=TaskEditPermissions)
    mock.has_task_edit_permissions.return_value = True
    return mock


async def _skip_antiforgery() -> None:
    return None


@pytest_asyncio.fixture
async def client(current_user, data_access, mediator, permissions):
    """API client with every collaborator mocked and anti-forgery bypassed."""
    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_data_access] = lambda: data_access
    app.dependency_overrides[get_mediator] = lambda: mediator
    app.dependency_overrides[get_task_permissions] = lambda: permissions
    app.dependency_overrides[validate_antiforgery_token] = _skip_antiforgery

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def secured_client(current_user, data_access, mediator, permissions):
    """API client that still enforces the anti-forgery check."""
    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_data_access] = lambda: data_access
    app.dependency_overrides[get_mediator] = lambda: mediator
    app.dependency_overrides[get_task_permissions] = lambda: permissions

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _mock_db():
    yield AsyncMock(spec=AsyncSession)


@pytest_asyncio.fixture
async def anonymous_client(data_access, mediator, permissions):
    """API client with real authentication over a mocked database session."""
    app.dependency_overrides[get_db] = _mock_db
    app.dependency_overrides[get_data_access] = lambda: data_access
    app.dependency_overrides[get_mediator] = lambda: mediator
    app.dependency_overrides[get_task_permissions] = lambda: permissions

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
