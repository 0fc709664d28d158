"""
Data Access
===========

Persistence gateway for activities, tasks, task signups and users.

Tasks are always loaded together with their activity and signups so
callers can inspect them without lazy loading (which is unavailable on
async sessions).
"""

from typing import Annotated, Optional
import uuid

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.session import get_db
from app.models.activity import Activity
from app.models.task import Task, TaskSignup
from app.models.user import User


class AllReadyDataAccess:
    """Gateway over the async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_activity(self, activity_id: int) -> Optional[Activity]:
        """Get an activity by ID."""
        stmt = select(Activity).where(Activity.activity_id == activity_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_task(self, task_id: int) -> Optional[Task]:
        """Get a task by ID with its activity and signups."""
        stmt = (
            select(Task)
            .where(Task.task_id == task_id)
            .options(
                selectinload(Task.activity),
                selectinload(Task.assigned_volunteers),
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        """Get a user by ID."""
        stmt = select(User).where(User.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    # =========================================================================
    # Writes
    # =========================================================================

    async def add_task(self, task: Task) -> Task:
        """Persist a new task."""
        self.db.add(task)
        await self.db.flush()
        return task

    async def update_task(self, task: Task) -> Task:
        """Flush pending changes on an already-tracked task."""
        await self.db.flush()
        return task

    async def delete_task(self, task_id: int) -> None:
        """Delete a task and (by cascade) its signups."""
        await self.db.execute(delete(Task).where(Task.task_id == task_id))
        await self.db.flush()

    async def add_task_signup(self, signup: TaskSignup) -> TaskSignup:
        """Persist a new task signup."""
        self.db.add(signup)
        await self.db.flush()
        return signup

    async def update_task_signup(self, signup: TaskSignup) -> TaskSignup:
        """Flush pending changes on a tracked signup."""
        await self.db.flush()
        return signup

    async def delete_task_signup(self, signup: TaskSignup) -> None:
        """Remove a task signup."""
        await self.db.delete(signup)
        await self.db.flush()


def get_data_access(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AllReadyDataAccess:
    """FastAPI dependency providing the data access gateway."""
    return AllReadyDataAccess(db)


DataAccess = Annotated[AllReadyDataAccess, Depends(get_data_access)]
