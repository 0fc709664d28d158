"""
Task Edit Permissions
=====================

Decides whether a principal may create, edit or delete a task.
"""

from typing import Annotated, Optional

from fastapi import Depends

from app.models.task import Task
from app.models.user import User, UserType


class TaskEditPermissions:
    """
    Edit rights on a task are granted to:

    - site administrators
    - administrators of the organization managing the task's activity
    - the organizer of the task's activity

    A task that could not be resolved (e.g. its activity does not exist)
    is never editable.
    """

    def has_task_edit_permissions(
        self,
        task: Optional[Task],
        user: Optional[User],
    ) -> bool:
        if task is None or user is None:
            return False

        if user.user_type == UserType.SITE_ADMIN:
            return True

        activity = task.activity
        if activity is None:
            return False

        if (
            user.user_type == UserType.ORG_ADMIN
            and user.organization_id is not None
            and activity.managing_organization_id == user.organization_id
        ):
            return True

        return activity.organizer_id is not None and activity.organizer_id == user.user_id


def get_task_permissions() -> TaskEditPermissions:
    """FastAPI dependency providing the permission service."""
    return TaskEditPermissions()


TaskPermissions = Annotated[TaskEditPermissions, Depends(get_task_permissions)]
