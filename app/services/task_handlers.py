"""
Task Features
=============

Commands, queries and notifications for the task workflow, their
handlers, and the per-request mediator that wires them together.

Failures that the client is expected to handle (unknown task, closed
task, invalid status transition) are reported through the ``status``
field of the result rather than raised.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Annotated, Optional
import uuid

from fastapi import Depends

from app.models.task import Task, TaskSignup, TaskStatus
from app.schemas.task import ActivitySignupViewModel
from app.services.data_access import AllReadyDataAccess, DataAccess
from app.services.mediator import Mediator

logger = logging.getLogger(__name__)


# =============================================================================
# Result status values
# =============================================================================

SUCCESS = "success"
FAILURE = "failure"
FAILURE_ACTIVITY_NOT_FOUND = "failure-activitynotfound"
FAILURE_TASK_NOT_FOUND = "failure-tasknotfound"
FAILURE_USER_NOT_FOUND = "failure-usernotfound"
FAILURE_CLOSED_TASK = "failure-taskclosed"
FAILURE_ALREADY_SIGNED_UP = "failure-alreadysignedup"
FAILURE_SIGNUP_NOT_FOUND = "failure-signupnotfound"
FAILURE_INVALID_TRANSITION = "failure-invalidtransition"


# =============================================================================
# Messages
# =============================================================================

@dataclass(frozen=True)
class TaskByTaskIdQuery:
    task_id: int


@dataclass(frozen=True)
class TaskSignupCommand:
    task_signup_model: ActivitySignupViewModel


@dataclass(frozen=True)
class TaskUnenrollCommand:
    task_id: int
    user_id: uuid.UUID


@dataclass(frozen=True)
class TaskStatusChangeCommand:
    task_id: int
    user_id: uuid.UUID
    task_status: TaskStatus
    task_status_description: Optional[str] = None


@dataclass
class TaskSignupResult:
    """Outcome of a signup or unenroll."""

    status: Optional[str] = None
    task: Optional[Task] = None


@dataclass
class TaskChangeResult:
    """Outcome of a status change."""

    status: Optional[str] = None
    task: Optional[Task] = None


# Notifications

@dataclass(frozen=True)
class VolunteerSignupNotification:
    task_id: int
    user_id: uuid.UUID


@dataclass(frozen=True)
class UserUnenrolls:
    task_id: int
    user_id: uuid.UUID


@dataclass(frozen=True)
class TaskSignupStatusChanged:
    task_id: int
    user_id: uuid.UUID
    previous_status: TaskStatus
    new_status: TaskStatus


# =============================================================================
# Status transitions
# =============================================================================

# Target status -> statuses it may be reached from (None = from any status)
ALLOWED_TRANSITIONS: dict[TaskStatus, Optional[frozenset[TaskStatus]]] = {
    TaskStatus.ASSIGNED: None,
    TaskStatus.ACCEPTED: frozenset({
        TaskStatus.ASSIGNED,
        TaskStatus.CAN_NOT_COMPLETE,
        TaskStatus.COMPLETED,
    }),
    TaskStatus.REJECTED: frozenset({TaskStatus.ASSIGNED}),
    TaskStatus.COMPLETED: frozenset({TaskStatus.ACCEPTED, TaskStatus.ASSIGNED}),
    TaskStatus.CAN_NOT_COMPLETE: frozenset({TaskStatus.ACCEPTED, TaskStatus.ASSIGNED}),
}


def is_transition_allowed(current: TaskStatus, target: TaskStatus) -> bool:
    """Return True if a signup in ``current`` may move to ``target``."""
    allowed_from = ALLOWED_TRANSITIONS[target]
    return allowed_from is None or current in allowed_from


# =============================================================================
# Handlers
# =============================================================================

class TaskByTaskIdQueryHandler:
    """Looks a task up by ID."""

    def __init__(self, data_access: AllReadyDataAccess):
        self.data_access = data_access

    async def __call__(self, message: TaskByTaskIdQuery) -> Optional[Task]:
        return await self.data_access.get_task(message.task_id)


class TaskSignupCommandHandler:
    """Signs a volunteer up for a task."""

    def __init__(self, data_access: AllReadyDataAccess, mediator: Mediator):
        self.data_access = data_access
        self.mediator = mediator

    async def __call__(self, message: TaskSignupCommand) -> TaskSignupResult:
        model = message.task_signup_model

        if model.activity_id is not None:
            activity = await self.data_access.get_activity(model.activity_id)
            if activity is None:
                return TaskSignupResult(status=FAILURE_ACTIVITY_NOT_FOUND)

        task = await self.data_access.get_task(model.task_id)
        if task is None or (
            model.activity_id is not None and task.activity_id != model.activity_id
        ):
            return TaskSignupResult(status=FAILURE_TASK_NOT_FOUND)

        if task.is_closed:
            return TaskSignupResult(status=FAILURE_CLOSED_TASK, task=task)

        user = await self.data_access.get_user(model.user_id) if model.user_id else None
        if user is None:
            return TaskSignupResult(status=FAILURE_USER_NOT_FOUND, task=task)

        if task.signup_for(user.user_id) is not None:
            return TaskSignupResult(status=FAILURE_ALREADY_SIGNED_UP, task=task)

        signup = TaskSignup(
            task=task,
            user_id=user.user_id,
            status=TaskStatus.ASSIGNED,
            status_changed_at=datetime.now(timezone.utc),
            preferred_email=model.preferred_email or user.email,
            preferred_phone_number=model.preferred_phone_number or user.phone_number,
            additional_info=model.additional_info,
        )
        await self.data_access.add_task_signup(signup)

        logger.info("User %s signed up for task %s", user.user_id, task.task_id)
        await self.mediator.publish(
            VolunteerSignupNotification(task_id=task.task_id, user_id=user.user_id)
        )
        return TaskSignupResult(status=SUCCESS, task=task)


class TaskUnenrollCommandHandler:
    """Withdraws a volunteer from a task."""

    def __init__(self, data_access: AllReadyDataAccess, mediator: Mediator):
        self.data_access = data_access
        self.mediator = mediator

    async def __call__(self, message: TaskUnenrollCommand) -> TaskSignupResult:
        task = await self.data_access.get_task(message.task_id)
        signup = task.signup_for(message.user_id) if task else None
        if signup is None:
            return TaskSignupResult(status=FAILURE)

        task.assigned_volunteers.remove(signup)
        await self.data_access.delete_task_signup(signup)

        logger.info("User %s unenrolled from task %s", message.user_id, message.task_id)
        await self.mediator.publish(
            UserUnenrolls(task_id=message.task_id, user_id=message.user_id)
        )
        return TaskSignupResult(status=SUCCESS, task=task)


class TaskStatusChangeCommandHandler:
    """Moves a volunteer's signup to a new status."""

    def __init__(self, data_access: AllReadyDataAccess, mediator: Mediator):
        self.data_access = data_access
        self.mediator = mediator

    async def __call__(self, message: TaskStatusChangeCommand) -> TaskChangeResult:
        task = await self.data_access.get_task(message.task_id)
        if task is None:
            return TaskChangeResult(status=FAILURE_TASK_NOT_FOUND)

        signup = task.signup_for(message.user_id)
        if signup is None:
            return TaskChangeResult(status=FAILURE_SIGNUP_NOT_FOUND, task=task)

        previous = signup.status
        if not is_transition_allowed(previous, message.task_status):
            logger.warning(
                "Rejected status change for task %s user %s: %s -> %s",
                message.task_id,
                message.user_id,
                previous.value,
                message.task_status.value,
            )
            return TaskChangeResult(status=FAILURE_INVALID_TRANSITION, task=task)

        signup.status = message.task_status
        signup.status_description = message.task_status_description
        signup.status_changed_at = datetime.now(timezone.utc)
        await self.data_access.update_task_signup(signup)

        logger.info(
            "Task %s user %s status %s -> %s",
            message.task_id,
            message.user_id,
            previous.value,
            message.task_status.value,
        )
        await self.mediator.publish(
            TaskSignupStatusChanged(
                task_id=message.task_id,
                user_id=message.user_id,
                previous_status=previous,
                new_status=message.task_status,
            )
        )
        return TaskChangeResult(status=SUCCESS, task=task)


# =============================================================================
# Notification subscribers
# =============================================================================

async def log_volunteer_signup(notification: VolunteerSignupNotification) -> None:
    logger.info(
        "Notify activity admins: volunteer %s joined task %s",
        notification.user_id,
        notification.task_id,
    )


async def log_user_unenrolls(notification: UserUnenrolls) -> None:
    logger.info(
        "Notify activity admins: volunteer %s left task %s",
        notification.user_id,
        notification.task_id,
    )


async def log_status_changed(notification: TaskSignupStatusChanged) -> None:
    logger.info(
        "Notify activity admins: task %s volunteer %s is now %s",
        notification.task_id,
        notification.user_id,
        notification.new_status.value,
    )


# =============================================================================
# Wiring
# =============================================================================

def build_mediator(data_access: AllReadyDataAccess) -> Mediator:
    """Create a mediator with all task handlers registered."""
    mediator = Mediator()
    mediator.register(TaskByTaskIdQuery, TaskByTaskIdQueryHandler(data_access))
    mediator.register(TaskSignupCommand, TaskSignupCommandHandler(data_access, mediator))
    mediator.register(TaskUnenrollCommand, TaskUnenrollCommandHandler(data_access, mediator))
    mediator.register(
        TaskStatusChangeCommand,
        TaskStatusChangeCommandHandler(data_access, mediator),
    )
    mediator.subscribe(VolunteerSignupNotification, log_volunteer_signup)
    mediator.subscribe(UserUnenrolls, log_user_unenrolls)
    mediator.subscribe(TaskSignupStatusChanged, log_status_changed)
    return mediator


def get_mediator(data_access: DataAccess) -> Mediator:
    """FastAPI dependency providing a per-request mediator."""
    return build_mediator(data_access)


TaskMediator = Annotated[Mediator, Depends(get_mediator)]
