"""
Tasks API Endpoints
===================

Task lifecycle endpoints: create, read, update and delete tasks, sign a
volunteer up for a task, withdraw from it, and change a volunteer's task
status.

Route prefix: /api/task

Endpoints:
    POST   /api/task                - Create a task (activity editors only)
    POST   /api/task/signup         - Sign up for a task
    DELETE /api/task/{id}/signup    - Withdraw the current user from a task
    POST   /api/task/changestatus   - Change a volunteer's task status
    GET    /api/task/{id}           - Fetch a task
    PUT    /api/task/{id}           - Update a task (activity editors only)
    DELETE /api/task/{id}           - Delete a task (activity editors only)

Every endpoint requires an authenticated user; state-changing endpoints
also require a valid anti-forgery token.
"""

import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from app.core.antiforgery import validate_antiforgery_token
from app.core.errors import (
    AuthenticationError,
    ErrorCodes,
    NotFoundError,
    ValidationError,
)
from app.dependencies import CurrentUser
from app.models.task import Task
from app.schemas.common import BaseResponse, ErrorResponse
from app.schemas.task import (
    ActivitySignupViewModel,
    TaskChangeModel,
    TaskViewModel,
)
from app.services.data_access import AllReadyDataAccess, DataAccess
from app.services.task_handlers import (
    TaskByTaskIdQuery,
    TaskChangeResult,
    TaskMediator,
    TaskSignupCommand,
    TaskSignupResult,
    TaskStatusChangeCommand,
    TaskUnenrollCommand,
)
from app.services.task_permissions import TaskPermissions

logger = logging.getLogger(__name__)

router = APIRouter(default_response_class=JSONResponse)

ValidateAntiForgery = Depends(validate_antiforgery_token)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    401: {"model": ErrorResponse, "description": "Not authorized"},
}


# =============================================================================
# Helpers
# =============================================================================

def _task_result_to_response(
    result: TaskSignupResult | TaskChangeResult,
    user_id,
) -> dict[str, Any]:
    """Shape a dispatcher result as ``{"Status", "Task"}``."""
    return {
        "Status": result.status,
        "Task": (
            TaskViewModel.from_task(result.task, user_id).to_api_dict()
            if result.task is not None
            else None
        ),
    }


def _apply_task_fields(task: Task, model: TaskViewModel) -> None:
    """Copy the editable fields of ``model`` onto ``task``."""
    task.name = model.name
    task.description = model.description
    task.start_date_time = model.start_date_time
    task.end_date_time = model.end_date_time
    task.number_of_volunteers_required = model.number_of_volunteers_required
    task.is_closed = model.is_closed


async def _build_task(
    model: TaskViewModel,
    data_access: AllReadyDataAccess,
) -> Optional[Task]:
    """
    Build the task described by ``model``.

    A non-zero ``id`` resolves to the stored task when there is one.
    Returns None when the referenced activity does not exist.
    """
    if model.activity_id is None:
        return None

    activity = await data_access.get_activity(model.activity_id)
    if activity is None:
        return None

    if model.id:
        existing = await data_access.get_task(model.id)
        if existing is not None:
            return existing

    task = Task(activity=activity, activity_id=activity.activity_id)
    if model.id:
        task.task_id = model.id
    _apply_task_fields(task, model)
    return task


def _signup_errors(exc: PydanticValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        messages.append(f"{field}: {message}" if field else message)
    return messages


# =============================================================================
# POST /api/task
# =============================================================================

@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[ValidateAntiForgery],
    responses=_ERROR_RESPONSES,
)
async def create_task(
    task_model: TaskViewModel,
    current_user: CurrentUser,
    data_access: DataAccess,
    mediator: TaskMediator,
    permissions: TaskPermissions,
) -> Response:
    """
    Create a task inside an activity.

    - 401 if the user may not edit tasks of the activity
    - 400 (no body) if a task with the given ID already exists
    - 400 if the activity does not exist or the task has no name
    - 201 (no body) on success
    """
    task = await _build_task(task_model, data_access)

    if not permissions.has_task_edit_permissions(task, current_user):
        raise AuthenticationError(
            message="Not authorized to edit tasks of this activity",
        )

    existing = await mediator.send(TaskByTaskIdQuery(task_id=task_model.id))
    if existing is not None:
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    if task is None:
        raise ValidationError(
            message="Should have found a matching activity Id",
            field="activityId",
            code=ErrorCodes.TASK_ACTIVITY_NOT_FOUND,
        )

    if not task.name:
        raise ValidationError(
            message="Task name is required",
            field="name",
            code=ErrorCodes.TASK_INVALID_DATA,
        )

    await data_access.add_task(task)
    logger.info("User %s created task %s", current_user.user_id, task.task_id)

    return Response(status_code=status.HTTP_201_CREATED)


# =============================================================================
# POST /api/task/signup
# =============================================================================

@router.post(
    "/signup",
    dependencies=[ValidateAntiForgery],
    responses=_ERROR_RESPONSES,
)
async def register_task(
    current_user: CurrentUser,
    mediator: TaskMediator,
    signup: Annotated[Any, Body()] = None,
):
    """
    Sign a volunteer up for a task.

    ``userId`` defaults to the authenticated user. Returns
    ``{"Status": ..., "Task": TaskViewModel | null}``.
    """
    if signup is None:
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    try:
        signup_model = ActivitySignupViewModel.model_validate(signup)
    except PydanticValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": _signup_errors(exc)},
        )

    if signup_model.user_id is None:
        signup_model.user_id = current_user.user_id

    result = await mediator.send(TaskSignupCommand(task_signup_model=signup_model))
    return _task_result_to_response(result, signup_model.user_id)


# =============================================================================
# DELETE /api/task/{id}/signup
# =============================================================================

@router.delete(
    "/{id}/signup",
    dependencies=[ValidateAntiForgery],
    responses=_ERROR_RESPONSES,
)
async def unregister_task(
    id: int,
    current_user: CurrentUser,
    mediator: TaskMediator,
):
    """
    Withdraw the authenticated user from a task.

    Returns ``{"Status": ..., "Task": TaskViewModel | null}``.
    """
    result = await mediator.send(
        TaskUnenrollCommand(task_id=id, user_id=current_user.user_id)
    )
    return _task_result_to_response(result, current_user.user_id)


# =============================================================================
# POST /api/task/changestatus
# =============================================================================

@router.post(
    "/changestatus",
    dependencies=[ValidateAntiForgery],
    responses=_ERROR_RESPONSES,
)
async def change_status(
    change_model: TaskChangeModel,
    current_user: CurrentUser,
    mediator: TaskMediator,
):
    """
    Change the status of a volunteer's signup for a task.

    ``userId`` defaults to the authenticated user. Returns
    ``{"Status": ..., "Task": TaskViewModel | null}``.
    """
    user_id = change_model.user_id or current_user.user_id

    result = await mediator.send(
        TaskStatusChangeCommand(
            task_id=change_model.task_id,
            user_id=user_id,
            task_status=change_model.status,
            task_status_description=change_model.status_description,
        )
    )
    return _task_result_to_response(result, user_id)


# =============================================================================
# GET / PUT / DELETE /api/task/{id}
# =============================================================================

@router.get(
    "/{id}",
    responses={404: {"model": ErrorResponse, "description": "Task not found"}},
)
async def get_task(
    id: int,
    current_user: CurrentUser,
    data_access: DataAccess,
):
    """Get a task as seen by the authenticated user."""
    task = await data_access.get_task(id)
    if task is None:
        raise NotFoundError(code=ErrorCodes.TASK_NOT_FOUND, message="Task not found")

    return TaskViewModel.from_task(task, current_user.user_id).to_api_dict()


@router.put(
    "/{id}",
    dependencies=[ValidateAntiForgery],
    responses=_ERROR_RESPONSES,
)
async def update_task(
    id: int,
    task_model: TaskViewModel,
    current_user: CurrentUser,
    data_access: DataAccess,
    permissions: TaskPermissions,
):
    """Update the editable fields of a task."""
    task = await data_access.get_task(id)

    if not permissions.has_task_edit_permissions(task, current_user):
        raise AuthenticationError(message="Not authorized to edit this task")

    if task is None:
        raise ValidationError(
            message="Task not found",
            field="id",
            code=ErrorCodes.TASK_NOT_FOUND,
        )

    _apply_task_fields(task, task_model)
    if not task.name:
        raise ValidationError(
            message="Task name is required",
            field="name",
            code=ErrorCodes.TASK_INVALID_DATA,
        )

    await data_access.update_task(task)
    logger.info("User %s updated task %s", current_user.user_id, id)

    return BaseResponse(
        data=TaskViewModel.from_task(task, current_user.user_id).to_api_dict(),
        message="Task updated successfully",
    )


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[ValidateAntiForgery],
    responses=_ERROR_RESPONSES,
)
async def delete_task(
    id: int,
    current_user: CurrentUser,
    data_access: DataAccess,
    permissions: TaskPermissions,
) -> Response:
    """Delete a task. Deleting a task that does not exist is a no-op."""
    task = await data_access.get_task(id)
    if task is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if not permissions.has_task_edit_permissions(task, current_user):
        raise AuthenticationError(message="Not authorized to delete this task")

    await data_access.delete_task(task.task_id)
    logger.info("User %s deleted task %s", current_user.user_id, id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
