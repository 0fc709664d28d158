"""
Task Schemas
============

Pydantic schemas for the task API: the task view model (used for both
request bodies and responses), the signup request and the status-change
request.
"""

from datetime import datetime, timezone
from typing import Any, Optional
import re
import uuid

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.task import Task, TaskStatus

_PHONE_PATTERN = re.compile(r"^\+?[0-9 ()\-.]{7,20}$")


# =============================================================================
# Task View Model
# =============================================================================

class TaskViewModel(BaseModel):
    """
    View representation of a task.

    ``id == 0`` denotes a task that has not been persisted yet. The
    status fields describe the signup of the user the view was built for.
    """

    id: int = Field(default=0, ge=0)
    activity_id: Optional[int] = Field(None, alias="activityId")
    activity_name: Optional[str] = Field(None, alias="activityName")
    campaign_name: Optional[str] = Field(None, alias="campaignName")
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    start_date_time: Optional[datetime] = Field(None, alias="startDateTime")
    end_date_time: Optional[datetime] = Field(None, alias="endDateTime")
    number_of_volunteers_required: int = Field(
        default=1, ge=0, alias="numberOfVolunteersRequired",
    )
    is_closed: bool = Field(default=False, alias="isClosed")
    status: Optional[TaskStatus] = None
    status_description: Optional[str] = Field(None, alias="statusDescription")
    assigned_volunteers: list[str] = Field(default_factory=list, alias="assignedVolunteers")
    is_user_signed_up_for_task: bool = Field(default=False, alias="isUserSignedUpForTask")

    class Config:
        populate_by_name = True

    @classmethod
    def from_task(
        cls,
        task: Task,
        user_id: Optional[uuid.UUID] = None,
    ) -> "TaskViewModel":
        """Build the view of ``task`` as seen by ``user_id``."""
        activity = task.activity
        signup = task.signup_for(user_id)
        return cls(
            id=task.task_id or 0,
            activity_id=task.activity_id,
            activity_name=activity.name if activity else None,
            campaign_name=activity.campaign_name if activity else None,
            name=task.name,
            description=task.description,
            start_date_time=task.start_date_time,
            end_date_time=task.end_date_time,
            number_of_volunteers_required=task.number_of_volunteers_required or 0,
            is_closed=bool(task.is_closed),
            status=signup.status if signup else None,
            status_description=signup.status_description if signup else None,
            assigned_volunteers=[
                str(s.user_id) for s in task.assigned_volunteers or []
            ],
            is_user_signed_up_for_task=signup is not None,
        )

    def to_api_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys and JSON-safe values."""
        return self.model_dump(by_alias=True, mode="json")

    @field_validator("start_date_time", "end_date_time")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Treat naive datetimes as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("end_date_time")
    @classmethod
    def validate_end_after_start(cls, v, info):
        """Reject an end date that precedes the start date."""
        start = info.data.get("start_date_time")
        if v is not None and start is not None and v < start:
            raise ValueError("End date cannot be earlier than the start date")
        return v


# =============================================================================
# Request Schemas
# =============================================================================

class ActivitySignupViewModel(BaseModel):
    """
    Request schema for signing a volunteer up for a task.

    Maps to POST /api/task/signup
    """

    task_id: int = Field(alias="taskId", gt=0)
    activity_id: Optional[int] = Field(None, alias="activityId")
    user_id: Optional[uuid.UUID] = Field(None, alias="userId")
    name: Optional[str] = Field(None, max_length=255)
    preferred_email: Optional[EmailStr] = Field(None, alias="preferredEmail")
    preferred_phone_number: Optional[str] = Field(None, alias="preferredPhoneNumber")
    additional_info: Optional[str] = Field(None, alias="additionalInfo", max_length=1000)

    class Config:
        populate_by_name = True

    @field_validator("preferred_phone_number")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        """Accept common phone number formats only."""
        if v is None or v == "":
            return None
        if not _PHONE_PATTERN.match(v):
            raise ValueError("Invalid phone number")
        return v


class TaskChangeModel(BaseModel):
    """
    Request schema for changing a volunteer's task status.

    Maps to POST /api/task/changestatus
    """

    task_id: int = Field(alias="taskId")
    user_id: Optional[uuid.UUID] = Field(None, alias="userId")
    status: TaskStatus
    status_description: Optional[str] = Field(None, alias="statusDescription")

    class Config:
        populate_by_name = True
