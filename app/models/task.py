"""
Task Models
===========

SQLAlchemy models for volunteer tasks and task signups.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.activity import Activity
    from app.models.user import User


# =============================================================================
# Enums
# =============================================================================

class TaskStatus(str, Enum):
    """Status of a volunteer's signup for a task."""
    ASSIGNED = "Assigned"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    COMPLETED = "Completed"
    CAN_NOT_COMPLETE = "CanNotComplete"


# =============================================================================
# Models
# =============================================================================

class Task(Base, TimestampMixin):
    """
    Task model.

    A unit of volunteer work inside an activity.
    """

    __tablename__ = "tasks"

    # Primary Key
    task_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # Foreign Key
    activity_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("activities.activity_id", ondelete="CASCADE"),
        nullable=False,
    )

    # Task details
    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    start_date_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    end_date_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    number_of_volunteers_required: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
    )
    is_closed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    # Relationships
    activity: Mapped["Activity"] = relationship(
        "Activity",
        back_populates="tasks",
    )
    assigned_volunteers: Mapped[list["TaskSignup"]] = relationship(
        "TaskSignup",
        back_populates="task",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_task_activity", "activity_id"),
    )

    def __repr__(self) -> str:
        return f"<Task(task_id={self.task_id}, name={(self.name or '')[:30]})>"

    def signup_for(self, user_id: Optional[uuid.UUID]) -> Optional["TaskSignup"]:
        """Return the signup held by ``user_id``, if any."""
        if user_id is None:
            return None
        for signup in self.assigned_volunteers or []:
            if signup.user_id == user_id:
                return signup
        return None


class TaskSignup(Base, TimestampMixin):
    """
    Task signup model.

    Links a volunteer to a task and carries that volunteer's status.
    """

    __tablename__ = "task_signups"

    task_signup_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # Foreign Keys
    task_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tasks.task_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )

    # Status
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, name="taskstatus", create_constraint=True, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=TaskStatus.ASSIGNED,
    )
    status_description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    status_changed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Contact preferences supplied at signup
    preferred_email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    preferred_phone_number: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    additional_info: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # Relationships
    task: Mapped["Task"] = relationship(
        "Task",
        back_populates="assigned_volunteers",
    )
    user: Mapped["User"] = relationship(
        "User",
        back_populates="task_signups",
    )

    __table_args__ = (
        UniqueConstraint("task_id", "user_id", name="uq_signup_task_user"),
        Index("idx_signup_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<TaskSignup(task_id={self.task_id}, user_id={self.user_id}, status={self.status})>"
