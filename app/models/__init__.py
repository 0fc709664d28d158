"""
Database Models
===============

SQLAlchemy ORM models for all database entities.

All models are imported here to ensure they are registered
with SQLAlchemy's metadata for migrations and relationships.
"""

from app.models.user import User, UserType
from app.models.activity import Activity
from app.models.task import (
    Task,
    TaskSignup,
    TaskStatus,
)

__all__ = [
    # User
    "User",
    "UserType",
    # Activity
    "Activity",
    # Task
    "Task",
    "TaskSignup",
    "TaskStatus",
]
