"""
Pydantic Schemas
================

Request/response schemas for API validation.
"""

from app.schemas.common import (
    BaseResponse,
    ErrorResponse,
)
from app.schemas.task import (
    ActivitySignupViewModel,
    TaskChangeModel,
    TaskViewModel,
)

__all__ = [
    "BaseResponse",
    "ErrorResponse",
    "ActivitySignupViewModel",
    "TaskChangeModel",
    "TaskViewModel",
]
