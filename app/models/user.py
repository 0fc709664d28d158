"""
User Model
==========

SQLAlchemy model for volunteer and administrator accounts.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import Enum as SQLEnum, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.task import TaskSignup


class UserType(str, Enum):
    """Role of the account within the platform."""
    BASIC_USER = "BasicUser"
    ORG_ADMIN = "OrgAdmin"
    SITE_ADMIN = "SiteAdmin"


class User(Base, TimestampMixin):
    """
    User account model.

    Accounts are provisioned by the identity service; this service only
    reads them to resolve the authenticated principal.
    """

    __tablename__ = "users"

    # Primary Key
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Account fields
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    phone_number: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    # Authorization
    user_type: Mapped[UserType] = mapped_column(
        SQLEnum(UserType, name="usertype", create_constraint=True, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=UserType.BASIC_USER,
    )
    organization_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        index=True,
    )

    # Relationships
    task_signups: Mapped[list["TaskSignup"]] = relationship(
        "TaskSignup",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, email={self.email})>"
