"""User model.

Users are owned by the profile/auth side of the system; projects only
reference them (creator, participants) and read their contact details.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.portfolio.models.base import utc_now
from src.portfolio.models.enums import UserRole, UserStatus


class User(SQLModel, table=True):
    """Team member or team leader."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    position: str | None = Field(default=None, max_length=100)
    role: str = Field(default=UserRole.TEAM_MEMBER.value, max_length=50)
    status: str = Field(default=UserStatus.ACTIVE.value, max_length=50)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
