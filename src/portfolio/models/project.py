"""Project model and its link tables.

Link and media rows cascade with their project; the creator reference is
RESTRICT so a user who still owns projects cannot be deleted.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Column, Text
from sqlmodel import Field, SQLModel

from src.portfolio.models.base import sql_in_list, utc_now
from src.portfolio.models.enums import MediaType, ProjectStatus


class Project(SQLModel, table=True):
    """User-submitted work item subject to moderation."""

    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(f"status IN ({sql_in_list(ProjectStatus)})", name="ck_projects_status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255, index=True)
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    picture_url: str | None = Field(default=None, max_length=500)
    status: str = Field(default=ProjectStatus.PENDING.value, max_length=50, index=True)
    created_by_user_id: UUID = Field(foreign_key="users.id", ondelete="RESTRICT", index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class ProjectParticipant(SQLModel, table=True):
    """Junction table: users participating in a project."""

    __tablename__ = "project_participants"

    project_id: UUID = Field(foreign_key="projects.id", ondelete="CASCADE", primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", primary_key=True)


class Skill(SQLModel, table=True):
    """Skill tag, created lazily the first time a name is referenced."""

    __tablename__ = "skills"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100, unique=True, index=True)


class ProjectSkill(SQLModel, table=True):
    """Junction table: skills used in a project."""

    __tablename__ = "project_skills"

    project_id: UUID = Field(foreign_key="projects.id", ondelete="CASCADE", primary_key=True)
    skill_id: UUID = Field(foreign_key="skills.id", ondelete="CASCADE", primary_key=True)


class ProjectMedia(SQLModel, table=True):
    """Image, video or external link attached to a project."""

    __tablename__ = "project_media"
    __table_args__ = (
        CheckConstraint(
            f"media_type IN ({sql_in_list(MediaType)})", name="ck_project_media_media_type"
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", ondelete="CASCADE", index=True)
    media_type: str = Field(max_length=50)
    url: str = Field(max_length=500)
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    # Set for files written to the media store; ad-hoc URLs are never removed on delete
    is_uploaded: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
