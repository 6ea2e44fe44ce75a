"""Project schemas for API request/response."""

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from src.portfolio.core.exceptions import ValidationError
from src.portfolio.models.enums import MediaType, ProjectStatus


def _strip_or_none(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


class MediaItemIn(BaseModel):
    """Ad-hoc media descriptor pointing at an existing URL.

    Descriptors without both a type and a URL are skipped on creation.
    """

    media_type: MediaType | None = None
    url: str | None = Field(default=None, max_length=500)
    description: str | None = None

    @field_validator("media_type", mode="before")
    @classmethod
    def blank_media_type(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("url", "description")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip_or_none(v)

    @property
    def is_complete(self) -> bool:
        return self.media_type is not None and self.url is not None


class ProjectCreate(BaseModel):
    """Schema for submitting a project.

    Has no status field: new projects always start pending.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    participants: list[UUID] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    media: list[MediaItemIn] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or whitespace only")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _strip_or_none(v)

    @field_validator("skills")
    @classmethod
    def normalize_skills(cls, v: list[str]) -> list[str]:
        """Strip names, drop blanks and collapse exact duplicates, keeping order."""
        seen: dict[str, None] = {}
        for raw in v:
            name = raw.strip()
            if not name:
                continue
            if len(name) > 100:
                raise ValueError("Skill names cannot exceed 100 characters")
            seen.setdefault(name, None)
        return list(seen)

    @classmethod
    def from_form(
        cls,
        *,
        name: str | None,
        description: str | None,
        participants: str | None,
        skills: str | None,
        media: str | None,
    ) -> "ProjectCreate":
        """Build from multipart form fields; collections arrive as JSON arrays.

        Raises:
            ValidationError: With the offending field named.
        """
        if name is None or not name.strip():
            raise ValidationError("Project name is required", field="name")

        payload: dict[str, Any] = {"name": name, "description": description}
        for field_name, raw in (("participants", participants), ("skills", skills), ("media", media)):
            payload[field_name] = _parse_json_array(raw, field_name)

        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            first = e.errors()[0]
            loc = first.get("loc") or ("body",)
            raise ValidationError(
                f"Invalid {loc[0]} data: {first.get('msg', 'invalid value')}",
                field=str(loc[0]),
            ) from e


def _parse_json_array(raw: str | None, field_name: str) -> list[Any]:
    if raw is None or not raw.strip():
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid {field_name} data", field=field_name) from e
    if not isinstance(value, list):
        raise ValidationError(f"Invalid {field_name} data: expected a JSON array", field=field_name)
    return value


class ProjectUpdate(BaseModel):
    """Schema for editing a project's name or description."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Project name cannot be empty or whitespace only")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _strip_or_none(v)


class RejectRequest(BaseModel):
    """Optional rejection reason, forwarded verbatim to the creator."""

    reason: str | None = Field(default=None, max_length=2000)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class ProjectCreated(BaseModel):
    """Response for a submitted project."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Project created successfully"
    project_id: UUID = Field(serialization_alias="projectId")
    picture_url: str | None = None


class CreatorRead(BaseModel):
    user_id: UUID
    first_name: str
    last_name: str
    email: str


class ParticipantRead(BaseModel):
    user_id: UUID
    first_name: str
    last_name: str


class MediaRead(BaseModel):
    media_id: UUID
    media_type: MediaType
    url: str
    description: str | None = None


class ProjectSummary(BaseModel):
    """Aggregated project projection used by every listing."""

    project_id: UUID
    name: str
    description: str | None
    picture_url: str | None
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime
    created_by: CreatorRead
    skills: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    videos: list[str] = Field(default_factory=list)
    links: list[str] = Field(default_factory=list)


class ProjectDetail(ProjectSummary):
    """Public detail of one approved project."""

    participants: list[ParticipantRead] = Field(default_factory=list)
    media: list[MediaRead] = Field(default_factory=list)


class ModerationResult(BaseModel):
    """Outcome of an approve/reject transition."""

    message: str
    project_id: UUID
    status: ProjectStatus
    notification_sent: bool


class MediaUploaded(BaseModel):
    message: str = "Project media uploaded successfully"
    media_id: UUID
    media_url: str
    media_type: MediaType


class MessageResponse(BaseModel):
    message: str
