"""Project and media factories for test data generation."""

from polyfactory import Use

from src.portfolio.models import MediaType, Project, ProjectMedia, ProjectStatus
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class ProjectFactory(BaseFactory):
    """Factory for generating Project test data."""

    __model__ = Project

    id = Use(generate_uuid)
    name = Use(lambda: f"Project {generate_uuid().hex[-6:]}")
    description = "A project built by the team"
    picture_url = None
    status = ProjectStatus.PENDING.value
    created_by_user_id = None  # Required FK - must be set explicitly
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def approved(cls, **kwargs):
        """Create an approved project."""
        return cls.build(status=ProjectStatus.APPROVED.value, **kwargs)

    @classmethod
    def rejected(cls, **kwargs):
        """Create a rejected project."""
        return cls.build(status=ProjectStatus.REJECTED.value, **kwargs)


class ProjectMediaFactory(BaseFactory):
    """Factory for generating ProjectMedia test data."""

    __model__ = ProjectMedia

    id = Use(generate_uuid)
    project_id = None  # Required FK - must be set explicitly
    media_type = MediaType.IMAGE.value
    url = Use(lambda: f"https://cdn.example.com/{generate_uuid().hex}.png")
    description = None
    is_uploaded = False
    created_at = Use(utc_now)
