"""Model exports.

Import from here: `from src.portfolio.models import Project, User`
"""

# Enums
from src.portfolio.models.enums import (
    CREATOR_ROLES,
    MODERATOR_ROLES,
    MediaType,
    ProjectStatus,
    UserRole,
    UserStatus,
)

# Tables
from src.portfolio.models.project import (
    Project,
    ProjectMedia,
    ProjectParticipant,
    ProjectSkill,
    Skill,
)
from src.portfolio.models.user import User

__all__ = [
    # Enums
    "CREATOR_ROLES",
    "MODERATOR_ROLES",
    "MediaType",
    "ProjectStatus",
    "UserRole",
    "UserStatus",
    # Tables
    "Project",
    "ProjectMedia",
    "ProjectParticipant",
    "ProjectSkill",
    "Skill",
    "User",
]
