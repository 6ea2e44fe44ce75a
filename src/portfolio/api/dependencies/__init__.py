"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenience.
"""

# Auth
from src.portfolio.api.dependencies.auth import (
    CreatorCaller,
    CurrentCaller,
    ModeratorCaller,
    get_current_caller,
    require_creator,
    require_moderator,
)

# Database
from src.portfolio.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.portfolio.api.dependencies.repositories import (
    ProjectRepo,
    SkillRepo,
    UserRepo,
    get_project_repository,
    get_skill_repository,
    get_user_repository,
)

# Services
from src.portfolio.api.dependencies.services import (
    MediaStorageDep,
    ProjectServiceDep,
    get_project_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CreatorCaller",
    "CurrentCaller",
    "ModeratorCaller",
    "get_current_caller",
    "require_creator",
    "require_moderator",
    # Repositories
    "ProjectRepo",
    "SkillRepo",
    "UserRepo",
    "get_project_repository",
    "get_skill_repository",
    "get_user_repository",
    # Services
    "MediaStorageDep",
    "ProjectServiceDep",
    "get_project_service",
]
