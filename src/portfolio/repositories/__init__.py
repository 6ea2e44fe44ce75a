"""Repository layer - data access abstraction."""

from src.portfolio.repositories.base import BaseRepository
from src.portfolio.repositories.project import ProjectRepository
from src.portfolio.repositories.skill import SkillRepository
from src.portfolio.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "ProjectRepository",
    "SkillRepository",
    "UserRepository",
]
