"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.portfolio.api.dependencies.db import DBSession
from src.portfolio.repositories import ProjectRepository, SkillRepository, UserRepository


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_skill_repository(session: DBSession) -> SkillRepository:
    return SkillRepository(session)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
SkillRepo = Annotated[SkillRepository, Depends(get_skill_repository)]
UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
