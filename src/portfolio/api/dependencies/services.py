"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.portfolio.api.dependencies.db import DBSession
from src.portfolio.api.dependencies.repositories import ProjectRepo, SkillRepo, UserRepo
from src.portfolio.core.storage import LocalMediaStorage, get_media_storage
from src.portfolio.services.project_service import ProjectService

MediaStorageDep = Annotated[LocalMediaStorage, Depends(get_media_storage)]


def get_project_service(
    project_repo: ProjectRepo,
    skill_repo: SkillRepo,
    user_repo: UserRepo,
    session: DBSession,
    storage: MediaStorageDep,
) -> ProjectService:
    """Get project service bound to the request's session."""
    return ProjectService(project_repo, skill_repo, user_repo, session, storage)


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
