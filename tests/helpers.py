"""Test helper functions for common data creation patterns."""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from src.portfolio.core.security import create_access_token
from src.portfolio.models import (
    Project,
    ProjectParticipant,
    ProjectSkill,
    Skill,
    User,
    UserRole,
)
from tests.factories import ProjectFactory, ProjectMediaFactory, UserFactory


@dataclass
class SentEmail:
    kind: str
    to: str
    project_name: str
    reason: str | None = None


@dataclass
class EmailOutbox:
    """Records notification calls instead of sending them."""

    messages: list[SentEmail] = field(default_factory=list)
    fail: bool = False

    def approved(self, to: str, project_name: str) -> bool:
        return self._record(SentEmail("approved", to, project_name))

    def rejected(self, to: str, project_name: str, reason: str | None = None) -> bool:
        return self._record(SentEmail("rejected", to, project_name, reason))

    def _record(self, message: SentEmail) -> bool:
        if self.fail:
            raise RuntimeError("mail transport unreachable")
        self.messages.append(message)
        return True


def auth_headers(user_id: UUID | str, role: UserRole | str = UserRole.TEAM_MEMBER) -> dict[str, str]:
    """Build a bearer Authorization header for the given identity."""
    role_value = role.value if isinstance(role, UserRole) else role
    token = create_access_token(user_id, role_value)
    return {"Authorization": f"Bearer {token}"}


async def create_user(session: AsyncSession, role: UserRole = UserRole.TEAM_MEMBER, **kwargs) -> User:
    """Create and commit a user with the given role."""
    user = UserFactory.build(role=role.value, **kwargs)
    session.add(user)
    await session.commit()
    return user


async def create_project(
    session: AsyncSession,
    creator: User,
    *,
    skills: list[str] | None = None,
    participants: list[User] | None = None,
    media: list[tuple[str, str]] | None = None,
    **kwargs,
) -> Project:
    """Create and commit a project with links, bypassing the service.

    Args:
        session: Database session
        creator: Owning user
        skills: Skill names; missing skills are created
        participants: Users linked besides the creator
        media: (media_type, url) pairs
        **kwargs: Additional args passed to ProjectFactory

    Returns:
        The committed project
    """
    project = ProjectFactory.build(created_by_user_id=creator.id, **kwargs)
    session.add(project)
    await session.flush()

    for user in [creator, *(participants or [])]:
        session.add(ProjectParticipant(project_id=project.id, user_id=user.id))

    for name in skills or []:
        result = await session.execute(select(Skill).where(Skill.name == name))
        skill = result.scalar_one_or_none()
        if skill is None:
            skill = Skill(name=name)
            session.add(skill)
            await session.flush()
        session.add(ProjectSkill(project_id=project.id, skill_id=skill.id))

    for media_type, url in media or []:
        session.add(ProjectMediaFactory.build(project_id=project.id, media_type=media_type, url=url))

    await session.commit()
    return project


async def count_rows(session: AsyncSession, model: type[SQLModel], **filters) -> int:
    """Count rows of a table, optionally filtered by column equality."""
    query = select(func.count()).select_from(model)
    for column, value in filters.items():
        query = query.where(getattr(model, column) == value)
    result = await session.execute(query)
    return result.scalar_one()
