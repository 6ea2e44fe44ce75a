"""Repository for Project entity and its participant, skill and media links."""

from collections import defaultdict
from collections.abc import Collection, Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import Row, delete, func, update
from sqlmodel import select

from src.portfolio.models import (
    Project,
    ProjectMedia,
    ProjectParticipant,
    ProjectSkill,
    ProjectStatus,
    Skill,
    User,
)
from src.portfolio.models.base import utc_now
from src.portfolio.repositories.base import BaseRepository


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity."""

    model = Project

    # --- Writes -----------------------------------------------------------

    async def add_participants(self, project_id: UUID, user_ids: Collection[UUID]) -> None:
        """Link users to a project; existing links are left untouched."""
        await self.insert_ignore(
            ProjectParticipant,
            [{"project_id": project_id, "user_id": user_id} for user_id in dict.fromkeys(user_ids)],
            conflict_columns=["project_id", "user_id"],
        )

    async def link_skills(self, project_id: UUID, skill_ids: Collection[UUID]) -> None:
        """Tag a project with skills; existing links are left untouched."""
        await self.insert_ignore(
            ProjectSkill,
            [{"project_id": project_id, "skill_id": skill_id} for skill_id in dict.fromkeys(skill_ids)],
            conflict_columns=["project_id", "skill_id"],
        )

    def add_media(self, media: ProjectMedia) -> None:
        self.session.add(media)

    async def set_status(
        self,
        project_id: UUID,
        target: ProjectStatus,
        allowed_sources: Collection[ProjectStatus],
    ) -> Row[Any] | None:
        """Move a project to `target` if its current status is an allowed source.

        Single UPDATE ... RETURNING; refreshes updated_at.

        Returns:
            Row with (created_by_user_id, name), or None if nothing matched.
        """
        stmt = (
            update(Project)
            .where(
                Project.id == project_id,
                Project.status.in_([s.value for s in allowed_sources]),  # type: ignore[attr-defined]
            )
            .values(status=target.value, updated_at=utc_now())
            .returning(Project.created_by_user_id, Project.name)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.first()

    async def touch(self, project_id: UUID) -> None:
        """Refresh updated_at after a change to a dependent row."""
        await self.session.execute(
            update(Project)
            .where(Project.id == project_id)
            .values(updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )

    async def delete_by_id(self, project_id: UUID) -> int:
        """Delete a project; link and media rows go with it via ON DELETE CASCADE.

        Returns:
            Number of project rows deleted (0 or 1).
        """
        result = await self.session.execute(
            delete(Project)
            .where(Project.id == project_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount  # type: ignore[attr-defined, no-any-return]

    # --- Reads ------------------------------------------------------------

    async def get_status(self, project_id: UUID) -> str | None:
        result = await self.session.execute(select(Project.status).where(Project.id == project_id))
        return result.scalar_one_or_none()

    async def stored_urls(self, project_id: UUID) -> list[str]:
        """Files this project wrote to the media store: its picture and uploaded media.

        Ad-hoc media URLs supplied at creation are excluded, since they may
        point at files owned by other projects.
        """
        picture = await self.session.execute(
            select(Project.picture_url).where(Project.id == project_id)
        )
        media = await self.session.execute(
            select(ProjectMedia.url).where(
                ProjectMedia.project_id == project_id,
                ProjectMedia.is_uploaded.is_(True),  # type: ignore[attr-defined]
            )
        )
        urls = [url for url in picture.scalars().all() if url]
        urls.extend(media.scalars().all())
        return urls

    async def list_with_creators(
        self,
        *,
        status: ProjectStatus | None = None,
        project_id: UUID | None = None,
        member_id: UUID | None = None,
        skill: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[Row[tuple[Project, User]]]:
        """Projects joined with their creator, newest first.

        Args:
            status: Only projects in this status.
            project_id: Only this project.
            member_id: Only projects this user participates in.
            skill: Only projects with a skill whose name contains this text,
                case-insensitively.
            limit: Page size (None for all).
            offset: Rows to skip.
        """
        query = select(Project, User).join(User, User.id == Project.created_by_user_id)

        if status is not None:
            query = query.where(Project.status == status.value)
        if project_id is not None:
            query = query.where(Project.id == project_id)
        if member_id is not None:
            query = query.where(
                Project.id.in_(  # type: ignore[attr-defined]
                    select(ProjectParticipant.project_id).where(
                        ProjectParticipant.user_id == member_id
                    )
                )
            )
        if skill:
            pattern = f"%{_escape_like(skill)}%"
            query = query.where(
                Project.id.in_(  # type: ignore[attr-defined]
                    select(ProjectSkill.project_id)
                    .join(Skill, Skill.id == ProjectSkill.skill_id)
                    .where(Skill.name.ilike(pattern, escape="\\"))  # type: ignore[attr-defined]
                )
            )

        query = query.order_by(Project.created_at.desc(), Project.id.desc())  # type: ignore[attr-defined]
        if limit is not None:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)

        result = await self.session.execute(query)
        return result.all()

    async def skill_names_by_project(self, project_ids: Collection[UUID]) -> dict[UUID, list[str]]:
        """Distinct skill names per project, alphabetically."""
        grouped: dict[UUID, list[str]] = defaultdict(list)
        if not project_ids:
            return grouped
        result = await self.session.execute(
            select(ProjectSkill.project_id, Skill.name)
            .join(Skill, Skill.id == ProjectSkill.skill_id)
            .where(ProjectSkill.project_id.in_(project_ids))  # type: ignore[attr-defined]
            .order_by(Skill.name)
        )
        for project_id, name in result.all():
            grouped[project_id].append(name)
        return grouped

    async def media_by_project(
        self, project_ids: Collection[UUID]
    ) -> dict[UUID, list[ProjectMedia]]:
        """Media rows per project in insertion order."""
        grouped: dict[UUID, list[ProjectMedia]] = defaultdict(list)
        if not project_ids:
            return grouped
        result = await self.session.execute(
            select(ProjectMedia)
            .where(ProjectMedia.project_id.in_(project_ids))  # type: ignore[attr-defined]
            .order_by(ProjectMedia.created_at, ProjectMedia.id)
        )
        for media in result.scalars().all():
            grouped[media.project_id].append(media)
        return grouped

    async def participants(self, project_id: UUID) -> Sequence[Row[tuple[UUID, str, str]]]:
        """Participants of a project as (user_id, first_name, last_name)."""
        result = await self.session.execute(
            select(User.id, User.first_name, User.last_name)
            .join(ProjectParticipant, ProjectParticipant.user_id == User.id)
            .where(ProjectParticipant.project_id == project_id)
            .order_by(User.first_name, User.last_name)
        )
        return result.all()

    async def count(self, status: ProjectStatus | None = None) -> int:
        """Count projects, optionally in one status."""
        query = select(func.count()).select_from(Project)
        if status is not None:
            query = query.where(Project.status == status.value)
        result = await self.session.execute(query)
        return result.scalar_one()
