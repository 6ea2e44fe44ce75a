"""Project lifecycle service: submission, moderation, deletion and read projections."""

import asyncio
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.portfolio.core.exceptions import (
    AppError,
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
    classify_integrity_error,
)
from src.portfolio.core.logging import get_logger
from src.portfolio.core.notifications import (
    send_project_approved_email,
    send_project_rejected_email,
)
from src.portfolio.core.security import Caller
from src.portfolio.core.storage import LocalMediaStorage
from src.portfolio.models import (
    MediaType,
    Project,
    ProjectMedia,
    ProjectStatus,
    User,
)
from src.portfolio.models.base import utc_now
from src.portfolio.repositories import ProjectRepository, SkillRepository, UserRepository
from src.portfolio.schemas import (
    CreatorRead,
    DashboardStats,
    MediaRead,
    ModerationResult,
    ParticipantRead,
    ProjectCreate,
    ProjectDetail,
    ProjectSummary,
    ProjectUpdate,
    PublicOverview,
)
from src.portfolio.services.moderation import (
    ModerationAction,
    can_transition,
    resolve_transition,
)

logger = get_logger(__name__)


class ProjectService:
    """Owns the project entity, its link rows and the moderation workflow.

    Every write runs as one transaction on the injected session: it either
    commits completely or is rolled back before the error propagates.
    """

    def __init__(
        self,
        project_repo: ProjectRepository,
        skill_repo: SkillRepository,
        user_repo: UserRepository,
        session: AsyncSession,
        storage: LocalMediaStorage | None = None,
    ):
        self.project_repo = project_repo
        self.skill_repo = skill_repo
        self.user_repo = user_repo
        self.session = session
        self.storage = storage

    # =========================================================================
    # Submission
    # =========================================================================

    async def create_project(
        self,
        creator_id: UUID | None,
        data: ProjectCreate,
        picture_url: str | None = None,
    ) -> Project:
        """Submit a project for moderation.

        The project always starts pending. The creator is linked as a
        participant even if not listed; participant and skill links are
        idempotent; media descriptors lacking a type or URL are skipped.

        Raises:
            ValidationError: Missing name/creator or unknown participant.
            DependencyError: The creator reference does not exist.
            InternalError: Any other store failure (nothing is written).
        """
        if creator_id is None:
            raise ValidationError("Creator identity is required", field="created_by")
        if not data.name:
            raise ValidationError("Project name is required", field="name")

        participant_ids = list(dict.fromkeys(data.participants))

        try:
            others = [user_id for user_id in participant_ids if user_id != creator_id]
            if others:
                existing = await self.user_repo.find_existing_ids(others)
                missing = [str(user_id) for user_id in others if user_id not in existing]
                if missing:
                    raise ValidationError(
                        f"Unknown participant(s): {', '.join(missing)}",
                        field="participants",
                    )

            project = Project(
                name=data.name,
                description=data.description,
                picture_url=picture_url,
                status=ProjectStatus.PENDING.value,
                created_by_user_id=creator_id,
            )
            self.project_repo.add(project)
            await self.session.flush()

            await self.project_repo.add_participants(project.id, [*participant_ids, creator_id])

            skill_ids = await self.skill_repo.get_or_create_many(data.skills)
            await self.project_repo.link_skills(project.id, list(skill_ids.values()))

            for item in data.media:
                if not item.is_complete:
                    continue
                self.project_repo.add_media(
                    ProjectMedia(
                        project_id=project.id,
                        media_type=MediaType(item.media_type).value,
                        url=item.url,
                        description=item.description,
                    )
                )

            await self.session.commit()

        except AppError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("Project creation rejected by store", error=str(e.orig))
            raise classify_integrity_error(e) from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create project", error=str(e))
            raise InternalError() from e

        logger.info(
            "Project created",
            project_id=str(project.id),
            created_by=str(creator_id),
            skills=len(skill_ids),
        )
        return project

    # =========================================================================
    # Moderation
    # =========================================================================

    async def approve_project(self, project_id: UUID) -> ModerationResult:
        """Approve a project and notify its creator (best effort)."""
        return await self._moderate(project_id, ModerationAction.APPROVE)

    async def reject_project(self, project_id: UUID, reason: str | None = None) -> ModerationResult:
        """Reject a project and notify its creator, including the reason if given."""
        return await self._moderate(project_id, ModerationAction.REJECT, reason)

    async def _moderate(
        self,
        project_id: UUID,
        action: ModerationAction,
        reason: str | None = None,
    ) -> ModerationResult:
        transition = resolve_transition(action)

        try:
            row = await self.project_repo.set_status(
                project_id, transition.target, transition.sources
            )
            if row is None:
                current = await self.project_repo.get_status(project_id)
                if current is None:
                    raise NotFoundError("Project not found")
                if not can_transition(current, action):
                    raise ConflictError(f"Cannot {action.value} a project that is {current}")
                raise ConflictError("Project status changed during moderation, please retry")
            await self.session.commit()
        except AppError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to update project status", project_id=str(project_id), error=str(e))
            raise InternalError() from e

        creator_id, project_name = row.created_by_user_id, row.name
        logger.info(
            f"Project {transition.target.value}",
            project_id=str(project_id),
            reason_given=reason is not None,
        )

        # The status change above is final; notification failures are only logged.
        notified = await self._notify_creator(creator_id, project_name, action, reason)

        return ModerationResult(
            message=f"Project {project_id} {transition.target.value} successfully.",
            project_id=project_id,
            status=transition.target,
            notification_sent=notified,
        )

    async def _notify_creator(
        self,
        creator_id: UUID,
        project_name: str,
        action: ModerationAction,
        reason: str | None,
    ) -> bool:
        try:
            email = await self.user_repo.get_email(creator_id)
            if not email:
                logger.warning("Creator has no contact address", user_id=str(creator_id))
                return False
            if action is ModerationAction.APPROVE:
                return await asyncio.to_thread(send_project_approved_email, email, project_name)
            return await asyncio.to_thread(send_project_rejected_email, email, project_name, reason)
        except Exception as e:
            logger.error(
                "Failed to notify project creator",
                user_id=str(creator_id),
                action=action.value,
                error=str(e),
            )
            return False

    # =========================================================================
    # Deletion
    # =========================================================================

    async def delete_project(self, project_id: UUID) -> None:
        """Delete a project with its participants, skill links and media.

        Dependent rows are removed by the store's cascading foreign keys; the
        transaction makes the existence check and the delete atomic.

        Raises:
            NotFoundError: No project with this id (nothing changes).
        """
        try:
            urls = await self.project_repo.stored_urls(project_id)
            deleted = await self.project_repo.delete_by_id(project_id)
            if deleted == 0:
                raise NotFoundError("Project not found")
            await self.session.commit()
        except AppError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            raise classify_integrity_error(e) from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to delete project", project_id=str(project_id), error=str(e))
            raise InternalError() from e

        logger.info("Project deleted", project_id=str(project_id))
        await self._remove_blobs(urls)

    async def _remove_blobs(self, urls: list[str]) -> None:
        if self.storage is None:
            return
        for url in urls:
            try:
                await self.storage.delete(url)
            except OSError as e:
                logger.warning("Failed to remove stored media", url=url, error=str(e))

    # =========================================================================
    # Edits by creator or moderator
    # =========================================================================

    async def get_modifiable_project(self, project_id: UUID, caller: Caller) -> Project:
        """Load a project the caller may edit: its creator or any moderator.

        Raises:
            NotFoundError: Unknown project.
            ForbiddenError: Caller is neither creator nor moderator.
        """
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        if not caller.is_moderator and project.created_by_user_id != caller.user_id:
            raise ForbiddenError("Only the project creator or a moderator can modify this project")
        return project

    async def update_project(
        self, project_id: UUID, caller: Caller, data: ProjectUpdate
    ) -> ProjectSummary:
        """Edit name and/or description. Status and creator never change here."""
        try:
            project = await self.get_modifiable_project(project_id, caller)
            changes = data.model_dump(exclude_unset=True)
            if changes.get("name") is not None:
                project.name = changes["name"]
            if "description" in changes:
                project.description = changes["description"]
            project.updated_at = utc_now()
            await self.session.commit()
        except AppError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to update project", project_id=str(project_id), error=str(e))
            raise InternalError() from e

        logger.info("Project updated", project_id=str(project_id), fields=sorted(changes))
        return await self.get_project_summary(project_id)

    async def add_uploaded_media(
        self,
        project_id: UUID,
        caller: Caller,
        url: str,
        media_type: MediaType,
        description: str | None = None,
    ) -> ProjectMedia:
        """Attach an already stored upload to a project."""
        try:
            await self.get_modifiable_project(project_id, caller)
            media = ProjectMedia(
                project_id=project_id,
                media_type=media_type.value,
                url=url,
                description=description,
                is_uploaded=True,
            )
            self.project_repo.add_media(media)
            await self.project_repo.touch(project_id)
            await self.session.commit()
        except AppError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            raise classify_integrity_error(e) from e
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to add project media", project_id=str(project_id), error=str(e))
            raise InternalError() from e

        logger.info(
            "Project media uploaded",
            project_id=str(project_id),
            media_id=str(media.id),
            media_type=media_type.value,
        )
        return media

    # =========================================================================
    # Read projections
    # =========================================================================

    async def list_portfolio(
        self,
        member_id: UUID | None = None,
        skill: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ProjectSummary]:
        """Approved projects for the public portfolio, newest first."""
        rows = await self.project_repo.list_with_creators(
            status=ProjectStatus.APPROVED,
            member_id=member_id,
            skill=skill.strip() if skill else None,
            limit=limit,
            offset=offset,
        )
        return await self._summaries(rows)

    async def list_pending(self, limit: int = 50, offset: int = 0) -> list[ProjectSummary]:
        """Moderation queue, newest first."""
        rows = await self.project_repo.list_with_creators(
            status=ProjectStatus.PENDING, limit=limit, offset=offset
        )
        return await self._summaries(rows)

    async def list_all(self, limit: int = 50, offset: int = 0) -> list[ProjectSummary]:
        """Every project regardless of status, newest first."""
        rows = await self.project_repo.list_with_creators(limit=limit, offset=offset)
        return await self._summaries(rows)

    async def get_project_summary(self, project_id: UUID) -> ProjectSummary:
        rows = await self.project_repo.list_with_creators(project_id=project_id)
        if not rows:
            raise NotFoundError("Project not found")
        return (await self._summaries(rows))[0]

    async def get_public_detail(self, project_id: UUID) -> ProjectDetail:
        """One approved project with participants and full media list.

        Pending and rejected projects are reported as not found.
        """
        rows = await self.project_repo.list_with_creators(
            status=ProjectStatus.APPROVED, project_id=project_id
        )
        if not rows:
            raise NotFoundError("Project not found")

        project, creator = rows[0]
        skills = await self.project_repo.skill_names_by_project([project_id])
        media = await self.project_repo.media_by_project([project_id])
        participants = await self.project_repo.participants(project_id)

        summary = self._build_summary(project, creator, skills[project_id], media[project_id])
        return ProjectDetail(
            **summary.model_dump(),
            participants=[
                ParticipantRead(user_id=user_id, first_name=first_name, last_name=last_name)
                for user_id, first_name, last_name in participants
            ],
            media=[
                MediaRead(
                    media_id=item.id,
                    media_type=MediaType(item.media_type),
                    url=item.url,
                    description=item.description,
                )
                for item in media[project_id]
            ],
        )

    async def _summaries(self, rows: Sequence[Row[Any]]) -> list[ProjectSummary]:
        """Aggregate skills and media for a page of projects in two extra queries."""
        project_ids = [project.id for project, _ in rows]
        skills = await self.project_repo.skill_names_by_project(project_ids)
        media = await self.project_repo.media_by_project(project_ids)
        return [
            self._build_summary(project, creator, skills[project.id], media[project.id])
            for project, creator in rows
        ]

    @staticmethod
    def _build_summary(
        project: Project,
        creator: User,
        skills: list[str],
        media: list[ProjectMedia],
    ) -> ProjectSummary:
        def urls_of(media_type: MediaType) -> list[str]:
            return list(dict.fromkeys(m.url for m in media if m.media_type == media_type.value))

        return ProjectSummary(
            project_id=project.id,
            name=project.name,
            description=project.description,
            picture_url=project.picture_url,
            status=ProjectStatus(project.status),
            created_at=project.created_at,
            updated_at=project.updated_at,
            created_by=CreatorRead(
                user_id=creator.id,
                first_name=creator.first_name,
                last_name=creator.last_name,
                email=creator.email,
            ),
            skills=list(skills),
            images=urls_of(MediaType.IMAGE),
            videos=urls_of(MediaType.VIDEO),
            links=urls_of(MediaType.LINK),
        )

    # =========================================================================
    # Dashboard counts
    # =========================================================================

    async def public_overview(self) -> PublicOverview:
        return PublicOverview(
            member_count=await self.user_repo.count(),
            total_projects=await self.project_repo.count(),
        )

    async def dashboard_stats(self) -> DashboardStats:
        return DashboardStats(
            member_count=await self.user_repo.count(),
            total_projects=await self.project_repo.count(),
            pending_projects=await self.project_repo.count(ProjectStatus.PENDING),
        )
