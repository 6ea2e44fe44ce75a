"""Project endpoints: submission, moderation and portfolio listings.

Static paths (/public, /pending) are declared before /{project_id} routes.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, File, Form, Query, UploadFile, status

from src.portfolio.api.dependencies import (
    CreatorCaller,
    MediaStorageDep,
    ModeratorCaller,
    ProjectServiceDep,
)
from src.portfolio.core.exceptions import ValidationError
from src.portfolio.core.logging import get_logger
from src.portfolio.core.storage import (
    PROJECT_MEDIA_FOLDER,
    PROJECT_PICTURES_FOLDER,
    LocalMediaStorage,
    media_type_for_content_type,
)
from src.portfolio.models import MediaType
from src.portfolio.schemas import (
    MediaUploaded,
    MessageResponse,
    ModerationResult,
    ProjectCreate,
    ProjectCreated,
    ProjectDetail,
    ProjectSummary,
    ProjectUpdate,
    RejectRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])

Limit = Annotated[int, Query(ge=1, le=100, description="Max items to return")]
Offset = Annotated[int, Query(ge=0, description="Items to skip")]
PAGING_NOTE = (
    " Paged with `limit` and `offset` (not cursors) so the response stays a plain JSON array."
)


async def _discard_upload(storage: LocalMediaStorage, url: str) -> None:
    """Remove a stored file after a failed write without masking the original error."""
    try:
        await storage.delete(url)
    except OSError as e:
        logger.warning("Failed to remove stored media", url=url, error=str(e))


@router.post(
    "",
    response_model=ProjectCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Submit project",
    description=(
        "Submit a project for moderation. Collections are JSON-encoded arrays in "
        "multipart form fields. New projects always start pending."
    ),
    responses={
        201: {"description": "Project created"},
        400: {"description": "Missing name, invalid field data or non-image picture"},
        401: {"description": "Missing or invalid token"},
    },
)
async def create_project(
    caller: CreatorCaller,
    service: ProjectServiceDep,
    storage: MediaStorageDep,
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    participants: Annotated[str | None, Form(description="JSON array of user ids")] = None,
    skills: Annotated[str | None, Form(description="JSON array of skill names")] = None,
    media: Annotated[
        str | None, Form(description="JSON array of {media_type, url, description}")
    ] = None,
    picture: Annotated[UploadFile | None, File()] = None,
) -> ProjectCreated:
    data = ProjectCreate.from_form(
        name=name,
        description=description,
        participants=participants,
        skills=skills,
        media=media,
    )

    picture_url = None
    if picture is not None and picture.filename:
        if media_type_for_content_type(picture.content_type) is not MediaType.IMAGE:
            raise ValidationError("Project picture must be an image", field="picture")
        picture_url = await storage.save(picture, PROJECT_PICTURES_FOLDER, "picture")

    try:
        project = await service.create_project(caller.user_id, data, picture_url)
    except Exception:
        if picture_url:
            await _discard_upload(storage, picture_url)
        raise

    return ProjectCreated(project_id=project.id, picture_url=picture_url)


@router.get(
    "/public",
    response_model=list[ProjectSummary],
    summary="Public portfolio",
    description=(
        "Approved projects, newest first, optionally filtered by member or skill." + PAGING_NOTE
    ),
)
async def list_public_projects(
    service: ProjectServiceDep,
    member: Annotated[UUID | None, Query(description="Participant user id")] = None,
    skill: Annotated[
        str | None, Query(description="Case-insensitive partial skill name")
    ] = None,
    limit: Limit = 50,
    offset: Offset = 0,
) -> list[ProjectSummary]:
    return await service.list_portfolio(member_id=member, skill=skill, limit=limit, offset=offset)


@router.get(
    "/public/{project_id}",
    response_model=ProjectDetail,
    summary="Public project detail",
    responses={404: {"description": "Project not found or not approved"}},
)
async def get_public_project(project_id: UUID, service: ProjectServiceDep) -> ProjectDetail:
    return await service.get_public_detail(project_id)


@router.get(
    "/pending",
    response_model=list[ProjectSummary],
    summary="Moderation queue",
    description="Pending projects, newest first." + PAGING_NOTE,
    responses={403: {"description": "Moderator role required"}},
)
async def list_pending_projects(
    _moderator: ModeratorCaller,
    service: ProjectServiceDep,
    limit: Limit = 50,
    offset: Offset = 0,
) -> list[ProjectSummary]:
    return await service.list_pending(limit=limit, offset=offset)


@router.get(
    "",
    response_model=list[ProjectSummary],
    summary="All projects",
    description="Every project regardless of status. Moderators only." + PAGING_NOTE,
    responses={403: {"description": "Moderator role required"}},
)
async def list_projects(
    _moderator: ModeratorCaller,
    service: ProjectServiceDep,
    limit: Limit = 50,
    offset: Offset = 0,
) -> list[ProjectSummary]:
    return await service.list_all(limit=limit, offset=offset)


@router.put(
    "/{project_id}/approve",
    response_model=ModerationResult,
    summary="Approve project",
    responses={
        404: {"description": "Project not found"},
        409: {"description": "Transition not allowed from the current status"},
    },
)
async def approve_project(
    project_id: UUID,
    _moderator: ModeratorCaller,
    service: ProjectServiceDep,
) -> ModerationResult:
    return await service.approve_project(project_id)


@router.put(
    "/{project_id}/reject",
    response_model=ModerationResult,
    summary="Reject project",
    description="Reject a project. The optional reason is included in the creator's email.",
    responses={
        404: {"description": "Project not found"},
        409: {"description": "Transition not allowed from the current status"},
    },
)
async def reject_project(
    project_id: UUID,
    _moderator: ModeratorCaller,
    service: ProjectServiceDep,
    body: Annotated[RejectRequest | None, Body()] = None,
) -> ModerationResult:
    return await service.reject_project(project_id, body.reason if body else None)


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    summary="Delete project",
    description="Delete a project together with its participants, skill links and media.",
    responses={404: {"description": "Project not found"}},
)
async def delete_project(
    project_id: UUID,
    _moderator: ModeratorCaller,
    service: ProjectServiceDep,
) -> MessageResponse:
    await service.delete_project(project_id)
    return MessageResponse(message="Project deleted successfully")


@router.patch(
    "/{project_id}",
    response_model=ProjectSummary,
    summary="Update project",
    description="Edit name or description. Allowed for the creator and moderators.",
    responses={
        403: {"description": "Not the creator or a moderator"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    caller: CreatorCaller,
    service: ProjectServiceDep,
) -> ProjectSummary:
    return await service.update_project(project_id, caller, data)


@router.post(
    "/{project_id}/media",
    response_model=MediaUploaded,
    status_code=status.HTTP_201_CREATED,
    summary="Upload project media",
    description="Attach an image or video file to a project.",
    responses={
        400: {"description": "Missing file or unsupported content type"},
        403: {"description": "Not the creator or a moderator"},
        404: {"description": "Project not found"},
    },
)
async def upload_project_media(
    project_id: UUID,
    caller: CreatorCaller,
    service: ProjectServiceDep,
    storage: MediaStorageDep,
    project_media: Annotated[UploadFile | None, File()] = None,
    description: Annotated[str | None, Form()] = None,
) -> MediaUploaded:
    if project_media is None or not project_media.filename:
        raise ValidationError("No file uploaded", field="project_media")

    media_type = media_type_for_content_type(project_media.content_type)
    if media_type is None:
        raise ValidationError("Only image and video files are allowed", field="project_media")

    # Fail before storing anything when the project is unknown or not editable
    await service.get_modifiable_project(project_id, caller)

    url = await storage.save(project_media, PROJECT_MEDIA_FOLDER, "project_media")
    try:
        media = await service.add_uploaded_media(
            project_id,
            caller,
            url,
            media_type,
            description.strip() or None if description else None,
        )
    except Exception:
        await _discard_upload(storage, url)
        raise

    return MediaUploaded(media_id=media.id, media_url=url, media_type=media_type)
