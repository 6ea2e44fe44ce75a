"""Dashboard counters for the landing page and the moderator console."""

from fastapi import APIRouter

from src.portfolio.api.dependencies import ModeratorCaller, ProjectServiceDep
from src.portfolio.schemas import DashboardStats, PublicOverview

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardStats,
    summary="Moderator dashboard",
    responses={403: {"description": "Moderator role required"}},
)
async def get_dashboard(_moderator: ModeratorCaller, service: ProjectServiceDep) -> DashboardStats:
    """Member count, total projects and the size of the moderation queue."""
    return await service.dashboard_stats()


@router.get("/public", response_model=PublicOverview, summary="Public overview")
async def get_public_overview(service: ProjectServiceDep) -> PublicOverview:
    return await service.public_overview()
