from src.portfolio.schemas.dashboard import DashboardStats, PublicOverview
from src.portfolio.schemas.project import (
    CreatorRead,
    MediaItemIn,
    MediaRead,
    MediaUploaded,
    MessageResponse,
    ModerationResult,
    ParticipantRead,
    ProjectCreate,
    ProjectCreated,
    ProjectDetail,
    ProjectSummary,
    ProjectUpdate,
    RejectRequest,
)

__all__ = [
    # Dashboard
    "DashboardStats",
    "PublicOverview",
    # Project
    "CreatorRead",
    "MediaItemIn",
    "MediaRead",
    "MediaUploaded",
    "MessageResponse",
    "ModerationResult",
    "ParticipantRead",
    "ProjectCreate",
    "ProjectCreated",
    "ProjectDetail",
    "ProjectSummary",
    "ProjectUpdate",
    "RejectRequest",
]
