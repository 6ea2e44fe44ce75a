from src.portfolio.services.moderation import (
    MODERATION_TRANSITIONS,
    ModerationAction,
    Transition,
    can_transition,
    resolve_transition,
)
from src.portfolio.services.project_service import ProjectService

__all__ = [
    "MODERATION_TRANSITIONS",
    "ModerationAction",
    "ProjectService",
    "Transition",
    "can_transition",
    "resolve_transition",
]
