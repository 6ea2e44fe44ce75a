"""Moderation state machine for projects.

Every status change made by a moderator goes through this table, so the
allowed source statuses for each action are defined in exactly one place.
Re-approving, re-rejecting and flipping between approved and rejected are
currently allowed; narrowing a `sources` set is all it takes to forbid them.
"""

from dataclasses import dataclass
from enum import Enum

from src.portfolio.models.enums import ProjectStatus


class ModerationAction(str, Enum):
    """Decision a moderator can take on a project."""

    APPROVE = "approve"
    REJECT = "reject"


@dataclass(frozen=True)
class Transition:
    """Target status of an action and the statuses it may start from."""

    action: ModerationAction
    target: ProjectStatus
    sources: frozenset[ProjectStatus]


MODERATION_TRANSITIONS: dict[ModerationAction, Transition] = {
    ModerationAction.APPROVE: Transition(
        action=ModerationAction.APPROVE,
        target=ProjectStatus.APPROVED,
        sources=frozenset(ProjectStatus),
    ),
    ModerationAction.REJECT: Transition(
        action=ModerationAction.REJECT,
        target=ProjectStatus.REJECTED,
        sources=frozenset(ProjectStatus),
    ),
}


def resolve_transition(action: ModerationAction) -> Transition:
    """Look up the transition for a moderation action."""
    return MODERATION_TRANSITIONS[action]


def can_transition(current: ProjectStatus | str, action: ModerationAction) -> bool:
    """Whether a project in `current` status may undergo `action`."""
    return ProjectStatus(current) in resolve_transition(action).sources
