"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Role carried by the caller's access token."""

    TEAM_MEMBER = "team_member"
    TEAM_LEADER = "team_leader"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """Account status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class ProjectStatus(str, Enum):
    """Moderation status of a project."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MediaType(str, Enum):
    """Kind of media attached to a project."""

    IMAGE = "image"
    VIDEO = "video"
    LINK = "link"


# Roles allowed to approve, reject and delete projects
MODERATOR_ROLES: frozenset[UserRole] = frozenset({UserRole.TEAM_LEADER, UserRole.ADMIN})

# Roles allowed to submit projects
CREATOR_ROLES: frozenset[UserRole] = frozenset(UserRole)
