"""Identity supplied by the authorization gate."""

from dataclasses import dataclass
from uuid import UUID

from src.portfolio.models.enums import CREATOR_ROLES, MODERATOR_ROLES, UserRole


@dataclass(frozen=True)
class Caller:
    """Authenticated caller as asserted by the access token.

    The project core trusts this completely and never re-checks credentials.
    """

    user_id: UUID
    role: UserRole

    @property
    def is_moderator(self) -> bool:
        return self.role in MODERATOR_ROLES

    @property
    def can_create(self) -> bool:
        return self.role in CREATOR_ROLES
