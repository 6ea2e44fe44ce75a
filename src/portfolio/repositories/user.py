"""Repository for User entity (read-only from the project side)."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.portfolio.models import User
from src.portfolio.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    model = User

    async def get_email(self, user_id: UUID) -> str | None:
        """Get a user's contact address."""
        result = await self.session.execute(select(User.email).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_existing_ids(self, user_ids: Iterable[UUID]) -> set[UUID]:
        """Return the subset of the given ids that belong to existing users."""
        ids = set(user_ids)
        if not ids:
            return set()
        result = await self.session.execute(
            select(User.id).where(User.id.in_(ids))  # type: ignore[attr-defined]
        )
        return set(result.scalars().all())

    async def count(self) -> int:
        """Count all users."""
        result = await self.session.execute(select(func.count()).select_from(User))
        return result.scalar_one()
