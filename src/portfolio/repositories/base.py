"""Base repository with common CRUD operations."""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def insert_ignore(
        self,
        model: type[SQLModel],
        rows: Sequence[dict[str, Any]],
        conflict_columns: Sequence[str],
    ) -> None:
        """Insert rows, silently skipping any that collide on a unique key.

        Uses the store's atomic INSERT ... ON CONFLICT DO NOTHING, so concurrent
        writers of the same key never race between a lookup and an insert.
        """
        if not rows:
            return
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = postgresql.insert(model)
        elif dialect == "sqlite":
            stmt = sqlite.insert(model)
        else:
            raise NotImplementedError(f"insert_ignore is not supported on {dialect}")
        await self.session.execute(
            stmt.values(list(rows)).on_conflict_do_nothing(index_elements=list(conflict_columns))
        )
