"""Repository for Skill entity."""

from uuid import UUID, uuid4

from sqlmodel import select

from src.portfolio.models import Skill
from src.portfolio.repositories.base import BaseRepository


class SkillRepository(BaseRepository[Skill]):
    """Repository for the shared skill vocabulary."""

    model = Skill

    async def get_or_create_many(self, names: list[str]) -> dict[str, UUID]:
        """Resolve skill names to ids, creating the missing ones.

        Insert-if-absent happens first and the ids are read back afterwards,
        so two transactions creating the same name both end up with the one
        row that won.

        Returns:
            Mapping of each requested name to its skill id.
        """
        if not names:
            return {}
        await self.insert_ignore(
            Skill,
            [{"id": uuid4(), "name": name} for name in names],
            conflict_columns=["name"],
        )
        result = await self.session.execute(
            select(Skill.name, Skill.id).where(Skill.name.in_(names))  # type: ignore[attr-defined]
        )
        return {name: skill_id for name, skill_id in result.all()}
