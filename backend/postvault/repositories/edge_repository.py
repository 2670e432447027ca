"""Co-occurrence edge repository for the entity graph."""
from typing import List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from postvault.db.models.entity_edge import EntityEdge
from postvault.repositories.base_repository import BaseRepository

CO_OCCURRENCE = "co-occurrence"


class EdgeRepository(BaseRepository[EntityEdge]):
    """Repository for EntityEdge model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize edge repository.

        Args:
            session: Async database session
        """
        super().__init__(EntityEdge, session)

    async def bump_edge(self, user_id: str, entity_id_a: int, entity_id_b: int) -> None:
        """Create the edge between two entities or increment its weight.

        The pair is stored in canonical order (source < target), so
        bump_edge(u, a, b) and bump_edge(u, b, a) hit the same row. The
        increment is done by the database in a single upsert. Self-pairs
        are ignored.

        Args:
            user_id: Owning user
            entity_id_a: One endpoint
            entity_id_b: Other endpoint
        """
        if entity_id_a == entity_id_b:
            return

        # Canonical ordering to prevent duplicates
        source_id, target_id = min(entity_id_a, entity_id_b), max(entity_id_a, entity_id_b)

        stmt = self.upsert_statement().values(
            source_entity_id=source_id,
            target_entity_id=target_id,
            relation_type=CO_OCCURRENCE,
            weight=1,
            user_id=user_id,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["source_entity_id", "target_entity_id", "user_id"],
            set_={"weight": EntityEdge.weight + 1},
        )
        await self.session.execute(stmt)

    async def get_edge(self, user_id: str, entity_id_a: int, entity_id_b: int) -> Optional[EntityEdge]:
        """Get the edge between two entities regardless of argument order."""
        source_id, target_id = min(entity_id_a, entity_id_b), max(entity_id_a, entity_id_b)
        result = await self.session.execute(
            select(EntityEdge).filter(
                and_(
                    EntityEdge.source_entity_id == source_id,
                    EntityEdge.target_entity_id == target_id,
                    EntityEdge.user_id == user_id,
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_by_user(self, user_id: str) -> List[EntityEdge]:
        """Get all edges owned by a user."""
        result = await self.session.execute(
            select(EntityEdge).filter(EntityEdge.user_id == user_id).order_by(EntityEdge.id)
        )
        return list(result.scalars().all())

    async def list_for_entity(self, user_id: str, entity_id: int) -> List[EntityEdge]:
        """Get the user's edges where the entity is either endpoint."""
        result = await self.session.execute(
            select(EntityEdge).filter(
                and_(
                    EntityEdge.user_id == user_id,
                    or_(
                        EntityEdge.source_entity_id == entity_id,
                        EntityEdge.target_entity_id == entity_id,
                    ),
                )
            )
        )
        return list(result.scalars().all())

    async def count_by_user(self, user_id: str) -> int:
        """Count the edges owned by a user."""
        result = await self.session.execute(
            select(func.count(EntityEdge.id)).filter(EntityEdge.user_id == user_id)
        )
        return result.scalar_one()
