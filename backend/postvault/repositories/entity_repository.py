"""Entity repository."""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from postvault.db.models.entity import Entity
from postvault.db.models.entity_link import EntityLink
from postvault.db.models.post import Post
from postvault.repositories.base_repository import BaseRepository
from postvault.services.canonicalize import canonicalize


class EntityRepository(BaseRepository[Entity]):
    """Repository for Entity and EntityLink operations."""

    def __init__(self, session: AsyncSession):
        """Initialize entity repository.

        Args:
            session: Async database session
        """
        super().__init__(Entity, session)

    async def upsert_entity(
        self,
        user_id: str,
        name: str,
        entity_type: str,
        description: Optional[str] = None,
    ) -> int:
        """Create an entity or merge into the existing one with the same key.

        The key is (user_id, canonicalize(name), entity_type). On a match the
        mention count is incremented in the database and the description is
        replaced only by a strictly longer one. The display name keeps its
        first-seen spelling.

        Args:
            user_id: Owning user
            name: Entity name as extracted
            entity_type: person, company, topic or technology
            description: Optional one-line description

        Returns:
            ID of the created or merged entity
        """
        name = name.strip()
        description = (description or "").strip() or None
        now = datetime.now(timezone.utc)

        stmt = self.upsert_statement().values(
            user_id=user_id,
            name=name,
            canonical_name=canonicalize(name),
            type=entity_type,
            description=description,
            mention_count=1,
            created_at=now,
            updated_at=now,
        )
        incoming = stmt.excluded.description
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "canonical_name", "type"],
            set_={
                "mention_count": Entity.mention_count + 1,
                "updated_at": now,
                "description": case(
                    (
                        and_(
                            incoming.is_not(None),
                            func.length(incoming) > func.coalesce(func.length(Entity.description), 0),
                        ),
                        incoming,
                    ),
                    else_=Entity.description,
                ),
            },
        ).returning(Entity.id)

        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def link_post_to_entity(
        self,
        entity_id: int,
        post_id: int,
        confidence: float = 1.0,
        context: Optional[str] = None,
    ) -> None:
        """Record that an entity was mentioned in a post (idempotent)."""
        stmt = (
            self.upsert_statement(EntityLink)
            .values(entity_id=entity_id, post_id=post_id, confidence=confidence, context=context)
            .on_conflict_do_nothing(index_elements=["entity_id", "post_id"])
        )
        await self.session.execute(stmt)

    async def get_for_user(self, entity_id: int, user_id: str) -> Optional[Entity]:
        """Get entity by ID, only if owned by user."""
        result = await self.session.execute(
            select(Entity).filter(and_(Entity.id == entity_id, Entity.user_id == user_id))
        )
        return result.scalar_one_or_none()

    async def get_by_key(
        self, user_id: str, name: str, entity_type: str
    ) -> Optional[Entity]:
        """Get entity by its dedup key, canonicalizing name first."""
        result = await self.session.execute(
            select(Entity).filter(
                and_(
                    Entity.user_id == user_id,
                    Entity.canonical_name == canonicalize(name),
                    Entity.type == entity_type,
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_by_user(
        self, user_id: str, entity_type: Optional[str] = None
    ) -> List[Entity]:
        """List entities for user, optionally filtered by type.

        Args:
            user_id: User ID
            entity_type: Optional filter by entity type (e.g., 'person', 'company')

        Returns:
            List of Entity instances
        """
        query = select(Entity).filter(Entity.user_id == user_id)

        if entity_type:
            query = query.filter(Entity.type == entity_type)

        result = await self.session.execute(query.order_by(Entity.id))
        return list(result.scalars().all())

    async def list_by_ids(self, user_id: str, entity_ids: List[int]) -> List[Entity]:
        """Get the user's entities with the given IDs."""
        if not entity_ids:
            return []
        result = await self.session.execute(
            select(Entity)
            .filter(and_(Entity.user_id == user_id, Entity.id.in_(entity_ids)))
            .order_by(Entity.id)
        )
        return list(result.scalars().all())

    async def count_by_type(self, user_id: str) -> Dict[str, int]:
        """Count the user's entities grouped by type."""
        result = await self.session.execute(
            select(Entity.type, func.count(Entity.id))
            .filter(Entity.user_id == user_id)
            .group_by(Entity.type)
        )
        return {entity_type: count for entity_type, count in result.all()}

    async def get_linked_posts(self, entity_id: int) -> List[Post]:
        """Get the posts an entity was mentioned in."""
        result = await self.session.execute(
            select(Post)
            .join(EntityLink, EntityLink.post_id == Post.id)
            .filter(EntityLink.entity_id == entity_id)
            .order_by(Post.id)
        )
        return list(result.scalars().all())

    async def list_links_for_post(self, post_id: int) -> List[EntityLink]:
        """Get the entity links recorded for a post."""
        result = await self.session.execute(
            select(EntityLink).filter(EntityLink.post_id == post_id).order_by(EntityLink.id)
        )
        return list(result.scalars().all())
