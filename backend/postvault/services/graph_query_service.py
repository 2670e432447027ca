"""Read-only projections of a user's entity graph."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from postvault.db.models.entity import Entity
from postvault.db.models.post import Post
from postvault.repositories import (
    EdgeRepository,
    EntityRepository,
    ExtractionStatusRepository,
    PostRepository,
)

logger = logging.getLogger(__name__)


def entity_to_dict(entity: Entity) -> Dict[str, Any]:
    return {
        "id": entity.id,
        "name": entity.name,
        "canonicalName": entity.canonical_name,
        "type": entity.type,
        "description": entity.description,
        "mentionCount": entity.mention_count,
        "createdAt": entity.created_at.isoformat() if entity.created_at else None,
        "updatedAt": entity.updated_at.isoformat() if entity.updated_at else None,
    }


def post_to_dict(post: Post) -> Dict[str, Any]:
    return {
        "id": post.id,
        "userId": post.user_id,
        "originalUrl": post.original_url,
        "content": post.content,
        "summary": post.summary,
        "platform": post.platform,
        "authorName": post.author_name,
        "authorUrl": post.author_url,
        "imageUrl": post.image_url,
        "publishedAt": post.published_at.isoformat() if post.published_at else None,
        "createdAt": post.created_at.isoformat() if post.created_at else None,
        "updatedAt": post.updated_at.isoformat() if post.updated_at else None,
        "tags": post.tags or [],
        "isFavorite": bool(post.is_favorite),
    }


class GraphQueryService:
    """Service for reading the knowledge graph of a user."""

    def __init__(self, session: AsyncSession):
        self.posts = PostRepository(session)
        self.entities = EntityRepository(session)
        self.edges = EdgeRepository(session)
        self.statuses = ExtractionStatusRepository(session)

    async def get_graph(self, user_id: str) -> Dict[str, Any]:
        """Every entity of the user as a node and every edge as a link.

        Returns:
            {"nodes": [...], "links": [...]}
        """
        entities = await self.entities.list_by_user(user_id)
        edges = await self.edges.list_by_user(user_id)

        nodes = [
            {
                "id": e.id,
                "name": e.name,
                "type": e.type,
                "description": e.description,
                "mentionCount": e.mention_count,
            }
            for e in entities
        ]
        links = [
            {
                "source": edge.source_entity_id,
                "target": edge.target_entity_id,
                "weight": edge.weight,
                "relationType": edge.relation_type,
            }
            for edge in edges
        ]

        logger.info(f"Graph for user {user_id}: {len(nodes)} nodes, {len(links)} links")
        return {"nodes": nodes, "links": links}

    async def get_entity_detail(self, user_id: str, entity_id: int) -> Optional[Dict[str, Any]]:
        """Entity with the posts it appears in and its connected entities.

        Returns:
            {"entity": {...}, "posts": [...], "connectedEntities": [...]},
            or None if the entity does not exist or is owned by someone else
        """
        entity = await self.entities.get_for_user(entity_id, user_id)
        if entity is None:
            return None

        posts = await self.entities.get_linked_posts(entity_id)
        edges = await self.edges.list_for_entity(user_id, entity_id)

        weights: Dict[int, int] = {}
        for edge in edges:
            other_id = edge.target_entity_id if edge.source_entity_id == entity_id else edge.source_entity_id
            weights[other_id] = edge.weight

        connected = await self.entities.list_by_ids(user_id, list(weights))

        return {
            "entity": entity_to_dict(entity),
            "posts": [post_to_dict(p) for p in posts],
            "connectedEntities": [
                {"id": e.id, "name": e.name, "type": e.type, "weight": weights.get(e.id, 0)}
                for e in connected
            ],
        }

    async def get_stats(self, user_id: str) -> Dict[str, Any]:
        """Entity, edge and extraction counts for a user.

        A post whose extraction failed counts as pending, since the next
        backfill retries it.
        """
        by_type = await self.entities.count_by_type(user_id)
        total_edges = await self.edges.count_by_user(user_id)
        total_posts = await self.posts.count_by_user(user_id)
        completed = await self.statuses.count_completed(user_id)

        return {
            "totalEntities": sum(by_type.values()),
            "totalEdges": total_edges,
            "totalPostsProcessed": completed,
            "totalPostsPending": total_posts - completed,
            "byType": by_type,
        }
