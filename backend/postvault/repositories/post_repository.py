"""Post repository."""
from typing import List, Optional

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from postvault.db.models.post import Post
from postvault.repositories.base_repository import BaseRepository


class PostRepository(BaseRepository[Post]):
    """Repository for saved posts."""

    def __init__(self, session: AsyncSession):
        """Initialize post repository.

        Args:
            session: Async database session
        """
        super().__init__(Post, session)

    async def get_for_user(self, post_id: int, user_id: str) -> Optional[Post]:
        """Get post by ID with user_id check for multi-tenancy.

        Args:
            post_id: Post ID
            user_id: User ID for multi-tenant isolation

        Returns:
            Post instance or None if not found
        """
        result = await self.session.execute(
            select(Post).filter(and_(Post.id == post_id, Post.user_id == user_id))
        )
        return result.scalar_one_or_none()

    async def list_by_user(self, user_id: str, favorites_only: bool = False) -> List[Post]:
        """List a user's posts, newest first.

        Args:
            user_id: User ID
            favorites_only: If True, only return favorited posts

        Returns:
            List of Post instances
        """
        query = select(Post).filter(Post.user_id == user_id)

        if favorites_only:
            query = query.filter(Post.is_favorite == True)  # noqa: E712

        result = await self.session.execute(query.order_by(Post.created_at.desc(), Post.id.desc()))
        return list(result.scalars().all())

    async def count_by_user(self, user_id: str) -> int:
        """Count a user's posts."""
        result = await self.session.execute(
            select(func.count(Post.id)).filter(Post.user_id == user_id)
        )
        return result.scalar_one()

    async def delete_by_id(self, post_id: int, user_id: str) -> bool:
        """Delete post by ID. Links and status rows cascade in the database.

        Args:
            post_id: Post ID
            user_id: User ID

        Returns:
            True if deleted, False if not found
        """
        result = await self.session.execute(
            delete(Post).filter(and_(Post.id == post_id, Post.user_id == user_id))
        )
        await self.session.flush()
        return result.rowcount > 0
