"""Extraction status repository."""
from datetime import datetime, timezone
from typing import Optional, Set

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from postvault.db.models.extraction_status import STATUS_COMPLETED, ExtractionStatus
from postvault.db.models.post import Post
from postvault.repositories.base_repository import BaseRepository


class ExtractionStatusRepository(BaseRepository[ExtractionStatus]):
    """Repository for per-post ExtractionStatus rows."""

    def __init__(self, session: AsyncSession):
        """Initialize extraction status repository.

        Args:
            session: Async database session
        """
        super().__init__(ExtractionStatus, session)

    async def record_status(self, post_id: int, status: str, error: Optional[str] = None) -> None:
        """Insert or overwrite the status row for a post.

        Args:
            post_id: Post ID
            status: 'completed' or 'failed'
            error: Error text for failed attempts (cleared otherwise)
        """
        now = datetime.now(timezone.utc)
        stmt = self.upsert_statement().values(
            post_id=post_id, status=status, processed_at=now, error=error
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["post_id"],
            set_={"status": status, "processed_at": now, "error": error},
        )
        await self.session.execute(stmt)

    async def get_by_id(self, post_id: int) -> Optional[ExtractionStatus]:
        """Get the status row for a post, None if never attempted."""
        result = await self.session.execute(
            select(ExtractionStatus).filter(ExtractionStatus.post_id == post_id)
        )
        return result.scalar_one_or_none()

    async def completed_post_ids(self, user_id: str) -> Set[int]:
        """IDs of the user's posts whose extraction completed."""
        result = await self.session.execute(
            select(ExtractionStatus.post_id)
            .join(Post, Post.id == ExtractionStatus.post_id)
            .filter(and_(Post.user_id == user_id, ExtractionStatus.status == STATUS_COMPLETED))
        )
        return set(result.scalars().all())

    async def count_completed(self, user_id: str) -> int:
        """Count the user's posts whose extraction completed."""
        result = await self.session.execute(
            select(func.count(ExtractionStatus.post_id))
            .join(Post, Post.id == ExtractionStatus.post_id)
            .filter(and_(Post.user_id == user_id, ExtractionStatus.status == STATUS_COMPLETED))
        )
        return result.scalar_one()
