"""Entity extraction pipeline for saved posts.

For one post: extract candidate entities with the LLM, merge them into the
user's entity table, link them to the post, bump the co-occurrence edges
between every pair, and record the post's extraction status.

There is no in-progress state and no locking. Running the pipeline twice
for the same post is safe because every store operation is an upsert,
though mention counts and edge weights are counted twice.
"""
import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from postvault.db.models.extraction_status import STATUS_COMPLETED, STATUS_FAILED
from postvault.db.session import AsyncSessionLocal
from postvault.repositories import (
    EdgeRepository,
    EntityRepository,
    ExtractionStatusRepository,
    PostRepository,
)
from postvault.services.entity_extraction import EntityExtractionService

logger = logging.getLogger(__name__)

# Type for progress callback: (current: int, total: int) -> None
BackfillProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class PostSnapshot:
    """The fields of a post the pipeline reads, detached from the session."""

    id: int
    user_id: str
    content: str
    author_name: Optional[str] = None

    @classmethod
    def from_post(cls, post: Any) -> "PostSnapshot":
        return cls(
            id=post.id,
            user_id=post.user_id,
            content=post.content or "",
            author_name=post.author_name,
        )


class ExtractionCoordinator:
    """Runs entity extraction for posts and keeps the entity graph up to date."""

    def __init__(
        self,
        session: AsyncSession,
        extractor: Optional[EntityExtractionService] = None,
    ):
        """Initialize the coordinator.

        Args:
            session: Async database session, committed once per post
            extractor: Entity extractor (built from settings on first use if None)
        """
        self.session = session
        self._extractor = extractor
        self.posts = PostRepository(session)
        self.entities = EntityRepository(session)
        self.edges = EdgeRepository(session)
        self.statuses = ExtractionStatusRepository(session)

    @property
    def extractor(self) -> EntityExtractionService:
        if self._extractor is None:
            self._extractor = EntityExtractionService()
        return self._extractor

    async def process_post(self, post: Any) -> None:
        """Extract and store the entities of one post.

        Never raises: any failure is logged, the post's partial work is
        rolled back and the post is marked 'failed' with the error text.
        Zero extracted entities is a successful, 'completed' outcome.

        Args:
            post: Post row (or anything with id, user_id, content, author_name)
        """
        snapshot = post if isinstance(post, PostSnapshot) else PostSnapshot.from_post(post)

        try:
            candidates = await self.extractor.extract_or_raise(
                snapshot.content, snapshot.author_name
            )

            entity_ids: List[int] = []
            for candidate in candidates:
                entity_id = await self.entities.upsert_entity(
                    user_id=snapshot.user_id,
                    name=candidate.name,
                    entity_type=candidate.type,
                    description=candidate.description,
                )
                await self.entities.link_post_to_entity(entity_id, snapshot.id)
                entity_ids.append(entity_id)

            # One bump per pair occurrence; a repeated entity bumps its pairs again
            for entity_id_a, entity_id_b in combinations(entity_ids, 2):
                if entity_id_a != entity_id_b:
                    await self.edges.bump_edge(snapshot.user_id, entity_id_a, entity_id_b)

            await self.statuses.record_status(snapshot.id, STATUS_COMPLETED)
            await self.session.commit()

            logger.info(
                f"Extracted {len(candidates)} entities for post {snapshot.id} "
                f"({len(set(entity_ids))} distinct)"
            )

        except Exception as e:
            logger.error(f"Entity extraction failed for post {snapshot.id}: {e}", exc_info=True)
            await self._record_failure(snapshot.id, e)

    async def _record_failure(self, post_id: int, error: Exception) -> None:
        try:
            await self.session.rollback()
            await self.statuses.record_status(post_id, STATUS_FAILED, str(error))
            await self.session.commit()
        except Exception:
            logger.exception(f"Could not record failed extraction for post {post_id}")
            await self.session.rollback()

    async def backfill(
        self,
        user_id: str,
        progress_callback: Optional[BackfillProgressCallback] = None,
    ) -> Dict[str, int]:
        """Run extraction for every post of a user that has not completed.

        Posts that previously failed are retried, with no cap on attempts.
        Posts are processed one after another.

        Args:
            user_id: User whose posts are analyzed
            progress_callback: Optional callback, called with (current, total)
                after each post that needed processing

        Returns:
            Dict with 'processed', 'failed' and 'skipped' counts. process_post
            handles its own errors, so 'failed' stays 0 in practice.
        """
        posts = [PostSnapshot.from_post(p) for p in await self.posts.list_by_user(user_id)]
        completed_ids = await self.statuses.completed_post_ids(user_id)

        pending = [p for p in posts if p.id not in completed_ids]
        skipped = len(posts) - len(pending)
        processed = 0
        failed = 0

        logger.info(f"Backfill for user {user_id}: {len(pending)} to process, {skipped} already done")

        for idx, post in enumerate(pending):
            try:
                await self.process_post(post)
                processed += 1
            except Exception as e:
                logger.error(f"Backfill could not process post {post.id}: {e}")
                failed += 1

            if progress_callback:
                progress_callback(idx + 1, len(pending))

        return {"processed": processed, "failed": failed, "skipped": skipped}


async def process_post_in_background(
    post_id: int,
    session_factory: Callable[[], AsyncSession] = AsyncSessionLocal,
    extractor: Optional[EntityExtractionService] = None,
) -> None:
    """Fire-and-forget entry point used after a post is created.

    Opens its own session, so it can run after the request's session is gone.
    Never raises: errors before the pipeline starts (opening the session,
    loading the post) are logged and the post stays unprocessed until the
    next backfill.
    """
    try:
        async with session_factory() as session:
            post = await PostRepository(session).get_by_id(post_id)
            if post is None:
                logger.warning(f"Post {post_id} disappeared before entity extraction")
                return

            coordinator = ExtractionCoordinator(session, extractor=extractor)
            await coordinator.process_post(post)
    except Exception as e:
        logger.error(f"Background entity extraction for post {post_id} failed: {e}", exc_info=True)
