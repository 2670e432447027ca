"""
Celery Tasks for Asynchronous Processing

Long-running entity backfills run here instead of in the request that
started them. The API polls the task state for progress.
"""

import asyncio
import logging
from typing import Any, Dict

from postvault.core.celery_app import celery_app
from postvault.db.session import AsyncSessionLocal, engine
from postvault.services.extraction_coordinator import ExtractionCoordinator

logger = logging.getLogger(__name__)


async def run_backfill(user_id: str, progress_callback=None) -> Dict[str, int]:
    """Backfill a user's posts in a fresh session."""
    try:
        async with AsyncSessionLocal() as session:
            coordinator = ExtractionCoordinator(session)
            return await coordinator.backfill(user_id, progress_callback=progress_callback)
    finally:
        # Each asyncio.run() gets a new loop; pooled connections can't outlive it
        await engine.dispose()


@celery_app.task(
    bind=True,
    name="backfill_entities",
    max_retries=3,
    default_retry_delay=60,
)
def backfill_entities_task(self, user_id: str) -> Dict[str, Any]:
    """
    Extract entities for every post of a user that has not completed yet.

    Args:
        user_id: Owner of the posts

    Returns:
        Dictionary with processed/failed/skipped counts
    """
    logger.info(f"Starting entity backfill for user {user_id}")

    def report_progress(current: int, total: int) -> None:
        self.update_state(
            state="PROCESSING",
            meta={
                "current": current,
                "total": total,
                "status": f"Analyzed {current} of {total} posts",
            },
        )

    try:
        result = asyncio.run(run_backfill(user_id, progress_callback=report_progress))
    except Exception as e:
        logger.error(f"Entity backfill failed for user {user_id}: {str(e)}")

        # Retry for transient database errors
        if "timeout" in str(e).lower() or "connection" in str(e).lower():
            raise self.retry(exc=e, countdown=min(60 * (2**self.request.retries), 600))

        raise

    logger.info(f"Entity backfill for user {user_id} finished: {result}")
    return {"status": "completed", **result}
