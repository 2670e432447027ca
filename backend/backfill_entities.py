"""
Entity Backfill Script

Runs knowledge-graph entity extraction for every saved post of a user that
has not completed yet (never attempted or previously failed), then prints
the result.

Usage:
    python backfill_entities.py --user-id USER_ID
    python backfill_entities.py --user-id USER_ID --stats   # Only print graph stats
"""

import argparse
import asyncio
import json
import logging

from postvault.db.session import AsyncSessionLocal, engine
from postvault.services.extraction_coordinator import ExtractionCoordinator
from postvault.services.graph_query_service import GraphQueryService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def run(user_id: str, stats_only: bool) -> dict:
    try:
        async with AsyncSessionLocal() as session:
            if not stats_only:
                coordinator = ExtractionCoordinator(session)
                result = await coordinator.backfill(
                    user_id,
                    progress_callback=lambda current, total: logger.info(
                        f"Processed {current}/{total} posts"
                    ),
                )
                logger.info(
                    f"Backfill done: {result['processed']} processed, "
                    f"{result['skipped']} skipped, {result['failed']} failed"
                )

            return await GraphQueryService(session).get_stats(user_id)
    finally:
        await engine.dispose()


def main() -> None:
    """
    Main entry point for the script.
    """
    parser = argparse.ArgumentParser(
        description="Extract knowledge-graph entities from a user's saved posts"
    )
    parser.add_argument(
        "--user-id",
        required=True,
        help="ID of the user whose posts should be analyzed",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Only print graph statistics, do not run extraction",
    )

    args = parser.parse_args()

    stats = asyncio.run(run(args.user_id, args.stats))
    print(json.dumps(stats, indent=2))


if __name__ == "__main__":
    main()
