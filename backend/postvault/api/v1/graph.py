"""Knowledge graph API endpoints."""
import logging
from typing import Any, Dict, List, Optional

from celery.result import AsyncResult
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from postvault.core.auth import get_current_user_id
from postvault.db.session import get_async_session
from postvault.services.extraction_coordinator import ExtractionCoordinator
from postvault.services.graph_query_service import GraphQueryService
from postvault.workers.tasks import backfill_entities_task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/graph")


def get_graph_query_service(
    session: AsyncSession = Depends(get_async_session),
) -> GraphQueryService:
    return GraphQueryService(session)


def get_extraction_coordinator(
    session: AsyncSession = Depends(get_async_session),
) -> ExtractionCoordinator:
    return ExtractionCoordinator(session)


class GraphDataResponse(BaseModel):
    """Graph data for visualization."""

    nodes: List[Dict[str, Any]]
    links: List[Dict[str, Any]]


class GraphStatsResponse(BaseModel):
    """Entity and extraction counts."""

    totalEntities: int
    totalEdges: int
    totalPostsProcessed: int
    totalPostsPending: int
    byType: Dict[str, int]


class BackfillResponse(BaseModel):
    """Result of analyzing a user's unprocessed posts."""

    processed: int
    failed: int
    skipped: int


class BackfillTaskResponse(BaseModel):
    """Response when a background backfill starts."""

    task_id: str
    message: str
    status: str


class BackfillStatusResponse(BaseModel):
    """Progress of a background backfill."""

    task_id: str
    state: str
    current: Optional[int] = None
    total: Optional[int] = None
    status: Optional[str] = None
    result: Optional[dict] = None
    error: Optional[str] = None


@router.get("", response_model=GraphDataResponse)
async def get_graph(
    user_id: str = Depends(get_current_user_id),
    graph_service: GraphQueryService = Depends(get_graph_query_service),
):
    """
    Get the full entity graph of the current user.

    Nodes are entities, links are co-occurrence edges weighted by the
    number of posts that mention both ends.
    """
    try:
        return await graph_service.get_graph(user_id)
    except Exception as e:
        logger.error(f"Failed to load graph: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats", response_model=GraphStatsResponse)
async def get_graph_stats(
    user_id: str = Depends(get_current_user_id),
    graph_service: GraphQueryService = Depends(get_graph_query_service),
):
    """Get entity counts by type and how many posts are still pending."""
    try:
        return await graph_service.get_stats(user_id)
    except Exception as e:
        logger.error(f"Failed to compute graph stats: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/entities/{entity_id}")
async def get_entity_detail(
    entity_id: int,
    user_id: str = Depends(get_current_user_id),
    graph_service: GraphQueryService = Depends(get_graph_query_service),
):
    """Get an entity with the posts that mention it and its connected entities."""
    detail = await graph_service.get_entity_detail(user_id, entity_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Entity not found")
    return detail


@router.post("/backfill", response_model=BackfillResponse)
async def backfill(
    user_id: str = Depends(get_current_user_id),
    coordinator: ExtractionCoordinator = Depends(get_extraction_coordinator),
):
    """
    Analyze every post of the current user that has not completed extraction.

    Previously failed posts are retried. Runs in the request; use
    /graph/backfill/async for large libraries.
    """
    logger.info(f"User {user_id} requested entity backfill")
    return await coordinator.backfill(user_id)


@router.post("/backfill/async", response_model=BackfillTaskResponse)
async def start_backfill(user_id: str = Depends(get_current_user_id)):
    """
    Start an entity backfill as a Celery task.

    The frontend polls /graph/backfill/status/{task_id} to check progress.
    """
    task = backfill_entities_task.apply_async(kwargs={"user_id": user_id})

    return BackfillTaskResponse(
        task_id=task.id,
        message="Entity backfill started",
        status="started",
    )


@router.get("/backfill/status/{task_id}", response_model=BackfillStatusResponse)
async def get_backfill_status(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
):
    """
    Check status of a background backfill.

    States:
        - PENDING: Task waiting to start
        - PROCESSING: Task in progress
        - SUCCESS: Task completed successfully
        - FAILURE: Task failed
    """
    task_result = AsyncResult(task_id)
    response = BackfillStatusResponse(task_id=task_id, state=task_result.state)

    if task_result.state == "PENDING":
        response.status = "Waiting to start..."

    elif task_result.state == "PROCESSING":
        info = task_result.info or {}
        response.current = info.get("current", 0)
        response.total = info.get("total", 0)
        response.status = info.get("status", "Processing...")

    elif task_result.state == "SUCCESS":
        response.result = task_result.result
        response.status = "Completed successfully"

    elif task_result.state == "FAILURE":
        response.error = str(task_result.info)
        response.status = "Failed"

    else:
        response.status = f"Unknown state: {task_result.state}"

    return response
