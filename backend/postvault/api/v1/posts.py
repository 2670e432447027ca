"""Saved post endpoints.

Only the parts of post management the knowledge graph depends on: a new
post schedules entity extraction in the background, and deleting a post
cascades to its entity links and extraction status.
"""
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from postvault.core.auth import get_current_user_id
from postvault.db.models.post import Post
from postvault.db.session import get_async_session
from postvault.repositories import PostRepository
from postvault.services.extraction_coordinator import process_post_in_background
from postvault.services.graph_query_service import post_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts")

PostProcessor = Callable[[int], Awaitable[None]]


def get_post_processor() -> PostProcessor:
    """Background job run for each newly created post."""
    return process_post_in_background


class PostCreate(BaseModel):
    """Request to save a post."""

    content: str = Field(..., min_length=1)
    original_url: Optional[str] = None
    platform: str = "linkedin"
    summary: Optional[str] = None
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    request: PostCreate,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_async_session),
    process_post: PostProcessor = Depends(get_post_processor),
):
    """
    Save a post and start entity extraction for it.

    Extraction runs after the response is sent; its failures are recorded
    on the post's extraction status and never reach this request.
    """
    post_repo = PostRepository(session)
    post = await post_repo.create(Post(user_id=user_id, **request.model_dump()))
    await session.commit()

    background_tasks.add_task(process_post, post.id)
    logger.info(f"User {user_id} saved post {post.id}; entity extraction scheduled")

    return post_to_dict(post)


@router.get("")
async def list_posts(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_async_session),
    favorites_only: bool = Query(default=False),
):
    """List the current user's posts, newest first."""
    posts = await PostRepository(session).list_by_user(user_id, favorites_only=favorites_only)
    return {"posts": [post_to_dict(p) for p in posts], "total": len(posts)}


@router.get("/{post_id}")
async def get_post(
    post_id: int,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_async_session),
):
    """Get one of the current user's posts."""
    post = await PostRepository(session).get_for_user(post_id, user_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post_to_dict(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_async_session),
):
    """Delete a post. Its entity links and extraction status go with it."""
    deleted = await PostRepository(session).delete_by_id(post_id, user_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Post not found")
    await session.commit()
    logger.info(f"User {user_id} deleted post {post_id}")
