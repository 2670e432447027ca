"""API v1 router."""
from fastapi import APIRouter

from postvault.api.v1 import graph, posts

api_router: APIRouter = APIRouter()
api_router.include_router(posts.router, tags=["posts"])
api_router.include_router(graph.router, tags=["graph"])
