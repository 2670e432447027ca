"""Database package."""
from postvault.db.base import Base
from postvault.db.session import AsyncSessionLocal, get_async_session

__all__ = ["Base", "AsyncSessionLocal", "get_async_session"]
