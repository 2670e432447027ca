"""Base repository shared by the post and knowledge graph repositories."""
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from postvault.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic base repository bound to one model and one async session."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session (repositories never commit)
        """
        self.model = model
        self.session = session

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """Get a row by its `id` column, None if missing."""
        result = await self.session.execute(
            select(self.model).filter(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[ModelType]:
        result = await self.session.execute(select(self.model))
        return list(result.scalars().all())

    async def create(self, obj: ModelType) -> ModelType:
        """Add a new row and flush it.

        Args:
            obj: Model instance to insert

        Returns:
            The instance, refreshed so ID and defaults are loaded
        """
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)
        return obj

    def upsert_statement(self, model: Optional[Type[Base]] = None):
        """INSERT statement supporting ON CONFLICT for the bound database.

        PostgreSQL in production; SQLite (same ON CONFLICT semantics) when
        the test suite runs against an in-memory database.
        """
        if self.session.bind.dialect.name == "sqlite":
            return sqlite.insert(model or self.model)
        return postgresql.insert(model or self.model)
