"""
Generic CRUD base for the search schema.

Model-specific CRUD classes inherit create/get_by_id and add their own
queries. Methods flush but never commit; the caller owns the
transaction.

Dependencies: sqlalchemy
System role: Shared persistence operations for CRUD singletons
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from edu_rag.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """CRUD operations shared by every model with a UUID primary key."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **fields) -> ModelT:
        """
        Insert a row and return it with server-side defaults loaded.

        Args:
            session: Open async session
            **fields: Column values

        Returns:
            ModelT: The flushed instance
        """
        instance = self.model(**fields)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        return await session.get(self.model, id)
