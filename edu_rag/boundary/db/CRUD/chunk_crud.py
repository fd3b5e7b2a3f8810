"""
Document chunk CRUD operations.

Scoped candidate queries join chunks to their parent document so
results carry the document title and can be filtered by folder.

Dependencies: sqlalchemy, edu_rag.boundary.db.models
System role: Chunk persistence and candidate retrieval
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from edu_rag.boundary.db.CRUD.base_crud import BaseCRUD
from edu_rag.boundary.db.models.chunk_model import DocumentChunkModel
from edu_rag.boundary.db.models.document_model import DocumentModel
from edu_rag.models.search import SearchScope


class ChunkCRUD(BaseCRUD[DocumentChunkModel]):
    """CRUD operations for DocumentChunkModel."""

    def __init__(self) -> None:
        super().__init__(DocumentChunkModel)

    def _apply_scope(self, stmt: Select, scope: SearchScope) -> Select:
        if scope.folder_id is not None:
            stmt = stmt.where(DocumentModel.folder_id == scope.folder_id)
        if scope.document_ids:
            stmt = stmt.where(DocumentChunkModel.document_id.in_(scope.document_ids))
        if scope.language:
            stmt = stmt.where(DocumentChunkModel.language == scope.language)
        return stmt

    def scoped_select(self, scope: SearchScope) -> Select:
        """
        Build a chunk+title select restricted by scope.

        Rows come back in creation order, then chunk index, so callers
        get a deterministic fetch order.
        """
        stmt = select(DocumentChunkModel, DocumentModel.title).join(
            DocumentModel, DocumentChunkModel.document_id == DocumentModel.id
        )
        stmt = self._apply_scope(stmt, scope)
        return stmt.order_by(DocumentChunkModel.created_at, DocumentChunkModel.chunk_index)

    async def get_with_title(
        self,
        session: AsyncSession,
        chunk_id: UUID,
    ) -> tuple[DocumentChunkModel, str] | None:
        stmt = (
            select(DocumentChunkModel, DocumentModel.title)
            .join(DocumentModel, DocumentChunkModel.document_id == DocumentModel.id)
            .where(DocumentChunkModel.id == chunk_id)
        )
        result = await session.execute(stmt)
        return result.tuples().first()

    async def language_counts(
        self,
        session: AsyncSession,
        scope: SearchScope,
    ) -> Sequence[tuple[str, int, int]]:
        """(language, distinct documents, chunks) per chunk language, largest first."""
        document_count = func.count(distinct(DocumentChunkModel.document_id))
        stmt = (
            select(DocumentChunkModel.language, document_count, func.count(DocumentChunkModel.id))
            .join(DocumentModel, DocumentChunkModel.document_id == DocumentModel.id)
            .group_by(DocumentChunkModel.language)
            .order_by(document_count.desc(), DocumentChunkModel.language)
        )
        result = await session.execute(self._apply_scope(stmt, scope))
        return result.tuples().all()

    async def get_scoped(
        self,
        session: AsyncSession,
        scope: SearchScope,
    ) -> Sequence[tuple[DocumentChunkModel, str]]:
        result = await session.execute(self.scoped_select(scope))
        return result.tuples().all()

    async def get_scoped_containing(
        self,
        session: AsyncSession,
        scope: SearchScope,
        terms: list[str],
    ) -> Sequence[tuple[DocumentChunkModel, str]]:
        """Scoped chunks whose content contains any of the terms (case-insensitive)."""
        if not terms:
            return []
        matches = [DocumentChunkModel.content.ilike(f"%{term}%") for term in terms]
        stmt = self.scoped_select(scope).where(or_(*matches))
        result = await session.execute(stmt)
        return result.tuples().all()

    async def delete_by_document_id(self, session: AsyncSession, document_id: UUID) -> int:
        stmt = delete(DocumentChunkModel).where(DocumentChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount


chunk_crud = ChunkCRUD()
