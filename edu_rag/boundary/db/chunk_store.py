"""
SQL chunk store.

Implements the ChunkStore contract over the documents and
document_chunks tables. Scope filters are applied in SQL; similarity
scoring happens in the search engine.

Dependencies: sqlalchemy, edu_rag.boundary.db.CRUD, edu_rag.core.vectors, edu_rag.core.search.keyword
System role: Candidate retrieval and chunk ingestion
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from edu_rag.boundary.db.CRUD.chunk_crud import chunk_crud
from edu_rag.boundary.db.CRUD.document_crud import document_crud
from edu_rag.boundary.db.models.chunk_model import DocumentChunkModel
from edu_rag.core.exceptions import DocumentNotFoundError
from edu_rag.core.search.keyword import keyword_terms, score_keywords
from edu_rag.core.vectors.codec import EmbeddingCodec
from edu_rag.models.chunk import CandidateChunk, ChunkInput, KeywordHit
from edu_rag.models.search import LanguageCount, SearchScope

logger = logging.getLogger(__name__)


def to_candidate(chunk: DocumentChunkModel, title: str) -> CandidateChunk:
    return CandidateChunk(
        chunk_id=chunk.id,
        document_id=chunk.document_id,
        document_title=title,
        chunk_index=chunk.chunk_index,
        content=chunk.content,
        language=chunk.language,
        page_number=chunk.page_number,
        embedding=chunk.embedding,
        created_at=chunk.created_at,
    )


class SqlChunkStore:
    """Chunk storage backed by SQLAlchemy async sessions."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        codec: EmbeddingCodec,
    ) -> None:
        """
        Initialize chunk store.

        Args:
            session_factory: Factory producing one session per operation
            codec: Codec used to validate and encode embeddings on write
        """
        self.session_factory = session_factory
        self.codec = codec

    async def fetch_candidate_chunks(self, scope: SearchScope) -> list[CandidateChunk]:
        """
        Return every chunk inside the scope, in creation order.

        Args:
            scope: Folder, document and language filters

        Returns:
            list[CandidateChunk]: Candidates with encoded embeddings
        """
        async with self.session_factory() as session:
            rows = await chunk_crud.get_scoped(session, scope)
        return [to_candidate(chunk, title) for chunk, title in rows]

    async def keyword_search(self, query: str, scope: SearchScope) -> list[KeywordHit]:
        """
        Score scoped chunks by keyword relevance.

        SQL narrows to chunks containing at least one term; counting
        and normalisation happen in Python.
        """
        terms = keyword_terms(query)
        if not terms:
            return []
        async with self.session_factory() as session:
            rows = await chunk_crud.get_scoped_containing(session, scope, terms)
        return score_keywords(query, [to_candidate(chunk, title) for chunk, title in rows])

    async def add_chunks(self, document_id: UUID, chunks: list[ChunkInput]) -> int:
        """
        Persist chunks for a document.

        Every embedding is validated before anything is written.

        Args:
            document_id: Parent document UUID
            chunks: Chunks with embeddings

        Returns:
            int: Number of chunks written

        Raises:
            DocumentNotFoundError: If the document does not exist
            InvalidEmbeddingError: If any embedding is invalid
        """
        encoded = [self.codec.encode(chunk.embedding) for chunk in chunks]

        async with self.session_factory() as session:
            try:
                if await document_crud.get_by_id(session, document_id) is None:
                    raise DocumentNotFoundError(str(document_id))

                for chunk, embedding in zip(chunks, encoded):
                    session.add(
                        DocumentChunkModel(
                            document_id=document_id,
                            chunk_index=chunk.chunk_index,
                            content=chunk.content,
                            language=chunk.language,
                            page_number=chunk.page_number,
                            embedding=embedding,
                        )
                    )
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:add_chunks - {type(e).__name__}: {e}")
                await session.rollback()
                raise

        logger.info(
            f"{__name__}:add_chunks - Chunks stored",
            extra={"document_id": str(document_id), "count": len(chunks)},
        )
        return len(chunks)

    async def get_chunk(self, chunk_id: UUID) -> CandidateChunk | None:
        async with self.session_factory() as session:
            row = await chunk_crud.get_with_title(session, chunk_id)
        if row is None:
            return None
        chunk, title = row
        return to_candidate(chunk, title)

    async def language_counts(self, scope: SearchScope) -> list[LanguageCount]:
        """Documents and chunks per chunk language inside the scope."""
        async with self.session_factory() as session:
            rows = await chunk_crud.language_counts(session, scope)
        return [
            LanguageCount(language=language, document_count=documents, total_chunks=chunks)
            for language, documents, chunks in rows
        ]

    async def delete_chunks(self, document_id: UUID) -> int:
        """
        Delete every chunk of a document, leaving the document row.

        Returns:
            int: Number of chunks deleted
        """
        async with self.session_factory() as session:
            try:
                removed = await chunk_crud.delete_by_document_id(session, document_id)
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:delete_chunks - {type(e).__name__}: {e}")
                await session.rollback()
                raise
        return removed
