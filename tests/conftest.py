"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory collaborators (chunk store, status store, embeddings),
chunk factories, small-dimension codec, async SQLite session factory
Dependencies: pytest, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from langchain_core.embeddings import Embeddings

from edu_rag.configs.notifications import NotificationSettings
from edu_rag.configs.processing import ProcessingSettings
from edu_rag.configs.search import SearchSettings
from edu_rag.core.exceptions import DocumentNotFoundError
from edu_rag.core.search.keyword import score_keywords
from edu_rag.core.vectors.codec import EmbeddingCodec
from edu_rag.models.chunk import CandidateChunk, KeywordHit
from edu_rag.models.processing import ProcessingStatus, StatusRecord
from edu_rag.models.search import LanguageCount, SearchScope

TEST_DIMENSION = 4
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class InMemoryChunkStore:
    """ChunkStore over a list, honouring scope like the SQL store."""

    def __init__(self, chunks: list[CandidateChunk] | None = None, delay: float = 0.0):
        self.chunks = list(chunks or [])
        self.delay = delay
        self.scopes: list[SearchScope] = []

    def _in_scope(self, chunk: CandidateChunk, scope: SearchScope) -> bool:
        if scope.document_ids and chunk.document_id not in scope.document_ids:
            return False
        if scope.language and chunk.language != scope.language:
            return False
        return True

    async def fetch_candidate_chunks(self, scope: SearchScope) -> list[CandidateChunk]:
        self.scopes.append(scope)
        if self.delay:
            await asyncio.sleep(self.delay)
        return [chunk for chunk in self.chunks if self._in_scope(chunk, scope)]

    async def keyword_search(self, query: str, scope: SearchScope) -> list[KeywordHit]:
        return score_keywords(query, [c for c in self.chunks if self._in_scope(c, scope)])

    async def get_chunk(self, chunk_id: uuid.UUID) -> CandidateChunk | None:
        return next((chunk for chunk in self.chunks if chunk.chunk_id == chunk_id), None)

    async def language_counts(self, scope: SearchScope) -> list[LanguageCount]:
        documents: dict[str, set[uuid.UUID]] = {}
        chunks: dict[str, int] = {}
        for chunk in self.chunks:
            if self._in_scope(chunk, scope):
                documents.setdefault(chunk.language, set()).add(chunk.document_id)
                chunks[chunk.language] = chunks.get(chunk.language, 0) + 1
        counts = [
            LanguageCount(language=language, document_count=len(ids), total_chunks=chunks[language])
            for language, ids in documents.items()
        ]
        return sorted(counts, key=lambda count: (-count.document_count, count.language))


class InMemoryStatusStore:
    """DocumentStatusStore keeping every saved snapshot."""

    def __init__(self):
        self.records: dict[str, StatusRecord] = {}
        self.saves: list[StatusRecord] = []

    async def load_status(self, document_id: str) -> StatusRecord:
        if document_id not in self.records:
            raise DocumentNotFoundError(document_id)
        return self.records[document_id]

    async def save_status(
        self,
        document_id: str,
        status: ProcessingStatus,
        progress: float,
        error_message: str | None = None,
    ) -> None:
        record = StatusRecord(status=status, progress=progress, error_message=error_message)
        self.records[document_id] = record
        self.saves.append(record)


class MappingEmbeddings(Embeddings):
    """Embeddings returning fixed vectors per text, with a fallback."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, default: list[float] | None = None):
        self.vectors = vectors or {}
        self.default = default or [1.0, 0.0, 0.0, 0.0]
        self.queries: list[str] = []

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        self.queries.append(text)
        return list(self.vectors.get(text, self.default))


@pytest.fixture
def codec() -> EmbeddingCodec:
    return EmbeddingCodec(TEST_DIMENSION)


@pytest.fixture
def search_settings() -> SearchSettings:
    return SearchSettings(timeout_seconds=1.0)


@pytest.fixture
def processing_settings() -> ProcessingSettings:
    return ProcessingSettings()


@pytest.fixture
def notification_settings() -> NotificationSettings:
    """Notification settings with no waiting between delivery retries."""
    return NotificationSettings(delivery_backoff_initial=0.0, delivery_backoff_max=0.0)


@pytest.fixture
def make_chunk(codec: EmbeddingCodec):
    """
    Factory building CandidateChunks.

    Chunks get increasing creation times in call order unless
    created_offset is given.
    """
    counter = {"n": 0}

    def _make(
        embedding: list[float],
        content: str = "chunk content",
        language: str = "en",
        document_id: uuid.UUID | None = None,
        chunk_index: int | None = None,
        created_offset: int | None = None,
        raw_embedding: str | None = None,
        title: str = "Biology Notes",
    ) -> CandidateChunk:
        n = counter["n"]
        counter["n"] += 1
        offset = n if created_offset is None else created_offset
        return CandidateChunk(
            chunk_id=uuid.uuid4(),
            document_id=document_id or uuid.uuid4(),
            document_title=title,
            chunk_index=n if chunk_index is None else chunk_index,
            content=content,
            language=language,
            page_number=1,
            embedding=raw_embedding if raw_embedding is not None else codec.encode(embedding),
            created_at=BASE_TIME + timedelta(seconds=offset),
        )

    return _make


@pytest.fixture
def chunk_store_factory():
    return InMemoryChunkStore


@pytest.fixture
def status_store() -> InMemoryStatusStore:
    return InMemoryStatusStore()


@pytest.fixture
def embeddings_factory():
    return MappingEmbeddings


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Session factory bound to a fresh schema
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from edu_rag.boundary.db.connection import create_tables

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    await engine.dispose()
