"""
Tests for VectorSearchEngine.

System role: Verification of thresholding, ranking, limits and failure modes
"""

import asyncio

import pytest

from edu_rag.configs.search import SearchSettings
from edu_rag.core.exceptions import InvalidEmbeddingError, SearchCancelledError, SearchTimeoutError
from edu_rag.core.search.vector_search import VectorSearchEngine
from edu_rag.models.search import SearchOptions, SearchScope

QUERY = [1.0, 0.0, 0.0, 0.0]


@pytest.fixture
def engine_factory(codec, search_settings):
    def _build(store, settings=None):
        return VectorSearchEngine(store, codec, settings or search_settings)

    return _build


class TestVectorSearch:
    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_list(self, engine_factory, chunk_store_factory):
        engine = engine_factory(chunk_store_factory([]))

        results = await engine.search(QUERY, SearchScope(), SearchOptions())

        assert results == []

    @pytest.mark.asyncio
    async def test_threshold_and_limit(self, engine_factory, chunk_store_factory, make_chunk):
        chunks = [
            make_chunk([1.0, 0.0, 0.0, 0.0]),
            make_chunk([0.9, 0.1, 0.0, 0.0]),
            make_chunk([0.8, 0.6, 0.0, 0.0]),
            make_chunk([0.0, 1.0, 0.0, 0.0]),
            make_chunk([0.7, 0.7, 0.1, 0.0]),
        ]
        engine = engine_factory(chunk_store_factory(chunks))

        results = await engine.search(QUERY, SearchScope(), SearchOptions(max_results=2, min_similarity=0.5))

        assert len(results) == 2
        assert all(r.similarity >= 0.5 for r in results)
        assert [r.chunk_id for r in results] == [chunks[0].chunk_id, chunks[1].chunk_id]

    @pytest.mark.asyncio
    async def test_results_sorted_descending(self, engine_factory, chunk_store_factory, make_chunk):
        chunks = [
            make_chunk([0.6, 0.8, 0.0, 0.0]),
            make_chunk([1.0, 0.0, 0.0, 0.0]),
            make_chunk([0.8, 0.6, 0.0, 0.0]),
        ]
        engine = engine_factory(chunk_store_factory(chunks))

        results = await engine.search(QUERY, SearchScope(), SearchOptions(min_similarity=0.0))

        scores = [r.similarity for r in results]
        assert scores == sorted(scores, reverse=True)
        assert results[0].chunk_id == chunks[1].chunk_id

    @pytest.mark.asyncio
    async def test_ties_prefer_earliest_created_chunk(self, engine_factory, chunk_store_factory, make_chunk):
        late = make_chunk([2.0, 0.0, 0.0, 0.0], created_offset=50)
        early = make_chunk([1.0, 0.0, 0.0, 0.0], created_offset=10)
        middle = make_chunk([3.0, 0.0, 0.0, 0.0], created_offset=30)
        engine = engine_factory(chunk_store_factory([late, early, middle]))

        results = await engine.search(QUERY, SearchScope(), SearchOptions(min_similarity=0.0))

        assert [r.chunk_id for r in results] == [early.chunk_id, middle.chunk_id, late.chunk_id]

    @pytest.mark.asyncio
    async def test_invalid_query_embedding_raises(self, engine_factory, chunk_store_factory):
        engine = engine_factory(chunk_store_factory([]))

        with pytest.raises(InvalidEmbeddingError):
            await engine.search([1.0, 0.0], SearchScope(), SearchOptions())

    @pytest.mark.asyncio
    async def test_candidates_with_invalid_vectors_are_skipped(
        self, engine_factory, chunk_store_factory, make_chunk
    ):
        good = make_chunk([1.0, 0.0, 0.0, 0.0])
        wrong_dimension = make_chunk([], raw_embedding="[1.0,0.0]")
        garbage = make_chunk([], raw_embedding="not a vector")
        engine = engine_factory(chunk_store_factory([wrong_dimension, good, garbage]))

        results = await engine.search(QUERY, SearchScope(), SearchOptions(min_similarity=0.0))

        assert [r.chunk_id for r in results] == [good.chunk_id]

    @pytest.mark.asyncio
    async def test_slow_store_raises_timeout(self, codec, chunk_store_factory, make_chunk):
        store = chunk_store_factory([make_chunk(QUERY)], delay=0.5)
        engine = VectorSearchEngine(store, codec, SearchSettings(timeout_seconds=0.05))

        with pytest.raises(SearchTimeoutError):
            await engine.search(QUERY, SearchScope(), SearchOptions())

    @pytest.mark.asyncio
    async def test_cancelled_search_raises(self, engine_factory, chunk_store_factory, make_chunk):
        engine = engine_factory(chunk_store_factory([make_chunk(QUERY)]))
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(SearchCancelledError):
            await engine.search(QUERY, SearchScope(), SearchOptions(), cancel_event=cancel)

    @pytest.mark.asyncio
    async def test_highlights_and_excerpt(self, engine_factory, chunk_store_factory, make_chunk):
        content = ("Cells divide. " * 30) + "Mitochondria produce energy for the cell. " + ("Filler. " * 30)
        chunk = make_chunk(QUERY, content=content)
        engine = engine_factory(chunk_store_factory([chunk]))

        results = await engine.search(
            QUERY,
            SearchScope(),
            SearchOptions(include_highlights=True),
            query_text="mitochondria energy",
        )

        result = results[0]
        assert "Mitochondria" in result.content
        assert len(result.content) < len(content)
        assert "<mark>Mitochondria</mark>" in result.highlighted_content
        assert "<mark>energy</mark>" in result.highlighted_content

    @pytest.mark.asyncio
    async def test_no_highlights_when_disabled(self, engine_factory, chunk_store_factory, make_chunk):
        chunk = make_chunk(QUERY, content="Mitochondria produce energy")
        engine = engine_factory(chunk_store_factory([chunk]))

        results = await engine.search(
            QUERY,
            SearchScope(),
            SearchOptions(include_highlights=False),
            query_text="mitochondria",
        )

        assert results[0].highlighted_content is None
        assert results[0].content == "Mitochondria produce energy"

    @pytest.mark.asyncio
    async def test_scope_is_passed_to_store(self, engine_factory, chunk_store_factory):
        store = chunk_store_factory([])
        engine = engine_factory(store)
        scope = SearchScope(language="ko")

        await engine.search(QUERY, scope, SearchOptions())

        assert store.scopes == [scope]

    def test_created_at_not_serialised(self, engine_factory, chunk_store_factory, make_chunk):
        engine = engine_factory(chunk_store_factory([]))
        chunk = make_chunk(QUERY)

        result = engine.build_result(chunk, 0.9, None, False)

        assert "created_at" not in result.model_dump()
        assert result.created_at == chunk.created_at
