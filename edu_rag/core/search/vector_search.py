"""
Vector similarity search engine.

Fetches scoped candidate chunks, scores them against a query embedding
by cosine similarity, applies the similarity threshold and returns
the ranked top results.

Dependencies: asyncio (stdlib), edu_rag.core.vectors, edu_rag.core.search.highlighting
System role: Semantic retrieval core
"""

import asyncio
import logging
from collections.abc import Sequence

from edu_rag.configs.search import SearchSettings
from edu_rag.core.exceptions import InvalidEmbeddingError, SearchCancelledError, SearchTimeoutError
from edu_rag.core.interfaces import ChunkStore
from edu_rag.core.search.hybrid import rank_results
from edu_rag.core.search.highlighting import create_excerpt, highlight_terms
from edu_rag.core.vectors.codec import EmbeddingCodec
from edu_rag.core.vectors.similarity import cosine_similarity
from edu_rag.models.chunk import CandidateChunk
from edu_rag.models.search import SearchOptions, SearchResult, SearchScope

logger = logging.getLogger(__name__)


def check_cancelled(cancel_event: asyncio.Event | None, stage: str) -> None:
    """Raise SearchCancelledError if the caller has set the cancel event."""
    if cancel_event is not None and cancel_event.is_set():
        raise SearchCancelledError("Search was cancelled", {"stage": stage})


class VectorSearchEngine:
    """Cosine-similarity search over chunks supplied by a ChunkStore."""

    def __init__(
        self,
        chunk_store: ChunkStore,
        codec: EmbeddingCodec,
        settings: SearchSettings | None = None,
    ) -> None:
        """
        Initialize search engine.

        Args:
            chunk_store: Storage collaborator returning scoped candidates
            codec: Embedding codec sized to the configured dimension
            settings: Search settings (defaults used if None)
        """
        self.chunk_store = chunk_store
        self.codec = codec
        self.settings = settings or SearchSettings()

    async def fetch_candidates(
        self,
        scope: SearchScope,
        cancel_event: asyncio.Event | None = None,
    ) -> list[CandidateChunk]:
        """
        Fetch candidates under the configured deadline.

        Raises:
            SearchTimeoutError: If storage does not answer in time
            SearchCancelledError: If cancelled before or during the fetch
        """
        check_cancelled(cancel_event, "fetch")
        try:
            candidates = await asyncio.wait_for(
                self.chunk_store.fetch_candidate_chunks(scope),
                timeout=self.settings.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                f"{__name__}:fetch_candidates - Candidate fetch timed out",
                extra={"timeout_seconds": self.settings.timeout_seconds},
            )
            raise SearchTimeoutError(
                "Search timed out while fetching candidates",
                {"timeout_seconds": self.settings.timeout_seconds},
            ) from e
        check_cancelled(cancel_event, "fetch")
        return candidates

    async def search(
        self,
        query_embedding: Sequence[float],
        scope: SearchScope,
        options: SearchOptions,
        *,
        query_text: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> list[SearchResult]:
        """
        Run a thresholded vector search.

        Args:
            query_embedding: Query vector of the configured dimension
            scope: Coarse storage filter
            options: max_results, min_similarity and highlighting flags; unset values use settings
            query_text: Original query, used for excerpts and highlights
            cancel_event: Set by the caller to abandon the search

        Returns:
            list[SearchResult]: At most max_results results, best first

        Raises:
            InvalidEmbeddingError: If the query embedding is invalid
            SearchTimeoutError: If fetching candidates exceeds the deadline
            SearchCancelledError: If the cancel event is set
        """
        options = options.with_defaults(self.settings)
        query_vector = self.codec.require_valid(query_embedding, field="query_embedding")
        candidates = await self.fetch_candidates(scope, cancel_event)
        if not candidates:
            return []

        scored = self.score_candidates(
            query_vector,
            candidates,
            query_text=query_text,
            include_highlights=options.include_highlights,
        )
        passing = [result for result in scored if result.similarity >= options.min_similarity]
        ranked = rank_results(passing)[: options.max_results]

        logger.debug(
            f"{__name__}:search - Scored {len(candidates)} candidates",
            extra={"passing": len(passing), "returned": len(ranked)},
        )
        return ranked

    def score_candidates(
        self,
        query_vector: Sequence[float],
        candidates: Sequence[CandidateChunk],
        *,
        query_text: str | None = None,
        include_highlights: bool = False,
    ) -> list[SearchResult]:
        """
        Score every candidate without thresholding or ordering.

        Candidates whose stored embedding cannot be decoded or has the
        wrong dimension are skipped and logged. Negative cosine scores
        are floored at 0.0.
        """
        results: list[SearchResult] = []
        for chunk in candidates:
            try:
                vector = self.codec.decode(chunk.embedding)
            except InvalidEmbeddingError as e:
                logger.warning(
                    f"{__name__}:score_candidates - Skipping chunk with invalid embedding",
                    extra={"chunk_id": str(chunk.chunk_id), "error": e.message},
                )
                continue

            score = max(0.0, cosine_similarity(query_vector, vector))
            results.append(self.build_result(chunk, score, query_text, include_highlights))
        return results

    def build_result(
        self,
        chunk: CandidateChunk,
        score: float,
        query_text: str | None,
        include_highlights: bool,
    ) -> SearchResult:
        content = chunk.content
        highlighted = None
        if include_highlights and query_text:
            content = create_excerpt(chunk.content, query_text, self.settings.excerpt_length)
            highlighted = highlight_terms(content, query_text)

        return SearchResult(
            document_id=chunk.document_id,
            document_title=chunk.document_title,
            chunk_id=chunk.chunk_id,
            chunk_index=chunk.chunk_index,
            content=content,
            highlighted_content=highlighted,
            similarity=score,
            page_number=chunk.page_number,
            language=chunk.language,
            created_at=chunk.created_at,
        )
