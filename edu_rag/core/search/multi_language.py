"""
Multi-language search orchestrator.

Entry point for single-language and cross-language search. Detects
the query language, embeds the query, dispatches to vector or hybrid
search per language and merges the per-language result sets.

Dependencies: langchain_core, edu_rag.core.search, edu_rag.core.interfaces
System role: Search orchestration between API and retrieval core
"""

import asyncio
import logging
import time
from collections import defaultdict
from uuid import UUID

from langchain_core.embeddings import Embeddings

from edu_rag.configs.search import SearchSettings
from edu_rag.core.exceptions import ChunkNotFoundError, SearchTimeoutError, ValidationError
from edu_rag.core.interfaces import ChunkStore, Translator
from edu_rag.core.search.hybrid import HybridSearchCombiner, rank_results
from edu_rag.core.search.language_detection import (
    UNKNOWN_LANGUAGE,
    detect_language,
    language_name,
    normalize_language_code,
)
from edu_rag.core.search.vector_search import VectorSearchEngine, check_cancelled
from edu_rag.models.chunk import KeywordHit
from edu_rag.models.search import (
    BatchSearchResponse,
    LanguageBreakdown,
    LanguageStatistics,
    SearchOptions,
    SearchResponse,
    SearchResult,
    SearchScope,
    SearchType,
)

logger = logging.getLogger(__name__)


def build_language_breakdown(results: list[SearchResult]) -> list[LanguageBreakdown]:
    """Count and average results per language, omitting languages without results."""
    grouped: dict[str, list[float]] = defaultdict(list)
    for result in results:
        grouped[result.language].append(result.similarity)
    return [
        LanguageBreakdown(
            language=language,
            result_count=len(scores),
            average_similarity=sum(scores) / len(scores),
        )
        for language, scores in grouped.items()
    ]


def merge_results(result_sets: list[list[SearchResult]], max_results: int) -> list[SearchResult]:
    """Union result sets, keeping the higher-scoring copy of duplicate chunks."""
    best: dict[UUID, SearchResult] = {}
    for results in result_sets:
        for result in results:
            current = best.get(result.chunk_id)
            if current is None or result.similarity > current.similarity:
                best[result.chunk_id] = result
    return rank_results(list(best.values()))[:max_results]


class MultiLanguageSearchOrchestrator:
    """
    Search across one or many languages.

    Cross-language search translates the query per target language
    when a translator is configured. Without one, only the source
    language partition is searched.
    """

    def __init__(
        self,
        engine: VectorSearchEngine,
        embeddings: Embeddings,
        chunk_store: ChunkStore,
        combiner: HybridSearchCombiner | None = None,
        translator: Translator | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self.engine = engine
        self.embeddings = embeddings
        self.chunk_store = chunk_store
        self.combiner = combiner or HybridSearchCombiner()
        self.translator = translator
        self.settings = settings or engine.settings

    def validate_query(self, query: str) -> str:
        """
        Trim and length-check a query.

        Raises:
            ValidationError: If the query is shorter or longer than allowed
        """
        cleaned = (query or "").strip()
        if len(cleaned) < self.settings.min_query_length:
            raise ValidationError(
                f"Search query must be at least {self.settings.min_query_length} characters",
                field="query",
                details={"length": len(cleaned)},
            )
        if len(cleaned) > self.settings.max_query_length:
            raise ValidationError(
                f"Search query must be at most {self.settings.max_query_length} characters",
                field="query",
                details={"length": len(cleaned)},
            )
        return cleaned

    def resolve_options(self, options: SearchOptions | None) -> SearchOptions:
        """
        Fill unset tunables from settings and validate the result.

        Raises:
            ValidationError: If max_results exceeds the configured limit
            InvalidWeightsError: If hybrid weights are invalid
        """
        resolved = (options or SearchOptions()).with_defaults(self.settings)
        self.validate_options(resolved)
        return resolved

    def validate_options(self, options: SearchOptions) -> None:
        if options.max_results > self.settings.max_results_limit:
            raise ValidationError(
                f"max_results cannot exceed {self.settings.max_results_limit}",
                field="max_results",
            )
        if options.hybrid:
            options.validate_weights()

    async def search_single_language(
        self,
        query: str,
        options: SearchOptions | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> SearchResponse:
        """
        Search in the query's own language, or unscoped if it is unknown.

        Args:
            query: Raw query text
            options: Search options (defaults if None)
            cancel_event: Set by the caller to abandon the search

        Returns:
            SearchResponse: Ranked results with detected language and breakdown

        Raises:
            ValidationError: If the query or options are invalid
            InvalidEmbeddingError: If the embedding model returns a bad vector
            SearchTimeoutError: If storage exceeds the deadline
            SearchCancelledError: If the cancel event is set
        """
        started = time.perf_counter()
        query = self.validate_query(query)
        options = self.resolve_options(options)

        detection = detect_language(query, self.settings.language_confidence_threshold)
        scoped_language = None if detection.language == UNKNOWN_LANGUAGE else detection.language
        scope = options.to_scope(scoped_language)

        logger.info(
            f"{__name__}:search_single_language - Searching",
            extra={
                "detected_language": detection.language,
                "confidence": round(detection.confidence, 3),
                "hybrid": options.hybrid,
            },
        )

        results = await self.run_search(query, scope, options, cancel_event)
        return SearchResponse(
            results=results,
            total_results=len(results),
            detected_language=detection.language,
            language_breakdown=build_language_breakdown(results),
            search_type=SearchType.HYBRID if options.hybrid else SearchType.VECTOR,
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )

    async def cross_language_search(
        self,
        query: str,
        source_language: str | None,
        target_languages: list[str],
        options: SearchOptions | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> SearchResponse:
        """
        Search several language partitions and merge the results.

        Args:
            query: Raw query text in the source language
            source_language: Query language; detected when None
            target_languages: Languages to search; empty means single-language search
            options: Search options (defaults if None)
            cancel_event: Set by the caller to abandon the search

        Returns:
            SearchResponse: Merged results tagged with is_translated and a per-language breakdown

        Raises:
            ValidationError: If the query or options are invalid
            SearchTimeoutError: If storage exceeds the deadline for any sub-query
            SearchCancelledError: If the cancel event is set before a sub-query
        """
        if not target_languages:
            return await self.search_single_language(query, options, cancel_event)

        started = time.perf_counter()
        query = self.validate_query(query)
        options = self.resolve_options(options)

        if source_language:
            source = normalize_language_code(source_language)
        else:
            source = detect_language(query, self.settings.language_confidence_threshold).language

        languages: list[str] = []
        for code in target_languages:
            code = normalize_language_code(code)
            if code not in languages:
                languages.append(code)

        if self.translator is None:
            logger.info(
                f"{__name__}:cross_language_search - No translator configured, "
                f"searching source language only",
                extra={"source_language": source, "requested": languages},
            )
            languages = [source]

        per_language: list[list[SearchResult]] = []
        for language in languages:
            check_cancelled(cancel_event, f"language:{language}")

            language_query = await self.translate_query(query, source, language)
            scope_language = None if language == UNKNOWN_LANGUAGE else language
            scope = SearchScope(
                folder_id=options.folder_id,
                document_ids=options.document_ids,
                language=scope_language,
            )
            results = await self.run_search(language_query, scope, options, cancel_event)
            per_language.append(
                [
                    result.model_copy(
                        update={
                            "is_translated": source != UNKNOWN_LANGUAGE and result.language != source
                        }
                    )
                    for result in results
                ]
            )

        flattened = [result for results in per_language for result in results]
        merged = merge_results(per_language, options.max_results)

        logger.info(
            f"{__name__}:cross_language_search - Merged {len(flattened)} results into {len(merged)}",
            extra={"source_language": source, "languages": languages},
        )

        return SearchResponse(
            results=merged,
            total_results=len(merged),
            detected_language=source,
            language_breakdown=build_language_breakdown(flattened),
            search_type=SearchType.CROSS_LANGUAGE,
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )

    async def find_similar(
        self,
        chunk_id: UUID,
        options: SearchOptions | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> SearchResponse:
        """
        Find passages close in meaning to a stored chunk.

        The chunk's own embedding is the query vector and the chunk itself
        is left out of the results. Unset max_results and min_similarity
        default to the similar-search settings (5 and 0.8) rather than
        the regular search defaults.

        Args:
            chunk_id: Chunk whose embedding is used as the query
            options: Scope and thresholds (defaults if None)
            cancel_event: Set by the caller to abandon the search

        Returns:
            SearchResponse: Ranked neighbours, detected_language set to the chunk's language

        Raises:
            ChunkNotFoundError: If the chunk does not exist
            InvalidEmbeddingError: If the stored embedding cannot be decoded
            SearchTimeoutError: If storage exceeds the deadline
        """
        started = time.perf_counter()
        options = options or SearchOptions()
        options = self.resolve_options(
            options.model_copy(
                update={
                    "max_results": options.max_results or self.settings.similar_max_results,
                    "min_similarity": (
                        options.min_similarity
                        if options.min_similarity is not None
                        else self.settings.similar_min_similarity
                    ),
                    "hybrid": False,
                }
            )
        )

        source = await self.chunk_store.get_chunk(chunk_id)
        if source is None:
            raise ChunkNotFoundError(str(chunk_id))
        query_vector = self.engine.codec.decode(source.embedding)

        candidates = await self.engine.fetch_candidates(options.to_scope(), cancel_event)
        neighbours = [candidate for candidate in candidates if candidate.chunk_id != source.chunk_id]
        scored = self.engine.score_candidates(query_vector, neighbours)
        passing = [result for result in scored if result.similarity >= options.min_similarity]
        results = rank_results(passing)[: options.max_results]

        logger.info(
            f"{__name__}:find_similar - Found {len(results)} similar chunks",
            extra={"chunk_id": chunk_id, "candidates": len(neighbours)},
        )
        return SearchResponse(
            results=results,
            total_results=len(results),
            detected_language=source.language,
            language_breakdown=build_language_breakdown(results),
            search_type=SearchType.SIMILAR,
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )

    async def batch_search(
        self,
        queries: list[str],
        options: SearchOptions | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> BatchSearchResponse:
        """
        Run single-language searches for several queries concurrently.

        Responses come back in query order. The first failing query fails
        the whole batch.

        Raises:
            ValidationError: If there are no queries, too many, or any query is invalid
        """
        if not queries:
            raise ValidationError("Batch search needs at least one query", field="queries")
        if len(queries) > self.settings.batch_max_queries:
            raise ValidationError(
                f"Batch search accepts at most {self.settings.batch_max_queries} queries",
                field="queries",
                details={"count": len(queries)},
            )
        for query in queries:
            self.validate_query(query)

        started = time.perf_counter()
        responses = await asyncio.gather(
            *(self.search_single_language(query, options, cancel_event) for query in queries)
        )
        return BatchSearchResponse(
            responses=list(responses),
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )

    async def language_distribution(self, scope: SearchScope | None = None) -> list[LanguageStatistics]:
        """Per-language document and chunk counts with each language's share of documents."""
        counts = await self.chunk_store.language_counts(scope or SearchScope())
        total_documents = sum(count.document_count for count in counts)
        return [
            LanguageStatistics(
                language=count.language,
                language_name=language_name(count.language),
                document_count=count.document_count,
                total_chunks=count.total_chunks,
                percentage=count.document_count / total_documents * 100 if total_documents else 0.0,
            )
            for count in counts
        ]

    async def translate_query(self, query: str, source: str, target: str) -> str:
        """Translate a query for a target language, falling back to the original text."""
        if self.translator is None or target == source or target == UNKNOWN_LANGUAGE:
            return query
        try:
            return await self.translator.translate(query, target)
        except Exception as e:
            logger.warning(
                f"{__name__}:translate_query - Translation failed, using original query",
                extra={"target_language": target, "error": str(e)},
            )
            return query

    async def run_search(
        self,
        query: str,
        scope: SearchScope,
        options: SearchOptions,
        cancel_event: asyncio.Event | None,
    ) -> list[SearchResult]:
        """Embed the query and run vector or hybrid search within one scope."""
        check_cancelled(cancel_event, "embed")
        query_embedding = await self.embeddings.aembed_query(query)

        if not options.hybrid:
            return await self.engine.search(
                query_embedding,
                scope,
                options,
                query_text=query,
                cancel_event=cancel_event,
            )

        query_vector = self.engine.codec.require_valid(query_embedding, field="query_embedding")
        candidates = await self.engine.fetch_candidates(scope, cancel_event)
        if not candidates:
            return []

        vector_results = self.engine.score_candidates(
            query_vector,
            candidates,
            query_text=query,
            include_highlights=options.include_highlights,
        )
        keyword_hits = await self.fetch_keyword_hits(query, scope)
        keyword_results = [
            self.engine.build_result(hit.chunk, hit.score, query, options.include_highlights)
            for hit in keyword_hits
        ]

        combined = self.combiner.combine(
            vector_results,
            keyword_results,
            options.vector_weight,
            options.keyword_weight,
        )
        passing = [result for result in combined if result.similarity >= options.min_similarity]
        return passing[: options.max_results]

    async def fetch_keyword_hits(self, query: str, scope: SearchScope) -> list[KeywordHit]:
        try:
            return await asyncio.wait_for(
                self.chunk_store.keyword_search(query, scope),
                timeout=self.settings.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise SearchTimeoutError(
                "Search timed out during keyword matching",
                {"timeout_seconds": self.settings.timeout_seconds},
            ) from e
