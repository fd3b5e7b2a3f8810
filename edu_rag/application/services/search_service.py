"""
Search service orchestrator.

Translates API requests into orchestrator calls and adds language
suggestions.

Dependencies: edu_rag.core.search, edu_rag.models.search
System role: Search use cases for the HTTP API
"""

import asyncio
import logging
from uuid import UUID

from edu_rag.core.search.language_detection import (
    detect_language,
    language_name,
    suggest_search_languages,
)
from edu_rag.core.search.multi_language import MultiLanguageSearchOrchestrator
from edu_rag.models.search import (
    BatchSearchRequest,
    BatchSearchResponse,
    CrossLanguageSearchRequest,
    LanguageStatistics,
    LanguageSuggestionResponse,
    SearchOptions,
    SearchRequest,
    SearchResponse,
    SearchScope,
)

logger = logging.getLogger(__name__)


class SearchService:
    """Search use cases."""

    def __init__(self, orchestrator: MultiLanguageSearchOrchestrator) -> None:
        self.orchestrator = orchestrator

    @property
    def confidence_threshold(self) -> float:
        return self.orchestrator.settings.language_confidence_threshold

    async def search(
        self,
        request: SearchRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> SearchResponse:
        """
        Run a single-language vector or hybrid search.

        Args:
            request: Query and options
            cancel_event: Optional cancellation signal

        Returns:
            SearchResponse: Ranked results
        """
        response = await self.orchestrator.search_single_language(
            request.query,
            request.options,
            cancel_event=cancel_event,
        )
        logger.info(
            f"{__name__}:search - Search completed",
            extra={
                "results": response.total_results,
                "search_type": response.search_type.value,
                "processing_time_ms": round(response.processing_time_ms, 1),
            },
        )
        return response

    async def cross_language_search(
        self,
        request: CrossLanguageSearchRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> SearchResponse:
        return await self.orchestrator.cross_language_search(
            request.query,
            request.source_language,
            request.target_languages,
            request.options,
            cancel_event=cancel_event,
        )

    async def find_similar(
        self,
        chunk_id: UUID,
        options: SearchOptions | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> SearchResponse:
        return await self.orchestrator.find_similar(chunk_id, options, cancel_event=cancel_event)

    async def batch_search(
        self,
        request: BatchSearchRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> BatchSearchResponse:
        response = await self.orchestrator.batch_search(request.queries, request.options, cancel_event=cancel_event)
        logger.info(
            f"{__name__}:batch_search - Batch completed",
            extra={
                "queries": len(request.queries),
                "processing_time_ms": round(response.processing_time_ms, 1),
            },
        )
        return response

    async def language_distribution(self, folder_id: UUID | None = None) -> list[LanguageStatistics]:
        return await self.orchestrator.language_distribution(SearchScope(folder_id=folder_id))

    def suggest_languages(self, query: str) -> LanguageSuggestionResponse:
        """
        Suggest languages for cross-language search.

        Args:
            query: Query text

        Returns:
            LanguageSuggestionResponse: Detected language, suggestions and display names
        """
        detection = detect_language(query, self.confidence_threshold)
        suggestions = suggest_search_languages(query, self.confidence_threshold)
        return LanguageSuggestionResponse(
            detected_language=detection.language,
            suggestions=suggestions,
            names={code: language_name(code) for code in suggestions},
        )
