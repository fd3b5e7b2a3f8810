"""
Tests for SearchService.

System role: Verification of search use cases and language suggestions
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from edu_rag.application.services.search_service import SearchService
from edu_rag.configs.search import SearchSettings
from edu_rag.models.search import (
    BatchSearchRequest,
    BatchSearchResponse,
    CrossLanguageSearchRequest,
    SearchOptions,
    SearchRequest,
    SearchResponse,
    SearchScope,
    SearchType,
)


@pytest.fixture
def orchestrator():
    orchestrator = MagicMock()
    orchestrator.settings = SearchSettings()
    response = SearchResponse(results=[], total_results=0, search_type=SearchType.VECTOR, processing_time_ms=1.0)
    orchestrator.search_single_language = AsyncMock(return_value=response)
    orchestrator.cross_language_search = AsyncMock(
        return_value=response.model_copy(update={"search_type": SearchType.CROSS_LANGUAGE})
    )
    return orchestrator


@pytest.fixture
def service(orchestrator):
    return SearchService(orchestrator)


@pytest.mark.asyncio
async def test_search_passes_query_and_options(service, orchestrator):
    request = SearchRequest(query="photosynthesis", options=SearchOptions(max_results=3))

    response = await service.search(request)

    assert response.search_type == SearchType.VECTOR
    orchestrator.search_single_language.assert_awaited_once_with(
        "photosynthesis", request.options, cancel_event=None
    )


@pytest.mark.asyncio
async def test_cross_language_search_passes_languages(service, orchestrator):
    request = CrossLanguageSearchRequest(query="photosynthesis", source_language="en", target_languages=["ko"])

    response = await service.cross_language_search(request)

    assert response.search_type == SearchType.CROSS_LANGUAGE
    orchestrator.cross_language_search.assert_awaited_once_with(
        "photosynthesis", "en", ["ko"], request.options, cancel_event=None
    )


def test_suggest_languages_for_english_query(service):
    suggestions = service.suggest_languages("How do plants turn sunlight into chemical energy?")

    assert suggestions.detected_language == "en"
    assert suggestions.suggestions == ["en", "ko", "ja", "zh"]
    assert suggestions.names["ko"] == "한국어"


def test_suggest_languages_for_undetectable_query(service):
    suggestions = service.suggest_languages("123 456")

    assert suggestions.detected_language == "unknown"
    assert suggestions.suggestions == []
    assert suggestions.names == {}


@pytest.mark.asyncio
async def test_batch_search_unpacks_request(service, orchestrator):
    batch = BatchSearchResponse(responses=[], processing_time_ms=2.0)
    orchestrator.batch_search = AsyncMock(return_value=batch)
    request = BatchSearchRequest(queries=["osmosis", "diffusion"], options=SearchOptions(min_similarity=0.4))

    assert await service.batch_search(request) is batch
    orchestrator.batch_search.assert_awaited_once_with(
        ["osmosis", "diffusion"], request.options, cancel_event=None
    )


@pytest.mark.asyncio
async def test_language_distribution_scopes_by_folder(service, orchestrator):
    orchestrator.language_distribution = AsyncMock(return_value=[])
    folder_id = uuid.uuid4()

    await service.language_distribution(folder_id)

    orchestrator.language_distribution.assert_awaited_once_with(SearchScope(folder_id=folder_id))
