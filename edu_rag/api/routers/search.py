"""
Search API endpoints.

Routes:
    POST /search
    POST /search/cross-language
    POST /search/batch
    POST /search/similar/{chunk_id}
    GET /search/languages/suggest
    GET /search/languages/distribution

Dependencies: edu_rag.application.services.search_service, edu_rag.models.search
System role: Search HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query

from edu_rag.api.deps import get_search_service
from edu_rag.application.services.search_service import SearchService
from edu_rag.models.search import (
    BatchSearchRequest,
    BatchSearchResponse,
    CrossLanguageSearchRequest,
    LanguageStatistics,
    LanguageSuggestionResponse,
    SearchOptions,
    SearchRequest,
    SearchResponse,
)

router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Search document chunks by meaning, optionally blended with keyword matches.

    The query language is detected and used to scope the search unless
    options.language is given.

    Raises:
        422: Invalid query, options or hybrid weights
        504: Storage did not answer before the search deadline
    """
    return await search_service.search(request)


@router.post("/cross-language", response_model=SearchResponse)
async def cross_language_search(
    request: CrossLanguageSearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Search several language partitions and merge the results."""
    return await search_service.cross_language_search(request)


@router.post("/batch", response_model=BatchSearchResponse)
async def batch_search(
    request: BatchSearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> BatchSearchResponse:
    """Answer several queries with shared options; responses follow query order."""
    return await search_service.batch_search(request)


@router.post("/similar/{chunk_id}", response_model=SearchResponse)
async def find_similar(
    chunk_id: UUID,
    options: SearchOptions | None = Body(default=None),
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Passages similar to a stored chunk.

    Raises:
        404: Unknown chunk
    """
    return await search_service.find_similar(chunk_id, options)


@router.get("/languages/suggest", response_model=LanguageSuggestionResponse)
async def suggest_languages(
    query: str = Query(..., min_length=1, max_length=1000),
    search_service: SearchService = Depends(get_search_service),
) -> LanguageSuggestionResponse:
    """Suggest languages worth including in a cross-language search."""
    return search_service.suggest_languages(query)


@router.get("/languages/distribution", response_model=list[LanguageStatistics])
async def language_distribution(
    folder_id: UUID | None = Query(default=None),
    search_service: SearchService = Depends(get_search_service),
) -> list[LanguageStatistics]:
    return await search_service.language_distribution(folder_id)
