"""
Search domain models and schemas.

Request, option and result schemas for vector, hybrid and
cross-language search.

Dependencies: pydantic, edu_rag.core.exceptions
System role: Search API contracts
"""

from datetime import datetime
from enum import Enum
from typing import Protocol
from uuid import UUID

from pydantic import BaseModel, Field

from edu_rag.core.exceptions import InvalidWeightsError

WEIGHT_TOLERANCE = 1e-6
DEFAULT_VECTOR_WEIGHT = 0.7
DEFAULT_KEYWORD_WEIGHT = 0.3


class SearchDefaults(Protocol):
    """Configured fallbacks for unset SearchOptions fields; SearchSettings satisfies it."""

    default_max_results: int
    default_min_similarity: float
    vector_weight: float
    keyword_weight: float


class SupportedLanguage(str, Enum):
    """Languages with dedicated search support."""

    ENGLISH = "en"
    KOREAN = "ko"
    JAPANESE = "ja"
    CHINESE = "zh"
    FRENCH = "fr"
    GERMAN = "de"
    SPANISH = "es"
    ITALIAN = "it"
    PORTUGUESE = "pt"
    RUSSIAN = "ru"
    ARABIC = "ar"
    HINDI = "hi"


class SearchType(str, Enum):
    VECTOR = "vector"
    HYBRID = "hybrid"
    CROSS_LANGUAGE = "cross_language"
    SIMILAR = "similar"


class SearchScope(BaseModel):
    """Coarse filter applied by chunk storage before scoring."""

    folder_id: UUID | None = None
    document_ids: list[UUID] | None = None
    language: str | None = None


class SearchOptions(BaseModel):
    """
    Caller-tunable search parameters.

    max_results, min_similarity and the hybrid weights left as None take
    the configured SEARCH_* defaults; see with_defaults(). When only one
    hybrid weight is given the other is its complement to 1.0.
    """

    max_results: int | None = Field(default=None, ge=1)
    min_similarity: float | None = Field(default=None, ge=0.0, le=1.0)
    include_highlights: bool = True
    folder_id: UUID | None = None
    document_ids: list[UUID] | None = None
    language: str | None = Field(default=None, description="Restrict search to one language")
    hybrid: bool = False
    vector_weight: float | None = None
    keyword_weight: float | None = None

    def resolved_weights(
        self,
        default_vector: float = DEFAULT_VECTOR_WEIGHT,
        default_keyword: float = DEFAULT_KEYWORD_WEIGHT,
    ) -> tuple[float, float]:
        if self.vector_weight is None and self.keyword_weight is None:
            return default_vector, default_keyword
        if self.vector_weight is None:
            return 1.0 - self.keyword_weight, self.keyword_weight
        if self.keyword_weight is None:
            return self.vector_weight, 1.0 - self.vector_weight
        return self.vector_weight, self.keyword_weight

    def with_defaults(self, settings: SearchDefaults) -> "SearchOptions":
        """Copy with every unset tunable filled from `settings`."""
        vector_weight, keyword_weight = self.resolved_weights(settings.vector_weight, settings.keyword_weight)
        return self.model_copy(
            update={
                "max_results": self.max_results if self.max_results is not None else settings.default_max_results,
                "min_similarity": (
                    self.min_similarity if self.min_similarity is not None else settings.default_min_similarity
                ),
                "vector_weight": vector_weight,
                "keyword_weight": keyword_weight,
            }
        )

    def validate_weights(self) -> None:
        """
        Check hybrid weights.

        Raises:
            InvalidWeightsError: If either weight is outside [0, 1] or they do not sum to 1.0
        """
        validate_weights(*self.resolved_weights())

    def to_scope(self, language: str | None = None) -> SearchScope:
        """Build the storage scope, letting an explicit language override detection."""
        return SearchScope(
            folder_id=self.folder_id,
            document_ids=self.document_ids,
            language=self.language or language,
        )


def validate_weights(vector_weight: float, keyword_weight: float) -> None:
    in_range = 0.0 <= vector_weight <= 1.0 and 0.0 <= keyword_weight <= 1.0
    if not in_range or abs(vector_weight + keyword_weight - 1.0) > WEIGHT_TOLERANCE:
        raise InvalidWeightsError(vector_weight, keyword_weight)


class SearchResult(BaseModel):
    """Single ranked passage returned to the caller."""

    document_id: UUID
    document_title: str
    chunk_id: UUID
    chunk_index: int
    content: str = Field(description="Content excerpt")
    highlighted_content: str | None = Field(default=None, description="Excerpt with <mark> tags")
    similarity: float = Field(ge=0.0, le=1.0)
    page_number: int | None = None
    language: str
    is_translated: bool = False
    vector_score: float | None = None
    keyword_score: float | None = None
    created_at: datetime | None = Field(default=None, exclude=True)


class LanguageBreakdown(BaseModel):
    """Per-language summary of a cross-language search."""

    language: str
    result_count: int
    average_similarity: float


class LanguageDetection(BaseModel):
    """Outcome of query language detection."""

    language: str = "unknown"
    confidence: float = 0.0
    alternatives: list[tuple[str, float]] = Field(default_factory=list)


class SearchRequest(BaseModel):
    """Request schema for single-language search."""

    query: str = Field(min_length=3, max_length=1000, description="Search query text")
    options: SearchOptions = Field(default_factory=SearchOptions)


class CrossLanguageSearchRequest(SearchRequest):
    """Request schema for cross-language search."""

    source_language: str | None = Field(default=None, description="Query language, detected when omitted")
    target_languages: list[str] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Response schema for all search endpoints."""

    results: list[SearchResult]
    total_results: int
    detected_language: str | None = None
    language_breakdown: list[LanguageBreakdown] = Field(default_factory=list)
    search_type: SearchType
    processing_time_ms: float


class LanguageSuggestionResponse(BaseModel):
    detected_language: str
    suggestions: list[str]
    names: dict[str, str]


class BatchSearchRequest(BaseModel):
    """Several queries searched with the same options."""

    queries: list[str] = Field(min_length=1, description="Query texts, answered in order")
    options: SearchOptions = Field(default_factory=SearchOptions)


class BatchSearchResponse(BaseModel):
    responses: list[SearchResponse]
    processing_time_ms: float


class LanguageStatistics(BaseModel):
    """Stored content in one language."""

    language: str
    language_name: str
    document_count: int
    total_chunks: int
    percentage: float = Field(description="Share of document_count across all languages, 0-100")


class LanguageCount(BaseModel):
    """Raw per-language counts as returned by chunk storage."""

    language: str
    document_count: int
    total_chunks: int
