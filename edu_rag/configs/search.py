"""
Search configuration settings.

Defaults and hard limits for vector, hybrid and cross-language search.

Dependencies: pydantic, pydantic_settings
System role: Retrieval tuning configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from edu_rag.configs.base import env_config


class SearchSettings(BaseSettings):
    """Search defaults, limits and deadlines."""

    model_config = env_config("SEARCH_")

    default_max_results: int = Field(default=10, description="Results returned when unspecified")
    max_results_limit: int = Field(default=100, description="Upper bound for max_results")
    default_min_similarity: float = Field(
        default=0.7,
        description="Minimum similarity score when unspecified (0.0-1.0)",
        ge=0.0,
        le=1.0,
    )
    min_query_length: int = Field(default=3, description="Shortest accepted query text")
    max_query_length: int = Field(default=1000, description="Longest accepted query text")

    vector_weight: float = Field(default=0.7, description="Default hybrid vector weight")
    keyword_weight: float = Field(default=0.3, description="Default hybrid keyword weight")

    timeout_seconds: float = Field(
        default=10.0,
        description="Deadline for fetching candidate chunks from storage",
        gt=0,
    )
    language_confidence_threshold: float = Field(
        default=0.5,
        description="Detected languages below this confidence are treated as unknown",
        ge=0.0,
        le=1.0,
    )
    excerpt_length: int = Field(default=200, description="Characters kept around the first hit")
    similar_max_results: int = Field(default=5, description="Results for similar-chunk search when unspecified", ge=1)
    similar_min_similarity: float = Field(
        default=0.8,
        description="Threshold for similar-chunk search when unspecified",
        ge=0.0,
        le=1.0,
    )
    batch_max_queries: int = Field(default=20, description="Most queries accepted by one batch search", ge=1)
    translation_enabled: bool = Field(
        default=False,
        description="Translate queries for cross-language search with an LLM",
    )
    translation_model: str = Field(
        default="gemini-2.5-flash",
        description="Google Gemini chat model used for query translation",
    )
