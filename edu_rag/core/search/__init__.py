"""Vector, hybrid and multi-language search."""

from edu_rag.core.search.hybrid import HybridSearchCombiner, rank_results
from edu_rag.core.search.language_detection import (
    detect_language,
    language_name,
    suggest_search_languages,
)
from edu_rag.core.search.multi_language import MultiLanguageSearchOrchestrator
from edu_rag.core.search.vector_search import VectorSearchEngine

__all__ = [
    "HybridSearchCombiner",
    "MultiLanguageSearchOrchestrator",
    "VectorSearchEngine",
    "detect_language",
    "language_name",
    "rank_results",
    "suggest_search_languages",
]
