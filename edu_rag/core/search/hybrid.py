"""
Hybrid search combiner.

Merges vector and keyword result lists into one ranking using a
weighted sum of the two scores.

Dependencies: edu_rag.models.search
System role: Score fusion for hybrid retrieval
"""

import math
from collections.abc import Sequence
from uuid import UUID

from edu_rag.models.search import SearchResult, validate_weights


def _tie_break_key(result: SearchResult) -> tuple[float, float]:
    created = result.created_at.timestamp() if result.created_at is not None else math.inf
    return (-result.similarity, created)


def rank_results(results: Sequence[SearchResult]) -> list[SearchResult]:
    """
    Order results by similarity descending.

    Equal scores fall back to chunk creation time (earliest first) and
    then to input order, since the sort is stable.
    """
    return sorted(results, key=_tie_break_key)


class HybridSearchCombiner:
    """Weighted fusion of vector and keyword search results."""

    def combine(
        self,
        vector_results: Sequence[SearchResult],
        keyword_results: Sequence[SearchResult],
        vector_weight: float,
        keyword_weight: float,
    ) -> list[SearchResult]:
        """
        Merge two result lists into one ranked list.

        A chunk found by only one side scores 0 on the other side.

        Args:
            vector_results: Results scored by cosine similarity
            keyword_results: Results scored by keyword relevance
            vector_weight: Weight of the vector score
            keyword_weight: Weight of the keyword score

        Returns:
            list[SearchResult]: One result per chunk, ranked by combined score

        Raises:
            InvalidWeightsError: If a weight is outside [0, 1] or they do not sum to 1.0
        """
        validate_weights(vector_weight, keyword_weight)

        vector_by_chunk: dict[UUID, SearchResult] = {}
        keyword_by_chunk: dict[UUID, SearchResult] = {}
        order: list[UUID] = []
        for result in vector_results:
            if result.chunk_id not in vector_by_chunk:
                vector_by_chunk[result.chunk_id] = result
                order.append(result.chunk_id)
        for result in keyword_results:
            if result.chunk_id not in keyword_by_chunk:
                keyword_by_chunk[result.chunk_id] = result
                if result.chunk_id not in vector_by_chunk:
                    order.append(result.chunk_id)

        combined: list[SearchResult] = []
        for chunk_id in order:
            vector_hit = vector_by_chunk.get(chunk_id)
            keyword_hit = keyword_by_chunk.get(chunk_id)
            vector_score = vector_hit.similarity if vector_hit else 0.0
            keyword_score = keyword_hit.similarity if keyword_hit else 0.0
            score = vector_weight * vector_score + keyword_weight * keyword_score

            base = vector_hit or keyword_hit
            combined.append(
                base.model_copy(
                    update={
                        "similarity": min(1.0, max(0.0, score)),
                        "vector_score": vector_score,
                        "keyword_score": keyword_score,
                    }
                )
            )

        return rank_results(combined)
