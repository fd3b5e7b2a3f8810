"""
Keyword relevance scoring.

Counts case-insensitive occurrences of query terms in chunk content
and normalises by the best count so the strongest chunk scores 1.0.

Dependencies: edu_rag.models.chunk
System role: Keyword side of hybrid search
"""

from collections.abc import Iterable

from edu_rag.models.chunk import CandidateChunk, KeywordHit

MIN_KEYWORD_TERM_LENGTH = 2


def keyword_terms(query: str) -> list[str]:
    terms: list[str] = []
    for raw in query.lower().split():
        term = raw.strip(".,;:!?\"'()[]{}")
        if len(term) >= MIN_KEYWORD_TERM_LENGTH and term not in terms:
            terms.append(term)
    return terms


def count_occurrences(content: str, terms: list[str]) -> int:
    lowered = content.lower()
    return sum(lowered.count(term) for term in terms)


def score_keywords(query: str, chunks: Iterable[CandidateChunk]) -> list[KeywordHit]:
    """
    Score chunks by keyword relevance.

    Args:
        query: Raw query text
        chunks: Candidate chunks, in fetch order

    Returns:
        list[KeywordHit]: Matching chunks with scores in (0, 1], fetch order preserved
    """
    terms = keyword_terms(query)
    if not terms:
        return []

    counted = [(chunk, count_occurrences(chunk.content, terms)) for chunk in chunks]
    counted = [(chunk, count) for chunk, count in counted if count > 0]
    if not counted:
        return []

    best = max(count for _, count in counted)
    return [KeywordHit(chunk=chunk, score=count / best) for chunk, count in counted]
