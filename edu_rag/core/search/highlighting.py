"""
Search term highlighting and excerpt extraction.

Dependencies: re, html (stdlib)
System role: Presentation helpers attached to search results
"""

import html
import re

MIN_HIGHLIGHT_TERM_LENGTH = 3


def extract_terms(query: str, min_length: int = MIN_HIGHLIGHT_TERM_LENGTH) -> list[str]:
    """Split a query into distinct lowercase terms of at least min_length characters."""
    seen: list[str] = []
    for term in query.lower().split():
        term = term.strip(".,;:!?\"'()[]{}")
        if len(term) >= min_length and term not in seen:
            seen.append(term)
    return seen


def highlight_terms(text: str, query: str) -> str:
    """
    Wrap every occurrence of a query term in <mark> tags.

    The text is HTML-escaped around and inside the marks, so only the
    inserted tags are markup.

    Args:
        text: Text to highlight
        query: Raw query text

    Returns:
        str: Escaped text with highlighted terms
    """
    terms = extract_terms(query)
    if not terms:
        return html.escape(text)
    # Longest first so overlapping terms prefer the wider match
    pattern = "|".join(re.escape(term) for term in sorted(terms, key=len, reverse=True))
    parts = re.split(f"({pattern})", text, flags=re.IGNORECASE)
    return "".join(
        f"<mark>{html.escape(part)}</mark>" if index % 2 else html.escape(part)
        for index, part in enumerate(parts)
    )


def create_excerpt(text: str, query: str, max_length: int = 200) -> str:
    """
    Cut an excerpt of text centred on the first query term hit.

    Falls back to the leading max_length characters when nothing matches.

    Args:
        text: Full chunk content
        query: Raw query text
        max_length: Target excerpt length in characters

    Returns:
        str: Excerpt with ellipses marking trimmed edges
    """
    if len(text) <= max_length:
        return text

    lowered = text.lower()
    first_hit = -1
    for term in extract_terms(query):
        index = lowered.find(term)
        if index != -1 and (first_hit == -1 or index < first_hit):
            first_hit = index

    if first_hit == -1:
        return text[:max_length].rstrip() + "..."

    start = max(0, first_hit - max_length // 2)
    end = min(len(text), start + max_length)
    start = max(0, end - max_length)

    excerpt = text[start:end].strip()
    if start > 0:
        excerpt = "..." + excerpt
    if end < len(text):
        excerpt = excerpt + "..."
    return excerpt
