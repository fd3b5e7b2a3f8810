"""
Tests for language detection, language suggestions and highlighting helpers.

System role: Verification of language awareness and result presentation
"""

import pytest

from edu_rag.core.search.highlighting import create_excerpt, extract_terms, highlight_terms
from edu_rag.core.search.language_detection import (
    UNKNOWN_LANGUAGE,
    detect_language,
    language_name,
    normalize_language_code,
    suggest_search_languages,
)

ENGLISH_QUERY = "What is the function of the mitochondria inside a living cell?"
KOREAN_QUERY = "세포 안에서 미토콘드리아는 어떤 역할을 하나요?"


class TestDetectLanguage:
    def test_detects_english(self):
        detection = detect_language(ENGLISH_QUERY)
        assert detection.language == "en"
        assert detection.confidence >= 0.5

    def test_detects_korean(self):
        assert detect_language(KOREAN_QUERY).language == "ko"

    def test_is_deterministic(self):
        assert detect_language(ENGLISH_QUERY) == detect_language(ENGLISH_QUERY)

    @pytest.mark.parametrize("text", ["", "   ", "12345 !!!"])
    def test_undetectable_text_is_unknown(self, text):
        detection = detect_language(text)
        assert detection.language == UNKNOWN_LANGUAGE
        assert detection.confidence == 0.0

    def test_below_threshold_reports_unknown(self):
        detection = detect_language(ENGLISH_QUERY, confidence_threshold=1.01)
        assert detection.language == UNKNOWN_LANGUAGE
        assert detection.confidence > 0.0

    @pytest.mark.parametrize("code,expected", [("zh-cn", "zh"), ("zh-TW", "zh"), ("pt_BR", "pt"), ("EN", "en")])
    def test_normalize_language_code(self, code, expected):
        assert normalize_language_code(code) == expected


class TestSuggestions:
    def test_english_query_suggests_common_pairs(self):
        assert suggest_search_languages(ENGLISH_QUERY) == ["en", "ko", "ja", "zh"]

    def test_korean_query_suggests_common_pairs(self):
        assert suggest_search_languages(KOREAN_QUERY) == ["ko", "en", "ja"]

    def test_unknown_query_has_no_suggestions(self):
        assert suggest_search_languages("") == []

    def test_language_names(self):
        assert language_name("ko") == "한국어"
        assert language_name("en") == "English"
        assert language_name("xx") == "XX"


class TestHighlighting:
    def test_short_terms_are_not_highlighted(self):
        assert extract_terms("is DNA a cell") == ["dna", "cell"]

    def test_highlight_is_case_insensitive_and_keeps_original_case(self):
        highlighted = highlight_terms("DNA encodes genes; dna is stable.", "dna")
        assert highlighted == "<mark>DNA</mark> encodes genes; <mark>dna</mark> is stable."

    def test_regex_characters_in_query_are_escaped(self):
        assert highlight_terms("learn c++ today", "c++") == "learn <mark>c++</mark> today"

    def test_markup_in_content_is_escaped(self):
        highlighted = highlight_terms("<script>alert(1)</script> cells & tissues", "cells")

        assert highlighted == "&lt;script&gt;alert(1)&lt;/script&gt; <mark>cells</mark> &amp; tissues"

    def test_text_without_terms_is_still_escaped(self):
        assert highlight_terms("<b>bold</b>", "is") == "&lt;b&gt;bold&lt;/b&gt;"

    def test_excerpt_returns_short_text_unchanged(self):
        assert create_excerpt("short text", "text", max_length=50) == "short text"

    def test_excerpt_centres_on_first_hit(self):
        text = "a" * 300 + " photosynthesis " + "b" * 300

        excerpt = create_excerpt(text, "photosynthesis", max_length=100)

        assert "photosynthesis" in excerpt
        assert excerpt.startswith("...")
        assert excerpt.endswith("...")

    def test_excerpt_without_hit_uses_leading_text(self):
        excerpt = create_excerpt("x" * 300, "missing", max_length=100)
        assert excerpt == "x" * 100 + "..."
