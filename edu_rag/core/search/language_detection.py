"""
Query language detection and cross-language suggestions.

Wraps langdetect with a fixed seed so the same query always yields
the same language. Low-confidence detections are reported as
"unknown" so they never narrow a search.

Dependencies: langdetect, edu_rag.models.search
System role: Language awareness for multi-language search
"""

import logging

from langdetect import DetectorFactory, LangDetectException, detect_langs

from edu_rag.models.search import LanguageDetection, SupportedLanguage

logger = logging.getLogger(__name__)

DetectorFactory.seed = 0

UNKNOWN_LANGUAGE = "unknown"

LANGUAGE_NAMES: dict[str, str] = {
    SupportedLanguage.ENGLISH.value: "English",
    SupportedLanguage.KOREAN.value: "한국어",
    SupportedLanguage.JAPANESE.value: "日本語",
    SupportedLanguage.CHINESE.value: "中文",
    SupportedLanguage.FRENCH.value: "Français",
    SupportedLanguage.GERMAN.value: "Deutsch",
    SupportedLanguage.SPANISH.value: "Español",
    SupportedLanguage.ITALIAN.value: "Italiano",
    SupportedLanguage.PORTUGUESE.value: "Português",
    SupportedLanguage.RUSSIAN.value: "Русский",
    SupportedLanguage.ARABIC.value: "العربية",
    SupportedLanguage.HINDI.value: "हिन्दी",
}

# Languages commonly searched together with the key language
COMMON_LANGUAGE_PAIRS: dict[str, list[str]] = {
    "en": ["ko", "ja", "zh"],
    "ko": ["en", "ja"],
    "ja": ["en", "ko"],
    "zh": ["en"],
    "fr": ["en", "es"],
    "de": ["en"],
    "es": ["en", "fr"],
}


def normalize_language_code(code: str) -> str:
    """Reduce regional variants such as 'zh-cn' or 'pt-BR' to the base code."""
    return code.split("-")[0].split("_")[0].lower()


def detect_language(text: str, confidence_threshold: float = 0.5) -> LanguageDetection:
    """
    Detect the dominant language of a text.

    Args:
        text: Text to inspect
        confidence_threshold: Probability below which the result is "unknown"

    Returns:
        LanguageDetection: Language code, confidence and ranked alternatives
    """
    if not text or not text.strip():
        return LanguageDetection()

    try:
        candidates = detect_langs(text)
    except LangDetectException as e:
        logger.debug(f"{__name__}:detect_language - Detection failed: {e}")
        return LanguageDetection()

    merged: dict[str, float] = {}
    for candidate in candidates:
        code = normalize_language_code(candidate.lang)
        merged[code] = merged.get(code, 0.0) + float(candidate.prob)
    ranked = sorted(merged.items(), key=lambda item: item[1], reverse=True)
    if not ranked:
        return LanguageDetection()

    language, confidence = ranked[0]
    confidence = min(confidence, 1.0)
    if confidence < confidence_threshold:
        return LanguageDetection(
            language=UNKNOWN_LANGUAGE,
            confidence=confidence,
            alternatives=ranked,
        )

    return LanguageDetection(language=language, confidence=confidence, alternatives=ranked[1:])


def language_name(code: str) -> str:
    """Native display name for a language code, or the upper-cased code."""
    return LANGUAGE_NAMES.get(normalize_language_code(code), code.upper())


def suggest_search_languages(query: str, confidence_threshold: float = 0.5) -> list[str]:
    """
    Suggest languages worth searching for a query.

    Returns the detected language followed by its common cross-language
    partners, without duplicates. Undetectable queries get no suggestions.
    """
    detection = detect_language(query, confidence_threshold)
    if detection.language == UNKNOWN_LANGUAGE:
        return []

    suggestions = [detection.language]
    for code in COMMON_LANGUAGE_PAIRS.get(detection.language, []):
        if code not in suggestions:
            suggestions.append(code)
    return suggestions
