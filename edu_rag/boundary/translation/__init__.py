"""Query translation for cross-language search."""

from edu_rag.boundary.translation.llm_translator import LLMTranslator

__all__ = ["LLMTranslator"]
