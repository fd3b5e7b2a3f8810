"""
LLM query translator.

Translates short search queries with a LangChain chat model so a
query written in one language can be matched against chunks written
in another.

Dependencies: langchain_core, langchain_google_genai
System role: Translation collaborator for cross-language search
"""

import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from edu_rag.core.search.language_detection import language_name

logger = logging.getLogger(__name__)

TRANSLATION_PROMPT = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            "You translate search queries for a document retrieval system. "
            "Translate the user's query into {target_language} ({target_code}). "
            "Keep technical terms and proper nouns intact. "
            "Reply with the translated query only, without quotes or commentary.",
        ),
        ("human", "{query}"),
    ]
)


class LLMTranslator:
    """Translator backed by a chat model."""

    def __init__(self, model: BaseChatModel) -> None:
        """
        Initialize translator.

        Args:
            model: Any LangChain chat model
        """
        self.chain = TRANSLATION_PROMPT | model | StrOutputParser()

    @classmethod
    def from_settings(cls, model_name: str) -> "LLMTranslator":
        """Build a translator over Google Gemini."""
        from langchain_google_genai import ChatGoogleGenerativeAI

        return cls(ChatGoogleGenerativeAI(model=model_name, temperature=0))

    async def translate(self, text: str, target_language: str) -> str:
        """
        Translate text into the target language.

        Args:
            text: Query text
            target_language: ISO 639-1 code

        Returns:
            str: Translated query, or the original text if the model returns nothing
        """
        translated = await self.chain.ainvoke(
            {
                "query": text,
                "target_language": language_name(target_language),
                "target_code": target_language,
            }
        )
        translated = translated.strip().strip('"')
        if not translated:
            logger.warning(
                f"{__name__}:translate - Empty translation, keeping original",
                extra={"target_language": target_language},
            )
            return text

        logger.debug(
            f"{__name__}:translate - Translated query",
            extra={"target_language": target_language, "length": len(translated)},
        )
        return translated
