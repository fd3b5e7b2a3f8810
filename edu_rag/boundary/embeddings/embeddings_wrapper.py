"""
Gemini embeddings pinned to the search dimension.

GoogleGenerativeAIEmbeddings drops output_dimensionality given to its
constructor, so the dimension is passed on every call instead. Queries
use the RETRIEVAL_QUERY task type and chunk texts RETRIEVAL_DOCUMENT,
matching how the stored vectors were produced.

Dependencies: langchain_google_genai, python-dotenv
System role: Query embeddings sized to the stored chunk vectors
"""

import logging

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

load_dotenv()
logger = logging.getLogger(__name__)

QUERY_TASK = "RETRIEVAL_QUERY"
DOCUMENT_TASK = "RETRIEVAL_DOCUMENT"


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """Embeddings whose vectors always have `dimension` components."""

    _dimension: int = 1536

    def __init__(self, model: str = "models/gemini-embedding-001", output_dimensionality: int = 1536, **kwargs) -> None:
        super().__init__(model=model, **kwargs)
        self._dimension = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Embedding model ready",
            extra={"model_id": model, "dimension": output_dimensionality},
        )

    @property
    def dimension(self) -> int:
        return self._dimension

    def _options(self, task_type: str | None, default_task: str, output_dimensionality: int | None) -> dict:
        return {
            "task_type": task_type or default_task,
            "output_dimensionality": output_dimensionality or self._dimension,
        }

    def embed_documents(
        self,
        texts: list[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: list[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> list[list[float]]:
        return super().embed_documents(
            texts,
            batch_size=batch_size,
            titles=titles,
            **self._options(task_type, DOCUMENT_TASK, output_dimensionality),
        )

    def embed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> list[float]:
        return super().embed_query(text, title=title, **self._options(task_type, QUERY_TASK, output_dimensionality))

    async def aembed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> list[float]:
        """Async query embedding; the search orchestrator calls this one."""
        return await super().aembed_query(
            text, title=title, **self._options(task_type, QUERY_TASK, output_dimensionality)
        )
