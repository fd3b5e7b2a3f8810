"""Embedding validation, wire codec and similarity scoring."""

from edu_rag.core.vectors.codec import EmbeddingCodec
from edu_rag.core.vectors.similarity import cosine_similarity

__all__ = ["EmbeddingCodec", "cosine_similarity"]
