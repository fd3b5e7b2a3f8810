"""Query embedding models."""

from edu_rag.boundary.embeddings.embeddings_wrapper import FixedDimensionEmbeddings

__all__ = ["FixedDimensionEmbeddings"]
