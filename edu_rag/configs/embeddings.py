"""
Embedding model configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Query embedding and vector dimension configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from edu_rag.configs.base import env_config


class EmbeddingSettings(BaseSettings):
    """Embedding model and vector dimension configuration."""

    model_config = env_config("EMBEDDING_")

    model_id: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    dimension: int = Field(
        default=1536,
        description="Embedding vector dimension; every stored and query vector must match",
        ge=1,
    )
