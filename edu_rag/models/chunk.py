"""
Chunk domain models.

Document chunks as written by ingestion and as returned by chunk
storage for similarity scoring.

Dependencies: pydantic
System role: Document chunk data structures
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ChunkInput(BaseModel):
    """Chunk produced by the chunking and embedding stages, ready to persist."""

    chunk_index: int = Field(ge=0, description="Zero-based position within the document")
    content: str = Field(description="Chunk text content")
    language: str = Field(default="unknown", description="ISO 639-1 language code")
    page_number: int | None = Field(default=None, description="Page number in source")
    embedding: list[float] = Field(description="Embedding vector")


class CandidateChunk(BaseModel):
    """Stored chunk returned by storage, with its embedding still encoded."""

    chunk_id: UUID
    document_id: UUID
    document_title: str
    chunk_index: int
    content: str
    language: str
    page_number: int | None = None
    embedding: str = Field(description="Embedding in wire form '[v1,v2,...]'")
    created_at: datetime


class KeywordHit(BaseModel):
    """Chunk matched by keyword relevance with a normalised score."""

    chunk: CandidateChunk
    score: float = Field(ge=0.0, le=1.0)
