"""ORM models for documents and their chunks."""

from edu_rag.boundary.db.models.chunk_model import DocumentChunkModel
from edu_rag.boundary.db.models.document_model import DocumentModel

__all__ = ["DocumentChunkModel", "DocumentModel"]
