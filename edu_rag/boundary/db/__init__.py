"""
Database boundary layer: ORM models, CRUD operations, stores and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Async connection management
  - DocumentModel, DocumentChunkModel: ORM entities
  - SqlChunkStore, SqlDocumentStatusStore: Collaborators used by the core

Dependencies: sqlalchemy, edu_rag.configs
System role: Database adapter for chunk retrieval and processing status
"""

from edu_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from edu_rag.boundary.db.chunk_store import SqlChunkStore
from edu_rag.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from edu_rag.boundary.db.models import DocumentChunkModel, DocumentModel
from edu_rag.boundary.db.status_store import SqlDocumentStatusStore

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
    "DocumentModel",
    "DocumentChunkModel",
    "SqlChunkStore",
    "SqlDocumentStatusStore",
]
