"""
Document chunk ORM model.

Stores chunk text with its embedding in the '[v1,v2,...]' wire form,
which is also the pgvector literal format.

Dependencies: sqlalchemy, edu_rag.boundary.db.base
System role: Chunk persistence for retrieval
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edu_rag.boundary.db.base import Base, UUIDMixin, utc_now


class DocumentChunkModel(Base, UUIDMixin):
    """
    Chunk of a document with its embedding.

    Constraints:
        document_id: Foreign key ON DELETE CASCADE to documents.id
        (document_id, chunk_index): unique
    """

    __tablename__ = "document_chunks"
    __table_args__ = (
        UniqueConstraint("document_id", "chunk_index", name="uq_document_chunks_document_index"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(String(16), nullable=False, default="unknown", index=True)
    page_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    embedding: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    document: Mapped["DocumentModel"] = relationship(back_populates="chunks")  # noqa: F821

    def __repr__(self) -> str:
        return f"<DocumentChunkModel(document_id={self.document_id}, chunk_index={self.chunk_index})>"
