"""
Document ORM model.

Represents uploaded documents with processing status and progress.

Dependencies: sqlalchemy, edu_rag.boundary.db.base
System role: Document persistence for processing status tracking
"""

import uuid

from sqlalchemy import Enum, Float, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edu_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from edu_rag.models.processing import ProcessingStatus


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking processing pipeline state.

    Only the coarse {status, progress} snapshot is persisted; per-stage
    detail lives in memory on the processing job.

    Attributes:
        id: UUID primary key (auto-generated)
        folder_id: Optional folder grouping used to scope search
        title: Display title shown with search results
        language: Dominant document language code
        processing_status: Current processing stage
        progress: Overall processing progress (0-100)
        error_message: Null unless FAILED

    Relationships:
        chunks: DocumentChunkModel rows (cascade delete)
    """

    __tablename__ = "documents"

    folder_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    language: Mapped[str] = mapped_column(String(16), nullable=False, default="unknown")

    processing_status: Mapped[ProcessingStatus] = mapped_column(
        Enum(ProcessingStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ProcessingStatus.UPLOADING,
    )

    progress: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    error_message: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    chunks: Mapped[list["DocumentChunkModel"]] = relationship(  # noqa: F821
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<DocumentModel(id={self.id}, title={self.title}, status={self.processing_status})>"
