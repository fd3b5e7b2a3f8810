"""
SQL document status store.

Persists the coarse {status, progress} snapshot of processing jobs
on the documents table.

Dependencies: sqlalchemy, edu_rag.boundary.db.CRUD
System role: Durable processing status for rehydration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from edu_rag.boundary.db.CRUD.document_crud import document_crud
from edu_rag.core.exceptions import DocumentNotFoundError
from edu_rag.models.processing import ProcessingStatus, StatusRecord

logger = logging.getLogger(__name__)


def parse_document_id(document_id: str) -> UUID:
    try:
        return UUID(str(document_id))
    except ValueError as e:
        raise DocumentNotFoundError(str(document_id)) from e


class SqlDocumentStatusStore:
    """Status persistence backed by the documents table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def load_status(self, document_id: str) -> StatusRecord:
        """
        Load a document's persisted status snapshot.

        Raises:
            DocumentNotFoundError: If no document has this ID
        """
        async with self.session_factory() as session:
            document = await document_crud.get_by_id(session, parse_document_id(document_id))
        if document is None:
            raise DocumentNotFoundError(document_id)
        return StatusRecord(
            status=document.processing_status,
            progress=document.progress,
            error_message=document.error_message,
        )

    async def save_status(
        self,
        document_id: str,
        status: ProcessingStatus,
        progress: float,
        error_message: str | None = None,
    ) -> None:
        """
        Persist a status snapshot.

        Args:
            document_id: Document UUID
            status: New processing status
            progress: Overall progress (0-100)
            error_message: Error details, kept only for FAILED

        Raises:
            DocumentNotFoundError: If no document has this ID
        """
        doc_uuid = parse_document_id(document_id)
        async with self.session_factory() as session:
            try:
                updated = await document_crud.update_status(
                    session,
                    doc_uuid,
                    status=status,
                    progress=progress,
                    error_message=error_message,
                )
                if updated is None:
                    raise DocumentNotFoundError(document_id)
                await session.commit()
            except Exception as e:
                logger.error(f"{__name__}:save_status - {type(e).__name__}: {e}")
                await session.rollback()
                raise

        logger.debug(
            f"{__name__}:save_status - Status saved",
            extra={"document_id": document_id, "status": status.value, "progress": progress},
        )
