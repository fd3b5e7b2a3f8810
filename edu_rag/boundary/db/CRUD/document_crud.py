"""
Status writes for the documents table.

Dependencies: sqlalchemy, edu_rag.boundary.db.models.document_model
System role: Persistence of the coarse processing status per document
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from edu_rag.boundary.db.CRUD.base_crud import BaseCRUD
from edu_rag.boundary.db.models.document_model import DocumentModel
from edu_rag.models.processing import ProcessingStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def update_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: ProcessingStatus,
        progress: float,
        error_message: str | None = None,
    ) -> DocumentModel | None:
        """
        Overwrite the status columns of one document.

        error_message is only kept for FAILED; any other status clears it.

        Returns:
            DocumentModel | None: The updated row, or None for an unknown id
        """
        document = await self.get_by_id(session, id)
        if document is None:
            return None

        document.processing_status = status
        document.progress = progress
        document.error_message = error_message if status is ProcessingStatus.FAILED else None
        await session.flush()
        return document


document_crud = DocumentCRUD()
