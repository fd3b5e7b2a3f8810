"""
Document processing API endpoints.

Routes: POST /documents/{id}/processing, GET /documents/{id}/processing,
POST /documents/{id}/processing/advance, POST /documents/{id}/processing/retry,
DELETE /documents/{id}/chunks

Dependencies: edu_rag.application.services.processing_service
System role: Processing status HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from edu_rag.api.deps import get_processing_service
from edu_rag.application.services.processing_service import ProcessingService
from edu_rag.models.processing import ProcessingStatus, ProcessingStatusResponse

router = APIRouter(prefix="/documents", tags=["processing"])


class AdvanceRequest(BaseModel):
    """Pipeline step reported by a processing worker."""

    status: ProcessingStatus
    progress: float = Field(description="Progress within the stage (0-100)")
    message: str | None = None
    error: str | None = None


class ChunksDeletedResponse(BaseModel):
    document_id: UUID
    removed: int


@router.post(
    "/{document_id}/processing",
    response_model=ProcessingStatusResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_processing(
    document_id: str,
    processing_service: ProcessingService = Depends(get_processing_service),
) -> ProcessingStatusResponse:
    """Begin tracking processing for an uploaded document."""
    job = await processing_service.start_processing(document_id)
    return processing_service.to_response(job)


@router.get("/{document_id}/processing", response_model=ProcessingStatusResponse)
async def get_processing_status(
    document_id: str,
    processing_service: ProcessingService = Depends(get_processing_service),
) -> ProcessingStatusResponse:
    """
    Get processing status and estimated time remaining.

    Raises:
        404: Document not found
    """
    return await processing_service.get_status(document_id)


@router.post("/{document_id}/processing/advance", response_model=ProcessingStatusResponse)
async def advance_processing(
    document_id: str,
    request: AdvanceRequest,
    processing_service: ProcessingService = Depends(get_processing_service),
) -> ProcessingStatusResponse:
    """
    Record a pipeline step.

    Raises:
        409: Illegal transition
        422: Progress outside 0-100
    """
    job = await processing_service.advance(
        document_id,
        request.status,
        request.progress,
        message=request.message,
        error=request.error,
    )
    return processing_service.to_response(job)


@router.post("/{document_id}/processing/retry", response_model=ProcessingStatusResponse)
async def retry_processing(
    document_id: str,
    processing_service: ProcessingService = Depends(get_processing_service),
) -> ProcessingStatusResponse:
    """
    Retry a failed document from the stage it failed in.

    The response carries retry_delay_seconds, the backoff the worker
    should wait before resuming.

    Raises:
        409: Document is not failed, or retries are exhausted
    """
    return await processing_service.retry(document_id)


@router.delete("/{document_id}/chunks", response_model=ChunksDeletedResponse)
async def delete_chunks(
    document_id: UUID,
    processing_service: ProcessingService = Depends(get_processing_service),
) -> ChunksDeletedResponse:
    """Drop a document's stored chunks so it can be re-embedded."""
    removed = await processing_service.delete_chunks(document_id)
    return ChunksDeletedResponse(document_id=document_id, removed=removed)
