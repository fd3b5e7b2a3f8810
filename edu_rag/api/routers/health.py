"""
Health check API endpoints.

Routes:
    GET /health - process liveness and package version
    GET /health/db - round trip to the chunk and status database
    GET /health/notifier - notifier lifecycle and monitored document count

System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text

from edu_rag import __version__
from edu_rag.api.deps.dependencies import get_notifier, get_session_factory
from edu_rag.core.notifications.notifier import ProcessingStatusNotifier

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    message: str
    version: str


class NotifierHealthResponse(BaseModel):
    status: str
    initialized: bool
    monitored_documents: int
    pending_deliveries: int


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", message="Server Healthy", version=__version__)


@router.get("/db", response_model=HealthResponse)
async def database_health(response: Response, session_factory=Depends(get_session_factory)) -> HealthResponse:
    """Run SELECT 1; answers 503 when the database cannot be reached."""
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(
            f"{__name__}:database_health - Database unreachable",
            extra={"error_type": type(e).__name__},
        )
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unhealthy", message="Database unreachable", version=__version__)
    return HealthResponse(status="healthy", message="Database reachable", version=__version__)


@router.get("/notifier", response_model=NotifierHealthResponse)
async def notifier_health(
    response: Response,
    notifier: ProcessingStatusNotifier = Depends(get_notifier),
) -> NotifierHealthResponse:
    initialized = notifier.is_initialized
    if not initialized:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return NotifierHealthResponse(
        status="healthy" if initialized else "unhealthy",
        initialized=initialized,
        monitored_documents=len(notifier.monitored_documents),
        pending_deliveries=notifier.pending_deliveries,
    )
