"""
Document processing domain models.

Status enum, per-document job snapshot and the transition event
published to observers.

Dependencies: pydantic
System role: Processing state machine data structures
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProcessingStatus(str, Enum):
    """Lifecycle of an uploaded document."""

    UPLOADING = "uploading"
    EXTRACTING = "extracting"
    CHUNKING = "chunking"
    EMBEDDING = "embedding"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ProcessingStatus.COMPLETED, ProcessingStatus.FAILED)


ACTIVE_STAGES: tuple[ProcessingStatus, ...] = (
    ProcessingStatus.UPLOADING,
    ProcessingStatus.EXTRACTING,
    ProcessingStatus.CHUNKING,
    ProcessingStatus.EMBEDDING,
)


class StageState(BaseModel):
    """Progress bookkeeping for one active stage."""

    model_config = ConfigDict(frozen=True)

    progress: float = 0.0
    started_at: datetime | None = None
    completed_at: datetime | None = None


class ProcessingJob(BaseModel):
    """
    Immutable snapshot of a document's processing job.

    Every state machine operation returns a new instance; callers keep
    whichever snapshot they were handed.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    status: ProcessingStatus = ProcessingStatus.UPLOADING
    progress: float = Field(default=0.0, ge=0.0, le=100.0, description="Overall progress, never decreases")
    stage_progress: float = Field(default=0.0, ge=0.0, le=100.0)
    message: str | None = None
    started_at: datetime = Field(default_factory=utc_now)
    retry_count: int = 0
    error: str | None = None
    failed_stage: ProcessingStatus | None = None
    stages: dict[ProcessingStatus, StageState] = Field(default_factory=dict)
    sequence: int = 0


class StatusTransition(BaseModel):
    """Event emitted for every accepted state machine operation."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    previous_status: ProcessingStatus | None
    status: ProcessingStatus
    progress: float
    stage_progress: float
    message: str | None = None
    error: str | None = None
    retry_count: int = 0
    is_retry: bool = False
    sequence: int
    estimated_time_remaining: float
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def is_status_change(self) -> bool:
        return self.previous_status is not None and self.previous_status != self.status


class ProcessingStatusResponse(BaseModel):
    """Response schema for the processing status endpoint."""

    document_id: str
    status: ProcessingStatus
    progress: float
    stage_progress: float
    message: str | None = None
    error: str | None = None
    retry_count: int = 0
    estimated_time_remaining: float
    retry_delay_seconds: float | None = None

    @classmethod
    def from_job(
        cls,
        job: ProcessingJob,
        estimated_time_remaining: float,
        retry_delay_seconds: float | None = None,
    ) -> "ProcessingStatusResponse":
        return cls(
            document_id=job.document_id,
            status=job.status,
            progress=job.progress,
            stage_progress=job.stage_progress,
            message=job.message,
            error=job.error,
            retry_count=job.retry_count,
            estimated_time_remaining=estimated_time_remaining,
            retry_delay_seconds=retry_delay_seconds,
        )


class StatusRecord(BaseModel):
    """Coarse status snapshot as persisted by the status store."""

    status: ProcessingStatus
    progress: float = 0.0
    error_message: str | None = None
