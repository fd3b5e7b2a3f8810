"""
Document processing state machine.

Drives a document through uploading -> extracting -> chunking ->
embedding -> completed, with failed reachable from every active
stage and a bounded retry path back out of failed.

Overall progress is a high-water mark: it never decreases, even when
a job fails and is retried. Stage progress restarts at 0 on retry.

Dependencies: asyncio (stdlib), edu_rag.core.processing, edu_rag.core.interfaces
System role: Authoritative processing status for uploaded documents
"""

import asyncio
import logging
import math
from datetime import datetime, timezone

from edu_rag.configs.processing import ProcessingSettings
from edu_rag.core.exceptions import IllegalTransitionError, RetryLimitExceededError, ValidationError
from edu_rag.core.interfaces import DocumentStatusStore
from edu_rag.core.processing.progress import StageBands, next_stage
from edu_rag.core.processing.subject import TransitionSubject
from edu_rag.models.processing import (
    ProcessingJob,
    ProcessingStatus,
    StageState,
    StatusTransition,
)

logger = logging.getLogger(__name__)


class DocumentProcessingStateMachine:
    """
    Validates, persists and publishes processing transitions.

    Jobs are immutable snapshots; every operation returns a new one.
    Operations on the same document are serialised by a per-document
    lock while different documents proceed concurrently.
    """

    def __init__(
        self,
        status_store: DocumentStatusStore,
        subject: TransitionSubject,
        settings: ProcessingSettings | None = None,
    ) -> None:
        """
        Initialize state machine.

        Args:
            status_store: Persistence for the {status, progress} snapshot
            subject: Publish-subscribe subject receiving every transition
            settings: Stage durations and retry policy (defaults if None)
        """
        self.status_store = status_store
        self.subject = subject
        self.settings = settings or ProcessingSettings()
        self.bands = StageBands(self.settings.stage_durations)
        self._locks: dict[str, asyncio.Lock] = {}
        self._sequences: dict[str, int] = {}

    def _lock_for(self, document_id: str) -> asyncio.Lock:
        lock = self._locks.get(document_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[document_id] = lock
        return lock

    def _next_sequence(self, job: ProcessingJob) -> int:
        sequence = max(job.sequence, self._sequences.get(job.document_id, 0)) + 1
        self._sequences[job.document_id] = sequence
        return sequence

    async def start(self, document_id: str, message: str | None = None) -> ProcessingJob:
        """
        Create a job in the uploading stage.

        Args:
            document_id: Document being processed
            message: Optional status message

        Returns:
            ProcessingJob: New job, already persisted and published
        """
        async with self._lock_for(document_id):
            now = datetime.now(timezone.utc)
            draft = ProcessingJob(document_id=document_id, started_at=now)
            job = draft.model_copy(
                update={
                    "message": message or "Uploading document",
                    "stages": {ProcessingStatus.UPLOADING: StageState(started_at=now)},
                    "sequence": self._next_sequence(draft),
                }
            )
            await self._commit(job, previous_status=None)

        logger.info(f"{__name__}:start - Processing started", extra={"document_id": document_id})
        return job

    def _check_snapshot(self, job: ProcessingJob, requested: str) -> None:
        """Reject a job snapshot older than the last committed one."""
        latest = self._sequences.get(job.document_id, 0)
        if job.sequence < latest:
            raise IllegalTransitionError(
                job.document_id,
                job.status.value,
                requested,
                reason=f"job snapshot {job.sequence} is older than committed sequence {latest}",
            )

    def _check_transition(self, job: ProcessingJob, new_status: ProcessingStatus) -> None:
        self._check_snapshot(job, new_status.value)
        current = job.status
        if current.is_terminal:
            raise IllegalTransitionError(job.document_id, current.value, new_status.value)
        if new_status in (current, ProcessingStatus.FAILED) or new_status == next_stage(current):
            return
        raise IllegalTransitionError(job.document_id, current.value, new_status.value)

    async def advance(
        self,
        job: ProcessingJob,
        new_status: ProcessingStatus,
        progress_within_stage: float,
        message: str | None = None,
        error: str | None = None,
    ) -> ProcessingJob:
        """
        Move a job forward or record progress within its current stage.

        Legal moves are a progress update within the active stage, the
        next stage in order, or failed from any active stage. The given
        job is left untouched.

        Args:
            job: Current job snapshot
            new_status: Requested status
            progress_within_stage: Progress within new_status (0-100)
            message: Optional status message
            error: Error detail, recorded when failing

        Returns:
            ProcessingJob: Updated job, already persisted and published

        Raises:
            ValidationError: If progress_within_stage is outside 0-100
            IllegalTransitionError: If the move skips, reverses or leaves a terminal stage,
                or if `job` is older than the last committed snapshot of the document
        """
        if math.isnan(progress_within_stage) or not 0.0 <= progress_within_stage <= 100.0:
            raise ValidationError(
                "Stage progress must be between 0 and 100",
                field="progress_within_stage",
                details={"value": progress_within_stage},
            )
        async with self._lock_for(job.document_id):
            self._check_transition(job, new_status)
            now = datetime.now(timezone.utc)
            stages = dict(job.stages)

            if new_status == ProcessingStatus.FAILED:
                update = {
                    "status": ProcessingStatus.FAILED,
                    "failed_stage": job.status,
                    "error": error or message or "Processing failed",
                    "message": message or job.message,
                }
            else:
                stage_progress = 100.0 if new_status == ProcessingStatus.COMPLETED else progress_within_stage
                candidate = self.bands.overall_progress(new_status, stage_progress)

                if new_status != job.status:
                    previous = stages.get(job.status, StageState())
                    stages[job.status] = StageState(
                        progress=100.0,
                        started_at=previous.started_at,
                        completed_at=now,
                    )
                if new_status != ProcessingStatus.COMPLETED:
                    existing = stages.get(new_status)
                    started_at = existing.started_at if existing and new_status == job.status else now
                    stages[new_status] = StageState(progress=stage_progress, started_at=started_at)

                update = {
                    "status": new_status,
                    "progress": max(job.progress, candidate),
                    "stage_progress": stage_progress,
                    "message": message or job.message,
                    "stages": stages,
                }

            update["sequence"] = self._next_sequence(job)
            updated = job.model_copy(update=update)
            await self._commit(updated, previous_status=job.status)

        if new_status != job.status:
            logger.info(
                f"{__name__}:advance - {job.status.value} -> {new_status.value}",
                extra={"document_id": job.document_id, "progress": updated.progress},
            )
        return updated

    async def retry(self, job: ProcessingJob, message: str | None = None) -> ProcessingJob:
        """
        Return a failed job to the stage it failed in.

        Args:
            job: Failed job snapshot
            message: Optional status message

        Returns:
            ProcessingJob: Job back in its failed stage with stage progress 0

        Raises:
            IllegalTransitionError: If the job is not failed or is an outdated snapshot
            RetryLimitExceededError: If the job has used all retries
        """
        async with self._lock_for(job.document_id):
            self._check_snapshot(job, "retry")
            if job.status != ProcessingStatus.FAILED:
                raise IllegalTransitionError(job.document_id, job.status.value, "retry")
            if job.retry_count >= self.settings.max_retries:
                logger.warning(
                    f"{__name__}:retry - Retry limit reached",
                    extra={"document_id": job.document_id, "retry_count": job.retry_count},
                )
                raise RetryLimitExceededError(job.document_id, job.retry_count, self.settings.max_retries)

            target = job.failed_stage or self.bands.stage_for_progress(job.progress)
            now = datetime.now(timezone.utc)
            stages = dict(job.stages)
            stages[target] = StageState(progress=0.0, started_at=now)
            updated = job.model_copy(
                update={
                    "status": target,
                    "stage_progress": 0.0,
                    "retry_count": job.retry_count + 1,
                    "error": None,
                    "failed_stage": None,
                    "message": message or f"Retrying {target.value}",
                    "stages": stages,
                    "sequence": self._next_sequence(job),
                }
            )
            await self._commit(updated, previous_status=job.status, is_retry=True)

        logger.info(
            f"{__name__}:retry - Retrying from {target.value}",
            extra={"document_id": job.document_id, "retry_count": updated.retry_count},
        )
        return updated

    def compute_backoff_delay(self, retry_count: int) -> float:
        """
        Delay before the next retry attempt, in seconds.

        A scheduling hint only; the state machine never waits.
        """
        delay = self.settings.backoff_base_seconds * self.settings.backoff_multiplier ** retry_count
        return min(delay, self.settings.backoff_max_seconds)

    def estimate_time_remaining(self, status: ProcessingStatus, progress_within_stage: float) -> float:
        return self.bands.estimate_time_remaining(status, progress_within_stage)

    async def rehydrate(self, document_id: str) -> ProcessingJob:
        """
        Rebuild a job from the persisted status snapshot.

        Per-stage history and retry count are not persisted, so the
        rebuilt job starts with a fresh retry budget.

        Raises:
            DocumentNotFoundError: If the store has no record of the document
        """
        record = await self.status_store.load_status(document_id)
        status = record.status
        progress = max(0.0, min(100.0, record.progress))

        failed_stage = None
        if status == ProcessingStatus.FAILED:
            failed_stage = self.bands.stage_for_progress(progress)
            stage_progress = self.bands.stage_progress_for(failed_stage, progress)
        elif status == ProcessingStatus.COMPLETED:
            stage_progress = 100.0
        else:
            stage_progress = self.bands.stage_progress_for(status, progress)

        return ProcessingJob(
            document_id=document_id,
            status=status,
            progress=progress,
            stage_progress=stage_progress,
            error=record.error_message,
            failed_stage=failed_stage,
            sequence=self._sequences.get(document_id, 0),
        )

    async def _commit(
        self,
        job: ProcessingJob,
        previous_status: ProcessingStatus | None,
        is_retry: bool = False,
    ) -> None:
        await self.status_store.save_status(
            job.document_id,
            job.status,
            job.progress,
            job.error if job.status == ProcessingStatus.FAILED else None,
        )
        await self.subject.publish(
            StatusTransition(
                document_id=job.document_id,
                previous_status=previous_status,
                status=job.status,
                progress=job.progress,
                stage_progress=job.stage_progress,
                message=job.message,
                error=job.error,
                retry_count=job.retry_count,
                is_retry=is_retry,
                sequence=job.sequence,
                estimated_time_remaining=self.estimate_time_remaining(job.status, job.stage_progress),
            )
        )
