"""
Processing service orchestrator.

Coordinates the processing state machine with notifier monitoring,
keeping the latest job snapshot per document and falling back to the
status store when a document is not in memory.

Calls for the same document are serialised: the latest snapshot is
read, advanced and stored back under one per-document lock, so two
concurrent steps never both build on the same snapshot.

Dependencies: asyncio (stdlib), edu_rag.core.processing, edu_rag.core.notifications, edu_rag.boundary.db
System role: Document processing use cases
"""

import asyncio
import logging
from collections import OrderedDict
from uuid import UUID

from edu_rag.boundary.db.chunk_store import SqlChunkStore
from edu_rag.core.notifications.notifier import ProcessingStatusNotifier
from edu_rag.core.processing.state_machine import DocumentProcessingStateMachine
from edu_rag.models.chunk import ChunkInput
from edu_rag.models.processing import ProcessingJob, ProcessingStatus, ProcessingStatusResponse

logger = logging.getLogger(__name__)


class ProcessingService:
    """Document processing use cases."""

    def __init__(
        self,
        state_machine: DocumentProcessingStateMachine,
        notifier: ProcessingStatusNotifier,
        chunk_store: SqlChunkStore | None = None,
    ) -> None:
        """
        Initialize processing service.

        Args:
            state_machine: Processing state machine
            notifier: Notifier that should monitor started documents
            chunk_store: Optional store used by store_chunks and delete_chunks
        """
        self.state_machine = state_machine
        self.notifier = notifier
        self.chunk_store = chunk_store
        self.tracked_jobs_limit = state_machine.settings.tracked_jobs_limit
        self._jobs: OrderedDict[str, ProcessingJob] = OrderedDict()
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, document_id: str) -> asyncio.Lock:
        lock = self._locks.get(document_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[document_id] = lock
        return lock

    def _remember(self, job: ProcessingJob) -> None:
        """Store the newest snapshot, evicting the least recently used beyond the limit."""
        self._jobs[job.document_id] = job
        self._jobs.move_to_end(job.document_id)
        while len(self._jobs) > self.tracked_jobs_limit:
            evicted, _ = self._jobs.popitem(last=False)
            lock = self._locks.get(evicted)
            if lock is not None and not lock.locked():
                del self._locks[evicted]

    @property
    def tracked_documents(self) -> list[str]:
        """Documents with an in-memory snapshot, least recently used first."""
        return list(self._jobs)

    async def _load(self, document_id: str) -> ProcessingJob:
        job = self._jobs.get(document_id)
        if job is None:
            job = await self.state_machine.rehydrate(document_id)
            self._remember(job)
        return job

    async def get_job(self, document_id: str) -> ProcessingJob:
        """
        Return the latest job snapshot for a document.

        Raises:
            DocumentNotFoundError: If the document is unknown to the status store
        """
        async with self._lock_for(document_id):
            return await self._load(document_id)

    async def start_processing(self, document_id: str) -> ProcessingJob:
        async with self._lock_for(document_id):
            self.notifier.start_monitoring(document_id)
            job = await self.state_machine.start(document_id)
            self._remember(job)
            return job

    async def advance(
        self,
        document_id: str,
        status: ProcessingStatus,
        progress_within_stage: float,
        message: str | None = None,
        error: str | None = None,
    ) -> ProcessingJob:
        """
        Record a pipeline step for a document.

        Raises:
            IllegalTransitionError: If the step is not a legal move from the latest snapshot
            ValidationError: If progress is outside 0-100
        """
        async with self._lock_for(document_id):
            job = await self._load(document_id)
            updated = await self.state_machine.advance(job, status, progress_within_stage, message, error)
            self._remember(updated)
        if updated.status == ProcessingStatus.COMPLETED:
            self.notifier.stop_monitoring(document_id)
        return updated

    async def retry(self, document_id: str) -> ProcessingStatusResponse:
        """
        Retry a failed document.

        Returns:
            ProcessingStatusResponse: New status with the suggested retry delay

        Raises:
            IllegalTransitionError: If the document is not failed
            RetryLimitExceededError: If no retries remain
        """
        async with self._lock_for(document_id):
            job = await self._load(document_id)
            delay = self.state_machine.compute_backoff_delay(job.retry_count)
            self.notifier.start_monitoring(document_id)
            updated = await self.state_machine.retry(job)
            self._remember(updated)

        logger.info(
            f"{__name__}:retry - Retry scheduled",
            extra={"document_id": document_id, "delay_seconds": delay},
        )
        return self.to_response(updated, retry_delay_seconds=delay)

    async def get_status(self, document_id: str) -> ProcessingStatusResponse:
        job = await self.get_job(document_id)
        return self.to_response(job)

    def to_response(
        self,
        job: ProcessingJob,
        retry_delay_seconds: float | None = None,
    ) -> ProcessingStatusResponse:
        eta = self.state_machine.estimate_time_remaining(job.status, job.stage_progress)
        return ProcessingStatusResponse.from_job(job, eta, retry_delay_seconds)

    def _require_chunk_store(self) -> SqlChunkStore:
        if self.chunk_store is None:
            raise RuntimeError("ProcessingService has no chunk store configured")
        return self.chunk_store

    async def store_chunks(self, document_id: UUID, chunks: list[ChunkInput]) -> int:
        """
        Persist embedded chunks produced by the embedding stage.

        Raises:
            RuntimeError: If the service was built without a chunk store
        """
        return await self._require_chunk_store().add_chunks(document_id, chunks)

    async def delete_chunks(self, document_id: UUID) -> int:
        """
        Remove every stored chunk of a document, e.g. before re-embedding it.

        Returns:
            int: Number of chunks removed

        Raises:
            RuntimeError: If the service was built without a chunk store
        """
        removed = await self._require_chunk_store().delete_chunks(document_id)
        logger.info(
            f"{__name__}:delete_chunks - Chunks removed",
            extra={"document_id": document_id, "removed": removed},
        )
        return removed
