"""
Collaborator contracts used by the core.

The core never imports storage, model or delivery implementations
directly; the boundary layer provides classes satisfying these
protocols and tests substitute in-memory fakes.

Dependencies: typing (stdlib), edu_rag.models
System role: Seams between core logic and the boundary layer
"""

from typing import Protocol, runtime_checkable
from uuid import UUID

from edu_rag.models.chunk import CandidateChunk, KeywordHit
from edu_rag.models.notification import ProcessingNotification
from edu_rag.models.processing import ProcessingStatus, StatusRecord
from edu_rag.models.search import LanguageCount, SearchScope


class ChunkStore(Protocol):
    """Read access to stored chunks, pre-filtered by scope."""

    async def fetch_candidate_chunks(self, scope: SearchScope) -> list[CandidateChunk]: ...

    async def keyword_search(self, query: str, scope: SearchScope) -> list[KeywordHit]: ...

    async def get_chunk(self, chunk_id: UUID) -> CandidateChunk | None: ...

    async def language_counts(self, scope: SearchScope) -> list[LanguageCount]: ...


class DocumentStatusStore(Protocol):
    """Persistence of the coarse {status, progress} snapshot per document."""

    async def load_status(self, document_id: str) -> StatusRecord: ...

    async def save_status(
        self,
        document_id: str,
        status: ProcessingStatus,
        progress: float,
        error_message: str | None = None,
    ) -> None: ...


class Translator(Protocol):
    async def translate(self, text: str, target_language: str) -> str: ...


@runtime_checkable
class DeliveryChannel(Protocol):
    """Outbound notification channel."""

    name: str

    async def deliver(self, notification: ProcessingNotification) -> bool: ...
