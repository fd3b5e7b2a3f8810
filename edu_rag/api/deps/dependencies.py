"""
Dependency injection container.

Lazily builds the object graph (storage, embeddings, search engine,
state machine, notifier) once per process and exposes FastAPI
dependency factories over it.

Dependencies: edu_rag.configs, edu_rag.application, edu_rag.boundary, edu_rag.core
System role: DI container for service injection
"""

from functools import lru_cache

from edu_rag.application.services import ProcessingService, SearchService
from edu_rag.configs import Settings, get_settings
from edu_rag.core.notifications.notifier import ProcessingStatusNotifier


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self.clear()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def engine(self):
        """Get cached async database engine."""
        if self._engine is None:
            from edu_rag.boundary.db.connection import get_async_engine

            self._engine = get_async_engine(self.settings.database)
        return self._engine

    @property
    def session_factory(self):
        if self._session_factory is None:
            from edu_rag.boundary.db.connection import get_async_session_factory

            self._session_factory = get_async_session_factory(self.engine)
        return self._session_factory

    @property
    def codec(self):
        if self._codec is None:
            from edu_rag.core.vectors.codec import EmbeddingCodec

            self._codec = EmbeddingCodec(self.settings.embeddings.dimension)
        return self._codec

    @property
    def chunk_store(self):
        if self._chunk_store is None:
            from edu_rag.boundary.db.chunk_store import SqlChunkStore

            self._chunk_store = SqlChunkStore(self.session_factory, self.codec)
        return self._chunk_store

    @property
    def status_store(self):
        if self._status_store is None:
            from edu_rag.boundary.db.status_store import SqlDocumentStatusStore

            self._status_store = SqlDocumentStatusStore(self.session_factory)
        return self._status_store

    @property
    def embeddings(self):
        """Get cached query embedding model."""
        if self._embeddings is None:
            from edu_rag.boundary.embeddings import FixedDimensionEmbeddings

            self._embeddings = FixedDimensionEmbeddings(
                model=self.settings.embeddings.model_id,
                output_dimensionality=self.settings.embeddings.dimension,
            )
        return self._embeddings

    @property
    def translator(self):
        """Get cached translator, or None when translation is disabled."""
        if self._translator is None and self.settings.search.translation_enabled:
            from edu_rag.boundary.translation import LLMTranslator

            self._translator = LLMTranslator.from_settings(self.settings.search.translation_model)
        return self._translator

    @property
    def subject(self):
        if self._subject is None:
            from edu_rag.core.processing.subject import TransitionSubject

            self._subject = TransitionSubject()
        return self._subject

    @property
    def state_machine(self):
        if self._state_machine is None:
            from edu_rag.core.processing.state_machine import DocumentProcessingStateMachine

            self._state_machine = DocumentProcessingStateMachine(
                self.status_store,
                self.subject,
                self.settings.processing,
            )
        return self._state_machine

    @property
    def notifier(self) -> ProcessingStatusNotifier:
        """Get cached notifier, attaching the email channel when a recipient is configured."""
        if self._notifier is None:
            notify_config = self.settings.notifications
            notifier = ProcessingStatusNotifier(self.subject, settings=notify_config)
            if notify_config.email_recipient:
                from edu_rag.boundary.aws import SesEmailChannel

                notifier.add_channel(
                    SesEmailChannel(
                        sender=notify_config.email_sender,
                        recipient=notify_config.email_recipient,
                        region=notify_config.ses_region,
                    )
                )
            self._notifier = notifier
        return self._notifier

    @property
    def search_service(self) -> SearchService:
        if self._search_service is None:
            from edu_rag.core.search import MultiLanguageSearchOrchestrator, VectorSearchEngine

            engine = VectorSearchEngine(self.chunk_store, self.codec, self.settings.search)
            orchestrator = MultiLanguageSearchOrchestrator(
                engine,
                self.embeddings,
                self.chunk_store,
                translator=self.translator,
                settings=self.settings.search,
            )
            self._search_service = SearchService(orchestrator)
        return self._search_service

    @property
    def processing_service(self) -> ProcessingService:
        if self._processing_service is None:
            self._processing_service = ProcessingService(
                self.state_machine,
                self.notifier,
                chunk_store=self.chunk_store,
            )
        return self._processing_service

    async def close(self) -> None:
        """Shut down the notifier, dispose the engine and clear all cached instances."""
        if self._notifier is not None:
            self._notifier.shutdown()
            await self._notifier.wait_for_deliveries()
        if self._engine is not None:
            await self._engine.dispose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._engine = None
        self._session_factory = None
        self._codec = None
        self._chunk_store = None
        self._status_store = None
        self._embeddings = None
        self._translator = None
        self._subject = None
        self._state_machine = None
        self._notifier = None
        self._search_service = None
        self._processing_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_search_service() -> SearchService:
    return get_service_cache().search_service


def get_processing_service() -> ProcessingService:
    return get_service_cache().processing_service


def get_notifier() -> ProcessingStatusNotifier:
    return get_service_cache().notifier


def get_session_factory():
    return get_service_cache().session_factory
